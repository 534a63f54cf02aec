"""API v1 router: all JSON endpoints under /api/v1 prefix."""

from fastapi import APIRouter

from .generation.routes import router as generation_router
from .usage.routes import router as usage_router

api_v1_router = APIRouter(prefix="/api/v1", tags=["api-v1"])

api_v1_router.include_router(generation_router)
api_v1_router.include_router(usage_router)
