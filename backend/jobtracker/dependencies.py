"""Shared FastAPI dependencies."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .auth.models import User
from .database import get_db
from .exceptions import ConfigurationError, Unauthenticated
from .generation.context import resolve_user
from .integrations.gemini_client import GeminiClient


def get_identity(request: Request) -> str:
    """Identity token forwarded by the identity provider as a bearer token."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated()
    return token.strip()


def get_current_user(identity: str = Depends(get_identity), db: Session = Depends(get_db)) -> User:
    """Resolve the caller's profile. No profile for a valid identity is a 404, not a 401."""
    return resolve_user(db, identity)


def get_generation_client(request: Request) -> GeminiClient:
    """Get the generation client from app state."""
    client = getattr(request.app.state, "generation_client", None)
    if client is None:
        raise ConfigurationError("GEMINI_API_KEY not configured")
    return client
