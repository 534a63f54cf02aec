"""Quota routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth.models import User
from ..database import get_db
from ..dependencies import get_current_user
from .schemas import MonthlyUsage, RemainingQuota
from .service import has_remaining_quota, monthly_usage

router = APIRouter(tags=["usage"])


@router.get("/usage", response_model=MonthlyUsage)
def monthly_usage_route(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return monthly_usage(db, user)


@router.get("/usage/remaining", response_model=RemainingQuota)
def remaining_quota_route(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return RemainingQuota(has_remaining=has_remaining_quota(db, user))
