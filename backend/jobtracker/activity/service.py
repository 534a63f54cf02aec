"""Activity log service."""

from uuid import UUID

from fastapi import Request
from sqlalchemy.orm import Session

from .models import Activity


def _get_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


def log_activity(
    db: Session,
    request: Request,
    activity_type: str,
    user_id: UUID | None = None,
    ref_id: str = "",
    payload: dict | None = None,
) -> None:
    """Add an activity entry. The caller commits."""
    db.add(
        Activity(
            user_id=user_id,
            type=activity_type,
            ref_id=ref_id,
            payload=payload or {},
            ip_address=_get_ip(request),
        )
    )
