"""CV store and profile-based fallback digest."""

from uuid import UUID

from sqlalchemy.orm import Session

from ..auth.models import User
from .models import CVVersion


def get_cv(db: Session, cv_id: str | UUID, user_id: UUID) -> CVVersion | None:
    """Fetch a CV owned by ``user_id``."""
    try:
        uid = cv_id if isinstance(cv_id, UUID) else UUID(cv_id)
    except (ValueError, AttributeError):
        return None
    return db.query(CVVersion).filter(CVVersion.id == uid, CVVersion.user_id == user_id).first()


def get_cv_text(db: Session, cv_id: str | UUID, user_id: UUID) -> str:
    """Extracted CV text, or an empty string when the CV is missing or unparsed."""
    cv = get_cv(db, cv_id, user_id)
    return (cv.text or "") if cv else ""


def create_cv(
    db: Session,
    user_id: UUID,
    name: str,
    text: str | None = None,
    file_ref: str | None = None,
) -> CVVersion:
    cv = CVVersion(user_id=user_id, name=name, text=text, file_ref=file_ref)
    db.add(cv)
    db.flush()
    return cv


def build_profile_digest(user: User) -> str:
    """Minimal CV stand-in synthesized from profile fields.

    Used for cover letters when the selected CV has no extracted text.
    """
    lines = [f"Name: {user.name}"]
    if user.title:
        lines.append(f"Current Title: {user.title}")
    if user.skills:
        lines.append(f"Skills: {', '.join(user.skills)}")
    lines.append(f"Email: {user.email}")
    if user.phone:
        lines.append(f"Phone: {user.phone}")
    if user.portfolio_url:
        lines.append(f"Portfolio: {user.portfolio_url}")
    return "\n".join(lines)
