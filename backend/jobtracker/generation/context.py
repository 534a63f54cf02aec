"""Context assembly: resolve the caller, the job and the CV text into a ContextBundle.

Read-only. Bundles are built fresh for every request and never cached.
"""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from ..auth.models import User
from ..auth.service import get_user_by_identity
from ..config import settings
from ..cv.service import build_profile_digest, get_cv
from ..exceptions import NotFound, PreconditionFailed
from ..jobs.service import get_job
from .schemas import ContentType, ContextBundle, JobContext, UserContext

logger = logging.getLogger(__name__)


def resolve_user(db: Session, identity: str) -> User:
    user = get_user_by_identity(db, identity)
    if not user:
        raise NotFound("User profile not found")
    return user


def _resolve_cv_text(db: Session, user: User, cv_id: UUID | str | None, content_type: ContentType) -> str:
    if cv_id is None:
        return ""

    cv = get_cv(db, cv_id, user.id)
    if content_type == ContentType.EMAIL:
        if cv is None:
            logger.warning("CV %s not found for user=%s, generating email without it", cv_id, user.id)
        return (cv.text or "") if cv else ""

    if cv is None:
        raise NotFound("CV not found")
    if cv.text:
        return cv.text
    if not settings.cv_fallback_digest:
        raise PreconditionFailed("CV text not available. Please upload a CV first.")
    logger.info("CV %s has no extracted text, using profile digest for user=%s", cv.id, user.id)
    return build_profile_digest(user)


def assemble_context(
    db: Session,
    user: User,
    job_id: UUID | str,
    content_type: ContentType,
    cv_id: UUID | str | None = None,
) -> ContextBundle:
    job = get_job(db, job_id, user.id)
    if not job:
        raise NotFound("Job not found")

    return ContextBundle(
        job=JobContext(
            id=job.id,
            title=job.title,
            company_name=job.company_name,
            url=job.url,
            location=job.location,
            salary=job.salary,
            notes=job.notes,
        ),
        user=UserContext(
            name=user.name,
            email=user.email,
            title=user.title,
            skills=user.skills or [],
            phone=user.phone,
            portfolio_url=user.portfolio_url,
            default_signature=user.default_signature,
        ),
        cv_text=_resolve_cv_text(db, user, cv_id, content_type),
    )
