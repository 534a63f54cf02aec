"""AI generation and saved draft routes."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..activity.service import log_activity
from ..auth.models import User
from ..config import settings
from ..database import get_db
from ..dependencies import get_current_user, get_generation_client
from ..exceptions import JobTrackerError, NotFound
from ..integrations.gemini_client import GeminiClient
from ..jobs.service import get_job
from ..rate_limit import limiter
from .schemas import (
    ContentType,
    CoverLetterRequest,
    EmailRequest,
    GeneratedCoverLetter,
    GeneratedEmail,
    SaveContentRequest,
    SavedContentResponse,
)
from .service import build_docx, generate_cover_letter, generate_email, get_generated_content, save_generated_content

router = APIRouter(tags=["generation"])


def _log_failure(db: Session, request: Request, user: User, job_id: str, content_type: ContentType, exc: Exception):
    db.rollback()
    log_activity(
        db,
        request,
        "ai_generation_error",
        user_id=user.id,
        ref_id=job_id,
        payload={"type": str(content_type), "kind": type(exc).__name__, "error": str(exc)[:500]},
    )
    db.commit()


@router.post("/jobs/{job_id}/generate/email", response_model=GeneratedEmail)
@limiter.limit(settings.rate_limit_generate)
def generate_email_route(
    request: Request,
    job_id: str,
    body: EmailRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    client: GeminiClient = Depends(get_generation_client),
):
    try:
        result = generate_email(
            db,
            client,
            user,
            job_id,
            cv_id=body.cv_id,
            tone=body.tone,
            additional_context=body.additional_context,
        )
        log_activity(db, request, "ai_generated", user_id=user.id, ref_id=job_id, payload={"type": "email"})
        db.commit()
    except JobTrackerError as exc:
        _log_failure(db, request, user, job_id, ContentType.EMAIL, exc)
        raise
    return result


@router.post("/jobs/{job_id}/generate/cover-letter", response_model=GeneratedCoverLetter)
@limiter.limit(settings.rate_limit_generate)
def generate_cover_letter_route(
    request: Request,
    job_id: str,
    body: CoverLetterRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    client: GeminiClient = Depends(get_generation_client),
):
    try:
        result = generate_cover_letter(
            db,
            client,
            user,
            job_id,
            cv_id=body.cv_id,
            length=body.length,
            focus_areas=body.focus_areas,
        )
        log_activity(
            db,
            request,
            "ai_generated",
            user_id=user.id,
            ref_id=job_id,
            payload={"type": "coverLetter", "length": str(body.length)},
        )
        db.commit()
    except JobTrackerError as exc:
        _log_failure(db, request, user, job_id, ContentType.COVER_LETTER, exc)
        raise
    return result


@router.get("/jobs/{job_id}/content/coverLetter/download")
def download_cover_letter(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Download the saved cover letter as a formatted DOCX file."""
    job = get_job(db, job_id, user.id)
    if not job:
        raise NotFound("Job not found")
    saved = get_generated_content(db, user, job.id, ContentType.COVER_LETTER)
    if not saved:
        raise NotFound("No saved cover letter for this job")

    buf, filename = build_docx(saved, user, job)

    # RFC 5987 encoding for non-ASCII filenames
    encoded_filename = quote(filename)

    return Response(
        content=buf.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        headers={
            "Content-Disposition": f"attachment; filename=\"{filename}\"; filename*=UTF-8''{encoded_filename}",
        },
    )


@router.put("/jobs/{job_id}/content/{content_type}", response_model=SavedContentResponse)
def save_content_route(
    request: Request,
    job_id: str,
    content_type: ContentType,
    body: SaveContentRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    saved = save_generated_content(db, user, job_id, content_type, body.content, body.subject)
    log_activity(db, request, "content_saved", user_id=user.id, ref_id=job_id, payload={"type": str(content_type)})
    db.commit()
    return saved


@router.get("/jobs/{job_id}/content/{content_type}", response_model=SavedContentResponse | None)
def get_content_route(
    job_id: str,
    content_type: ContentType,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_generated_content(db, user, job_id, content_type)
