"""AI outreach generation: orchestration, saved drafts and DOCX export.

Flow per request: quota gate -> context assembly -> prompt -> one provider
call -> usage record -> parse. Usage is recorded only after the provider
returned text, so failed calls never count against the quota.
"""

import io
import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, NamedTuple
from uuid import UUID

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.models import User
from ..config import settings
from ..exceptions import NotFound
from ..integrations.gemini_client import GeminiClient, GenerationConfig, GenerationResult
from ..integrations.parsing import parse_generated_email
from ..jobs.models import Job
from ..jobs.service import get_job
from ..prompts import build_cover_letter_prompt, build_email_prompt
from ..usage.service import ensure_quota_available, record_usage
from .context import assemble_context
from .models import SavedContent
from .schemas import (
    ContentType,
    ContextBundle,
    CoverLetterLength,
    CoverLetterRequest,
    EmailRequest,
    GeneratedCoverLetter,
    GeneratedEmail,
    Tone,
)

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7

# Thinking models spend part of the budget before any visible output;
# tight ceilings come back as empty candidates.
EMAIL_MAX_OUTPUT_TOKENS = 2000
COVER_LETTER_MAX_OUTPUT_TOKENS = {
    CoverLetterLength.SHORT: 2048,
    CoverLetterLength.MEDIUM: 3072,
    CoverLetterLength.DETAILED: 4096,
}


class GenerationProfile(NamedTuple):
    content_type: ContentType
    build_prompt: Callable[[ContextBundle, Any], str]
    max_output_tokens: Callable[[Any], int]
    temperature: float = TEMPERATURE


EMAIL_PROFILE = GenerationProfile(
    content_type=ContentType.EMAIL,
    build_prompt=lambda context, opts: build_email_prompt(context, opts.tone, opts.additional_context),
    max_output_tokens=lambda opts: EMAIL_MAX_OUTPUT_TOKENS,
)

COVER_LETTER_PROFILE = GenerationProfile(
    content_type=ContentType.COVER_LETTER,
    build_prompt=lambda context, opts: build_cover_letter_prompt(context, opts.length, opts.focus_areas),
    max_output_tokens=lambda opts: COVER_LETTER_MAX_OUTPUT_TOKENS[opts.length],
)


def _run_generation(
    db: Session,
    client: GeminiClient,
    user: User,
    job_id: UUID | str,
    profile: GenerationProfile,
    options: EmailRequest | CoverLetterRequest,
) -> GenerationResult:
    ensure_quota_available(db, user)

    context = assemble_context(db, user, job_id, profile.content_type, options.cv_id)
    prompt = profile.build_prompt(context, options)
    config = GenerationConfig(
        temperature=profile.temperature,
        max_output_tokens=profile.max_output_tokens(options),
    )

    logger.info(
        "Generating %s for job=%s user=%s (model=%s, max_tokens=%d)",
        profile.content_type,
        context.job.id,
        user.id,
        client.model,
        config.max_output_tokens,
    )
    result = client.generate(prompt, config)

    record_usage(
        db,
        user,
        profile.content_type,
        context.job.id,
        result.tokens_used,
        model=client.model,
        strict=settings.strict_quota,
    )
    return result


def generate_email(
    db: Session,
    client: GeminiClient,
    user: User,
    job_id: UUID | str,
    cv_id: UUID | str | None = None,
    tone: Tone = Tone.PROFESSIONAL,
    additional_context: str | None = None,
) -> GeneratedEmail:
    """Generate an outreach email and split it into subject and body."""
    options = EmailRequest.model_construct(cv_id=cv_id, tone=Tone(tone), additional_context=additional_context)
    result = _run_generation(db, client, user, job_id, EMAIL_PROFILE, options)
    parts = parse_generated_email(result.text)
    return GeneratedEmail(subject=parts.subject, body=parts.body, full_text=result.text)


def generate_cover_letter(
    db: Session,
    client: GeminiClient,
    user: User,
    job_id: UUID | str,
    cv_id: UUID | str,
    length: CoverLetterLength = CoverLetterLength.MEDIUM,
    focus_areas: list[str] | None = None,
) -> GeneratedCoverLetter:
    """Generate a cover letter. The raw text is the content, no parsing."""
    options = CoverLetterRequest.model_construct(
        cv_id=cv_id,
        length=CoverLetterLength(length),
        focus_areas=focus_areas or [],
    )
    result = _run_generation(db, client, user, job_id, COVER_LETTER_PROFILE, options)
    return GeneratedCoverLetter(content=result.text)


# ── Saved drafts ─────────────────────────────────────────────────────


def _require_job(db: Session, user: User, job_id: UUID | str) -> Job:
    job = get_job(db, job_id, user.id)
    if not job:
        raise NotFound("Job not found")
    return job


def _find_saved(db: Session, job_id: UUID, content_type: ContentType) -> SavedContent | None:
    return (
        db.query(SavedContent)
        .filter(SavedContent.job_id == job_id, SavedContent.type == str(content_type))
        .first()
    )


def save_generated_content(
    db: Session,
    user: User,
    job_id: UUID | str,
    content_type: ContentType,
    content: str,
    subject: str | None = None,
) -> SavedContent:
    """Create or overwrite the saved draft for (job, type).

    The insert runs in a savepoint: when a concurrent save created the row
    first, the unique constraint fires and this call overwrites that row.
    """
    job = _require_job(db, user, job_id)
    saved = _find_saved(db, job.id, content_type)
    if saved is None:
        try:
            with db.begin_nested():
                saved = SavedContent(
                    user_id=user.id,
                    job_id=job.id,
                    type=str(content_type),
                    content=content,
                    subject=subject,
                )
                db.add(saved)
            return saved
        except IntegrityError:
            logger.info("Saved %s for job=%s created concurrently, overwriting", content_type, job.id)
            saved = _find_saved(db, job.id, content_type)

    saved.content = content
    saved.subject = subject
    saved.created_at = datetime.now(UTC)
    db.flush()
    return saved


def get_generated_content(
    db: Session,
    user: User,
    job_id: UUID | str,
    content_type: ContentType,
) -> SavedContent | None:
    job = get_job(db, job_id, user.id)
    if not job:
        return None
    return (
        db.query(SavedContent)
        .filter(
            SavedContent.job_id == job.id,
            SavedContent.type == str(content_type),
            SavedContent.user_id == user.id,
        )
        .first()
    )


def build_docx(saved: SavedContent, user: User, job: Job) -> tuple[io.BytesIO, str]:
    """Render a saved cover letter as a formatted DOCX.

    Returns an in-memory buffer and a download filename.
    """
    doc = Document()

    # -- Page margins: 2.5 cm all sides --
    for section in doc.sections:
        section.top_margin = Cm(2.5)
        section.bottom_margin = Cm(2.5)
        section.left_margin = Cm(2.5)
        section.right_margin = Cm(2.5)

    # -- Default font: Calibri 11pt --
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)
    pf = style.paragraph_format
    pf.space_before = Pt(0)
    pf.space_after = Pt(6)
    pf.line_spacing = 1.15

    # -- Header: name and contact details, right-aligned --
    header_para = doc.add_paragraph()
    header_para.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    name_run = header_para.add_run(f"{user.name}\n")
    name_run.bold = True
    name_run.font.size = Pt(13)
    contact = " | ".join(part for part in (user.email, user.phone, user.portfolio_url) if part)
    contact_run = header_para.add_run(contact)
    contact_run.font.size = Pt(9)

    date_para = doc.add_paragraph()
    date_run = date_para.add_run(datetime.now(UTC).strftime("%d %B %Y"))
    date_run.font.size = Pt(10)

    doc.add_paragraph()

    # -- Letter body: blank lines separate paragraphs --
    content = saved.content or ""
    for para_text in re.split(r"\n{2,}", content.strip()):
        cleaned = para_text.strip().replace("\n", " ")
        if not cleaned:
            continue
        p = doc.add_paragraph(cleaned)
        p.paragraph_format.space_after = Pt(8)

    company = (job.company_name or "").strip()
    if company:
        safe_company = re.sub(r'[<>:"/\\|?*]', "", company)
        safe_company = re.sub(r"\s+", "_", safe_company)
        filename = f"Cover_Letter_{safe_company}.docx"
    else:
        filename = "Cover_Letter.docx"

    buf = io.BytesIO()
    doc.save(buf)
    buf.seek(0)
    return buf, filename
