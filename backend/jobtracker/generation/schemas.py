"""Generation request/response schemas and the context bundle."""

import enum
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ContentType(enum.StrEnum):
    EMAIL = "email"
    COVER_LETTER = "coverLetter"


class Tone(enum.StrEnum):
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    ENTHUSIASTIC = "enthusiastic"


class CoverLetterLength(enum.StrEnum):
    SHORT = "short"
    MEDIUM = "medium"
    DETAILED = "detailed"


# ── Context bundle ───────────────────────────────────────────────────


class JobContext(BaseModel):
    id: UUID
    title: str
    company_name: str
    url: str | None = None
    location: str | None = None
    salary: str | None = None
    notes: str | None = None


class UserContext(BaseModel):
    name: str
    email: str
    title: str | None = None
    skills: list[str] = Field(default_factory=list)
    phone: str | None = None
    portfolio_url: str | None = None
    default_signature: str | None = None


class ContextBundle(BaseModel):
    """Snapshot of job, user and CV data taken at request time."""

    job: JobContext
    user: UserContext
    cv_text: str = ""


# ── Requests ─────────────────────────────────────────────────────────


class EmailRequest(BaseModel):
    cv_id: UUID | None = None
    tone: Tone = Tone.PROFESSIONAL
    additional_context: str | None = Field(None, max_length=2000)


class CoverLetterRequest(BaseModel):
    cv_id: UUID
    length: CoverLetterLength = CoverLetterLength.MEDIUM
    focus_areas: list[str] = Field(default_factory=list, max_length=3)


class SaveContentRequest(BaseModel):
    content: str = Field(..., min_length=1)
    subject: str | None = None


# ── Results ──────────────────────────────────────────────────────────


class GeneratedEmail(BaseModel):
    subject: str
    body: str
    full_text: str


class GeneratedCoverLetter(BaseModel):
    content: str


class SavedContentResponse(BaseModel):
    id: UUID
    job_id: UUID
    type: ContentType
    content: str
    subject: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
