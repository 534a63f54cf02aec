"""Job posting model and pipeline statuses."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database import Base


class JobStatus(enum.StrEnum):
    """Application pipeline status."""

    SAVED = "Saved"
    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    GHOSTED = "Ghosted"
    ARCHIVED = "Archived"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)
    url = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)
    salary = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(
        SQLEnum(JobStatus, values_callable=lambda e: [s.value for s in e]),
        default=JobStatus.SAVED,
    )

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    applied_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="jobs")

    __table_args__ = (
        Index("idx_jobs_user_status", "user_id", "status"),
    )
