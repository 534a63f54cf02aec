"""AI usage ledger. Rows are appended once per successful generation and never updated."""

import uuid

from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID

from ..database import Base


class UsageRecord(Base):
    __tablename__ = "ai_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    job_id = Column(
        UUID(as_uuid=True),
        ForeignKey("jobs.id", ondelete="SET NULL"),
        nullable=True,
    )
    type = Column(String(20), nullable=False)  # email / coverLetter
    model = Column(String(100), default="")
    tokens_used = Column(Integer, default=0)
    timestamp = Column(BigInteger, nullable=False)  # epoch millis

    __table_args__ = (
        Index("idx_ai_requests_user_timestamp", "user_id", "timestamp"),
    )
