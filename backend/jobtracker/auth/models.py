"""User profile model.

Identity is issued by the external identity provider; ``token_identifier``
is the opaque subject it hands us.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    token_identifier = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    skills = Column(JSON, default=list)
    phone = Column(String(50), nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    default_signature = Column(Text, nullable=True)
    monthly_quota = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )

    jobs = relationship("Job", back_populates="user", cascade="all, delete-orphan")
    cv_versions = relationship("CVVersion", back_populates="user", cascade="all, delete-orphan")
