"""Shared test fixtures."""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtracker.activity.models import Activity
from jobtracker.auth.models import User
from jobtracker.cv.models import CVVersion
from jobtracker.database import Base
from jobtracker.generation.models import SavedContent
from jobtracker.integrations.gemini_client import GenerationResult
from jobtracker.jobs.models import Job, JobStatus
from jobtracker.usage.models import UsageRecord

# Models must be imported so Base.metadata.create_all() sees all tables.
_ALL_MODELS = [Activity, User, CVVersion, SavedContent, Job, UsageRecord]


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing.

    Note: SQLite doesn't support all PostgreSQL features (JSONB, UUID, FOR UPDATE),
    but works for service logic testing.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_user(db_session):
    """Create a test user with a full profile."""
    user = User(
        id=uuid.uuid4(),
        token_identifier="idp|test-user",
        name="Jo Tester",
        email="jo@example.com",
        title="Backend Developer",
        skills=["Python", "FastAPI", "PostgreSQL"],
        phone="+44 20 7946 0000",
        portfolio_url="https://jo.dev",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_user(db_session):
    user = User(
        id=uuid.uuid4(),
        token_identifier="idp|other-user",
        name="Someone Else",
        email="else@example.com",
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def test_job(db_session, test_user):
    job = Job(
        id=uuid.uuid4(),
        user_id=test_user.id,
        title="Backend Engineer",
        company_name="Acme",
        url="https://acme.example/jobs/42",
        location="Remote",
        notes="Hiring manager: Dana Smith",
        status=JobStatus.SAVED,
    )
    db_session.add(job)
    db_session.commit()
    return job


@pytest.fixture
def test_cv(db_session, test_user):
    cv = CVVersion(
        id=uuid.uuid4(),
        user_id=test_user.id,
        name="Main CV",
        text="Seven years building Python services. Led migration of billing to FastAPI.",
    )
    db_session.add(cv)
    db_session.commit()
    return cv


@pytest.fixture
def fake_client():
    """Generation client double returning a well-formed email."""
    client = MagicMock()
    client.model = "gemini-test"
    client.generate.return_value = GenerationResult(
        text="Subject: Application\n\nDear Acme team...",
        tokens_used=321,
        finish_reason="STOP",
    )
    return client
