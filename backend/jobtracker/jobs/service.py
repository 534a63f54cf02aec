"""Job store: ownership-checked lookups and pipeline updates."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.orm import Session

from .models import Job, JobStatus


def get_job(db: Session, job_id: str | UUID, user_id: UUID) -> Job | None:
    """Fetch a job owned by ``user_id``. Foreign or malformed ids read as missing."""
    try:
        uid = job_id if isinstance(job_id, UUID) else UUID(job_id)
    except (ValueError, AttributeError):
        return None
    return db.query(Job).filter(Job.id == uid, Job.user_id == user_id).first()


def list_jobs(db: Session, user_id: UUID, status: JobStatus | None = None) -> list[Job]:
    query = db.query(Job).filter(Job.user_id == user_id)
    if status is not None:
        query = query.filter(Job.status == status)
    return query.order_by(Job.created_at.desc()).all()


def create_job(
    db: Session,
    user_id: UUID,
    title: str,
    company_name: str,
    url: str | None = None,
    location: str | None = None,
    salary: str | None = None,
    notes: str | None = None,
) -> Job:
    job = Job(
        user_id=user_id,
        title=title,
        company_name=company_name,
        url=url,
        location=location,
        salary=salary,
        notes=notes,
        status=JobStatus.SAVED,
    )
    db.add(job)
    db.flush()
    return job


def update_status(db: Session, job: Job, new_status: JobStatus) -> None:
    """Move a job along the pipeline, stamping applied_at on first application."""
    job.status = new_status
    if new_status == JobStatus.APPLIED and job.applied_at is None:
        job.applied_at = datetime.now(UTC)
    db.flush()
