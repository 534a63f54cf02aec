"""Quota guard and usage ledger writes.

The monthly window runs from the 1st of the current month (local server
clock) to now. By default the guard is advisory: the count is read before
the provider call and the record appended after it, so two concurrent
requests can both pass with one slot left. With ``strict=True``,
``record_usage`` locks the user's row, recounts and refuses the insert
when the limit is already reached.
"""

import logging
import time
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth.models import User
from ..config import settings
from ..exceptions import QuotaExceeded
from .models import UsageRecord
from .schemas import MonthlyUsage

logger = logging.getLogger(__name__)


def now_millis() -> int:
    return int(time.time() * 1000)


def month_start_millis(now: datetime | None = None) -> int:
    """Epoch millis of local midnight on the 1st of ``now``'s month."""
    now = now or datetime.now()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return int(start.timestamp() * 1000)


def quota_limit(user: User) -> int:
    if user.monthly_quota is not None:
        return user.monthly_quota
    return settings.default_monthly_quota


def count_monthly_usage(db: Session, user_id: UUID, now: datetime | None = None) -> int:
    return (
        db.query(func.count(UsageRecord.id))
        .filter(
            UsageRecord.user_id == user_id,
            UsageRecord.timestamp >= month_start_millis(now),
        )
        .scalar()
        or 0
    )


def monthly_usage(db: Session, user: User, now: datetime | None = None) -> MonthlyUsage:
    count = count_monthly_usage(db, user.id, now)
    limit = quota_limit(user)
    return MonthlyUsage(count=count, limit=limit, remaining=max(0, limit - count))


def has_remaining_quota(db: Session, user: User, now: datetime | None = None) -> bool:
    return count_monthly_usage(db, user.id, now) < quota_limit(user)


def ensure_quota_available(db: Session, user: User) -> None:
    """Raise QuotaExceeded when the user has no generations left this month."""
    count = count_monthly_usage(db, user.id)
    limit = quota_limit(user)
    if count >= limit:
        logger.info("Quota exhausted for user=%s (%d/%d)", user.id, count, limit)
        raise QuotaExceeded(count, limit)


def record_usage(
    db: Session,
    user: User,
    content_type: str,
    job_id: UUID | None,
    tokens_used: int,
    model: str = "",
    strict: bool = False,
    timestamp: int | None = None,
) -> UsageRecord:
    """Append one usage record. Call only after the provider returned text."""
    if strict:
        # Serialises concurrent generations of the same user (no-op on SQLite)
        db.query(User).filter(User.id == user.id).with_for_update().one()
        count = count_monthly_usage(db, user.id)
        limit = quota_limit(user)
        if count >= limit:
            logger.warning("Strict quota refused usage insert for user=%s (%d/%d)", user.id, count, limit)
            raise QuotaExceeded(count, limit)

    record = UsageRecord(
        user_id=user.id,
        job_id=job_id,
        type=str(content_type),
        model=model,
        tokens_used=tokens_used,
        timestamp=timestamp if timestamp is not None else now_millis(),
    )
    db.add(record)
    db.flush()
    logger.info("Recorded %s usage for user=%s job=%s tokens=%d", content_type, user.id, job_id, tokens_used)
    return record
