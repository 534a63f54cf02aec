"""Quota response schemas."""

from pydantic import BaseModel


class MonthlyUsage(BaseModel):
    count: int = 0
    limit: int = 0
    remaining: int = 0


class RemainingQuota(BaseModel):
    has_remaining: bool
