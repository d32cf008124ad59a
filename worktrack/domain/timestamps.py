"""Timestamp normalization

Every datetime is stored and compared as naive UTC, the same form
``datetime.utcnow()`` returns.
"""
from datetime import datetime, timezone
from typing import Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an offset-aware datetime to naive UTC; naive values pass through"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
