"""
Clock helpers.

All timestamps are stored as naive UTC datetimes.
"""

import math
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def whole_seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, floored, never negative."""
    seconds = math.floor((end - start).total_seconds())
    return max(seconds, 0)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Mark a naive UTC datetime as aware UTC for serialization."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
