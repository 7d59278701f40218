"""Date manipulation utilities"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple


def utc_now() -> datetime:
    """Current time as a naive UTC datetime, the form stored transaction dates use"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def get_window(days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Trailing window [now - days, now], both ends inclusive"""
    end = now or utc_now()
    return end - timedelta(days=days), end


def days_until(target: date, now: datetime) -> int:
    """Whole days from now until the start of target, rounded up"""
    if isinstance(target, datetime):
        target_dt = target
    else:
        target_dt = datetime.combine(target, datetime.min.time())
    return math.ceil((target_dt - now) / timedelta(days=1))
