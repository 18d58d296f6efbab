# tracker/client/dates.py
"""
Pure date helpers shared by the store, selectors and calendar.

Naive datetimes are read as UTC, the same way the models coerce them, so
day cells and "now" values without tzinfo compare cleanly with stored dates.
"""

from datetime import datetime, timedelta
from typing import Tuple

from tracker.models.work_range import ensure_utc

def is_same_day(a: datetime, b: datetime) -> bool:
    return ensure_utc(a).date() == ensure_utc(b).date()

def is_before(a: datetime, b: datetime) -> bool:
    return ensure_utc(a) < ensure_utc(b)

def is_after(a: datetime, b: datetime) -> bool:
    return ensure_utc(a) > ensure_utc(b)

def add_days(d: datetime, n: int) -> datetime:
    return d + timedelta(days=n)

def start_of_day(d: datetime) -> datetime:
    """Midnight of the same calendar day; naive input comes back as UTC."""
    return ensure_utc(d).replace(hour=0, minute=0, second=0, microsecond=0)

def is_within_interval(d: datetime, start: datetime, end: datetime) -> bool:
    """
    Inclusive containment test.

    An inverted interval (start after end) contains nothing; normalize it
    with normalize_range() first.
    """
    d, start, end = ensure_utc(d), ensure_utc(start), ensure_utc(end)
    if start > end:
        return False
    return start <= d <= end

def normalize_range(a: datetime, b: datetime) -> Tuple[datetime, datetime]:
    """Order two dates so the earlier one comes first (drags can go backwards)."""
    a, b = ensure_utc(a), ensure_utc(b)
    return (a, b) if a <= b else (b, a)
