"""
HB Core Time - Temporal Helpers
=================================
Pure functions for expiry checks and calendar date iteration.
All functions take explicit datetime arguments - no hidden clock access.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator


def is_expired(issued_at: datetime, ttl_seconds: float, now: datetime) -> bool:
    """
    True once `ttl_seconds` have fully elapsed since `issued_at`.

    Exactly at the boundary the record is still live.
    """
    return (now - issued_at).total_seconds() > ttl_seconds


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Ascending calendar dates from start to end inclusive. Stops at date.max."""
    current = start
    one_day = timedelta(days=1)
    while current <= end:
        yield current
        if current == date.max:
            return
        current += one_day
