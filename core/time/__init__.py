"""
HB Core Time - Public API
===========================
Explicit clock protocol, IANA-rule based wall-clock resolution
and temporal helpers.
Doctrine: NO datetime.now() in engine logic.
"""

from core.time.clock import Clock, FixedClock, SystemClock
from core.time.errors import InvalidTimeOfDay, InvalidTimeZone, TemporalInputError
from core.time.temporal import is_expired, iter_dates
from core.time.zones import (
    UTC_ZONE,
    is_ambiguous,
    is_nonexistent,
    load_zone,
    local_date_of,
    parse_time_of_day,
    to_utc_instant,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TemporalInputError",
    "InvalidTimeZone",
    "InvalidTimeOfDay",
    "UTC_ZONE",
    "load_zone",
    "parse_time_of_day",
    "to_utc_instant",
    "is_nonexistent",
    "is_ambiguous",
    "local_date_of",
    "is_expired",
    "iter_dates",
]
