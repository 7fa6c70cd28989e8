"""
HB Core Time - Wall-Clock to UTC Resolution
=============================================
Converts a local calendar date + wall-clock time in an IANA zone
into a UTC instant, using the zone's rules for that specific date.

Flat hour offsets are never used: the offset is looked up from the
IANA rule table (zoneinfo + tzdata) for the date being resolved.

DST policies (fixed, not configurable):
- Non-existent time (spring-forward gap): shifted forward by the
  gap duration. 02:00 in a 02:00-03:00 gap resolves to 03:00.
- Ambiguous time (fall-back repeat): the LATER instant, i.e. the
  post-transition offset.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone, tzinfo
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.time.errors import InvalidTimeOfDay, InvalidTimeZone

ZoneLike = Union[str, tzinfo]
TimeLike = Union[str, time]

UTC_ZONE = "UTC"

_TIME_OF_DAY = re.compile(r"^(\d{1,2}):(\d{2})$")


# ══════════════════════════════════════════════════════════════
# INPUT PARSING
# ══════════════════════════════════════════════════════════════

def load_zone(zone: ZoneLike) -> tzinfo:
    """
    Resolve an IANA identifier to its rule table.

    A tzinfo instance is passed through untouched, so callers that
    iterate many dates in one zone load the rules only once.
    """
    if isinstance(zone, tzinfo):
        return zone
    if not isinstance(zone, str) or not zone.strip():
        raise InvalidTimeZone(zone)
    try:
        return ZoneInfo(zone.strip())
    except (ZoneInfoNotFoundError, ValueError):
        # ValueError covers malformed keys such as absolute paths.
        raise InvalidTimeZone(zone) from None


def parse_time_of_day(value: TimeLike) -> time:
    """
    Parse a strict "HH:MM" string (or validate a time instance).

    Hours 0-23, minutes 0-59. Seconds are not part of a closing time.
    """
    if isinstance(value, time):
        if value.tzinfo is not None:
            raise InvalidTimeOfDay(value, "Time of day must be naive wall-clock time.")
        if value.second or value.microsecond:
            raise InvalidTimeOfDay(value, "Seconds are not supported.")
        return value

    if not isinstance(value, str):
        raise InvalidTimeOfDay(value, "Expected 'HH:MM' string or time.")

    match = _TIME_OF_DAY.match(value.strip())
    if match is None:
        raise InvalidTimeOfDay(value, "Expected 'HH:MM' format.")

    hour, minute = int(match.group(1)), int(match.group(2))
    if not 0 <= hour <= 23:
        raise InvalidTimeOfDay(value, f"Hour {hour} out of range 0-23.")
    if not 0 <= minute <= 59:
        raise InvalidTimeOfDay(value, f"Minute {minute} out of range 0-59.")
    return time(hour, minute)


# ══════════════════════════════════════════════════════════════
# RESOLUTION
# ══════════════════════════════════════════════════════════════

def _roundtrips(local: datetime, zone: tzinfo) -> bool:
    back = local.astimezone(timezone.utc).astimezone(zone)
    return back.replace(tzinfo=None) == local.replace(tzinfo=None)


def to_utc_instant(
    calendar_date: date,
    time_of_day: TimeLike,
    zone: ZoneLike,
) -> datetime:
    """
    Resolve local wall-clock time on a calendar date to a UTC instant.

    Args:
        calendar_date: Local calendar date (not a datetime).
        time_of_day:   "HH:MM" or naive time.
        zone:          IANA identifier or a tzinfo from load_zone().

    Returns:
        Timezone-aware datetime in UTC.

    Raises:
        InvalidTimeZone:  unknown identifier.
        InvalidTimeOfDay: malformed or out-of-range time.
    """
    if isinstance(calendar_date, datetime) or not isinstance(calendar_date, date):
        raise TypeError(
            f"calendar_date must be a date, got {type(calendar_date).__name__}."
        )
    wall = parse_time_of_day(time_of_day)
    tz = load_zone(zone)

    naive = datetime.combine(calendar_date, wall)

    # fold=1 selects the post-transition offset: the later instant
    # for a repeated time, and a no-op for ordinary times.
    later = naive.replace(tzinfo=tz, fold=1)
    if _roundtrips(later, tz):
        return later.astimezone(timezone.utc)

    # Gap: fold=0 applies the pre-transition offset, which lands the
    # nominal time shifted forward by the gap length.
    return naive.replace(tzinfo=tz, fold=0).astimezone(timezone.utc)


def is_nonexistent(calendar_date: date, time_of_day: TimeLike, zone: ZoneLike) -> bool:
    """True if the wall-clock time falls in a spring-forward gap."""
    tz = load_zone(zone)
    naive = datetime.combine(calendar_date, parse_time_of_day(time_of_day))
    return not _roundtrips(naive.replace(tzinfo=tz, fold=0), tz)


def is_ambiguous(calendar_date: date, time_of_day: TimeLike, zone: ZoneLike) -> bool:
    """True if the wall-clock time occurs twice (fall-back repeat)."""
    tz = load_zone(zone)
    naive = datetime.combine(calendar_date, parse_time_of_day(time_of_day))
    earlier = naive.replace(tzinfo=tz, fold=0)
    later = naive.replace(tzinfo=tz, fold=1)
    if earlier.utcoffset() == later.utcoffset():
        return False
    return _roundtrips(earlier, tz) and _roundtrips(later, tz)


def local_date_of(instant: datetime, zone: ZoneLike) -> date:
    """Calendar date of a UTC instant as seen on the zone's wall clock."""
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware.")
    return instant.astimezone(load_zone(zone)).date()
