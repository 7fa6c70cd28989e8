"""
HB Business Day - Value Objects
=================================
LocationTimeConfig, BusinessDayBounds and BusinessDayRange.

A missing LocationTimeConfig (None) is a valid state meaning
"calendar midnight-to-midnight, UTC".

This file contains NO resolution logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Union

from core.business_day.errors import InvalidRange
from core.time.zones import load_zone, parse_time_of_day


# ══════════════════════════════════════════════════════════════
# DEFAULTS
# ══════════════════════════════════════════════════════════════

DEFAULT_BUSINESS_CLOSE_TIMES = {
    "MIDNIGHT": "00:00",   # Standard calendar day
    "TWO_AM": "02:00",     # Common for bars/restaurants
    "THREE_AM": "03:00",   # Late night establishments
    "FOUR_AM": "04:00",
    "SIX_AM": "06:00",
}

COMMON_TIMEZONES = (
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "America/Phoenix",      # no DST
    "America/Anchorage",
    "Pacific/Honolulu",
    "Europe/London",
    "Europe/Paris",
    "Asia/Tokyo",
    "Australia/Sydney",
)

MIDNIGHT = time(0, 0)


# ══════════════════════════════════════════════════════════════
# LOCATION TIME CONFIG
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LocationTimeConfig:
    """
    A location's closing time and IANA zone.

    Owned by the location entity; read-only to this core.
    `business_close_time` accepts "HH:MM" or a naive time and is
    normalized to a time. The zone is validated at construction.
    """

    location_id: str
    business_close_time: Union[str, time] = "00:00"
    timezone: str = "UTC"
    _zone: tzinfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.location_id, str) or not self.location_id.strip():
            raise ValueError("location_id must be a non-empty string.")
        object.__setattr__(
            self, "business_close_time", parse_time_of_day(self.business_close_time)
        )
        object.__setattr__(self, "_zone", load_zone(self.timezone))

    @property
    def zone(self) -> tzinfo:
        return self._zone

    @property
    def crosses_midnight(self) -> bool:
        return self.business_close_time != MIDNIGHT

    @property
    def close_offset(self) -> timedelta:
        """Close time expressed as a duration after midnight."""
        close = self.business_close_time
        return timedelta(hours=close.hour, minutes=close.minute)

    @property
    def close_time_label(self) -> str:
        return self.business_close_time.strftime("%H:%M")

    def to_dict(self) -> dict:
        return {
            "location_id": self.location_id,
            "business_close_time": self.close_time_label,
            "timezone": self.timezone,
        }

    @classmethod
    def from_dict(cls, data: dict) -> LocationTimeConfig:
        return cls(
            location_id=data["location_id"],
            business_close_time=data.get("business_close_time", "00:00"),
            timezone=data.get("timezone", "UTC"),
        )


# ══════════════════════════════════════════════════════════════
# BUSINESS DAY BOUNDS - half-open [start, end)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BusinessDayBounds:
    """
    UTC window of one business day, half-open [start, end).

    Invariant: end > start, both timezone-aware.
    Ephemeral: computed on demand, never persisted here.
    """

    start: datetime
    end: datetime
    label: Optional[date] = None

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("BusinessDayBounds requires timezone-aware datetimes.")
        if self.end <= self.start:
            raise ValueError(
                f"BusinessDayBounds end ({self.end}) must be after start ({self.start})."
            )

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "label": self.label.isoformat() if self.label else None,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


# ══════════════════════════════════════════════════════════════
# BUSINESS DAY RANGE - inclusive labels
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BusinessDayRange:
    """Inclusive range of calendar labels. Used only as an expansion request."""

    start_label: date
    end_label: date

    def __post_init__(self) -> None:
        for value in (self.start_label, self.end_label):
            if isinstance(value, datetime) or not isinstance(value, date):
                raise TypeError("BusinessDayRange labels must be dates.")
        if self.end_label < self.start_label:
            raise InvalidRange(self.start_label, self.end_label)
        if self.end_label == date.max:
            raise ValueError("date.max cannot be a business day label.")

    @property
    def day_count(self) -> int:
        return (self.end_label - self.start_label).days + 1


def parse_date_label(value: Union[str, date]) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        raise TypeError("Business day labels are calendar dates, not datetimes.")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"Unsupported date label type: {type(value).__name__}.")
