"""
HB Core Time - Explicit Clock Protocol
========================================
No datetime.now() in engine logic. The clock is a collaborator
passed to the components that need "now" (single-flight windows,
claim abandonment, current business day). There is no module-level
default clock: whoever wires the core to its stores owns the clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol, Union


class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time (timezone-aware)."""
        ...  # pragma: no cover


class SystemClock:
    """Production clock - real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock - returns a controlled timestamp.

    Usage:
        clock = FixedClock(datetime(2024, 6, 1, 12, tzinfo=timezone.utc))
        clock.advance(seconds=31)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        self._fixed_dt = self._checked(fixed_dt)

    @staticmethod
    def _checked(dt: datetime) -> datetime:
        if dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        return dt.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: Union[float, timedelta] = 0) -> None:
        """Move time forward by seconds (or a timedelta)."""
        delta = seconds if isinstance(seconds, timedelta) else timedelta(seconds=seconds)
        if delta < timedelta(0):
            raise ValueError("FixedClock cannot move backwards.")
        self._fixed_dt = self._fixed_dt + delta

    def set(self, dt: datetime) -> None:
        """Jump to an absolute instant."""
        self._fixed_dt = self._checked(dt)
