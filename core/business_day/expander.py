"""
HB Business Day - Period Range Expander
=========================================
Expands an inclusive label range into business day windows.

The result is lazy (bounds are resolved while iterating), finite,
and restartable: iterating twice recomputes the same windows.
The zone rule table is loaded once per expansion and shared by
every label.
"""

from __future__ import annotations

from datetime import date
from typing import Iterator, List, Optional

from core.business_day.models import (
    BusinessDayBounds,
    BusinessDayRange,
    LocationTimeConfig,
)
from core.business_day.resolver import resolve_in_zone, zone_for
from core.time.temporal import iter_dates


class BusinessDayPeriod:
    """
    Lazy, restartable sequence of BusinessDayBounds.

    Usage:
        period = expand(BusinessDayRange(date(2024, 6, 1), date(2024, 6, 3)), config)
        for bounds in period:
            ...
        len(period)  # 3
    """

    def __init__(
        self,
        day_range: BusinessDayRange,
        config: Optional[LocationTimeConfig] = None,
    ) -> None:
        self._range = day_range
        self._config = config
        self._zone = zone_for(config)

    @property
    def day_range(self) -> BusinessDayRange:
        return self._range

    def __iter__(self) -> Iterator[BusinessDayBounds]:
        for label in iter_dates(self._range.start_label, self._range.end_label):
            yield resolve_in_zone(label, self._config, self._zone)

    def __len__(self) -> int:
        return self._range.day_count

    def labels(self) -> List[date]:
        return list(iter_dates(self._range.start_label, self._range.end_label))

    def collapse(self) -> BusinessDayBounds:
        """Single window from the first day's start to the last day's end."""
        first = resolve_in_zone(self._range.start_label, self._config, self._zone)
        last = resolve_in_zone(self._range.end_label, self._config, self._zone)
        return BusinessDayBounds(start=first.start, end=last.end)


def expand(
    day_range: BusinessDayRange,
    config: Optional[LocationTimeConfig] = None,
) -> BusinessDayPeriod:
    """Expand a label range into ascending business day windows."""
    if not isinstance(day_range, BusinessDayRange):
        raise TypeError(
            f"expand() takes a BusinessDayRange, got {type(day_range).__name__}."
        )
    return BusinessDayPeriod(day_range, config)


def expand_between(
    start_label: date,
    end_label: date,
    config: Optional[LocationTimeConfig] = None,
) -> BusinessDayPeriod:
    """
    expand() for two labels.

    Raises:
        InvalidRange: end label precedes start label.
    """
    return expand(BusinessDayRange(start_label=start_label, end_label=end_label), config)


def collapse(
    day_range: BusinessDayRange,
    config: Optional[LocationTimeConfig] = None,
) -> BusinessDayBounds:
    """
    Convert a label range filter into one UTC window:
    start of the first business day to end of the last.
    """
    return BusinessDayPeriod(day_range, config).collapse()
