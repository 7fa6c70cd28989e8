"""
HB Business Day - Bounds Resolver
===================================
Turns a calendar label + LocationTimeConfig into the authoritative
UTC window of that business day.

Rules:
1. No config, or close time 00:00 → calendar day in the location zone:
     start = D 00:00 local, end = D+1 00:00 local.
2. Cross-midnight close time:
     start = D 00:00 local, end = D+1 <close> local.
3. Each endpoint is resolved independently under the DST policies
   of core.time.zones (gap → shift forward, repeat → later instant).

Post-condition: end > start, always. If a pathological zone rule
produces end <= start, end is extended to start + nominal duration
(24h, or 24h + close time for cross-midnight days).

Pure and stateless. Safe for unlimited parallel use.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from core.business_day.models import MIDNIGHT, BusinessDayBounds, LocationTimeConfig
from core.time.clock import Clock
from core.time.zones import to_utc_instant

logger = logging.getLogger("hb.business_day")

ONE_DAY = timedelta(days=1)


def zone_for(config: Optional[LocationTimeConfig]) -> tzinfo:
    return config.zone if config is not None else timezone.utc


def _nominal_duration(config: Optional[LocationTimeConfig]) -> timedelta:
    if config is None or not config.crosses_midnight:
        return ONE_DAY
    return ONE_DAY + config.close_offset


def resolve_in_zone(
    label: date,
    config: Optional[LocationTimeConfig],
    zone: tzinfo,
) -> BusinessDayBounds:
    """Resolve with a preloaded zone (shared across an expansion)."""
    if isinstance(label, datetime) or not isinstance(label, date):
        raise TypeError(f"Business day label must be a date, got {type(label).__name__}.")
    if label == date.max:
        raise ValueError("date.max has no following day to close on.")

    close = config.business_close_time if config is not None else MIDNIGHT

    start = to_utc_instant(label, MIDNIGHT, zone)
    end = to_utc_instant(label + ONE_DAY, close, zone)

    if end <= start:
        nominal = _nominal_duration(config)
        logger.warning(
            f"Zone rules produced an empty business day for {label} "
            f"(start={start.isoformat()}, end={end.isoformat()}); "
            f"extending to nominal {nominal}."
        )
        end = start + nominal

    return BusinessDayBounds(start=start, end=end, label=label)


# ══════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════

def resolve_bounds(
    date_label: date,
    config: Optional[LocationTimeConfig] = None,
) -> BusinessDayBounds:
    """
    Resolve the UTC half-open window [start, end) of a business day.

    Args:
        date_label: Calendar date naming the business day.
        config:     Location time config, or None for a UTC calendar day.

    Returns:
        BusinessDayBounds with end > start and label == date_label.
    """
    return resolve_in_zone(date_label, config, zone_for(config))


def business_day_for_instant(
    instant: datetime,
    config: Optional[LocationTimeConfig] = None,
) -> date:
    """
    Label of the business day whose window contains `instant`.

    After-midnight trading belongs to the previous day: at a 02:00
    close bar, 01:00 on Sunday is still Saturday's business day.
    When two windows contain the instant the earlier label wins.
    """
    if instant.tzinfo is None:
        raise ValueError("instant must be timezone-aware.")

    zone = zone_for(config)
    local_label = instant.astimezone(zone).date()
    previous = local_label - ONE_DAY

    if resolve_in_zone(previous, config, zone).contains(instant):
        return previous
    return local_label


def is_instant_in_business_day(
    instant: datetime,
    date_label: date,
    config: Optional[LocationTimeConfig] = None,
) -> bool:
    """True if the instant falls inside the label's half-open window."""
    return resolve_bounds(date_label, config).contains(instant)


def current_business_day(
    config: Optional[LocationTimeConfig],
    clock: Clock,
) -> date:
    """The business day open right now. Never naive calendar 'today'."""
    return business_day_for_instant(clock.now_utc(), config)


def current_bounds(
    config: Optional[LocationTimeConfig],
    clock: Clock,
) -> BusinessDayBounds:
    """Bounds of the business day open right now."""
    return resolve_bounds(current_business_day(config, clock), config)


def previous_business_day(
    config: Optional[LocationTimeConfig],
    clock: Clock,
) -> date:
    """Label of the business day before the one currently open."""
    return current_business_day(config, clock) - ONE_DAY
