"""
HB Alerts - Alert Aggregator
==============================
Combines externally stored variance alerts with freshly evaluated
stock thresholds into one summary per location.

Composition:
    low_stock_count      = items with current < minimum
    critical_stock_count = items with current <= 0
    active_alerts        = low_stock_count + active variance
    critical_alerts      = (1 if any stock-out) + critical variance
    has_critical         = any stock-out OR any critical variance

Polling UIs call compute_summary() freely: concurrent callers for
the same location within the tolerance window share one store query
pair (single-flight). When to poll is the caller's concern.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence

from core.alerts.models import (
    AlertSummary,
    DailyVarianceSummary,
    InventoryLevel,
    Quantity,
    StockSeverity,
    VarianceCounts,
)
from core.alerts.stores import AlertStore, InventoryStore
from core.business_day.expander import expand
from core.business_day.models import BusinessDayBounds, BusinessDayRange, LocationTimeConfig
from core.business_day.resolver import resolve_bounds
from core.caching.singleflight import SingleFlight
from core.config.rules import EngineSettings
from core.time.clock import Clock

logger = logging.getLogger("hb.alerts")


# ══════════════════════════════════════════════════════════════
# PURE FUNCTIONS
# ══════════════════════════════════════════════════════════════

def classify_stock_level(current: Quantity, minimum: Quantity) -> StockSeverity:
    """
    Severity of a stock level relative to its minimum.

    <= 0 is always CRITICAL. With a minimum set, the ratio decides
    (<= 25% HIGH, <= 50% MEDIUM). Without one, absolute quantities do.
    """
    if current <= 0:
        return StockSeverity.CRITICAL
    if minimum > 0:
        ratio = Decimal(str(current)) / Decimal(str(minimum))
        if ratio <= Decimal("0.25"):
            return StockSeverity.HIGH
        if ratio <= Decimal("0.5"):
            return StockSeverity.MEDIUM
        return StockSeverity.LOW
    if current <= 2:
        return StockSeverity.HIGH
    if current <= 5:
        return StockSeverity.MEDIUM
    return StockSeverity.LOW


def compose_summary(
    location_id: str,
    levels: Sequence[InventoryLevel],
    variance: VarianceCounts,
    computed_at: Optional[datetime] = None,
) -> AlertSummary:
    """Pure composition of a summary from a snapshot and variance counts."""
    low = [level for level in levels if level.is_low]
    critical_stock_count = sum(1 for level in levels if level.is_out)

    severity_counts = {severity.value: 0 for severity in StockSeverity}
    for level in low:
        severity = classify_stock_level(level.current_quantity, level.minimum_quantity)
        severity_counts[severity.value] += 1

    stock_critical = 1 if critical_stock_count > 0 else 0
    return AlertSummary(
        location_id=location_id,
        active_alerts=len(low) + variance.active,
        critical_alerts=stock_critical + variance.critical,
        has_critical=critical_stock_count > 0 or variance.critical > 0,
        low_stock_count=len(low),
        critical_stock_count=critical_stock_count,
        severity_counts=severity_counts,
        computed_at=computed_at,
    )


# ══════════════════════════════════════════════════════════════
# AGGREGATOR
# ══════════════════════════════════════════════════════════════

class AlertAggregator:
    """
    On-demand alert summaries with per-location request coalescing.

    Usage:
        aggregator = AlertAggregator(inventory, alerts, clock)
        summary = aggregator.compute_summary("loc-1")
    """

    def __init__(
        self,
        inventory_store: InventoryStore,
        alert_store: AlertStore,
        clock: Clock,
        settings: Optional[EngineSettings] = None,
        tolerance_seconds: Optional[float] = None,
    ) -> None:
        settings = settings or EngineSettings()
        if tolerance_seconds is None:
            tolerance_seconds = settings.summary_tolerance_seconds
        self._inventory = inventory_store
        self._alerts = alert_store
        self._clock = clock
        self._flight: SingleFlight[AlertSummary] = SingleFlight(
            clock, tolerance_seconds=tolerance_seconds
        )

    def compute_summary(self, location_id: str) -> AlertSummary:
        """Summary for a location; at most one store query pair per window."""
        if not isinstance(location_id, str) or not location_id.strip():
            raise ValueError("location_id must be a non-empty string.")
        return self._flight.do(location_id, lambda: self._compute(location_id))

    def invalidate(self, location_id: str) -> bool:
        """Drop the retained summary (e.g. after a count is approved)."""
        return self._flight.invalidate(location_id)

    def compute_range_summaries(
        self,
        location_id: str,
        day_range: BusinessDayRange,
        config: Optional[LocationTimeConfig] = None,
    ) -> List[DailyVarianceSummary]:
        """
        Variance alerts raised per business day over a historical range.

        Inventory levels are point-in-time, so history covers variance
        alerts only. Not coalesced: historical queries are not polled.

        Cross-midnight windows overlap by the after-midnight span; an
        alert there is counted once, for the earlier day, so per-day
        counts add up to the range total.
        """
        previous_end = None
        if day_range.start_label != date.min:
            previous_end = resolve_bounds(day_range.start_label - timedelta(days=1), config).end

        results: List[DailyVarianceSummary] = []
        for bounds in expand(day_range, config):
            owned = bounds
            if previous_end is not None and previous_end > bounds.start:
                owned = BusinessDayBounds(start=previous_end, end=bounds.end, label=bounds.label)
            counts = self._alerts.variance_counts_between(location_id, owned)
            results.append(
                DailyVarianceSummary(
                    label=bounds.label,
                    start=bounds.start,
                    end=bounds.end,
                    active=counts.active,
                    critical=counts.critical,
                )
            )
            previous_end = bounds.end
        return results

    @property
    def flight(self) -> SingleFlight[AlertSummary]:
        return self._flight

    def _compute(self, location_id: str) -> AlertSummary:
        levels = self._inventory.snapshot(location_id)
        variance = self._alerts.variance_counts(location_id)
        summary = compose_summary(
            location_id, levels, variance, computed_at=self._clock.now_utc()
        )
        logger.debug(
            f"Alert summary computed for {location_id}: "
            f"active={summary.active_alerts} critical={summary.critical_alerts}"
        )
        return summary
