"""
HB Alerts - Value Objects
===========================
Inventory snapshot rows, variance counts, stock severity and the
AlertSummary aggregate.

AlertSummary is a point-in-time aggregate. It is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional, Union

Quantity = Union[int, float, Decimal]


class StockSeverity(Enum):
    """How far below its minimum an inventory item is."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"  # at or below zero


@dataclass(frozen=True)
class InventoryLevel:
    """One row of an InventoryStore snapshot."""

    current_quantity: Quantity
    minimum_quantity: Quantity
    item_id: Optional[str] = None

    @property
    def is_low(self) -> bool:
        return self.current_quantity < self.minimum_quantity

    @property
    def is_out(self) -> bool:
        return self.current_quantity <= 0


@dataclass(frozen=True)
class VarianceCounts:
    """Externally stored variance alerts for a location."""

    active: int = 0
    critical: int = 0

    def __post_init__(self) -> None:
        if self.active < 0 or self.critical < 0:
            raise ValueError("Variance counts must be non-negative.")


@dataclass(frozen=True)
class AlertSummary:
    """
    Combined stock + variance alert summary for one location.

    active_alerts:   low-stock items + active variance alerts.
    critical_alerts: 1 if any item is out of stock, plus critical
                     variance alerts (numeric displays).
    has_critical:    any stock-out or any critical variance (badges).
    """

    location_id: str
    active_alerts: int
    critical_alerts: int
    has_critical: bool
    low_stock_count: int = 0
    critical_stock_count: int = 0
    severity_counts: Dict[str, int] = field(default_factory=dict)
    computed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "location_id": self.location_id,
            "active_alerts": self.active_alerts,
            "critical_alerts": self.critical_alerts,
            "has_critical": self.has_critical,
            "low_stock_count": self.low_stock_count,
            "critical_stock_count": self.critical_stock_count,
            "severity_counts": dict(self.severity_counts),
            "computed_at": self.computed_at.isoformat() if self.computed_at else None,
        }


@dataclass(frozen=True)
class DailyVarianceSummary:
    """
    Variance alerts owned by one business day. start/end are the full
    window; instants shared with the previous day are counted there.
    """

    label: date
    start: datetime
    end: datetime
    active: int
    critical: int

    @property
    def has_critical(self) -> bool:
        return self.critical > 0
