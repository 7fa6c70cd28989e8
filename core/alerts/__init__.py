"""
HB Alerts - Public API
========================
Stock + variance alert summaries with request coalescing.
"""

from core.alerts.aggregator import AlertAggregator, classify_stock_level, compose_summary
from core.alerts.models import (
    AlertSummary,
    DailyVarianceSummary,
    InventoryLevel,
    StockSeverity,
    VarianceCounts,
)
from core.alerts.stores import (
    AlertStore,
    InMemoryAlertStore,
    InMemoryInventoryStore,
    InventoryStore,
)

__all__ = [
    "AlertAggregator",
    "compose_summary",
    "classify_stock_level",
    "AlertSummary",
    "DailyVarianceSummary",
    "InventoryLevel",
    "StockSeverity",
    "VarianceCounts",
    "InventoryStore",
    "AlertStore",
    "InMemoryInventoryStore",
    "InMemoryAlertStore",
]
