"""
HB Alerts - External Store Interfaces
=======================================
Protocols for the inventory and alert stores this core reads, plus
in-memory implementations for tests and bootstrap.

The stores are external collaborators: persistence of inventory and
alerts is not owned here.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, List, Protocol, Sequence, Tuple

from core.alerts.models import InventoryLevel, VarianceCounts
from core.business_day.models import BusinessDayBounds


class InventoryStore(Protocol):
    def snapshot(self, location_id: str) -> Sequence[InventoryLevel]:
        """Current inventory levels for a location."""
        ...  # pragma: no cover


class AlertStore(Protocol):
    def variance_counts(self, location_id: str) -> VarianceCounts:
        """Currently active / critical variance alerts."""
        ...  # pragma: no cover

    def variance_counts_between(
        self, location_id: str, bounds: BusinessDayBounds
    ) -> VarianceCounts:
        """Variance alerts raised inside [bounds.start, bounds.end)."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class InMemoryInventoryStore:
    """Thread-safe inventory snapshot store. Counts snapshot calls."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._levels: Dict[str, List[InventoryLevel]] = {}
        self.snapshot_calls = 0

    def set_levels(self, location_id: str, levels: Sequence[InventoryLevel]) -> None:
        with self._lock:
            self._levels[location_id] = list(levels)

    def snapshot(self, location_id: str) -> Sequence[InventoryLevel]:
        with self._lock:
            self.snapshot_calls += 1
            return tuple(self._levels.get(location_id, ()))


class InMemoryAlertStore:
    """
    Thread-safe variance alert store.

    Alerts are (raised_at, is_critical, is_active) tuples per location.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._alerts: Dict[str, List[Tuple[datetime, bool, bool]]] = {}
        self.count_calls = 0

    def add_alert(
        self,
        location_id: str,
        raised_at: datetime,
        critical: bool = False,
        active: bool = True,
    ) -> None:
        with self._lock:
            self._alerts.setdefault(location_id, []).append((raised_at, critical, active))

    def variance_counts(self, location_id: str) -> VarianceCounts:
        with self._lock:
            self.count_calls += 1
            live = [a for a in self._alerts.get(location_id, ()) if a[2]]
            return VarianceCounts(
                active=len(live),
                critical=sum(1 for a in live if a[1]),
            )

    def variance_counts_between(
        self, location_id: str, bounds: BusinessDayBounds
    ) -> VarianceCounts:
        with self._lock:
            raised = [
                a for a in self._alerts.get(location_id, ())
                if bounds.contains(a[0])
            ]
            return VarianceCounts(
                active=sum(1 for a in raised if a[2]),
                critical=sum(1 for a in raised if a[1]),
            )
