"""
HB Sync - Sales Merge
=======================
Merges fetched sales into the local store for one business-day
window. Re-merging the same batch is harmless: sales already present
(by external id) are counted as duplicates and left untouched.

Lines are aggregated per product before persisting: quantity and
total are summed, unit price becomes the quantity-weighted average.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, List, Protocol, Tuple

from core.business_day.models import BusinessDayBounds
from core.sync.errors import PersistenceFailure
from core.sync.models import MergeStats, SaleLine, SaleRecord

logger = logging.getLogger("hb.sync")


class SalesSink(Protocol):
    def has_sale(self, location_id: str, external_id: str) -> bool:
        ...  # pragma: no cover

    def record_sale(self, location_id: str, provider_id: str, sale: SaleRecord) -> None:
        ...  # pragma: no cover


class InMemorySalesSink:
    """Thread-safe sales sink keyed by (location, external id)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sales: Dict[Tuple[str, str], Tuple[str, SaleRecord]] = {}

    def has_sale(self, location_id: str, external_id: str) -> bool:
        with self._lock:
            return (location_id, external_id) in self._sales

    def record_sale(self, location_id: str, provider_id: str, sale: SaleRecord) -> None:
        with self._lock:
            self._sales[(location_id, sale.external_id)] = (provider_id, sale)

    def sales_for(self, location_id: str) -> List[SaleRecord]:
        with self._lock:
            return [
                sale for (loc, _), (_, sale) in self._sales.items() if loc == location_id
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sales)


def aggregate_lines(lines: Iterable[SaleLine]) -> Tuple[SaleLine, ...]:
    """Collapse lines for the same product, keeping first-seen order."""
    grouped: "OrderedDict[str, List[SaleLine]]" = OrderedDict()
    for line in lines:
        grouped.setdefault(line.product_ref, []).append(line)

    merged = []
    for product_ref, group in grouped.items():
        if len(group) == 1:
            merged.append(group[0])
            continue
        quantity = sum((line.quantity for line in group), Decimal("0"))
        total = sum((line.total_price for line in group), Decimal("0"))
        unit_price = total / quantity if quantity else group[0].unit_price
        merged.append(
            SaleLine(
                product_ref=product_ref,
                quantity=quantity,
                unit_price=unit_price,
                total_price=total,
            )
        )
    return tuple(merged)


def merge_sales(
    location_id: str,
    provider_id: str,
    sales: Iterable[SaleRecord],
    window: BusinessDayBounds,
    sink: SalesSink,
) -> MergeStats:
    """
    Persist new sales that fall inside `window`.

    Raises PersistenceFailure when the sink fails; sales written before
    the failure stay written and are skipped as duplicates on retry.
    """
    stats = MergeStats()
    seen = set()

    for sale in sales:
        if not window.contains(sale.occurred_at):
            stats.outside_window += 1
            continue

        stats.processed += 1
        try:
            if sale.external_id in seen or sink.has_sale(location_id, sale.external_id):
                stats.duplicates += 1
                continue
            sink.record_sale(
                location_id, provider_id, replace(sale, lines=aggregate_lines(sale.lines))
            )
        except PersistenceFailure:
            raise
        except Exception as exc:
            raise PersistenceFailure(
                f"Failed to persist sale {sale.external_id} for {location_id}: {exc}"
            ) from exc
        seen.add(sale.external_id)
        stats.new_sales += 1

    if stats.outside_window:
        logger.debug(
            f"{stats.outside_window} sale(s) for {location_id} fell outside "
            f"{window.label} and were skipped"
        )
    return stats
