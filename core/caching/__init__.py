"""
HB Core Caching - Public API
==============================
Request coalescing for on-demand aggregates.

Doctrine: retained results are disposable and bounded by a tolerance
window. Time is injected - no datetime.now() calls.
"""

from core.caching.singleflight import FlightResult, FlightStats, SingleFlight

__all__ = [
    "SingleFlight",
    "FlightResult",
    "FlightStats",
]
