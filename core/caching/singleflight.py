"""
HB Core Caching - Keyed Single-Flight with Tolerance Window
=============================================================
Coalesces concurrent requests for the same key into ONE underlying
computation, and lets requests arriving shortly afterwards reuse
that result.

Per key:
- No record → caller becomes the leader and computes.
- In flight → caller blocks until the leader finishes, then gets
  the leader's value (or the leader's exception).
- Completed less than `tolerance_seconds` after the leader started
  → caller gets the retained value, nothing is recomputed.
- Failed computations are never retained.

The lock is held only to read/update the per-key records, never
while the computation runs. Time is injected via Clock.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

from core.time.clock import Clock

logger = logging.getLogger("hb.caching")

T = TypeVar("T")


# ══════════════════════════════════════════════════════════════
# RECORDS
# ══════════════════════════════════════════════════════════════

@dataclass
class FlightResult(Generic[T]):
    """A retained result and the window in which it may be reused."""

    key: Hashable
    value: T
    started_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass
class _Call:
    started_at: datetime
    done: threading.Event = field(default_factory=threading.Event)
    value: Any = None
    error: Optional[BaseException] = None


@dataclass
class FlightStats:
    """Single-flight statistics."""

    computations: int = 0
    reused: int = 0
    coalesced: int = 0
    failures: int = 0
    evictions: int = 0
    invalidations: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "computations": self.computations,
            "reused": self.reused,
            "coalesced": self.coalesced,
            "failures": self.failures,
            "evictions": self.evictions,
            "invalidations": self.invalidations,
        }


# ══════════════════════════════════════════════════════════════
# SINGLE FLIGHT
# ══════════════════════════════════════════════════════════════

class SingleFlight(Generic[T]):
    """
    In-memory keyed single-flight group with a reuse window.

    Usage:
        flight = SingleFlight(clock, tolerance_seconds=30)
        summary = flight.do(location_id, lambda: expensive(location_id))

    Not a distributed lock: each process coalesces its own callers.
    """

    def __init__(
        self,
        clock: Clock,
        tolerance_seconds: float = 30,
        max_entries: int = 1000,
    ) -> None:
        if tolerance_seconds < 0:
            raise ValueError("tolerance_seconds must be >= 0.")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1.")
        self._clock = clock
        self._tolerance = timedelta(seconds=tolerance_seconds)
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._results: OrderedDict[Hashable, FlightResult[T]] = OrderedDict()
        self._inflight: Dict[Hashable, _Call] = {}
        self._stats = FlightStats()

    def do(self, key: Hashable, fn: Callable[[], T]) -> T:
        """
        Return fn()'s value for `key`, computing it at most once
        per in-flight period and tolerance window.
        """
        with self._lock:
            now = self._clock.now_utc()
            retained = self._results.get(key)
            if retained is not None:
                if not retained.is_expired(now):
                    self._results.move_to_end(key)
                    self._stats.reused += 1
                    logger.debug(f"Single-flight reuse for {key!r}")
                    return retained.value
                self._evict(key)

            call = self._inflight.get(key)
            leader = call is None
            if leader:
                call = _Call(started_at=now)
                self._inflight[key] = call
                self._stats.computations += 1
            else:
                self._stats.coalesced += 1

        if not leader:
            logger.debug(f"Single-flight waiting on in-flight computation for {key!r}")
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.value

        try:
            value = fn()
        except BaseException as exc:
            call.error = exc
            with self._lock:
                self._inflight.pop(key, None)
                self._stats.failures += 1
            call.done.set()
            raise

        call.value = value
        with self._lock:
            self._inflight.pop(key, None)
            if self._tolerance > timedelta(0):
                self._retain(key, value, call.started_at)
        call.done.set()
        return value

    def invalidate(self, key: Hashable) -> bool:
        """Drop a retained result. In-flight computations are unaffected."""
        with self._lock:
            if key in self._results:
                del self._results[key]
                self._stats.invalidations += 1
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._results.clear()

    def peek(self, key: Hashable) -> Optional[FlightResult[T]]:
        """Inspect a retained result without counting a reuse."""
        with self._lock:
            return self._results.get(key)

    @property
    def stats(self) -> FlightStats:
        return self._stats

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._results)

    def _retain(self, key: Hashable, value: T, started_at: datetime) -> None:
        if key not in self._results and len(self._results) >= self._max_entries:
            oldest = next(iter(self._results))
            self._evict(oldest)
        self._results[key] = FlightResult(
            key=key,
            value=value,
            started_at=started_at,
            expires_at=started_at + self._tolerance,
        )
        self._results.move_to_end(key)

    def _evict(self, key: Hashable) -> None:
        self._results.pop(key, None)
        self._stats.evictions += 1
