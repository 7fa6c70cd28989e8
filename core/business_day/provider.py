"""
HB Business Day - Location Config Provider
============================================
Protocol + InMemory implementation for LocationTimeConfig lookup.

The location entity (external) owns the config. This core only reads.
A missing config is not an error: callers treat None as a UTC
calendar day.
"""

from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from core.business_day.models import LocationTimeConfig


class LocationConfigProvider(Protocol):
    def get_time_config(self, location_id: str) -> Optional[LocationTimeConfig]:
        """Return the location's time config, or None if unset."""
        ...  # pragma: no cover


class InMemoryLocationConfigProvider:
    """Thread-safe in-memory provider for tests and bootstrap."""

    def __init__(self, configs: tuple[LocationTimeConfig, ...] = ()):
        self._lock = threading.Lock()
        self._configs: Dict[str, LocationTimeConfig] = {
            config.location_id: config for config in configs
        }

    def get_time_config(self, location_id: str) -> Optional[LocationTimeConfig]:
        with self._lock:
            return self._configs.get(location_id)

    def set_time_config(self, config: LocationTimeConfig) -> None:
        """Register or replace a config."""
        with self._lock:
            self._configs[config.location_id] = config

    def remove(self, location_id: str) -> None:
        with self._lock:
            self._configs.pop(location_id, None)
