"""
HB Core Config - Public API
=============================
Engine tunables. Doctrine: no hardcoded timeouts in engine logic.
"""

from core.config.rules import (
    DEFAULT_CLAIM_ABANDON_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_SUMMARY_TOLERANCE_SECONDS,
    DEFAULT_TIMEZONE,
    EngineSettings,
    load_engine_settings,
)

__all__ = [
    "EngineSettings",
    "load_engine_settings",
    "DEFAULT_SUMMARY_TOLERANCE_SECONDS",
    "DEFAULT_CLAIM_ABANDON_SECONDS",
    "DEFAULT_FETCH_TIMEOUT_SECONDS",
    "DEFAULT_TIMEZONE",
]
