"""
HB Core Config - Engine Settings
==================================
Tunables for the aggregation engine: single-flight tolerance,
claim abandonment timeout, external fetch timeout, fallback zone.

Values come from the Django settings module when one is configured
(HB_* names), otherwise from the defaults below. Nothing in engine
logic reads settings directly; components receive EngineSettings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.time.zones import load_zone

DEFAULT_SUMMARY_TOLERANCE_SECONDS = 30
DEFAULT_CLAIM_ABANDON_SECONDS = 600
DEFAULT_FETCH_TIMEOUT_SECONDS = 120
DEFAULT_TIMEZONE = "UTC"

_SETTING_NAMES = {
    "summary_tolerance_seconds": "HB_SUMMARY_TOLERANCE_SECONDS",
    "claim_abandon_seconds": "HB_CLAIM_ABANDON_SECONDS",
    "fetch_timeout_seconds": "HB_FETCH_TIMEOUT_SECONDS",
    "default_timezone": "HB_DEFAULT_TIMEZONE",
}


@dataclass(frozen=True)
class EngineSettings:
    """
    Validated engine tunables.

    summary_tolerance_seconds: window in which repeated summary
        requests for a location share one computation (0 disables
        result reuse; concurrent callers still coalesce).
    claim_abandon_seconds: age after which a Running sync claim is
        considered abandoned and may be reclaimed.
    fetch_timeout_seconds: default limit for one external fetch.
    default_timezone: zone used when a location has no config
        and the caller asks for one explicitly.
    """

    summary_tolerance_seconds: float = DEFAULT_SUMMARY_TOLERANCE_SECONDS
    claim_abandon_seconds: float = DEFAULT_CLAIM_ABANDON_SECONDS
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    default_timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        if self.summary_tolerance_seconds < 0:
            raise ValueError(
                f"summary_tolerance_seconds must be >= 0, got {self.summary_tolerance_seconds}."
            )
        if self.claim_abandon_seconds <= 0:
            raise ValueError(
                f"claim_abandon_seconds must be > 0, got {self.claim_abandon_seconds}."
            )
        if self.fetch_timeout_seconds <= 0:
            raise ValueError(
                f"fetch_timeout_seconds must be > 0, got {self.fetch_timeout_seconds}."
            )
        load_zone(self.default_timezone)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> EngineSettings:
        """Build from HB_* keys; missing keys keep their defaults."""
        kwargs = {}
        for attr, name in _SETTING_NAMES.items():
            if name in values and values[name] is not None:
                raw = values[name]
                kwargs[attr] = raw if attr == "default_timezone" else float(raw)
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {name: getattr(self, attr) for attr, name in _SETTING_NAMES.items()}


def load_engine_settings(source: Optional[Any] = None) -> EngineSettings:
    """
    Read EngineSettings from a settings object (default: django.conf.settings).

    Falls back to defaults when Django is not configured.
    """
    if source is None:
        from django.conf import settings as django_settings

        if not django_settings.configured:
            return EngineSettings()
        source = django_settings

    values = {name: getattr(source, name, None) for name in _SETTING_NAMES.values()}
    return EngineSettings.from_mapping(values)
