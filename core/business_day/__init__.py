"""
HB Business Day - Public API
==============================
Location closing time + IANA zone → authoritative UTC business day
windows, and lazy expansion of label ranges.
"""

from core.business_day.errors import BusinessDayError, InvalidRange
from core.business_day.expander import (
    BusinessDayPeriod,
    collapse,
    expand,
    expand_between,
)
from core.business_day.models import (
    COMMON_TIMEZONES,
    DEFAULT_BUSINESS_CLOSE_TIMES,
    BusinessDayBounds,
    BusinessDayRange,
    LocationTimeConfig,
    parse_date_label,
)
from core.business_day.provider import (
    InMemoryLocationConfigProvider,
    LocationConfigProvider,
)
from core.business_day.resolver import (
    business_day_for_instant,
    current_bounds,
    current_business_day,
    is_instant_in_business_day,
    previous_business_day,
    resolve_bounds,
)

__all__ = [
    "BusinessDayError",
    "InvalidRange",
    "LocationTimeConfig",
    "BusinessDayBounds",
    "BusinessDayRange",
    "DEFAULT_BUSINESS_CLOSE_TIMES",
    "COMMON_TIMEZONES",
    "parse_date_label",
    "resolve_bounds",
    "business_day_for_instant",
    "is_instant_in_business_day",
    "current_business_day",
    "current_bounds",
    "previous_business_day",
    "BusinessDayPeriod",
    "expand",
    "expand_between",
    "collapse",
    "LocationConfigProvider",
    "InMemoryLocationConfigProvider",
]
