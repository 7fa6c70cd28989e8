"""
HB Business Day - Errors
==========================
"""

from datetime import date


class BusinessDayError(ValueError):
    """Base error for business day input."""
    pass


class InvalidRange(BusinessDayError):
    """Range end precedes range start."""

    def __init__(self, start_label: date, end_label: date):
        self.start_label = start_label
        self.end_label = end_label
        super().__init__(
            f"Business day range end ({end_label}) must not precede "
            f"start ({start_label})."
        )
