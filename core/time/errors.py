"""
HB Core Time - Input Errors
=============================
Validation failures for wall-clock and timezone input.
Fail fast. Never retried.
"""


class TemporalInputError(ValueError):
    """Base error for invalid temporal input."""
    pass


class InvalidTimeZone(TemporalInputError):
    """Timezone identifier is not a known IANA zone."""

    def __init__(self, identifier: object):
        self.identifier = identifier
        super().__init__(
            f"Unknown or malformed IANA timezone identifier: {identifier!r}."
        )


class InvalidTimeOfDay(TemporalInputError):
    """Time-of-day is malformed or out of the 00:00-23:59 range."""

    def __init__(self, value: object, detail: str = ""):
        self.value = value
        self.detail = detail
        message = f"Invalid time of day: {value!r}."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
