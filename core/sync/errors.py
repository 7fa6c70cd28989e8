"""
HB Sync - Errors
==================
Error types for claim ownership, external fetches and persistence.

A claim conflict is NOT an error: it is ClaimOutcome.ALREADY_RUNNING.
"""

from typing import Optional


class SyncError(Exception):
    """Base error for sync operations."""
    pass


class ExternalFetchFailure(SyncError):
    """
    The external POS fetch failed.

    `transient` tells the trigger layer whether retrying soon is
    worthwhile (network blip, rate limit) or not (bad credentials).
    Either way the claim becomes FAILED and remains claimable.
    """

    transient = True

    def __init__(self, message: str, transient: Optional[bool] = None):
        if transient is not None:
            self.transient = transient
        super().__init__(message)


class TransientFetchError(ExternalFetchFailure):
    transient = True


class PermanentFetchError(ExternalFetchFailure):
    transient = False


class FetchTimeout(TransientFetchError):
    """Fetch did not finish within its timeout."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"External fetch timed out after {timeout_seconds}s.")


class FetchCancelled(TransientFetchError):
    """Caller cancelled the fetch."""

    def __init__(self):
        super().__init__("External fetch cancelled by caller.")


class PersistenceFailure(SyncError):
    """Writing merged results failed. Fatal for the run."""
    pass


class ClaimNotHeldError(SyncError):
    """Caller tried to finish a claim it does not hold (or no longer holds)."""

    def __init__(self, token_key: str, owner_id: str, current_owner: Optional[str] = None,
                 current_status: Optional[str] = None):
        self.token_key = token_key
        self.owner_id = owner_id
        self.current_owner = current_owner
        self.current_status = current_status
        super().__init__(
            f"Owner '{owner_id}' does not hold a RUNNING claim on {token_key} "
            f"(current owner: {current_owner}, status: {current_status})."
        )
