"""
HB Sync - Claim and Sales Value Objects
=========================================
SyncToken identifies one unit of periodic sync work:
(location, business day label, provider). SyncClaim is the ownership
record over that token; its layout and transition rules are owned
here even though the record is physically stored elsewhere.

Claim lifecycle:
    (no record)  → RUNNING     first successful claim
    RUNNING      → SUCCEEDED   fetch + merge persisted
    RUNNING      → FAILED      unrecoverable error, timeout, cancel
    FAILED       → RUNNING     fresh claim (retry)
    RUNNING      → RUNNING     reclaim once older than the abandon timeout
    SUCCEEDED    is terminal
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from core.time.temporal import is_expired


# ══════════════════════════════════════════════════════════════
# CLAIM STATUS / TOKEN
# ══════════════════════════════════════════════════════════════

class ClaimStatus(Enum):
    PENDING = "PENDING"      # implicit: no record exists
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SyncToken:
    """Idempotency token for one sync unit."""

    location_id: str
    business_day: date
    provider_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.location_id, str) or not self.location_id.strip():
            raise ValueError("location_id must be a non-empty string.")
        if not isinstance(self.provider_id, str) or not self.provider_id.strip():
            raise ValueError("provider_id must be a non-empty string.")
        if isinstance(self.business_day, datetime) or not isinstance(self.business_day, date):
            raise ValueError("business_day must be a date.")

    @property
    def key(self) -> str:
        return f"{self.location_id}|{self.business_day.isoformat()}|{self.provider_id}"

    def __str__(self) -> str:
        return self.key


# ══════════════════════════════════════════════════════════════
# SYNC CLAIM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SyncClaim:
    """Ownership record for a token. Pending has no record."""

    token: SyncToken
    status: ClaimStatus
    owner_id: str
    claimed_at: datetime
    completed_at: Optional[datetime] = None
    attempts: int = 1
    last_error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status == ClaimStatus.PENDING:
            raise ValueError("PENDING claims are implicit and never stored.")
        if self.status == ClaimStatus.RUNNING and self.completed_at is not None:
            raise ValueError("RUNNING claim must not have completed_at.")
        if self.status in (ClaimStatus.SUCCEEDED, ClaimStatus.FAILED) and self.completed_at is None:
            raise ValueError(f"{self.status.value} claim requires completed_at.")

    def is_stale(self, now: datetime, abandon_after: timedelta) -> bool:
        """A RUNNING claim older than the abandon timeout is reclaimable."""
        return self.status == ClaimStatus.RUNNING and is_expired(
            self.claimed_at, abandon_after.total_seconds(), now
        )

    def to_dict(self) -> dict:
        return {
            "location_id": self.token.location_id,
            "business_day": self.token.business_day.isoformat(),
            "provider_id": self.token.provider_id,
            "status": self.status.value,
            "owner_id": self.owner_id,
            "claimed_at": self.claimed_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "attempts": self.attempts,
            "last_error": self.last_error,
        }


# ══════════════════════════════════════════════════════════════
# CLAIM RESULTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AcquireAttempt:
    """What a ClaimStore reports after one atomic acquire."""

    acquired: bool
    claim: Optional[SyncClaim]
    previous: Optional[SyncClaim] = None


class ClaimOutcome(Enum):
    ACQUIRED = "ACQUIRED"
    ALREADY_RUNNING = "ALREADY_RUNNING"        # claim conflict, no action taken
    ALREADY_COMPLETED = "ALREADY_COMPLETED"    # idempotent short-circuit


@dataclass(frozen=True)
class ClaimResult:
    """
    Outcome of SyncClaimCoordinator.claim().

    Invariants:
        - ACQUIRED carries the new owner's claim and owner_id.
        - Conflicts and completions carry no owner_id.
    """

    outcome: ClaimOutcome
    token: SyncToken
    claim: Optional[SyncClaim] = None
    owner_id: Optional[str] = None
    reclaimed: bool = False
    previous_status: Optional[ClaimStatus] = None

    def __post_init__(self) -> None:
        if self.outcome == ClaimOutcome.ACQUIRED:
            if self.owner_id is None or self.claim is None:
                raise ValueError("ACQUIRED result must include owner_id and claim.")
        elif self.owner_id is not None:
            raise ValueError(f"{self.outcome.value} result must not include owner_id.")

    @property
    def is_acquired(self) -> bool:
        return self.outcome == ClaimOutcome.ACQUIRED

    @property
    def is_conflict(self) -> bool:
        return self.outcome == ClaimOutcome.ALREADY_RUNNING

    @property
    def is_completed(self) -> bool:
        return self.outcome == ClaimOutcome.ALREADY_COMPLETED


# ══════════════════════════════════════════════════════════════
# SALES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SaleLine:
    product_ref: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class SaleRecord:
    """A sale as returned by an external POS client."""

    external_id: str
    occurred_at: datetime
    total_amount: Decimal
    lines: Tuple[SaleLine, ...] = ()

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError("external_id must be non-empty.")
        if self.occurred_at.tzinfo is None:
            raise ValueError("occurred_at must be timezone-aware.")


@dataclass
class MergeStats:
    processed: int = 0
    new_sales: int = 0
    duplicates: int = 0
    outside_window: int = 0

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "new_sales": self.new_sales,
            "duplicates": self.duplicates,
            "outside_window": self.outside_window,
        }


# ══════════════════════════════════════════════════════════════
# SYNC RUN RESULT
# ══════════════════════════════════════════════════════════════

class SyncRunStatus(Enum):
    COMPLETED = "COMPLETED"
    SKIPPED_IN_PROGRESS = "SKIPPED_IN_PROGRESS"
    SKIPPED_COMPLETED = "SKIPPED_COMPLETED"
    FAILED = "FAILED"
    CLAIM_LOST = "CLAIM_LOST"   # another caller reclaimed the token mid-run


@dataclass(frozen=True)
class SyncRunResult:
    """Reportable outcome of one driven sync run."""

    token: SyncToken
    status: SyncRunStatus
    merge: Optional[MergeStats] = None
    owner_id: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    retryable: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status in (SyncRunStatus.COMPLETED, SyncRunStatus.SKIPPED_COMPLETED)

    def to_dict(self) -> dict:
        return {
            "token": self.token.key,
            "status": self.status.value,
            "merge": self.merge.to_dict() if self.merge else None,
            "owner_id": self.owner_id,
            "error": self.error,
            "error_type": self.error_type,
            "retryable": self.retryable,
        }


# ══════════════════════════════════════════════════════════════
# SYNC BATCH
# ══════════════════════════════════════════════════════════════

_FAILED_RUNS = (SyncRunStatus.FAILED, SyncRunStatus.CLAIM_LOST)


@dataclass(frozen=True)
class SyncBatchItem:
    """One target of a batch: a run result, or the error that prevented it."""

    location_id: str
    provider_id: str
    result: Optional[SyncRunResult] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError("SyncBatchItem needs exactly one of result or error.")

    @property
    def succeeded(self) -> bool:
        return self.result is not None and self.result.succeeded

    @property
    def is_error(self) -> bool:
        return self.error is not None or self.result.status in _FAILED_RUNS

    def to_dict(self) -> dict:
        return {
            "location_id": self.location_id,
            "provider_id": self.provider_id,
            "success": self.succeeded,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error if self.error is not None else self.result.error,
        }


@dataclass(frozen=True)
class SyncBatchResult:
    """
    Aggregate of a batch run. Targets skipped because another caller
    holds them count as neither success nor error.
    """

    items: Tuple[SyncBatchItem, ...] = ()

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def success_count(self) -> int:
        return sum(1 for item in self.items if item.succeeded)

    @property
    def error_count(self) -> int:
        return sum(1 for item in self.items if item.is_error)

    @property
    def succeeded(self) -> bool:
        return self.error_count == 0

    def to_dict(self) -> dict:
        return {
            "success": self.succeeded,
            "total": self.total,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "results": [item.to_dict() for item in self.items],
        }
