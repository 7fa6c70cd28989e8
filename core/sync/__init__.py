"""
HB Sync - Public API
======================
Idempotent sync claims and the sales sync run they guard.
"""

from core.sync.coordinator import SyncClaimCoordinator
from core.sync.db_provider import DbClaimStore
from core.sync.errors import (
    ClaimNotHeldError,
    ExternalFetchFailure,
    FetchCancelled,
    FetchTimeout,
    PermanentFetchError,
    PersistenceFailure,
    SyncError,
    TransientFetchError,
)
from core.sync.merge import InMemorySalesSink, SalesSink, aggregate_lines, merge_sales
from core.sync.models import (
    AcquireAttempt,
    ClaimOutcome,
    ClaimResult,
    ClaimStatus,
    MergeStats,
    SaleLine,
    SaleRecord,
    SyncBatchItem,
    SyncBatchResult,
    SyncClaim,
    SyncRunResult,
    SyncRunStatus,
    SyncToken,
)
from core.sync.service import ExternalSyncClient, SalesSyncService
from core.sync.store import ClaimStore, InMemoryClaimStore

__all__ = [
    "SyncClaimCoordinator",
    "SalesSyncService",
    "ExternalSyncClient",
    "ClaimStore",
    "InMemoryClaimStore",
    "DbClaimStore",
    "SalesSink",
    "InMemorySalesSink",
    "merge_sales",
    "aggregate_lines",
    "SyncToken",
    "SyncClaim",
    "ClaimStatus",
    "ClaimOutcome",
    "ClaimResult",
    "AcquireAttempt",
    "SaleLine",
    "SaleRecord",
    "MergeStats",
    "SyncRunResult",
    "SyncBatchItem",
    "SyncBatchResult",
    "SyncRunStatus",
    "SyncError",
    "ExternalFetchFailure",
    "TransientFetchError",
    "PermanentFetchError",
    "FetchTimeout",
    "FetchCancelled",
    "PersistenceFailure",
    "ClaimNotHeldError",
]
