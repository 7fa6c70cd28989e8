"""
HB Sync - Claim Store
=======================
Protocol + InMemory implementation for SyncClaim persistence.

Every store MUST make acquire() and release() atomic per token.
Two racing acquires for the same token: exactly one wins. The
InMemory store does compare-and-set under a lock; the Django store
(core.sync.db_provider) relies on a unique constraint plus
conditional UPDATEs.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, Optional, Protocol

from core.sync.models import AcquireAttempt, ClaimStatus, SyncClaim, SyncToken


class ClaimStore(Protocol):
    def get(self, token: SyncToken) -> Optional[SyncClaim]:
        """Current claim for a token, or None (Pending)."""
        ...  # pragma: no cover

    def acquire(
        self,
        token: SyncToken,
        owner_id: str,
        now: datetime,
        stale_before: datetime,
    ) -> AcquireAttempt:
        """
        Atomically claim a token for owner_id.

        Succeeds when no record exists, the record is FAILED, or the
        record is RUNNING with claimed_at < stale_before.
        """
        ...  # pragma: no cover

    def release(
        self,
        token: SyncToken,
        owner_id: str,
        status: ClaimStatus,
        now: datetime,
        error: Optional[str] = None,
    ) -> Optional[SyncClaim]:
        """
        Move a RUNNING claim held by owner_id to a terminal status.

        Returns the updated claim, or None if owner_id does not hold it.
        """
        ...  # pragma: no cover


def is_reclaimable(claim: SyncClaim, stale_before: datetime) -> bool:
    if claim.status == ClaimStatus.FAILED:
        return True
    return claim.status == ClaimStatus.RUNNING and claim.claimed_at < stale_before


class InMemoryClaimStore:
    """Thread-safe in-memory claim store for tests and single-process use."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claims: Dict[SyncToken, SyncClaim] = {}

    def get(self, token: SyncToken) -> Optional[SyncClaim]:
        with self._lock:
            return self._claims.get(token)

    def acquire(
        self,
        token: SyncToken,
        owner_id: str,
        now: datetime,
        stale_before: datetime,
    ) -> AcquireAttempt:
        with self._lock:
            current = self._claims.get(token)
            if current is None:
                claim = SyncClaim(
                    token=token,
                    status=ClaimStatus.RUNNING,
                    owner_id=owner_id,
                    claimed_at=now,
                )
                self._claims[token] = claim
                return AcquireAttempt(acquired=True, claim=claim)

            if not is_reclaimable(current, stale_before):
                return AcquireAttempt(acquired=False, claim=current)

            claim = replace(
                current,
                status=ClaimStatus.RUNNING,
                owner_id=owner_id,
                claimed_at=now,
                completed_at=None,
                attempts=current.attempts + 1,
                last_error=None,
            )
            self._claims[token] = claim
            return AcquireAttempt(acquired=True, claim=claim, previous=current)

    def release(
        self,
        token: SyncToken,
        owner_id: str,
        status: ClaimStatus,
        now: datetime,
        error: Optional[str] = None,
    ) -> Optional[SyncClaim]:
        if status not in (ClaimStatus.SUCCEEDED, ClaimStatus.FAILED):
            raise ValueError(f"release() requires a terminal status, got {status.value}.")
        with self._lock:
            current = self._claims.get(token)
            if (
                current is None
                or current.status != ClaimStatus.RUNNING
                or current.owner_id != owner_id
            ):
                return None
            claim = replace(
                current,
                status=status,
                completed_at=now,
                last_error=error,
            )
            self._claims[token] = claim
            return claim
