"""
HB Sync - DB-backed Claim Store
=================================
Persists SyncClaims in core.sync_store via the Django ORM.

Atomicity per token comes from the database, not from locks:
  A) first claim: INSERT guarded by the unique token constraint;
     the losing INSERT raises IntegrityError and falls through
  B) retry/reclaim: one conditional UPDATE whose WHERE clause
     re-checks FAILED / stale RUNNING; rowcount 1 means we won
  C) release: UPDATE filtered on RUNNING + owner_id
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.sync.models import AcquireAttempt, ClaimStatus, SyncClaim, SyncToken


def _token_filter(token: SyncToken) -> dict:
    return {
        "location_id": token.location_id,
        "business_day": token.business_day,
        "provider_id": token.provider_id,
    }


def _to_claim(token: SyncToken, row) -> SyncClaim:
    return SyncClaim(
        token=token,
        status=ClaimStatus(row.status),
        owner_id=row.owner_id,
        claimed_at=row.claimed_at,
        completed_at=row.completed_at,
        attempts=row.attempts,
        last_error=row.last_error,
    )


class DbClaimStore:
    def get(self, token: SyncToken) -> Optional[SyncClaim]:
        from core.sync_store.models import SyncClaimRecord

        row = SyncClaimRecord.objects.filter(**_token_filter(token)).first()
        return _to_claim(token, row) if row is not None else None

    def acquire(
        self,
        token: SyncToken,
        owner_id: str,
        now: datetime,
        stale_before: datetime,
    ) -> AcquireAttempt:
        from django.db import IntegrityError, transaction
        from django.db.models import F, Q

        from core.sync_store.models import ClaimRecordStatus, SyncClaimRecord

        try:
            with transaction.atomic():
                row = SyncClaimRecord.objects.create(
                    **_token_filter(token),
                    status=ClaimRecordStatus.RUNNING,
                    owner_id=owner_id,
                    claimed_at=now,
                    attempts=1,
                )
            return AcquireAttempt(acquired=True, claim=_to_claim(token, row))
        except IntegrityError:
            pass

        # Snapshot for reporting only; the UPDATE below decides ownership.
        previous = self.get(token)
        updated = (
            SyncClaimRecord.objects.filter(**_token_filter(token))
            .filter(
                Q(status=ClaimRecordStatus.FAILED)
                | Q(status=ClaimRecordStatus.RUNNING, claimed_at__lt=stale_before)
            )
            .update(
                status=ClaimRecordStatus.RUNNING,
                owner_id=owner_id,
                claimed_at=now,
                completed_at=None,
                last_error=None,
                attempts=F("attempts") + 1,
            )
        )
        current = self.get(token)
        if updated == 1:
            return AcquireAttempt(acquired=True, claim=current, previous=previous)
        return AcquireAttempt(acquired=False, claim=current)

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

        from core.sync_store.models import ClaimRecordStatus, SyncClaimRecord

        updated = (
            SyncClaimRecord.objects.filter(**_token_filter(token))
            .filter(status=ClaimRecordStatus.RUNNING, owner_id=owner_id)
            .update(status=status.value, completed_at=now, last_error=error)
        )
        if updated != 1:
            return None
        return self.get(token)
