"""
HB Sync - Claim Coordinator
=============================
Idempotent, race-safe ownership of periodic sync work.

Exactly one caller wins a token at a time. Losers get
ALREADY_RUNNING (or ALREADY_COMPLETED) and must not perform the
work. A winner that never finishes is not permanent: once its claim
is older than the abandon timeout, the next caller reclaims it.

complete()/fail() are owner-checked. A caller whose claim was
reclaimed by someone else gets ClaimNotHeldError and must not
overwrite the new owner's state.
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Optional, Union

from core.config.rules import EngineSettings
from core.sync.errors import ClaimNotHeldError
from core.sync.models import (
    ClaimOutcome,
    ClaimResult,
    ClaimStatus,
    SyncClaim,
    SyncToken,
)
from core.sync.store import ClaimStore
from core.time.clock import Clock

logger = logging.getLogger("hb.sync")


class SyncClaimCoordinator:
    """
    Usage:
        coordinator = SyncClaimCoordinator(InMemoryClaimStore(), clock)
        result = coordinator.claim(token)
        if result.is_acquired:
            ...fetch + merge...
            coordinator.complete(token, result.owner_id)
    """

    def __init__(
        self,
        store: ClaimStore,
        clock: Clock,
        settings: Optional[EngineSettings] = None,
        abandon_seconds: Optional[float] = None,
    ) -> None:
        settings = settings or EngineSettings()
        if abandon_seconds is None:
            abandon_seconds = settings.claim_abandon_seconds
        if abandon_seconds <= 0:
            raise ValueError(f"abandon_seconds must be > 0, got {abandon_seconds}.")
        self._store = store
        self._clock = clock
        self._abandon_after = timedelta(seconds=abandon_seconds)

    @property
    def abandon_after(self) -> timedelta:
        return self._abandon_after

    def claim(self, token: SyncToken, owner_id: Optional[str] = None) -> ClaimResult:
        """Try to become the owner of `token`. Never raises on conflict."""
        owner_id = owner_id or uuid.uuid4().hex
        now = self._clock.now_utc()
        attempt = self._store.acquire(
            token, owner_id, now=now, stale_before=now - self._abandon_after
        )

        if attempt.acquired:
            previous = attempt.previous
            reclaimed = previous is not None and previous.status == ClaimStatus.RUNNING
            if reclaimed:
                logger.warning(
                    f"Reclaimed abandoned sync claim {token.key}: "
                    f"owner {previous.owner_id} claimed at {previous.claimed_at.isoformat()}"
                )
            elif previous is not None:
                logger.info(
                    f"Retrying failed sync {token.key} (attempt {attempt.claim.attempts})"
                )
            return ClaimResult(
                outcome=ClaimOutcome.ACQUIRED,
                token=token,
                claim=attempt.claim,
                owner_id=owner_id,
                reclaimed=reclaimed,
                previous_status=previous.status if previous else None,
            )

        current = attempt.claim
        if current is not None and current.status == ClaimStatus.SUCCEEDED:
            logger.debug(f"Sync {token.key} already completed, skipping.")
            return ClaimResult(
                outcome=ClaimOutcome.ALREADY_COMPLETED,
                token=token,
                claim=current,
                previous_status=ClaimStatus.SUCCEEDED,
            )

        logger.debug(f"Sync {token.key} already running, skipping.")
        return ClaimResult(
            outcome=ClaimOutcome.ALREADY_RUNNING,
            token=token,
            claim=current,
            previous_status=current.status if current else None,
        )

    def complete(self, token: SyncToken, owner_id: str) -> SyncClaim:
        """Running → Succeeded. Raises ClaimNotHeldError if not the owner."""
        return self._release(token, owner_id, ClaimStatus.SUCCEEDED, None)

    def fail(
        self,
        token: SyncToken,
        owner_id: str,
        error: Union[str, BaseException, None] = None,
    ) -> SyncClaim:
        """Running → Failed. The token stays claimable for a retry."""
        if isinstance(error, BaseException):
            error = f"{type(error).__name__}: {error}"
        return self._release(token, owner_id, ClaimStatus.FAILED, error)

    def status(self, token: SyncToken) -> ClaimStatus:
        """Current status. A token never claimed is PENDING."""
        claim = self._store.get(token)
        return claim.status if claim else ClaimStatus.PENDING

    def get_claim(self, token: SyncToken) -> Optional[SyncClaim]:
        return self._store.get(token)

    def _release(
        self,
        token: SyncToken,
        owner_id: str,
        status: ClaimStatus,
        error: Optional[str],
    ) -> SyncClaim:
        released = self._store.release(
            token, owner_id, status, now=self._clock.now_utc(), error=error
        )
        if released is None:
            current = self._store.get(token)
            raise ClaimNotHeldError(
                token_key=token.key,
                owner_id=owner_id,
                current_owner=current.owner_id if current else None,
                current_status=current.status.value if current else ClaimStatus.PENDING.value,
            )
        logger.info(f"Sync {token.key} -> {status.value} (owner {owner_id})")
        return released
