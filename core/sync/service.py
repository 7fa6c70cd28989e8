"""
HB Sync - Sales Sync Service
==============================
Drives one claimed sync run end to end:

    claim → resolve window → fetch (bounded) → merge → complete

Every failure after the claim is taken releases it as FAILED so the
token stays retryable; nothing is left RUNNING except by a crashed
process, which the abandon timeout covers. sync_all() drives a batch
of targets and isolates their failures from each other.

Results are returned, not raised: the trigger layer (scheduler, HTTP
handler) reports them.

The external fetch runs on a worker thread so it can be bounded by a
timeout and a caller-supplied cancel event. A timed-out fetch cannot
be killed; its eventual result is discarded.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from datetime import date
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from core.business_day.models import BusinessDayBounds, LocationTimeConfig
from core.business_day.provider import LocationConfigProvider
from core.business_day.resolver import business_day_for_instant, resolve_bounds
from core.config.rules import EngineSettings
from core.sync.coordinator import SyncClaimCoordinator
from core.sync.errors import (
    ClaimNotHeldError,
    ExternalFetchFailure,
    FetchCancelled,
    FetchTimeout,
    PermanentFetchError,
    PersistenceFailure,
    SyncError,
)
from core.sync.merge import SalesSink, merge_sales
from core.sync.models import (
    MergeStats,
    SaleRecord,
    SyncBatchItem,
    SyncBatchResult,
    SyncRunResult,
    SyncRunStatus,
    SyncToken,
)
from core.time.clock import Clock

logger = logging.getLogger("hb.sync")

CANCEL_POLL_SECONDS = 0.05


class ExternalSyncClient(Protocol):
    def fetch_sales(
        self,
        location_id: str,
        window: BusinessDayBounds,
        provider_id: str,
    ) -> Sequence[SaleRecord]:
        """Sales that occurred inside window, as reported by the provider."""
        ...  # pragma: no cover


class SalesSyncService:
    """
    Usage:
        service = SalesSyncService(coordinator, client, sink, configs, clock)
        result = service.sync_current_day("loc-1", "square")
        if not result.succeeded and result.retryable:
            ...schedule retry...
    """

    def __init__(
        self,
        coordinator: SyncClaimCoordinator,
        client: ExternalSyncClient,
        sink: SalesSink,
        config_provider: LocationConfigProvider,
        clock: Clock,
        settings: Optional[EngineSettings] = None,
        max_workers: int = 4,
    ) -> None:
        self._coordinator = coordinator
        self._client = client
        self._sink = sink
        self._configs = config_provider
        self._clock = clock
        self._settings = settings or EngineSettings()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="hb-sync-fetch"
        )

    # ── public ────────────────────────────────────────────────

    def time_config_for(self, location_id: str) -> LocationTimeConfig:
        """Location's config, or a calendar day in the default zone."""
        config = self._configs.get_time_config(location_id)
        if config is None:
            return LocationTimeConfig(
                location_id=location_id,
                timezone=self._settings.default_timezone,
            )
        return config

    def current_business_day(self, location_id: str) -> date:
        config = self.time_config_for(location_id)
        return business_day_for_instant(self._clock.now_utc(), config)

    def sync_current_day(
        self,
        location_id: str,
        provider_id: str,
        *,
        timeout_seconds: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        owner_id: Optional[str] = None,
    ) -> SyncRunResult:
        """Sync the business day open right now (not the calendar day)."""
        return self.sync_business_day(
            location_id,
            self.current_business_day(location_id),
            provider_id,
            timeout_seconds=timeout_seconds,
            cancel=cancel,
            owner_id=owner_id,
        )

    def sync_business_day(
        self,
        location_id: str,
        business_day: date,
        provider_id: str,
        *,
        timeout_seconds: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        owner_id: Optional[str] = None,
    ) -> SyncRunResult:
        """
        Claim, fetch, merge and complete one business day.

        Config and window are resolved before the claim, so an unreachable
        config provider raises without leaving anything RUNNING. Once the
        claim is held, every error ends in fail().
        """
        token = SyncToken(location_id, business_day, provider_id)
        timeout = self._fetch_timeout(timeout_seconds)
        window = resolve_bounds(business_day, self.time_config_for(location_id))

        claim = self._coordinator.claim(token, owner_id=owner_id)
        if claim.is_completed:
            return SyncRunResult(token=token, status=SyncRunStatus.SKIPPED_COMPLETED)
        if claim.is_conflict:
            return SyncRunResult(token=token, status=SyncRunStatus.SKIPPED_IN_PROGRESS)

        owner = claim.owner_id
        try:
            sales = self._fetch(location_id, window, provider_id, timeout, cancel)
            stats = merge_sales(location_id, provider_id, sales, window, self._sink)
        except ExternalFetchFailure as exc:
            return self._failed(token, owner, exc, retryable=exc.transient)
        except PersistenceFailure as exc:
            return self._failed(token, owner, exc, retryable=False)
        except Exception as exc:
            wrapped = SyncError(f"{type(exc).__name__}: {exc}")
            wrapped.__cause__ = exc
            return self._failed(token, owner, wrapped, retryable=False)

        try:
            self._coordinator.complete(token, owner)
        except ClaimNotHeldError as exc:
            logger.warning(f"Sync {token.key} finished after losing its claim: {exc}")
            return self._lost(token, owner, exc, stats)

        logger.info(
            f"Sync {token.key} completed: {stats.new_sales} new, "
            f"{stats.duplicates} duplicate(s)"
        )
        return SyncRunResult(
            token=token, status=SyncRunStatus.COMPLETED, merge=stats, owner_id=owner
        )

    def sync_all(
        self,
        targets: Iterable[Tuple[str, str]],
        *,
        timeout_seconds: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> SyncBatchResult:
        """
        Sync the current business day for every (location_id, provider_id).

        One target's failure never stops the batch: errors raised before
        a claim is taken are recorded on that target's item.
        """
        items: List[SyncBatchItem] = []
        for location_id, provider_id in targets:
            try:
                result = self.sync_current_day(
                    location_id,
                    provider_id,
                    timeout_seconds=timeout_seconds,
                    cancel=cancel,
                )
            except Exception as exc:
                logger.error(
                    f"Sync of {location_id}/{provider_id} raised: {exc}", exc_info=exc
                )
                items.append(
                    SyncBatchItem(
                        location_id=location_id,
                        provider_id=provider_id,
                        error=f"{type(exc).__name__}: {exc}",
                    )
                )
                continue
            items.append(
                SyncBatchItem(location_id=location_id, provider_id=provider_id, result=result)
            )

        batch = SyncBatchResult(items=tuple(items))
        logger.info(
            f"Sync batch finished: {batch.success_count}/{batch.total} succeeded, "
            f"{batch.error_count} error(s)"
        )
        return batch

    def close(self) -> None:
        self._executor.shutdown(wait=False)

    # ── internals ─────────────────────────────────────────────

    def _fetch_timeout(self, timeout_seconds: Optional[float]) -> float:
        if timeout_seconds is None:
            return self._settings.fetch_timeout_seconds
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {timeout_seconds}.")
        return timeout_seconds

    def _fetch(
        self,
        location_id: str,
        window: BusinessDayBounds,
        provider_id: str,
        timeout: float,
        cancel: Optional[threading.Event],
    ) -> Sequence[SaleRecord]:
        """Run the client on a worker; client errors surface as ExternalFetchFailure."""
        future = self._executor.submit(
            self._client.fetch_sales, location_id, window, provider_id
        )
        deadline = time.monotonic() + timeout

        while True:
            if cancel is not None and cancel.is_set():
                future.cancel()
                raise FetchCancelled()
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                future.cancel()
                raise FetchTimeout(timeout)
            step = min(remaining, CANCEL_POLL_SECONDS) if cancel is not None else remaining
            done, _ = wait([future], timeout=step, return_when=FIRST_COMPLETED)
            if done:
                try:
                    return list(future.result())
                except ExternalFetchFailure:
                    raise
                except Exception as exc:
                    raise PermanentFetchError(f"{type(exc).__name__}: {exc}") from exc

    def _failed(
        self,
        token: SyncToken,
        owner_id: str,
        exc: SyncError,
        retryable: bool,
    ) -> SyncRunResult:
        logger.error(f"Sync {token.key} failed: {exc}", exc_info=exc)
        try:
            self._coordinator.fail(token, owner_id, exc)
        except ClaimNotHeldError as lost:
            logger.warning(f"Sync {token.key} could not record failure: {lost}")
            return self._lost(token, owner_id, lost, None)
        return SyncRunResult(
            token=token,
            status=SyncRunStatus.FAILED,
            owner_id=owner_id,
            error=str(exc),
            error_type=type(exc).__name__,
            retryable=retryable,
        )

    @staticmethod
    def _lost(
        token: SyncToken,
        owner_id: str,
        exc: ClaimNotHeldError,
        stats: Optional[MergeStats],
    ) -> SyncRunResult:
        return SyncRunResult(
            token=token,
            status=SyncRunStatus.CLAIM_LOST,
            merge=stats,
            owner_id=owner_id,
            error=str(exc),
            error_type=type(exc).__name__,
            retryable=False,
        )
