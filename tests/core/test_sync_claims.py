"""
Tests for core.sync - claim coordination, sales merge and the sync run.
"""

import threading
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from core.business_day import InMemoryLocationConfigProvider, LocationTimeConfig, resolve_bounds
from core.config.rules import EngineSettings
from core.sync import (
    ClaimNotHeldError,
    ClaimOutcome,
    ClaimResult,
    ClaimStatus,
    InMemoryClaimStore,
    InMemorySalesSink,
    PermanentFetchError,
    PersistenceFailure,
    SaleLine,
    SaleRecord,
    SalesSyncService,
    SyncBatchItem,
    SyncClaim,
    SyncClaimCoordinator,
    SyncRunResult,
    SyncRunStatus,
    SyncToken,
    TransientFetchError,
    aggregate_lines,
    merge_sales,
)
from core.time.clock import FixedClock

T0 = datetime(2024, 6, 1, 18, 0, tzinfo=timezone.utc)
DAY = date(2024, 6, 1)
TOKEN = SyncToken("loc-1", DAY, "square")


def make_coordinator(abandon=600):
    clock = FixedClock(T0)
    return SyncClaimCoordinator(InMemoryClaimStore(), clock, abandon_seconds=abandon), clock


def sale(external_id, at, lines=(), total="10.00"):
    return SaleRecord(
        external_id=external_id,
        occurred_at=at,
        total_amount=Decimal(total),
        lines=tuple(lines),
    )


def line(ref, qty, unit):
    qty, unit = Decimal(qty), Decimal(unit)
    return SaleLine(product_ref=ref, quantity=qty, unit_price=unit, total_price=qty * unit)


# ── Value objects ────────────────────────────────────────────

class TestSyncToken:
    def test_key(self):
        assert TOKEN.key == "loc-1|2024-06-01|square"
        assert str(TOKEN) == TOKEN.key

    def test_equal_tokens_hash_equal(self):
        assert SyncToken("loc-1", DAY, "square") == TOKEN
        assert len({TOKEN, SyncToken("loc-1", DAY, "square")}) == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"location_id": "", "business_day": DAY, "provider_id": "square"},
            {"location_id": "loc-1", "business_day": DAY, "provider_id": " "},
            {"location_id": "loc-1", "business_day": T0, "provider_id": "square"},
            {"location_id": "loc-1", "business_day": "2024-06-01", "provider_id": "square"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SyncToken(**kwargs)


class TestSyncClaimInvariants:
    def test_pending_never_stored(self):
        with pytest.raises(ValueError):
            SyncClaim(TOKEN, ClaimStatus.PENDING, "o", T0)

    def test_running_has_no_completion(self):
        with pytest.raises(ValueError):
            SyncClaim(TOKEN, ClaimStatus.RUNNING, "o", T0, completed_at=T0)

    def test_terminal_requires_completion(self):
        with pytest.raises(ValueError):
            SyncClaim(TOKEN, ClaimStatus.SUCCEEDED, "o", T0)

    def test_is_stale(self):
        claim = SyncClaim(TOKEN, ClaimStatus.RUNNING, "o", T0)
        abandon = timedelta(seconds=600)
        assert not claim.is_stale(T0 + abandon, abandon)
        assert claim.is_stale(T0 + abandon + timedelta(seconds=1), abandon)

    def test_claim_result_owner_rules(self):
        with pytest.raises(ValueError):
            ClaimResult(outcome=ClaimOutcome.ACQUIRED, token=TOKEN)
        with pytest.raises(ValueError):
            ClaimResult(outcome=ClaimOutcome.ALREADY_RUNNING, token=TOKEN, owner_id="x")


# ── Coordinator ──────────────────────────────────────────────

class TestClaim:
    def test_first_claim_acquires(self):
        coordinator, _ = make_coordinator()
        result = coordinator.claim(TOKEN)
        assert result.is_acquired
        assert result.owner_id
        assert result.claim.status == ClaimStatus.RUNNING
        assert result.claim.attempts == 1
        assert coordinator.status(TOKEN) == ClaimStatus.RUNNING

    def test_unclaimed_is_pending(self):
        coordinator, _ = make_coordinator()
        assert coordinator.status(TOKEN) == ClaimStatus.PENDING
        assert coordinator.get_claim(TOKEN) is None

    def test_second_claim_conflicts(self):
        coordinator, _ = make_coordinator()
        coordinator.claim(TOKEN, owner_id="a")
        result = coordinator.claim(TOKEN, owner_id="b")
        assert result.outcome == ClaimOutcome.ALREADY_RUNNING
        assert result.owner_id is None
        assert result.claim.owner_id == "a"

    def test_completed_claim_short_circuits(self):
        coordinator, _ = make_coordinator()
        first = coordinator.claim(TOKEN)
        coordinator.complete(TOKEN, first.owner_id)
        again = coordinator.claim(TOKEN)
        assert again.outcome == ClaimOutcome.ALREADY_COMPLETED
        assert coordinator.status(TOKEN) == ClaimStatus.SUCCEEDED

    def test_completed_stays_completed_after_timeout(self):
        coordinator, clock = make_coordinator(abandon=60)
        first = coordinator.claim(TOKEN)
        coordinator.complete(TOKEN, first.owner_id)
        clock.advance(3600)
        assert coordinator.claim(TOKEN).is_completed

    def test_failed_claim_is_retryable(self):
        coordinator, _ = make_coordinator()
        first = coordinator.claim(TOKEN, owner_id="a")
        failed = coordinator.fail(TOKEN, first.owner_id, RuntimeError("pos down"))
        assert failed.status == ClaimStatus.FAILED
        assert failed.last_error == "RuntimeError: pos down"

        retry = coordinator.claim(TOKEN, owner_id="b")
        assert retry.is_acquired
        assert retry.reclaimed is False
        assert retry.previous_status == ClaimStatus.FAILED
        assert retry.claim.attempts == 2
        assert retry.claim.last_error is None

    def test_running_claim_not_reclaimed_before_timeout(self):
        coordinator, clock = make_coordinator(abandon=600)
        coordinator.claim(TOKEN, owner_id="a")
        clock.advance(600)
        assert coordinator.claim(TOKEN, owner_id="b").is_conflict

    def test_abandoned_claim_reclaimed(self):
        coordinator, clock = make_coordinator(abandon=600)
        coordinator.claim(TOKEN, owner_id="a")
        clock.advance(601)
        result = coordinator.claim(TOKEN, owner_id="b")
        assert result.is_acquired
        assert result.reclaimed is True
        assert result.claim.owner_id == "b"
        assert result.claim.claimed_at == clock.now_utc()

    def test_previous_owner_cannot_finish_after_reclaim(self):
        coordinator, clock = make_coordinator(abandon=600)
        coordinator.claim(TOKEN, owner_id="a")
        clock.advance(601)
        coordinator.claim(TOKEN, owner_id="b")
        with pytest.raises(ClaimNotHeldError) as exc_info:
            coordinator.complete(TOKEN, "a")
        assert exc_info.value.current_owner == "b"
        assert coordinator.status(TOKEN) == ClaimStatus.RUNNING

    def test_complete_unclaimed_token(self):
        coordinator, _ = make_coordinator()
        with pytest.raises(ClaimNotHeldError) as exc_info:
            coordinator.complete(TOKEN, "nobody")
        assert exc_info.value.current_status == "PENDING"

    def test_fail_with_message(self):
        coordinator, _ = make_coordinator()
        first = coordinator.claim(TOKEN)
        assert coordinator.fail(TOKEN, first.owner_id, "timeout").last_error == "timeout"

    def test_tokens_are_independent(self):
        coordinator, _ = make_coordinator()
        coordinator.claim(TOKEN)
        other_day = SyncToken("loc-1", date(2024, 6, 2), "square")
        other_provider = SyncToken("loc-1", DAY, "toast")
        assert coordinator.claim(other_day).is_acquired
        assert coordinator.claim(other_provider).is_acquired

    def test_abandon_from_settings(self):
        clock = FixedClock(T0)
        coordinator = SyncClaimCoordinator(
            InMemoryClaimStore(), clock, settings=EngineSettings(claim_abandon_seconds=30)
        )
        assert coordinator.abandon_after == timedelta(seconds=30)

    def test_invalid_abandon(self):
        with pytest.raises(ValueError):
            SyncClaimCoordinator(InMemoryClaimStore(), FixedClock(T0), abandon_seconds=0)


class TestClaimRace:
    def test_exactly_one_concurrent_winner(self):
        coordinator, _ = make_coordinator()
        callers = 12
        barrier = threading.Barrier(callers)
        results = []
        lock = threading.Lock()

        def contend(i):
            barrier.wait(timeout=5)
            result = coordinator.claim(TOKEN, owner_id=f"worker-{i}")
            with lock:
                results.append(result)

        threads = [threading.Thread(target=contend, args=(i,)) for i in range(callers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        winners = [r for r in results if r.is_acquired]
        losers = [r for r in results if r.is_conflict]
        assert len(winners) == 1
        assert len(losers) == callers - 1
        assert coordinator.get_claim(TOKEN).owner_id == winners[0].owner_id


# ── Merge ────────────────────────────────────────────────────

class TestMergeSales:
    WINDOW = resolve_bounds(DAY, LocationTimeConfig("loc-1", "02:00", "UTC"))

    def test_new_duplicate_and_outside(self):
        sink = InMemorySalesSink()
        sales = [
            sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc)),
            sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc)),
            sale("s2", datetime(2024, 6, 2, 1, 30, tzinfo=timezone.utc)),
            sale("s3", datetime(2024, 6, 2, 2, 0, tzinfo=timezone.utc)),
        ]
        stats = merge_sales("loc-1", "square", sales, self.WINDOW, sink)
        assert stats.to_dict() == {
            "processed": 3,
            "new_sales": 2,
            "duplicates": 1,
            "outside_window": 1,
        }
        assert len(sink) == 2

    def test_remerge_is_idempotent(self):
        sink = InMemorySalesSink()
        sales = [sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc))]
        merge_sales("loc-1", "square", sales, self.WINDOW, sink)
        stats = merge_sales("loc-1", "square", sales, self.WINDOW, sink)
        assert stats.new_sales == 0
        assert stats.duplicates == 1
        assert len(sink) == 1

    def test_lines_aggregated_per_product(self):
        sink = InMemorySalesSink()
        lines = [line("beer", "2", "5.00"), line("wine", "1", "9.00"), line("beer", "1", "8.00")]
        merge_sales(
            "loc-1", "square",
            [sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc), lines)],
            self.WINDOW, sink,
        )
        stored = sink.sales_for("loc-1")[0]
        assert [l.product_ref for l in stored.lines] == ["beer", "wine"]
        beer = stored.lines[0]
        assert beer.quantity == Decimal("3")
        assert beer.total_price == Decimal("18.00")
        assert beer.unit_price == Decimal("6")

    def test_zero_quantity_keeps_unit_price(self):
        merged = aggregate_lines([line("x", "0", "4.00"), line("x", "0", "4.00")])
        assert merged[0].unit_price == Decimal("4.00")

    def test_sink_failure_becomes_persistence_failure(self):
        class BrokenSink(InMemorySalesSink):
            def record_sale(self, location_id, provider_id, sale):
                raise OSError("disk full")

        with pytest.raises(PersistenceFailure) as exc_info:
            merge_sales(
                "loc-1", "square",
                [sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc))],
                self.WINDOW, BrokenSink(),
            )
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_naive_sale_rejected(self):
        with pytest.raises(ValueError):
            sale("s1", datetime(2024, 6, 1, 20, 0))


# ── Sync service ─────────────────────────────────────────────

class FakeClient:
    def __init__(self, sales=(), error=None, block=None):
        self.sales = list(sales)
        self.error = error
        self.block = block
        self.calls = []

    def fetch_sales(self, location_id, window, provider_id):
        self.calls.append((location_id, window, provider_id))
        if self.block is not None:
            self.block.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.sales


def make_service(client, sink=None, clock_at=T0, config=None, configs=None):
    clock = FixedClock(clock_at)
    coordinator = SyncClaimCoordinator(InMemoryClaimStore(), clock, abandon_seconds=600)
    if configs is None:
        configs = InMemoryLocationConfigProvider(
            (config or LocationTimeConfig("loc-1", "02:00", "America/New_York"),)
        )
    if sink is None:
        sink = InMemorySalesSink()
    service = SalesSyncService(coordinator, client, sink, configs, clock)
    return service, coordinator, clock


class TestSalesSyncService:
    def test_sync_completes(self):
        client = FakeClient([sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc))])
        service, coordinator, _ = make_service(client)
        result = service.sync_business_day("loc-1", DAY, "square")
        try:
            assert result.status == SyncRunStatus.COMPLETED
            assert result.succeeded
            assert result.merge.new_sales == 1
            assert coordinator.status(result.token) == ClaimStatus.SUCCEEDED
        finally:
            service.close()

    def test_second_run_skips_and_fetches_once(self):
        client = FakeClient()
        service, _, _ = make_service(client)
        try:
            first = service.sync_business_day("loc-1", DAY, "square")
            second = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert first.status == SyncRunStatus.COMPLETED
        assert second.status == SyncRunStatus.SKIPPED_COMPLETED
        assert second.succeeded
        assert len(client.calls) == 1

    def test_fetch_window_is_business_day(self):
        client = FakeClient()
        config = LocationTimeConfig("loc-1", "02:00", "America/New_York")
        service, _, _ = make_service(client, config=config)
        try:
            service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        _, window, provider = client.calls[0]
        assert window == resolve_bounds(DAY, config)
        assert provider == "square"

    def test_current_day_uses_business_day(self):
        # 01:30 EDT on June 2nd is still June 1st's business day.
        client = FakeClient()
        service, _, _ = make_service(
            client, clock_at=datetime(2024, 6, 2, 5, 30, tzinfo=timezone.utc)
        )
        try:
            result = service.sync_current_day("loc-1", "square")
        finally:
            service.close()
        assert result.token.business_day == date(2024, 6, 1)

    def test_missing_config_uses_default_zone(self):
        client = FakeClient()
        service, _, _ = make_service(client)
        try:
            config = service.time_config_for("unknown-loc")
        finally:
            service.close()
        assert config.timezone == "UTC"
        assert not config.crosses_midnight

    def test_transient_fetch_failure(self):
        service, coordinator, _ = make_service(FakeClient(error=TransientFetchError("503")))
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert result.retryable is True
        assert result.error_type == "TransientFetchError"
        assert coordinator.status(result.token) == ClaimStatus.FAILED

    def test_unexpected_client_error_is_permanent(self):
        service, coordinator, _ = make_service(FakeClient(error=KeyError("token")))
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert result.retryable is False
        assert result.error_type == PermanentFetchError.__name__

    def test_failed_run_can_be_retried(self):
        client = FakeClient(error=TransientFetchError("503"))
        service, _, _ = make_service(client)
        try:
            service.sync_business_day("loc-1", DAY, "square")
            client.error = None
            retry = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert retry.status == SyncRunStatus.COMPLETED
        assert len(client.calls) == 2

    def test_fetch_timeout_fails_claim(self):
        block = threading.Event()
        service, coordinator, _ = make_service(FakeClient(block=block))
        try:
            result = service.sync_business_day("loc-1", DAY, "square", timeout_seconds=0.05)
        finally:
            block.set()
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert result.error_type == "FetchTimeout"
        assert result.retryable is True
        assert coordinator.status(result.token) == ClaimStatus.FAILED

    def test_cancel_fails_claim(self):
        block = threading.Event()
        cancel = threading.Event()
        cancel.set()
        service, coordinator, _ = make_service(FakeClient(block=block))
        try:
            result = service.sync_business_day("loc-1", DAY, "square", cancel=cancel)
        finally:
            block.set()
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert result.error_type == "FetchCancelled"
        assert coordinator.status(result.token) == ClaimStatus.FAILED

    def test_persistence_failure_fails_claim(self):
        class BrokenSink(InMemorySalesSink):
            def record_sale(self, location_id, provider_id, sale):
                raise OSError("disk full")

        client = FakeClient([sale("s1", datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc))])
        service, coordinator, _ = make_service(client, sink=BrokenSink())
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert result.error_type == "PersistenceFailure"
        assert result.retryable is False
        assert coordinator.status(result.token) == ClaimStatus.FAILED

    def test_in_progress_skips(self):
        client = FakeClient()
        service, coordinator, _ = make_service(client)
        coordinator.claim(SyncToken("loc-1", DAY, "square"), owner_id="other")
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.SKIPPED_IN_PROGRESS
        assert client.calls == []

    def test_claim_lost_mid_run(self):
        token = SyncToken("loc-1", DAY, "square")
        holder = {}

        class ReclaimingClient(FakeClient):
            def fetch_sales(self, location_id, window, provider_id):
                holder["clock"].advance(601)
                holder["coordinator"].claim(token, owner_id="usurper")
                return []

        service, coordinator, clock = make_service(ReclaimingClient())
        holder.update(clock=clock, coordinator=coordinator)
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.CLAIM_LOST
        assert coordinator.get_claim(token).owner_id == "usurper"
        assert coordinator.status(token) == ClaimStatus.RUNNING

    def test_result_to_dict(self):
        service, _, _ = make_service(FakeClient())
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        data = result.to_dict()
        assert data["token"] == "loc-1|2024-06-01|square"
        assert data["status"] == "COMPLETED"
        assert data["merge"]["new_sales"] == 0

    def test_malformed_record_fails_claim(self):
        service, coordinator, _ = make_service(FakeClient([{"external_id": "s1"}]))
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert result.error_type == "SyncError"
        assert "AttributeError" in result.error
        assert result.retryable is False
        assert coordinator.status(TOKEN) == ClaimStatus.FAILED

    def test_unexpected_merge_error_fails_claim(self):
        naive = SimpleNamespace(
            external_id="s1", occurred_at=datetime(2024, 6, 1, 20, 0), lines=()
        )
        service, coordinator, _ = make_service(FakeClient([naive]))
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.status == SyncRunStatus.FAILED
        assert "TypeError" in result.error
        assert coordinator.status(TOKEN) == ClaimStatus.FAILED

    def test_non_iterable_fetch_result_is_permanent(self):
        client = FakeClient()
        client.sales = 42
        service, coordinator, _ = make_service(client)
        try:
            result = service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert result.error_type == "PermanentFetchError"
        assert coordinator.status(TOKEN) == ClaimStatus.FAILED

    def test_config_error_raises_before_claim(self):
        client = FakeClient()
        service, coordinator, _ = make_service(client, configs=UnreachableConfigs())
        try:
            with pytest.raises(ConnectionError):
                service.sync_business_day("loc-1", DAY, "square")
        finally:
            service.close()
        assert coordinator.status(TOKEN) == ClaimStatus.PENDING
        assert client.calls == []

    def test_explicit_timeout_must_be_positive(self):
        client = FakeClient()
        service, coordinator, _ = make_service(client)
        try:
            with pytest.raises(ValueError):
                service.sync_business_day("loc-1", DAY, "square", timeout_seconds=0)
        finally:
            service.close()
        assert coordinator.status(TOKEN) == ClaimStatus.PENDING
        assert client.calls == []


class UnreachableConfigs:
    def __init__(self, locations=None):
        self.locations = locations
        self.configs = InMemoryLocationConfigProvider(
            (LocationTimeConfig("loc-1", "02:00", "America/New_York"),)
        )

    def get_time_config(self, location_id):
        if self.locations is None or location_id in self.locations:
            raise ConnectionError("config service unreachable")
        return self.configs.get_time_config(location_id)


class PickyClient(FakeClient):
    def __init__(self, failing):
        super().__init__()
        self.failing = failing

    def fetch_sales(self, location_id, window, provider_id):
        self.calls.append((location_id, window, provider_id))
        if location_id in self.failing:
            raise TransientFetchError(f"{location_id} unavailable")
        return []


class TestSyncAll:
    TARGETS = [("loc-1", "square"), ("loc-2", "square"), ("loc-bad", "toast")]

    def test_failures_are_isolated(self):
        client = PickyClient(failing={"loc-2"})
        service, coordinator, _ = make_service(
            client, configs=UnreachableConfigs(locations={"loc-bad"})
        )
        try:
            batch = service.sync_all(self.TARGETS)
        finally:
            service.close()

        assert batch.total == 3
        assert batch.success_count == 1
        assert batch.error_count == 2
        assert not batch.succeeded

        ok, fetch_failed, unreachable = batch.items
        assert ok.result.status == SyncRunStatus.COMPLETED
        assert fetch_failed.result.status == SyncRunStatus.FAILED
        assert fetch_failed.result.retryable is True
        assert unreachable.result is None
        assert unreachable.error.startswith("ConnectionError")
        assert coordinator.status(SyncToken("loc-2", DAY, "square")) == ClaimStatus.FAILED
        assert [call[0] for call in client.calls] == ["loc-1", "loc-2"]

    def test_all_succeed(self):
        service, _, _ = make_service(FakeClient())
        try:
            batch = service.sync_all([("loc-1", "square"), ("loc-1", "toast")])
        finally:
            service.close()
        assert batch.succeeded
        assert batch.success_count == 2

    def test_in_progress_target_is_not_an_error(self):
        service, coordinator, _ = make_service(FakeClient())
        coordinator.claim(TOKEN, owner_id="other")
        try:
            batch = service.sync_all([("loc-1", "square")])
        finally:
            service.close()
        assert batch.success_count == 0
        assert batch.error_count == 0
        assert batch.items[0].result.status == SyncRunStatus.SKIPPED_IN_PROGRESS

    def test_item_needs_result_or_error(self):
        with pytest.raises(ValueError):
            SyncBatchItem(location_id="loc-1", provider_id="square")
        with pytest.raises(ValueError):
            SyncBatchItem(
                location_id="loc-1",
                provider_id="square",
                result=SyncRunResult(token=TOKEN, status=SyncRunStatus.COMPLETED),
                error="boom",
            )

    def test_empty_batch(self):
        service, _, _ = make_service(FakeClient())
        try:
            batch = service.sync_all([])
        finally:
            service.close()
        assert batch.total == 0
        assert batch.succeeded

    def test_to_dict(self):
        client = PickyClient(failing={"loc-1"})
        service, _, _ = make_service(client)
        try:
            data = service.sync_all([("loc-1", "square")]).to_dict()
        finally:
            service.close()
        assert data["total"] == 1
        assert data["error_count"] == 1
        assert data["results"][0]["success"] is False
        assert data["results"][0]["error"] == "loc-1 unavailable"
