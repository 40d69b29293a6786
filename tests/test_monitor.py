"""Tests for the completion monitor."""

import asyncio

import pytest

from stablecenter_sdk.config import resolve_config
from stablecenter_sdk.errors import MonitorTimeoutError, StatusFetchError, ValidationError
from stablecenter_sdk.store import MemoryStore
from stablecenter_sdk.fusion import (
    CheckpointStore,
    CompletionMonitor,
    FusionApiClient,
    MonitorCheckpoint,
    OrderStatus,
    OrderSubmissionGateway,
    build_secret_set,
)

from conftest import ORDER_HASH, PENDING_STATUS, FakeFusionApi


class FakeTime:
    """Clock and sleep pair where sleeping advances the clock."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def make_monitor(fake, checkpoints=None, fake_time=None, poll_interval=0.001):
    api = FusionApiClient(resolve_config({"auth_key": "test-key"}), http_client=fake.client())
    kwargs = {}
    if fake_time is not None:
        kwargs = {"sleep": fake_time.sleep, "clock": fake_time.clock}
    return CompletionMonitor(
        OrderSubmissionGateway(api),
        poll_interval=poll_interval,
        checkpoints=checkpoints,
        **kwargs,
    )


def revealed_secrets(fake):
    return [body["secret"] for body in fake.revealed]


class TestCompletionMonitor:
    """Tests for secret reveal and polling."""

    @pytest.mark.asyncio
    async def test_single_fill_happy_path(self):
        """Ready fill 0 gets exactly one reveal, then the executed status is returned."""
        fake = FakeFusionApi()
        fake.ready_fills = [[0]]
        secrets = build_secret_set(1).secrets

        report = await make_monitor(fake).run(ORDER_HASH, secrets)

        assert report.state is OrderStatus.EXECUTED
        assert len(report.fills) >= 1
        assert revealed_secrets(fake) == [secrets[0]]
        assert fake.revealed[0]["orderHash"] == ORDER_HASH

    @pytest.mark.asyncio
    async def test_ready_index_revealed_once(self):
        """An index reported on several ticks is revealed only the first time."""
        fake = FakeFusionApi()
        fake.statuses = [PENDING_STATUS, PENDING_STATUS, PENDING_STATUS, fake.statuses[0]]
        fake.ready_fills = [[0], [0], [0, 1], [0, 1]]
        secrets = build_secret_set(2).secrets

        report = await make_monitor(fake).run(ORDER_HASH, secrets)

        assert report.is_terminal
        assert revealed_secrets(fake) == [secrets[0], secrets[1]]

    @pytest.mark.asyncio
    async def test_no_reveal_before_ready(self):
        fake = FakeFusionApi()
        secrets = build_secret_set(3).secrets

        report = await make_monitor(fake).run(ORDER_HASH, secrets)

        assert report.state is OrderStatus.EXECUTED
        assert fake.revealed == []

    @pytest.mark.asyncio
    async def test_expired_is_terminal(self):
        fake = FakeFusionApi()
        fake.statuses = [{"status": "expired", "fills": []}]

        report = await make_monitor(fake).run(ORDER_HASH, build_secret_set(1).secrets)

        assert report.state is OrderStatus.EXPIRED
        assert report.fills == []

    @pytest.mark.asyncio
    async def test_unknown_status_keeps_polling(self):
        fake = FakeFusionApi()
        fake.statuses = [{"status": "settling"}, {"status": "refunded"}]

        report = await make_monitor(fake).run(ORDER_HASH, build_secret_set(1).secrets)

        assert report.state is OrderStatus.REFUNDED
        assert len(fake.calls_to(f"/orders/v1.0/order/status/{ORDER_HASH}")) == 2

    @pytest.mark.asyncio
    async def test_timeout(self):
        fake = FakeFusionApi()
        fake.statuses = [PENDING_STATUS]
        fake.ready_fills = [[0]]
        fake_time = FakeTime()
        checkpoints = CheckpointStore()
        secrets = build_secret_set(1).secrets

        monitor = make_monitor(fake, checkpoints, fake_time, poll_interval=1.0)
        with pytest.raises(MonitorTimeoutError) as exc_info:
            await monitor.run(ORDER_HASH, secrets, timeout=5)

        details = exc_info.value.details
        assert details["order_hash"] == ORDER_HASH
        assert details["last_status"] == "pending"
        assert details["revealed_indices"] == [0]
        assert sum(fake_time.sleeps) == pytest.approx(5.0)
        # Progress survives a timeout
        assert checkpoints.load(ORDER_HASH).revealed_indices == [0]

    @pytest.mark.asyncio
    async def test_cancel_keeps_checkpoint(self):
        fake = FakeFusionApi()
        fake.statuses = [PENDING_STATUS]
        checkpoints = CheckpointStore()
        monitor = make_monitor(fake, checkpoints)

        task = monitor.start(ORDER_HASH, build_secret_set(2).secrets)
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert checkpoints.load(ORDER_HASH) is not None

    @pytest.mark.asyncio
    async def test_resume_after_failure(self):
        """A crashed run resumes from its checkpoint without re-revealing."""
        fake = FakeFusionApi()
        fake.statuses = [PENDING_STATUS, 503, fake.statuses[0]]
        fake.ready_fills = [[0]]
        checkpoints = CheckpointStore()
        monitor = make_monitor(fake, checkpoints)
        secret_set = build_secret_set(2)

        with pytest.raises(StatusFetchError):
            await monitor.run(ORDER_HASH, secret_set.secrets, secret_set.secret_hashes)

        checkpoint = checkpoints.load(ORDER_HASH)
        assert checkpoint.revealed_indices == [0]
        assert checkpoint.secret_hashes == secret_set.secret_hashes

        fake.ready_fills = [[0, 1]]
        report = await monitor.resume(ORDER_HASH)

        assert report.state is OrderStatus.EXECUTED
        assert revealed_secrets(fake) == secret_set.secrets
        assert checkpoints.load(ORDER_HASH) is None

    @pytest.mark.asyncio
    async def test_terminal_status_erases_checkpoint(self):
        fake = FakeFusionApi()
        checkpoints = CheckpointStore()
        secrets = build_secret_set(1).secrets

        await make_monitor(fake, checkpoints).run(ORDER_HASH, secrets)

        assert checkpoints.load(ORDER_HASH) is None

    @pytest.mark.asyncio
    async def test_out_of_range_index(self):
        fake = FakeFusionApi()
        fake.ready_fills = [[5]]

        with pytest.raises(ValidationError, match="fill index 5"):
            await make_monitor(fake).run(ORDER_HASH, build_secret_set(2).secrets)
        assert fake.revealed == []

    @pytest.mark.asyncio
    async def test_requires_secrets(self):
        with pytest.raises(ValidationError):
            await make_monitor(FakeFusionApi()).run(ORDER_HASH, [])

    @pytest.mark.asyncio
    async def test_resume_without_checkpoint(self):
        monitor = make_monitor(FakeFusionApi(), CheckpointStore())

        with pytest.raises(ValidationError, match="No monitor checkpoint"):
            await monitor.resume(ORDER_HASH)

    @pytest.mark.asyncio
    async def test_resume_without_store(self):
        with pytest.raises(ValidationError, match="no checkpoint store"):
            await make_monitor(FakeFusionApi()).resume(ORDER_HASH)

    @pytest.mark.asyncio
    async def test_malformed_status_keeps_checkpoint(self):
        """A garbled status body stops the run as StatusFetchError, resumable later."""
        fake = FakeFusionApi()
        fake.statuses = [{"status": "pending", "fills": ["bad"]}, fake.statuses[0]]
        checkpoints = CheckpointStore()
        monitor = make_monitor(fake, checkpoints)

        with pytest.raises(StatusFetchError, match="Malformed order status"):
            await monitor.run(ORDER_HASH, build_secret_set(1).secrets)
        assert checkpoints.load(ORDER_HASH) is not None

        report = await monitor.resume(ORDER_HASH)
        assert report.state is OrderStatus.EXECUTED


class TestCheckpointStore:
    """Tests for checkpoint persistence."""

    def test_erase_clears_secrets(self):
        store = CheckpointStore()
        checkpoint = MonitorCheckpoint(ORDER_HASH, ["0x01"], ["0x02"], [0])
        store.save(checkpoint)

        assert store.load(ORDER_HASH) is checkpoint
        assert checkpoint.last_revealed_idx == 0

        store.erase(ORDER_HASH)

        assert store.load(ORDER_HASH) is None
        assert checkpoint.secrets == []
        assert checkpoint.secret_hashes == []

    def test_erase_missing_is_noop(self):
        CheckpointStore().erase(ORDER_HASH)

    def test_checkpoint_expires_without_progress(self):
        """An abandoned checkpoint (and its secrets) drops out after ``ttl``."""
        now = [0.0]
        store = CheckpointStore(MemoryStore(clock=lambda: now[0]), ttl=60)
        checkpoint = MonitorCheckpoint(ORDER_HASH, ["0x01"])
        store.save(checkpoint)

        now[0] = 50
        checkpoint.revealed_indices.append(0)
        store.save(checkpoint)

        now[0] = 100
        assert store.load(ORDER_HASH) is checkpoint

        now[0] = 111
        assert store.load(ORDER_HASH) is None

    def test_checkpoint_without_ttl_is_kept(self):
        now = [0.0]
        store = CheckpointStore(MemoryStore(clock=lambda: now[0]))
        store.save(MonitorCheckpoint(ORDER_HASH, ["0x01"]))

        now[0] = 10**9
        assert store.load(ORDER_HASH) is not None
