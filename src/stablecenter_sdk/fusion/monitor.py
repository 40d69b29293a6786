"""Completion monitor for submitted Fusion+ orders.

After submission an order moves through::

    Submitted -> Polling -> (SecretRevealing)* -> Executed | Expired | Refunded

Each tick asks the relayer which escrow fills are deployed and ready for
their secret, reveals exactly those secrets, then checks the order status.
A secret is only ever revealed for an index the relayer reported as ready;
revealing it earlier would let anyone claim the escrow.

Each monitor run owns its order's secrets. Runs are plain coroutines, so
monitoring several orders means running several tasks; cancelling a task
stops polling and leaves the checkpoint in place for ``resume``.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Sequence

from ..errors import MonitorTimeoutError, ValidationError
from ..store import ExpiringStore, MemoryStore
from .gateway import OrderSubmissionGateway
from .types import MonitorCheckpoint, OrderStatusReport

logger = logging.getLogger(__name__)

CHECKPOINT_KEY_PREFIX = "monitor:"


class CheckpointStore:
    """Persists monitor progress keyed by order hash.

    Every save restarts the entry's ``ttl``, so a checkpoint expires ``ttl``
    seconds after its monitor last made progress. None keeps it until erased.
    """

    def __init__(
        self,
        backend: Optional[ExpiringStore] = None,
        ttl: Optional[float] = None,
    ):
        self._backend = backend if backend is not None else MemoryStore()
        self._ttl = ttl

    @property
    def ttl(self) -> Optional[float]:
        return self._ttl

    def save(self, checkpoint: MonitorCheckpoint) -> None:
        self._backend.put(
            CHECKPOINT_KEY_PREFIX + checkpoint.order_hash, checkpoint, ttl=self._ttl
        )

    def load(self, order_hash: str) -> Optional[MonitorCheckpoint]:
        return self._backend.get(CHECKPOINT_KEY_PREFIX + order_hash)

    def erase(self, order_hash: str) -> None:
        checkpoint = self._backend.consume(CHECKPOINT_KEY_PREFIX + order_hash)
        if checkpoint is not None:
            # Drop our references to the secrets as well as the entry
            checkpoint.secrets.clear()
            checkpoint.secret_hashes.clear()


class CompletionMonitor:
    """Reveals secrets as escrows become claimable and polls to a terminal status."""

    def __init__(
        self,
        gateway: OrderSubmissionGateway,
        poll_interval: float = 1.0,
        checkpoints: Optional[CheckpointStore] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._gateway = gateway
        self._poll_interval = poll_interval
        self._checkpoints = checkpoints
        self._sleep = sleep
        self._clock = clock

    def _save(self, checkpoint: MonitorCheckpoint) -> None:
        if self._checkpoints is not None:
            self._checkpoints.save(checkpoint)

    async def _reveal_ready_secrets(self, checkpoint: MonitorCheckpoint) -> None:
        ready = await self._gateway.get_ready_to_accept_secret_fills(checkpoint.order_hash)
        for idx in ready:
            if idx in checkpoint.revealed_indices:
                continue
            if not 0 <= idx < len(checkpoint.secrets):
                raise ValidationError(
                    f"Relayer reported fill index {idx} but order "
                    f"{checkpoint.order_hash} has {len(checkpoint.secrets)} secrets",
                    order_hash=checkpoint.order_hash,
                    idx=idx,
                )
            await self._gateway.submit_secret(checkpoint.order_hash, checkpoint.secrets[idx])
            checkpoint.revealed_indices.append(idx)
            self._save(checkpoint)
            logger.info("Shared secret for fill %d of order %s", idx, checkpoint.order_hash)

    async def _poll(
        self, checkpoint: MonitorCheckpoint, timeout: Optional[float]
    ) -> OrderStatusReport:
        deadline = self._clock() + timeout if timeout is not None else None
        last_status = None

        while True:
            await self._reveal_ready_secrets(checkpoint)

            report = await self._gateway.get_order_status(checkpoint.order_hash)
            if report.is_terminal:
                logger.info(
                    "Order %s reached terminal status %s with %d fill(s)",
                    checkpoint.order_hash,
                    report.status,
                    len(report.fills),
                )
                if self._checkpoints is not None:
                    self._checkpoints.erase(checkpoint.order_hash)
                return report

            if report.status != last_status:
                logger.info("Order %s status: %s", checkpoint.order_hash, report.status)
                last_status = report.status

            delay = self._poll_interval
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise MonitorTimeoutError(
                        f"Order {checkpoint.order_hash} still {report.status} "
                        f"after {timeout}s",
                        order_hash=checkpoint.order_hash,
                        last_status=report.status,
                        revealed_indices=list(checkpoint.revealed_indices),
                    )
                delay = min(delay, remaining)
            await self._sleep(delay)

    async def run(
        self,
        order_hash: str,
        secrets: Sequence[str],
        secret_hashes: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ) -> OrderStatusReport:
        """Monitor an order until it reaches a terminal status.

        Args:
            order_hash: Upstream order hash
            secrets: The order's secrets, index-aligned with its escrow fills
            secret_hashes: Hashes of ``secrets``, stored with the checkpoint
            timeout: Give up after this many seconds (None: no limit)

        Returns:
            Terminal OrderStatusReport

        Raises:
            MonitorTimeoutError: If ``timeout`` elapses first
            StatusFetchError: If a status or ready-fills call fails
            SubmissionError: If revealing a secret fails
        """
        if not secrets:
            raise ValidationError("Cannot monitor an order without secrets")

        checkpoint = MonitorCheckpoint(
            order_hash=order_hash,
            secrets=list(secrets),
            secret_hashes=list(secret_hashes or []),
        )
        self._save(checkpoint)
        logger.info("Monitoring order %s (%d secret(s))", order_hash, len(secrets))
        return await self._poll(checkpoint, timeout)

    async def resume(
        self, order_hash: str, timeout: Optional[float] = None
    ) -> OrderStatusReport:
        """Continue monitoring from a stored checkpoint.

        Raises:
            ValidationError: If no checkpoint store is configured or none exists
        """
        if self._checkpoints is None:
            raise ValidationError("Monitor has no checkpoint store to resume from")
        checkpoint = self._checkpoints.load(order_hash)
        if checkpoint is None:
            raise ValidationError(
                f"No monitor checkpoint for order {order_hash}", order_hash=order_hash
            )
        logger.info(
            "Resuming order %s (already revealed: %s)",
            order_hash,
            checkpoint.revealed_indices,
        )
        return await self._poll(checkpoint, timeout)

    def start(
        self,
        order_hash: str,
        secrets: Sequence[str],
        secret_hashes: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ) -> "asyncio.Task[OrderStatusReport]":
        """Run the monitor as a task. Cancel the task to stop polling."""
        return asyncio.ensure_future(
            self.run(order_hash, secrets, secret_hashes=secret_hashes, timeout=timeout)
        )
