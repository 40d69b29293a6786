"""Prepared order storage and nonce tracking.

A prepared order can be submitted at most once: ``consume`` is the only
production read path and removes the record it returns. Records are evicted
15 minutes after creation whether or not they were consumed.
"""

import logging
import threading
from typing import Optional

from ..config import (
    PREPARED_ORDER_TTL_SECONDS,
    TIMESTAMP_FUTURE_TOLERANCE_MS,
    TIMESTAMP_MAX_AGE_MS,
)
from ..store import ExpiringStore, MemoryStore
from .types import PreparationRecord

logger = logging.getLogger(__name__)

PREPARED_KEY_PREFIX = "prepared:"
NONCE_KEY_PREFIX = "nonce:"


class PreparedOrderStore:
    """Ephemeral, at-most-once-readable store of pending orders."""

    def __init__(
        self,
        backend: Optional[ExpiringStore] = None,
        ttl: float = PREPARED_ORDER_TTL_SECONDS,
    ):
        self._backend = backend if backend is not None else MemoryStore()
        self._ttl = ttl

    @property
    def ttl(self) -> float:
        return self._ttl

    def put(self, preparation_hash: str, record: PreparationRecord) -> None:
        self._backend.put(PREPARED_KEY_PREFIX + preparation_hash, record, ttl=self._ttl)
        logger.info("Stored prepared order %s (ttl=%ss)", preparation_hash, self._ttl)

    def consume(self, preparation_hash: str) -> Optional[PreparationRecord]:
        """Return and remove the record, or None if unknown, consumed or expired."""
        record = self._backend.consume(PREPARED_KEY_PREFIX + preparation_hash)
        if record is None:
            logger.info("Prepared order %s not found or expired", preparation_hash)
        return record

    def has(self, preparation_hash: str) -> bool:
        """Non-destructive existence check. Diagnostics only."""
        return self._backend.has(PREPARED_KEY_PREFIX + preparation_hash)

    def purge_expired(self) -> int:
        return self._backend.purge_expired()


class NonceRegistry:
    """Remembers (wallet, nonce) pairs for as long as a timestamp is accepted.

    Past that window the timestamp check rejects the request anyway, so the
    entry can safely expire.
    """

    def __init__(
        self,
        backend: Optional[ExpiringStore] = None,
        window_seconds: float = (TIMESTAMP_MAX_AGE_MS + TIMESTAMP_FUTURE_TOLERANCE_MS) / 1000,
    ):
        self._backend = backend if backend is not None else MemoryStore()
        self._window = window_seconds
        self._lock = threading.Lock()

    @staticmethod
    def _key(wallet: str, nonce: str) -> str:
        return f"{NONCE_KEY_PREFIX}{wallet.lower()}:{nonce.lower()}"

    def register(self, wallet: str, nonce: str) -> bool:
        """Record a nonce. Returns False if the pair was already used."""
        key = self._key(wallet, nonce)
        with self._lock:
            if self._backend.has(key):
                return False
            self._backend.put(key, True, ttl=self._window)
        return True

    def seen(self, wallet: str, nonce: str) -> bool:
        return self._backend.has(self._key(wallet, nonce))
