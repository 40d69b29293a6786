"""Expiring key/value storage.

``ExpiringStore`` is the contract shared by the prepared-order store, the
nonce registry and the monitor checkpoints. ``MemoryStore`` backs it with a
locked dict for single-instance deployments; a multi-instance deployment
plugs in an external cache implementing the same methods.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple


class ExpiringStore(ABC):
    """Key/value store whose entries may carry a time-to-live."""

    @abstractmethod
    def put(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Insert or replace ``key``. ``ttl`` is in seconds; None never expires."""

    @abstractmethod
    def consume(self, key: str) -> Optional[Any]:
        """Atomically return and remove ``key``; None if absent or expired."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return ``key`` without removing it; None if absent or expired."""

    @abstractmethod
    def has(self, key: str) -> bool:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if it was present."""

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""


class MemoryStore(ExpiringStore):
    """In-process store guarded by a lock.

    Expiry is checked on every read, so an expired entry is unreachable even
    before ``purge_expired`` physically removes it.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def _live(self, key: str) -> bool:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return False
        expires_at = entry[1]
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return False
        return True

    def put(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._entries[key] = (value, expires_at)

    def consume(self, key: str) -> Optional[Any]:
        with self._lock:
            if not self._live(key):
                return None
            value, _ = self._entries.pop(key)
            return value

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if not self._live(key):
                return None
            return self._entries[key][0]

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live(key)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, (_, expires_at) in self._entries.items()
                if expires_at is not None and now >= expires_at
            ]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
