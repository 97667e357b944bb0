"""In-process key-value store and client.

:class:`MemoryStore` behaves like a single memcached server: entries
expire store-side after their TTL (0 = never), ``add`` is atomic, and
expired entries are dropped on access. Time is read from an injectable
clock so tests can move it forward without sleeping.

Several :class:`MemoryStoreClient` instances may share one store, the
same way several processes share a memcached server.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from ..exceptions import StoreOperationError
from ..models import ConnectionParams, MemcachedOptions
from .store_client import KeyValueStoreClient

logger = logging.getLogger(__name__)


class _StoredItem:
    __slots__ = ("payload", "expires_at")

    def __init__(self, payload: bytes, expires_at: float | None) -> None:
        self.payload = payload
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryStore:
    """Thread-safe in-memory key-value state with TTL expiry.

    Parameters:
        clock: Returns the current time in seconds. Defaults to
            :func:`time.monotonic`.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._items: dict[str, _StoredItem] = {}

    def get(self, key: str) -> bytes | None:
        with self._lock:
            item = self._live_item(key)
            return item.payload if item is not None else None

    def add(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        """Store only if *key* is absent or expired."""
        with self._lock:
            if self._live_item(key) is not None:
                return False
            self._items[key] = _StoredItem(payload, self._expires_at(ttl_seconds))
            return True

    def set(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        with self._lock:
            self._items[key] = _StoredItem(payload, self._expires_at(ttl_seconds))
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            existed = self._live_item(key) is not None
            self._items.pop(key, None)
            return existed

    def evict_expired(self) -> int:
        """Remove all expired entries. Returns count removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, v in self._items.items() if v.is_expired(now)]
            for k in expired:
                del self._items[k]
        if expired:
            logger.debug("Evicted %d expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for v in self._items.values() if not v.is_expired(now))

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    # ── Private (callers hold self._lock) ─────────────────────────

    def _live_item(self, key: str) -> _StoredItem | None:
        item = self._items.get(key)
        if item is not None and item.is_expired(self._clock()):
            del self._items[key]
            return None
        return item

    def _expires_at(self, ttl_seconds: int) -> float | None:
        if ttl_seconds <= 0:
            return None
        return self._clock() + ttl_seconds


class MemoryStoreClient(KeyValueStoreClient):
    """Store client over a :class:`MemoryStore`.

    Parameters:
        store: Backing store. A private one is created when omitted.
    """

    def __init__(self, store: MemoryStore | None = None) -> None:
        self._store = store if store is not None else MemoryStore()
        self._closed = False

    @classmethod
    def factory(
        cls, store: MemoryStore
    ) -> Callable[[list[ConnectionParams], MemcachedOptions], MemoryStoreClient]:
        """Return a :data:`StoreClientFactory` whose clients share *store*."""

        def create(connections: list[ConnectionParams], options: MemcachedOptions) -> MemoryStoreClient:
            return cls(store)

        return create

    @property
    def store(self) -> MemoryStore:
        return self._store

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get(self, key: str) -> bytes | None:
        self._check_open("get", key)
        return self._store.get(key)

    def insert_if_absent(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        self._check_open("add", key)
        return self._store.add(key, ttl_seconds, payload)

    def set(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        self._check_open("set", key)
        return self._store.set(key, ttl_seconds, payload)

    def delete(self, key: str) -> bool:
        self._check_open("delete", key)
        return self._store.delete(key)

    def close(self) -> None:
        self._closed = True

    def _check_open(self, operation: str, key: str) -> None:
        if self._closed:
            raise StoreOperationError(operation, key, reason="Client is closed")
