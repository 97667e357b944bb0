"""Key-value store client contract consumed by the cache and the lock.

Implementations must be safe for concurrent use by multiple threads and
must translate their transport failures (timeouts, socket errors,
protocol errors) into :class:`~memcached_cache.exceptions.StoreOperationError`.
"""

from __future__ import annotations

import abc
from typing import Callable

from ..models import ConnectionParams, MemcachedOptions


class KeyValueStoreClient(abc.ABC):
    """Minimal capability surface of a memcached-style store."""

    @abc.abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the stored payload, or None if absent or expired."""
        ...

    @abc.abstractmethod
    def insert_if_absent(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        """Atomically store *payload* only if *key* does not exist.

        Returns:
            True if stored, False if the key already exists.
        """
        ...

    @abc.abstractmethod
    def set(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        """Store *payload* unconditionally. Returns True if stored."""
        ...

    @abc.abstractmethod
    def delete(self, key: str) -> bool:
        """Delete *key*. Returns True if it existed."""
        ...

    @abc.abstractmethod
    def close(self) -> None:
        """Release every connection held by the client."""
        ...


StoreClientFactory = Callable[[list[ConnectionParams], MemcachedOptions], KeyValueStoreClient]
"""Builds a client bound to all the given endpoints."""


def to_ttl_seconds(ttl_ms: int) -> int:
    """Convert a TTL in milliseconds to the store's whole seconds.

    The sub-second remainder is discarded (truncation towards zero).
    """
    if ttl_ms >= 0:
        return ttl_ms // 1000
    return -(-ttl_ms // 1000)
