"""Memcached-backed distributed lock.

A lock is a key holding a fixed sentinel payload, written with memcached's
atomic ``add`` (store only if absent). Whoever's ``add`` succeeds owns the
lock until it deletes the key or the lease (TTL) runs out on the server.
There is no owner identity: any caller may release any key.
"""

from __future__ import annotations

import logging

from ..connect.connection_resolver import ConnectionResolver
from ..exceptions import correlated
from ..models import MemcachedConfig
from ..storage.store_client import StoreClientFactory, to_ttl_seconds
from ..storage.store_connection import StoreConnection
from . import lock_acquirer
from .lock_handle import LockHandle

logger = logging.getLogger(__name__)

LOCK_PAYLOAD = b"lock"


class MemcachedLock:
    """Distributed lock that stores its leases in memcached.

    Parameters:
        config: Endpoints and client options.
        connection_resolver: Supplies endpoints at open time. Defaults to
            the endpoints listed in *config*.
        client_factory: Builds the store client. Defaults to pymemcache.
        retry_timeout: Sleep between acquisition attempts, in milliseconds.
            Defaults to ``config.options.retry_timeout``.
    """

    def __init__(
        self,
        config: MemcachedConfig | None = None,
        connection_resolver: ConnectionResolver | None = None,
        client_factory: StoreClientFactory | None = None,
        retry_timeout: int | None = None,
    ) -> None:
        self._connection = StoreConnection(config, connection_resolver, client_factory)
        if retry_timeout is None:
            retry_timeout = self._connection.config.options.retry_timeout
        if retry_timeout <= 0:
            raise ValueError(f"retry_timeout must be positive, got {retry_timeout}")
        self._retry_timeout = retry_timeout

    @property
    def retry_timeout(self) -> int:
        return self._retry_timeout

    # ── Lifecycle ─────────────────────────────────────────────────

    def is_open(self) -> bool:
        return self._connection.is_open()

    def open(self, correlation_id: str | None = None) -> None:
        """Connect to every resolved memcached endpoint.

        Raises:
            ConfigurationError: If no endpoint is configured.
            StoreConnectionError: If the client cannot be created.
        """
        self._connection.open(correlation_id)

    def close(self, correlation_id: str | None = None) -> None:
        """Disconnect and free the client. Never raises."""
        self._connection.close(correlation_id)

    # ── Lock API ──────────────────────────────────────────────────

    def try_acquire_lock(self, correlation_id: str | None, key: str, ttl: int) -> bool:
        """Make a single attempt to acquire a lock.

        Args:
            correlation_id: Optional id to trace execution through the call chain.
            key: A unique lock key.
            ttl: Lock lease in milliseconds, truncated to whole seconds.

        Returns:
            True if the lock was acquired, False if someone else holds it.

        Raises:
            InvalidStateError: If the lock is not open.
            StoreOperationError: On a store or network failure.
        """
        client = self._connection.client(correlation_id)
        with correlated(correlation_id):
            acquired = client.insert_if_absent(key, to_ttl_seconds(ttl), LOCK_PAYLOAD)
        logger.debug(
            "[%s] Lock '%s' %s", correlation_id, key, "acquired" if acquired else "is busy"
        )
        return acquired

    def release_lock(self, correlation_id: str | None, key: str) -> None:
        """Release a lock. Releasing a lock nobody holds is a no-op.

        Raises:
            InvalidStateError: If the lock is not open.
            StoreOperationError: On a store or network failure.
        """
        client = self._connection.client(correlation_id)
        with correlated(correlation_id):
            client.delete(key)
        logger.debug("[%s] Lock '%s' released", correlation_id, key)

    def acquire_lock(
        self, correlation_id: str | None, key: str, ttl: int, timeout: int
    ) -> None:
        """Acquire a lock, retrying every ``retry_timeout`` ms until *timeout*.

        Raises:
            InvalidStateError: If the lock is not open.
            LockAcquireTimeoutError: If the lock stayed busy for *timeout* ms.
            StoreOperationError: On a store or network failure.
        """
        lock_acquirer.acquire_lock(self, correlation_id, key, ttl, timeout, self._retry_timeout)

    def lock(self, correlation_id: str | None, key: str, ttl: int, timeout: int) -> LockHandle:
        """Acquire a lock and return a handle that releases it on exit.

        Usage::

            with memcached_lock.lock("req-1", "jobs:nightly", ttl=30_000, timeout=5_000):
                run_nightly_job()
        """
        return lock_acquirer.lock(self, correlation_id, key, ttl, timeout, self._retry_timeout)
