"""Memcached-backed TTL value cache.

Values are encoded to text before they are written (see
:mod:`memcached_cache.codec`) and read back as that same text. Expiry is
enforced by the store; the cache never reads a TTL back.

Usage::

    cache = MemcachedCache(MemcachedConfig(connections=[ConnectionParams(host="cache-1")]))
    cache.open("req-1")
    cache.store("req-1", "user:42", {"name": "Alice"}, 60_000)
    raw = cache.retrieve("req-1", "user:42")   # '{"name":"Alice"}'
    cache.close("req-1")
"""

from __future__ import annotations

import logging
from typing import Any

from ..codec.value_codec import decode_value, encode_payload
from ..connect.connection_resolver import ConnectionResolver
from ..exceptions import StoreOperationError, correlated
from ..models import MemcachedConfig
from ..storage.store_client import StoreClientFactory, to_ttl_seconds
from ..storage.store_connection import StoreConnection

logger = logging.getLogger(__name__)


class MemcachedCache:
    """Distributed cache that stores values in memcached.

    Parameters:
        config: Endpoints and client options.
        connection_resolver: Supplies endpoints at open time. Defaults to
            the endpoints listed in *config*.
        client_factory: Builds the store client. Defaults to pymemcache.
    """

    def __init__(
        self,
        config: MemcachedConfig | None = None,
        connection_resolver: ConnectionResolver | None = None,
        client_factory: StoreClientFactory | None = None,
    ) -> None:
        self._connection = StoreConnection(config, connection_resolver, client_factory)

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

    # ── Cache API ─────────────────────────────────────────────────

    def retrieve(self, correlation_id: str | None, key: str) -> str | None:
        """Retrieve a cached value by its key.

        Args:
            correlation_id: Optional id to trace execution through the call chain.
            key: A unique value key.

        Returns:
            The stored text, or None if the key is missing or expired.

        Raises:
            InvalidStateError: If the cache is not open.
            StoreOperationError: On a store or network failure.
        """
        client = self._connection.client(correlation_id)
        with correlated(correlation_id):
            value = decode_value(client.get(key))
        logger.debug(
            "[%s] Cache %s for '%s'", correlation_id, "hit" if value is not None else "miss", key
        )
        return value

    def store(self, correlation_id: str | None, key: str, value: Any, timeout: int) -> str:
        """Store a value with an expiration time.

        Args:
            correlation_id: Optional id to trace execution through the call chain.
            key: A unique value key.
            value: The value to store. Encoded before any network call.
            timeout: Expiration timeout in milliseconds. Truncated to whole
                seconds; 0 means the entry never expires.

        Returns:
            The encoded text that was written, not the original value.

        Raises:
            InvalidStateError: If the cache is not open.
            SerializationError: If the value cannot be encoded.
            StoreOperationError: On a store or network failure.
        """
        client = self._connection.client(correlation_id)
        ttl_seconds = to_ttl_seconds(timeout)
        with correlated(correlation_id):
            text, payload = encode_payload(value)
            stored = client.set(key, ttl_seconds, payload)
        if not stored:
            raise StoreOperationError(
                "set", key, reason="Value was not stored", correlation_id=correlation_id
            )

        logger.debug("[%s] Stored '%s' for %d s", correlation_id, key, ttl_seconds)
        return text

    def remove(self, correlation_id: str | None, key: str) -> None:
        """Remove a value by its key. Removing a missing key is a no-op.

        Raises:
            InvalidStateError: If the cache is not open.
            StoreOperationError: On a store or network failure.
        """
        client = self._connection.client(correlation_id)
        with correlated(correlation_id):
            client.delete(key)
        logger.debug("[%s] Removed '%s'", correlation_id, key)

