"""Open/close lifecycle shared by the cache and lock components.

A :class:`StoreConnection` is either closed (no client) or open (one
client bound to every resolved endpoint). A failed ``open`` leaves it
closed, and once closed every per-key call fails fast with
:class:`InvalidStateError`.
"""

from __future__ import annotations

import logging
import threading

from ..connect.connection_resolver import ConfigConnectionResolver, ConnectionResolver
from ..exceptions import ConfigurationError, InvalidStateError, StoreConnectionError
from ..models import MemcachedConfig
from .pymemcache_store_client import PymemcacheStoreClient
from .store_client import KeyValueStoreClient, StoreClientFactory

logger = logging.getLogger(__name__)


class StoreConnection:
    """Holds the store client of one component between open and close.

    Parameters:
        config: Endpoints and client options.
        connection_resolver: Supplies endpoints at open time. Defaults to
            the endpoints listed in *config*.
        client_factory: Builds the client. Defaults to
            :meth:`PymemcacheStoreClient.create`.
    """

    def __init__(
        self,
        config: MemcachedConfig | None = None,
        connection_resolver: ConnectionResolver | None = None,
        client_factory: StoreClientFactory | None = None,
    ) -> None:
        self._config = config or MemcachedConfig()
        self._resolver = connection_resolver or ConfigConnectionResolver(self._config.connections)
        self._client_factory = client_factory or PymemcacheStoreClient.create
        self._lock = threading.Lock()
        self._client: KeyValueStoreClient | None = None

    @property
    def config(self) -> MemcachedConfig:
        return self._config

    def is_open(self) -> bool:
        return self._client is not None

    def open(self, correlation_id: str | None = None) -> None:
        """Resolve the endpoints and bind a client to all of them.

        Raises:
            ConfigurationError: If no endpoint is resolved.
            StoreConnectionError: If the client cannot be created.
        """
        with self._lock:
            if self._client is not None:
                return

            connections = self._resolver.resolve_all(correlation_id)
            if not connections:
                raise ConfigurationError(correlation_id=correlation_id)

            endpoints = [c.address for c in connections]
            try:
                client = self._client_factory(connections, self._config.options)
            except StoreConnectionError as ex:
                ex.correlation_id = ex.correlation_id or correlation_id
                raise
            except OSError as ex:
                raise StoreConnectionError(
                    endpoints, reason=str(ex), correlation_id=correlation_id
                ) from ex
            self._client = client

        logger.info(
            "[%s] Connected to memcached at %s",
            correlation_id,
            ", ".join(endpoints),
        )

    def close(self, correlation_id: str | None = None) -> None:
        """Release the client. Safe to call repeatedly; never raises."""
        with self._lock:
            client, self._client = self._client, None

        if client is None:
            return
        try:
            client.close()
        except Exception:
            logger.warning(
                "[%s] Failed to close memcached client cleanly",
                correlation_id,
                exc_info=True,
            )
            return
        logger.info("[%s] Disconnected from memcached", correlation_id)

    def client(self, correlation_id: str | None = None) -> KeyValueStoreClient:
        """Return the open client.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        client = self._client
        if client is None:
            raise InvalidStateError(correlation_id=correlation_id)
        return client
