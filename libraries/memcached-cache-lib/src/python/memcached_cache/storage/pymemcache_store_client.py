"""pymemcache-backed store client.

Keys are spread over every configured server with rendezvous hashing
(``HashClient``). Replies are always awaited so that ``add`` reports an
existing key as a plain ``False`` instead of being fire-and-forget.

A server that fails a call is taken out of the hash ring straight away
(``retry_attempts=0``) and stays out for ``options.retry`` ms. While it is
out its keys hash to the remaining servers, and once none is left every
call raises. pymemcache's retry window is never enabled: inside it the
client answers with default values (``None``, ``False``) instead of
raising, which would read as a cache miss or a busy lock.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from pymemcache.client.hash import HashClient
from pymemcache.exceptions import MemcacheError

from ..exceptions import StoreConnectionError, StoreOperationError
from ..models import ConnectionParams, MemcachedOptions
from .store_client import KeyValueStoreClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

# socket.timeout and ConnectionError are both OSError subclasses
_CLIENT_ERRORS = (MemcacheError, OSError)
_CONNECT_ERRORS = _CLIENT_ERRORS + (ValueError,)


class PymemcacheStoreClient(KeyValueStoreClient):
    """Store client over a pymemcache :class:`HashClient`.

    Safe for concurrent use when pooling is enabled (``pool_size > 0``).

    Parameters:
        connections: Endpoints to bind to. Must not be empty.
        options: Socket, pooling and dead-server tuning.
    """

    def __init__(
        self,
        connections: list[ConnectionParams],
        options: MemcachedOptions | None = None,
    ) -> None:
        options = options or MemcachedOptions()
        self._endpoints = [c.address for c in connections]
        try:
            self._client = HashClient(
                [(c.host, c.port) for c in connections],
                connect_timeout=options.connect_timeout / 1000.0,
                timeout=options.timeout / 1000.0,
                use_pooling=options.pool_size > 0,
                max_pool_size=options.pool_size or None,
                pool_idle_timeout=options.idle / 1000.0,
                retry_attempts=0,
                dead_timeout=options.retry / 1000.0,
                ignore_exc=False,
                default_noreply=False,
            )
        except _CONNECT_ERRORS as ex:
            raise StoreConnectionError(self._endpoints, reason=str(ex)) from ex

        logger.debug("pymemcache client bound to %s", ", ".join(self._endpoints))

    @classmethod
    def create(
        cls,
        connections: list[ConnectionParams],
        options: MemcachedOptions,
    ) -> PymemcacheStoreClient:
        """Default :data:`StoreClientFactory`."""
        return cls(connections, options)

    @property
    def endpoints(self) -> list[str]:
        return list(self._endpoints)

    def get(self, key: str) -> bytes | None:
        return self._call("get", key, self._client.get, key)

    def insert_if_absent(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        stored = self._call(
            "add", key, self._client.add, key, payload, expire=ttl_seconds, noreply=False
        )
        return bool(stored)

    def set(self, key: str, ttl_seconds: int, payload: bytes) -> bool:
        stored = self._call(
            "set", key, self._client.set, key, payload, expire=ttl_seconds, noreply=False
        )
        return bool(stored)

    def delete(self, key: str) -> bool:
        deleted = self._call("delete", key, self._client.delete, key, noreply=False)
        return bool(deleted)

    def close(self) -> None:
        self._client.close()

    # ── Private ───────────────────────────────────────────────────

    def _call(
        self,
        operation: str,
        key: str,
        func: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        try:
            return func(*args, **kwargs)
        except _CLIENT_ERRORS as ex:
            raise StoreOperationError(operation, key, reason=str(ex) or type(ex).__name__) from ex
