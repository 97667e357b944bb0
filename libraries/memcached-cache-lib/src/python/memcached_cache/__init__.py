"""Memcached Cache Library — TTL value cache and distributed lock.

Two components share one connection model: a cache that keeps values
(encoded to text) with a store-side expiry, and a mutual-exclusion lock
built on memcached's atomic ``add``. Both connect to every configured
endpoint at once and spread keys across them by hashing.

Quick Start::

    from memcached_cache import MemcachedCache, MemcachedLock, load_config

    config = load_config("config.yaml")

    cache = MemcachedCache(config)
    cache.open("req-1")
    cache.store("req-1", "user:42", {"name": "Alice"}, 60_000)
    raw = cache.retrieve("req-1", "user:42")

    lock = MemcachedLock(config)
    lock.open("req-1")
    with lock.lock("req-1", "jobs:nightly", ttl=30_000, timeout=5_000):
        pass  # critical section

    lock.close("req-1")
    cache.close("req-1")
"""

from .cache.memcached_cache import MemcachedCache
from .codec.value_codec import decode_value, encode_value
from .config import load_config
from .connect.connection_resolver import (
    ConfigConnectionResolver,
    ConnectionResolver,
    FileConnectionResolver,
)
from .exceptions import (
    ConfigurationError,
    InvalidStateError,
    LockAcquireTimeoutError,
    MemcachedCacheError,
    SerializationError,
    StoreConnectionError,
    StoreOperationError,
)
from .locking.lock_acquirer import acquire_lock
from .locking.lock_handle import LockHandle
from .locking.lockable import Lockable
from .locking.memcached_lock import MemcachedLock
from .models import ConnectionParams, MemcachedConfig, MemcachedOptions
from .storage.memory_store_client import MemoryStore, MemoryStoreClient
from .storage.pymemcache_store_client import PymemcacheStoreClient
from .storage.store_client import KeyValueStoreClient, StoreClientFactory

__all__ = [
    # Components
    "MemcachedCache",
    "MemcachedLock",
    # Locking
    "Lockable",
    "LockHandle",
    "acquire_lock",
    # Configuration
    "ConnectionParams",
    "MemcachedConfig",
    "MemcachedOptions",
    "load_config",
    # Endpoint discovery
    "ConnectionResolver",
    "ConfigConnectionResolver",
    "FileConnectionResolver",
    # Store clients
    "KeyValueStoreClient",
    "StoreClientFactory",
    "PymemcacheStoreClient",
    "MemoryStore",
    "MemoryStoreClient",
    # Codec
    "encode_value",
    "decode_value",
    # Exceptions
    "MemcachedCacheError",
    "ConfigurationError",
    "InvalidStateError",
    "StoreOperationError",
    "StoreConnectionError",
    "SerializationError",
    "LockAcquireTimeoutError",
]
