# Storage subpackage

from .memory_store_client import MemoryStore, MemoryStoreClient
from .pymemcache_store_client import PymemcacheStoreClient
from .store_client import KeyValueStoreClient, StoreClientFactory
from .store_connection import StoreConnection

__all__ = [
    "KeyValueStoreClient",
    "MemoryStore",
    "MemoryStoreClient",
    "PymemcacheStoreClient",
    "StoreClientFactory",
    "StoreConnection",
]
