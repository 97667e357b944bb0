"""Distributed locking."""

from .lock_acquirer import acquire_lock, lock
from .lock_handle import LockHandle
from .lockable import Lockable
from .memcached_lock import MemcachedLock

__all__ = [
    "Lockable",
    "LockHandle",
    "MemcachedLock",
    "acquire_lock",
    "lock",
]
