"""Blocking lock acquisition with retry, for any :class:`Lockable`.

The timeout is measured in wall-clock time between attempts; an attempt
already in flight is never interrupted. Because a single attempt can
itself block for the store client's network timeout, a call may return
(or raise) up to one attempt's duration after *timeout* has elapsed.
"""

from __future__ import annotations

import logging
import time

from ..exceptions import LockAcquireTimeoutError
from .lock_handle import LockHandle
from .lockable import Lockable

logger = logging.getLogger(__name__)

DEFAULT_RETRY_TIMEOUT = 100


def acquire_lock(
    lockable: Lockable,
    correlation_id: str | None,
    key: str,
    ttl: int,
    timeout: int,
    retry_timeout: int = DEFAULT_RETRY_TIMEOUT,
) -> None:
    """Acquire a lock, retrying until it succeeds or *timeout* elapses.

    Args:
        lockable: The lock implementation to drive.
        correlation_id: Optional id to trace execution through the call chain.
        key: A unique lock key.
        ttl: Lock lease (time to live) in milliseconds.
        timeout: How long to keep trying, in milliseconds. 0 makes exactly
            one attempt.
        retry_timeout: Sleep between attempts, in milliseconds.

    Raises:
        LockAcquireTimeoutError: If the lock is still held by someone else
            when the timeout elapses.
        StoreOperationError: If an attempt fails for any reason other than
            contention. Not retried.
    """
    deadline = time.monotonic() + timeout / 1000.0
    attempts = 0

    while True:
        attempts += 1
        if lockable.try_acquire_lock(correlation_id, key, ttl):
            if attempts > 1:
                logger.debug(
                    "[%s] Lock '%s' acquired after %d attempts", correlation_id, key, attempts
                )
            return

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.debug(
                "[%s] Lock '%s' not acquired within %d ms (%d attempts)",
                correlation_id,
                key,
                timeout,
                attempts,
            )
            raise LockAcquireTimeoutError(key, timeout, correlation_id=correlation_id)

        time.sleep(min(retry_timeout / 1000.0, remaining))


def lock(
    lockable: Lockable,
    correlation_id: str | None,
    key: str,
    ttl: int,
    timeout: int,
    retry_timeout: int = DEFAULT_RETRY_TIMEOUT,
) -> LockHandle:
    """Acquire a lock like :func:`acquire_lock` and return a handle for it.

    Usage::

        with lock(memcached_lock, "req-1", "jobs:nightly", 30_000, 5_000):
            ...  # critical section
    """
    acquire_lock(lockable, correlation_id, key, ttl, timeout, retry_timeout)
    return LockHandle(lockable, correlation_id, key)
