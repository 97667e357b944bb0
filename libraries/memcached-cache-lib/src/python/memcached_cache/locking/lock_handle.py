"""Lock handle — context manager over an acquired lock."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lockable import Lockable

logger = logging.getLogger(__name__)


class LockHandle:
    """A handle to a held lock.

    Supports ``with`` statement for automatic release::

        with memcached_lock.lock("req-1", "my-key", ttl=10_000, timeout=1_000):
            # critical section
        # lock released automatically

    The store does not track ownership, so releasing only deletes the
    key. If the lease expired while held, another party may own the key
    by then and the release removes *their* lock.

    Parameters:
        lockable: The lock implementation that acquired the key.
        correlation_id: Correlation id used for the release call.
        key: The lock key.
    """

    def __init__(self, lockable: Lockable, correlation_id: str | None, key: str) -> None:
        self._lockable = lockable
        self._correlation_id = correlation_id
        self._key = key
        self._released = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release this lock. Further calls are no-ops.

        Raises:
            StoreOperationError: If the store fails to delete the key.
        """
        if self._released:
            return
        self._lockable.release_lock(self._correlation_id, self._key)
        self._released = True

    def __enter__(self) -> LockHandle:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        try:
            self.release()
        except Exception:
            if exc_type is None:
                raise
            # the body's exception takes precedence
            logger.exception("Failed to release lock '%s'", self._key)

    def __repr__(self) -> str:
        state = "released" if self._released else "held"
        return f"LockHandle(key={self._key!r}, {state})"
