"""Structural interface of a single-attempt lock."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Lockable(Protocol):
    """Anything that can make one attempt at a keyed lock and release it."""

    def try_acquire_lock(self, correlation_id: str | None, key: str, ttl: int) -> bool:
        """Make a single attempt to acquire *key* for *ttl* milliseconds."""
        ...

    def release_lock(self, correlation_id: str | None, key: str) -> None:
        """Release *key*."""
        ...
