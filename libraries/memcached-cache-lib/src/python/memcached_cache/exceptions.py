"""Exception hierarchy for the memcached cache and lock components."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator


class MemcachedCacheError(Exception):
    """Base exception for all memcached cache and lock errors."""

    code = "UNKNOWN"

    def __init__(self, message: str = "", correlation_id: str | None = None) -> None:
        self.message = message
        self.correlation_id = correlation_id
        super().__init__(message)


# ── Lifecycle Errors ──────────────────────────────────────────────

class ConfigurationError(MemcachedCacheError):
    """Raised when no store endpoint could be resolved at open time."""

    code = "NO_CONNECTION"

    def __init__(
        self,
        message: str = "Connection is not configured.",
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(message, correlation_id)


class InvalidStateError(MemcachedCacheError):
    """Raised when a per-key operation is attempted on a closed component."""

    code = "NOT_OPENED"

    def __init__(
        self,
        message: str = "Connection is not opened.",
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(message, correlation_id)


# ── Store Errors ──────────────────────────────────────────────────

class StoreOperationError(MemcachedCacheError):
    """Raised when the key-value store fails to execute an operation.

    The originating client error is chained as ``__cause__``.
    """

    code = "STORE_OPERATION_FAILED"

    def __init__(
        self,
        operation: str,
        key: str | None = None,
        reason: str = "",
        correlation_id: str | None = None,
    ) -> None:
        self.operation = operation
        self.key = key
        msg = f"Store operation '{operation}'"
        if key is not None:
            msg += f" on key '{key}'"
        msg += " failed."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg, correlation_id)


class StoreConnectionError(StoreOperationError):
    """Raised when a client bound to the store endpoints cannot be created."""

    code = "CONNECTION_FAILED"

    def __init__(
        self,
        endpoints: list[str],
        reason: str = "",
        correlation_id: str | None = None,
    ) -> None:
        self.endpoints = endpoints
        super().__init__(
            "connect",
            reason=reason or f"Cannot connect to {', '.join(endpoints)}",
            correlation_id=correlation_id,
        )


# ── Codec Errors ──────────────────────────────────────────────────

class SerializationError(MemcachedCacheError):
    """Raised when a value cannot be encoded for, or decoded from, the store."""

    code = "SERIALIZATION_FAILED"

    def __init__(
        self,
        value_type: str,
        reason: str = "",
        correlation_id: str | None = None,
    ) -> None:
        self.value_type = value_type
        msg = f"Cannot serialize value of type '{value_type}'."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg, correlation_id)


# ── Lock Errors ───────────────────────────────────────────────────

class LockAcquireTimeoutError(MemcachedCacheError):
    """Raised when a lock cannot be acquired within the timeout."""

    code = "LOCK_TIMEOUT"

    def __init__(
        self,
        key: str,
        timeout: int,
        correlation_id: str | None = None,
    ) -> None:
        self.key = key
        self.timeout = timeout
        super().__init__(
            f"Acquiring lock '{key}' failed on timeout after {timeout} ms.",
            correlation_id,
        )


@contextmanager
def correlated(correlation_id: str | None) -> Iterator[None]:
    """Stamp errors raised inside the block with *correlation_id*.

    Errors raised by store clients do not know the caller's correlation
    id; an id already set on the error is kept.
    """
    try:
        yield
    except MemcachedCacheError as ex:
        if ex.correlation_id is None:
            ex.correlation_id = correlation_id
        raise
