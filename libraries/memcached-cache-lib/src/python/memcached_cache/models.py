"""Configuration models for the memcached cache and lock components.

All models use Pydantic for validation and serialization. Durations are
expressed in milliseconds, like every timeout in the public API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_PORT = 11211


# ── Connections ───────────────────────────────────────────────────


class ConnectionParams(BaseModel):
    """A single memcached server endpoint."""

    host: str = Field(..., min_length=1)
    """Server host name or IP address."""

    port: int = Field(default=DEFAULT_PORT, gt=0, le=65535)
    """Server TCP port."""

    @classmethod
    def from_address(cls, address: str) -> ConnectionParams:
        """Parse a ``host`` or ``host:port`` string."""
        address = address.strip()
        if ":" not in address:
            return cls(host=address)
        host, port = address.rsplit(":", 1)
        return cls(host=host, port=int(port))

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


# ── Options ───────────────────────────────────────────────────────


class MemcachedOptions(BaseModel):
    """Client tuning options (milliseconds unless stated otherwise)."""

    timeout: int = Field(default=5000, gt=0)
    """Socket send/receive timeout."""

    connect_timeout: int = Field(default=5000, gt=0)
    """Socket connect timeout."""

    pool_size: int = Field(default=5, ge=0)
    """Max pooled sockets per server. 0 disables pooling."""

    idle: int = Field(default=5000, ge=0)
    """Idle time after which a pooled socket is discarded. 0 = never."""

    retry: int = Field(default=30000, ge=0)
    """How long a failed server stays out of the hash ring before it is retried."""

    retry_timeout: int = Field(default=100, gt=0)
    """Interval between lock acquisition attempts."""


# ── Component Config ──────────────────────────────────────────────


class MemcachedConfig(BaseModel):
    """Configuration shared by :class:`MemcachedCache` and :class:`MemcachedLock`."""

    connections: list[ConnectionParams] = Field(default_factory=list)
    """Store endpoints. All of them are bound to a single client."""

    options: MemcachedOptions = Field(default_factory=MemcachedOptions)
    """Client tuning options."""
