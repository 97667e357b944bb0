"""TTL value cache."""

from .memcached_cache import MemcachedCache

__all__ = [
    "MemcachedCache",
]
