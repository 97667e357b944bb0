"""Endpoint resolution."""

from .connection_resolver import (
    ConfigConnectionResolver,
    ConnectionResolver,
    FileConnectionResolver,
)

__all__ = [
    "ConfigConnectionResolver",
    "ConnectionResolver",
    "FileConnectionResolver",
]
