"""Store endpoint resolution.

Components ask a :class:`ConnectionResolver` for the full endpoint list
every time they are opened. Discovery itself (DNS, Kubernetes, a
sidecar writing a file…) is left to the implementation.
"""

from __future__ import annotations

import abc
import logging
from pathlib import Path

from ..models import ConnectionParams

logger = logging.getLogger(__name__)


class ConnectionResolver(abc.ABC):
    """Interface that supplies the memcached endpoints to connect to."""

    @abc.abstractmethod
    def resolve_all(self, correlation_id: str | None) -> list[ConnectionParams]:
        """Return every endpoint the client should be bound to.

        Args:
            correlation_id: Optional id to trace execution through the
                call chain. Only used for diagnostics.

        Returns:
            The endpoints; an empty list means nothing is configured.
        """
        ...


class ConfigConnectionResolver(ConnectionResolver):
    """Resolves a fixed list of endpoints, usually taken from config."""

    def __init__(self, connections: list[ConnectionParams] | None = None) -> None:
        self._connections = list(connections or [])

    def resolve_all(self, correlation_id: str | None) -> list[ConnectionParams]:
        return list(self._connections)


class FileConnectionResolver(ConnectionResolver):
    """Reads endpoints from a plain-text file, one ``host[:port]`` per line.

    Blank lines and ``#`` comments are ignored. The file is re-read on
    every call so an external process can rewrite it at any time. If it
    is missing or unreadable the last successfully-read list is returned.

    Args:
        nodes_file: Path to the endpoints file.
    """

    def __init__(self, nodes_file: Path | str) -> None:
        self._nodes_file = Path(nodes_file)
        self._last_known: list[ConnectionParams] = []

    def resolve_all(self, correlation_id: str | None) -> list[ConnectionParams]:
        try:
            text = self._nodes_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning(
                "[%s] Endpoints file not found: %s, using last known list (%d endpoints)",
                correlation_id,
                self._nodes_file,
                len(self._last_known),
            )
            return list(self._last_known)
        except OSError:
            logger.warning(
                "[%s] Failed to read endpoints file: %s, using last known list (%d endpoints)",
                correlation_id,
                self._nodes_file,
                len(self._last_known),
                exc_info=True,
            )
            return list(self._last_known)

        connections = [
            ConnectionParams.from_address(line.strip())
            for line in text.splitlines()
            if line.strip() and not line.strip().startswith("#")
        ]
        if connections:
            self._last_known = connections
        return list(connections)
