"""YAML loading for :class:`MemcachedConfig`.

Expected layout::

    memcached:
      connections:
        - host: cache-1
          port: 11211
        - host: cache-2
      options:
        timeout: 2000
        retry_timeout: 250
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .models import MemcachedConfig

logger = logging.getLogger(__name__)

_SECTION = "memcached"


def load_config(path: Path | str | None) -> MemcachedConfig:
    """Load a MemcachedConfig from the ``memcached`` section of a YAML file.

    A missing path yields the default (empty) configuration.
    """

    if path is None:
        return MemcachedConfig()

    resolved = Path(path).expanduser().resolve()
    data = _read_yaml(resolved)
    config = MemcachedConfig.model_validate(data.get(_SECTION) or {})
    logger.info(
        "Memcached config loaded from %s (%d connections)",
        resolved,
        len(config.connections),
    )
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data
