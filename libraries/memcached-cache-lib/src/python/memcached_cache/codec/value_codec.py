"""Value encoding for cached entries.

Encoding rules, first match wins:

    None / str      literal text ("null" for None), no quoting
    datetime        UTC ISO-8601 with a ``Z`` offset
    anything else   compact JSON document

Decoding is type-oblivious: the stored text is returned as-is and callers
that cached a structure parse the JSON themselves.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic_core import PydanticSerializationError, to_json

from ..exceptions import SerializationError

NULL_TEXT = "null"

_ENCODING = "utf-8"
_UTC_SUFFIX = "+00:00"


def encode_value(value: Any) -> str:
    """Encode an application value into the text stored in the cache.

    Args:
        value: Any value. Naive datetimes are taken to be in UTC.
            NaN and infinite floats nested inside a structure are written
            as JSON ``null``, the same text as ``None``.

    Returns:
        The text representation to be written.

    Raises:
        SerializationError: If the value cannot be rendered as JSON, or is
            itself a NaN or infinite float.
    """
    if value is None:
        return NULL_TEXT
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        return encode_datetime(value)
    if isinstance(value, float) and not math.isfinite(value):
        raise SerializationError("float", reason=f"{value!r} has no JSON representation")
    try:
        return to_json(value).decode(_ENCODING)
    except (PydanticSerializationError, TypeError, ValueError) as ex:
        raise SerializationError(type(value).__name__, reason=str(ex)) from ex


def encode_datetime(value: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 timestamp, e.g. ``2024-01-02T03:04:05Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat()
    return text[: -len(_UTC_SUFFIX)] + "Z"


def encode_payload(value: Any) -> tuple[str, bytes]:
    """Encode a value and return both its text and the bytes sent to the store."""
    text = encode_value(value)
    return text, text.encode(_ENCODING)


def decode_value(payload: bytes | str | None) -> str | None:
    """Return the stored text, or None when nothing was stored.

    Raises:
        SerializationError: If the payload is not valid UTF-8.
    """
    if payload is None:
        return None
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode(_ENCODING)
    except UnicodeDecodeError as ex:
        raise SerializationError("bytes", reason=str(ex)) from ex
