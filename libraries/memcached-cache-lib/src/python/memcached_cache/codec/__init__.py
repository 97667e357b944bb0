"""Value codec — text encoding of cached values."""

from .value_codec import (
    NULL_TEXT,
    decode_value,
    encode_datetime,
    encode_payload,
    encode_value,
)

__all__ = [
    "NULL_TEXT",
    "decode_value",
    "encode_datetime",
    "encode_payload",
    "encode_value",
]
