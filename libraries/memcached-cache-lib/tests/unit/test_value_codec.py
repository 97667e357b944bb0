"""Tests for value encoding and decoding."""

from datetime import datetime, timedelta, timezone

import pytest

from memcached_cache.codec import NULL_TEXT, decode_value, encode_payload, encode_value
from memcached_cache.exceptions import SerializationError


def test_none_and_strings_are_stored_verbatim():
    assert encode_value(None) == NULL_TEXT == "null"
    assert encode_value("v") == "v"
    assert encode_value("") == ""
    # strings are never quoted, even when they look like JSON
    assert encode_value('{"a": 1}') == '{"a": 1}'


def test_structures_and_scalars_are_compact_json():
    assert encode_value({"name": "Alice", "tags": [1, 2]}) == '{"name":"Alice","tags":[1,2]}'
    assert encode_value([1, "a", None]) == '[1,"a",null]'
    assert encode_value(42) == "42"
    assert encode_value(True) == "true"
    assert encode_value(1.5) == "1.5"


def test_datetimes_render_as_utc_with_z_suffix():
    aware = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert encode_value(aware) == "2024-01-02T03:04:05Z"

    shifted = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    assert encode_value(shifted) == "2024-01-02T03:04:05Z"

    naive = datetime(2024, 1, 2, 3, 4, 5)
    assert encode_value(naive) == "2024-01-02T03:04:05Z"

    with_micros = datetime(2024, 1, 2, 3, 4, 5, 120000, tzinfo=timezone.utc)
    assert encode_value(with_micros) == "2024-01-02T03:04:05.120000Z"


def test_unserializable_value_raises_serialization_error():
    with pytest.raises(SerializationError) as exc_info:
        encode_value(object())
    assert exc_info.value.code == "SERIALIZATION_FAILED"
    assert exc_info.value.value_type == "object"
    assert exc_info.value.__cause__ is not None


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_float_is_rejected(value):
    with pytest.raises(SerializationError) as exc_info:
        encode_value(value)
    assert exc_info.value.value_type == "float"


def test_encode_payload_returns_text_and_utf8_bytes():
    text, payload = encode_payload("héllo")
    assert text == "héllo"
    assert payload == "héllo".encode("utf-8")


def test_decode_value():
    assert decode_value(None) is None
    assert decode_value(b"") == ""
    assert decode_value(b"null") == "null"
    assert decode_value("already text") == "already text"
    assert decode_value("héllo".encode("utf-8")) == "héllo"


def test_decode_invalid_utf8_raises():
    with pytest.raises(SerializationError):
        decode_value(b"\xff\xfe")
