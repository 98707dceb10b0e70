"""
Unit tests for the cached body codec.
"""

import pytest

from service_cache.app.caching.codec import decode, encode
from shared.errors import SerializationError


class TestCodec:
    """JSON encoding of response bodies."""

    def test_nested_body_round_trip(self):
        body = {
            "message": "Hello, this data is from the database!",
            "items": [1, 2.5, None, True, {"deep": ["a", {"b": []}]}],
            "meta": {"count": 3, "tags": []},
        }

        payload = encode(body)

        assert decode(payload) == body
        assert encode(decode(payload)) == payload

    def test_non_ascii_text_preserved(self):
        payload = encode({"city": "Zürich"})
        assert "Zürich" in payload
        assert decode(payload) == {"city": "Zürich"}

    def test_unencodable_body_raises(self):
        with pytest.raises(SerializationError) as exc_info:
            encode({"when": object()})
        assert exc_info.value.code == "SERIALIZATION_ERROR"

    def test_nan_rejected(self):
        with pytest.raises(SerializationError):
            encode({"value": float("nan")})

    def test_malformed_payload_raises(self):
        with pytest.raises(SerializationError):
            decode("{not json")
