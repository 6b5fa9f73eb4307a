"""
Tests for Value Codecs

Run with: python -m pytest tests/test_codecs.py -v
"""

import json
import pytest

from disk_cache.cache.codecs import Codec, JSONCodec, PickleCodec, get_codec


class Point:
    """Picklable custom class."""

    def __init__(self, x, y):
        self.x = x
        self.y = y

    def __eq__(self, other):
        return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)


class TestPickleCodec:
    """Test PickleCodec."""

    def test_custom_object(self):
        """Test arbitrary picklable objects survive."""
        codec = PickleCodec()
        assert codec.decode(codec.encode(Point(1, 2))) == Point(1, 2)

    def test_uses_requested_protocol(self):
        """Test the pickle protocol is configurable."""
        data = PickleCodec(protocol=2).encode("x")
        assert data[:2] == b"\x80\x02"

    def test_decode_garbage_raises(self):
        """Test bad bytes raise instead of returning a value."""
        with pytest.raises(Exception):
            PickleCodec().decode(b"garbage")

    def test_decode_truncated_raises(self):
        """Test a truncated pickle raises."""
        data = PickleCodec().encode({"a": list(range(100))})
        with pytest.raises(Exception):
            PickleCodec().decode(data[: len(data) // 2])


class TestJSONCodec:
    """Test JSONCodec."""

    def test_encodes_compact(self):
        """Test output is compact ASCII-escaped JSON."""
        assert JSONCodec().encode({"a": [1, "\u00e9"]}) == b'{"a":[1,"\\u00e9"]}'

    def test_decode(self):
        """Test decoding JSON bytes."""
        assert JSONCodec().decode(b'{"a": 1}') == {"a": 1}

    def test_encode_unsupported_type_raises(self):
        """Test values JSON cannot represent raise TypeError."""
        with pytest.raises(TypeError):
            JSONCodec().encode(object())

    def test_decode_invalid_raises(self):
        """Test invalid JSON raises ValueError."""
        with pytest.raises(json.JSONDecodeError):
            JSONCodec().decode(b"{not json")


class TestGetCodec:
    """Test get_codec()."""

    @pytest.mark.parametrize("name, cls", [
        ("pickle", PickleCodec),
        ("json", JSONCodec),
        ("JSON", JSONCodec),
    ])
    def test_known_names(self, name, cls):
        """Test codecs are found by name, case-insensitively."""
        codec = get_codec(name)
        assert isinstance(codec, cls)
        assert isinstance(codec, Codec)

    def test_unknown_name(self):
        """Test unknown names raise ValueError listing the options."""
        with pytest.raises(ValueError, match="json, pickle"):
            get_codec("yaml")

    def test_abstract_codec(self):
        """Test the Codec base class cannot be instantiated."""
        with pytest.raises(TypeError):
            Codec()
