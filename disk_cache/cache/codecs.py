"""
Value Codecs

A codec turns a cached value into bytes and back. The cache never looks
inside the bytes; it only hands them to the codec it was built with.

decode() is allowed to raise anything on bad input. The cache treats every
decode failure as a missing entry.
"""

import json
import pickle
from abc import ABC, abstractmethod
from typing import Any, Dict


class Codec(ABC):
    """Encode/decode capability injected into a cache."""

    name: str = "abstract"

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Serialize a value to bytes."""

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Deserialize bytes produced by encode()."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PickleCodec(Codec):
    """Stores any picklable object. Only read files you wrote yourself."""

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def encode(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=self.protocol)

    def decode(self, data: bytes) -> Any:
        return pickle.loads(data)


class JSONCodec(Codec):
    """Stores JSON-compatible values as UTF-8 text."""

    name = "json"

    def encode(self, value: Any) -> bytes:
        return json.dumps(value, separators=(",", ":")).encode("utf-8")

    def decode(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


_CODECS: Dict[str, type] = {
    PickleCodec.name: PickleCodec,
    JSONCodec.name: JSONCodec,
}


def get_codec(name: str) -> Codec:
    """
    Build a codec by name.

    Args:
        name: "pickle" or "json" (case-insensitive)

    Raises:
        ValueError: If no codec is registered under that name
    """
    try:
        codec_cls = _CODECS[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown codec {name!r} (expected one of: {', '.join(sorted(_CODECS))})"
        ) from None
    return codec_cls()
