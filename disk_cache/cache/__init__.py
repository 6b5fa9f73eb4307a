"""Cache module for Disk-Cache."""

from .base import Cache
from .codecs import Codec, JSONCodec, PickleCodec, get_codec
from .disk import DiskCache, validate_key
from .errors import DirectoryUnavailable, DiskCacheError, InvalidKeyError
from .queue import BarrierQueue

__all__ = [
    "BarrierQueue",
    "Cache",
    "Codec",
    "DirectoryUnavailable",
    "DiskCache",
    "DiskCacheError",
    "InvalidKeyError",
    "JSONCodec",
    "PickleCodec",
    "get_codec",
    "validate_key",
]
