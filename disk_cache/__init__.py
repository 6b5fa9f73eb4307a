"""
Disk-Cache: File-per-Key Value Cache

A key-value cache persisted as one file per key in a directory, built on
Python asyncio. Reads run concurrently; writes and removals run one at a
time, in submission order.
"""

from .cache import (
    Cache,
    DirectoryUnavailable,
    DiskCache,
    DiskCacheError,
    InvalidKeyError,
    JSONCodec,
    PickleCodec,
)

__version__ = "1.0.0"

__all__ = [
    "Cache",
    "DirectoryUnavailable",
    "DiskCache",
    "DiskCacheError",
    "InvalidKeyError",
    "JSONCodec",
    "PickleCodec",
]
