"""Exceptions raised by the disk cache."""


class DiskCacheError(Exception):
    """Base class for disk cache errors."""


class DirectoryUnavailable(DiskCacheError, OSError):
    """The cache directory is not a directory and could not be created."""

    def __init__(self, directory: str, reason: str):
        super().__init__(f"cache directory unavailable: {directory} ({reason})")
        self.directory = directory
        self.reason = reason


class InvalidKeyError(DiskCacheError, ValueError):
    """The key cannot be used as a file name inside the cache directory."""

    def __init__(self, key, reason: str):
        super().__init__(f"invalid key {key!r}: {reason}")
        self.key = key
        self.reason = reason
