"""
Disk Cache Module

This module implements the disk-backed key-value cache.

Layout:
    One flat directory per cache. Each key is stored in exactly one file
    whose name is the key itself. File contents are whatever the injected
    codec produces; the cache never interprets them.

Concurrency:
    Every operation goes through one BarrierQueue per cache.
    - get / exists / stats are concurrent reads
    - set / remove / remove_all are barriers: they wait for everything
      submitted earlier and block everything submitted later

Errors:
    Only construction (DirectoryUnavailable) and bad keys (InvalidKeyError)
    reach the caller. Filesystem failures inside queued operations are
    logged, passed to the optional on_error hook and otherwise dropped.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from concurrent.futures import Executor
from typing import Any, Callable, Dict, Optional, Type

from ..config.settings import settings
from .base import Cache, Completion, GetCompletion, T
from .codecs import Codec, get_codec
from .errors import DirectoryUnavailable, InvalidKeyError
from .queue import BarrierQueue

logger = logging.getLogger(__name__)

ErrorObserver = Callable[[str, str, BaseException], None]

# Name pattern of in-progress writes; never a valid key
TEMP_PREFIX = ".diskcache-"
TEMP_SUFFIX = ".tmp"


class DiskCache(Cache[T]):
    """
    Key-value cache persisted as one file per key in a directory.

    All reads run concurrently. Writes wait for all other queued operations
    to finish and run one at a time, in submission order.

    Usage:
        cache = DiskCache("/tmp/my-cache")
        cache.set("user:1", {"name": "alice"})
        value = await cache.get("user:1")   # {"name": "alice"}
        await cache.remove_all()

    Operations must be called from a running event loop. Each returns an
    asyncio.Future for work that is already queued, so calls made back to
    back keep their order even if the caller only awaits the last one.
    Cancelling a returned future does not cancel the queued work.

    Attributes:
        directory: Absolute path of the cache directory
        codec: Codec used to encode and decode values
        value_type: If set, decoded values of another type read as absent
    """

    def __init__(
            self,
            directory: Optional[str] = None,
            codec: Optional[Codec] = None,
            value_type: Optional[Type[T]] = None,
            executor: Optional[Executor] = None,
            on_error: Optional[ErrorObserver] = None,
    ):
        """
        Initialize the cache, creating its directory if needed.

        Args:
            directory: Cache directory (default from settings.DIRECTORY)
            codec: Value codec (default from settings.CODEC)
            value_type: Optional runtime type check applied on get()
            executor: Executor for file I/O (None = event loop default)
            on_error: Called as on_error(operation, path, exc) for every
                swallowed filesystem or codec failure

        Raises:
            DirectoryUnavailable: If the path is not a directory and cannot
                be created, or is not writable
        """
        raw = directory if directory is not None else settings.DIRECTORY
        self.directory = os.path.abspath(os.path.expanduser(os.fspath(raw)))
        self.codec = codec if codec is not None else get_codec(settings.CODEC)
        self.value_type = value_type
        self.on_error = on_error
        self._queue = BarrierQueue(executor=executor)

        self._ensure_directory()

    def _ensure_directory(self) -> None:
        if not os.path.isdir(self.directory):
            if os.path.lexists(self.directory):
                raise DirectoryUnavailable(self.directory, "exists and is not a directory")
            try:
                os.makedirs(self.directory, exist_ok=True)
            except OSError as e:
                raise DirectoryUnavailable(self.directory, str(e)) from e
            logger.debug(f"Created cache directory {self.directory}")

        if not os.access(self.directory, os.W_OK | os.X_OK):
            raise DirectoryUnavailable(self.directory, "not writable")

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def get(
            self,
            key: str,
            completion: Optional[GetCompletion] = None,
    ) -> "asyncio.Future[Optional[T]]":
        """
        Retrieve the value stored under key.

        Args:
            key: The key to look up
            completion: Optional callback receiving the value (or None)

        Returns:
            Future resolving to the value, or None if the file is missing,
            unreadable, undecodable or of the wrong type
        """
        path = self.path_for_key(key)
        return self._queue.submit(self._read, path, callback=completion)

    def set(
            self,
            key: str,
            value: T,
            completion: Optional[Completion] = None,
    ) -> "asyncio.Future[None]":
        """
        Store value under key, replacing any previous entry.

        Write failures are not reported; the completion fires regardless.
        """
        path = self.path_for_key(key)
        return self._queue.submit(
            self._write, path, value, barrier=True, callback=_no_args(completion)
        )

    def remove(
            self,
            key: str,
            completion: Optional[Completion] = None,
    ) -> "asyncio.Future[None]":
        """Delete the entry for key if there is one."""
        path = self.path_for_key(key)
        return self._queue.submit(
            self._delete, path, "remove", barrier=True, callback=_no_args(completion)
        )

    def remove_all(
            self,
            completion: Optional[Completion] = None,
    ) -> "asyncio.Future[None]":
        """Delete every entry in the cache directory."""
        return self._queue.submit(
            self._clear, barrier=True, callback=_no_args(completion)
        )

    def exists(
            self,
            key: str,
            completion: Optional[Callable[[bool], None]] = None,
    ) -> "asyncio.Future[bool]":
        """Check whether a file exists for key. Does not decode it."""
        path = self.path_for_key(key)
        return self._queue.submit(os.path.isfile, path, callback=completion)

    def stats(
            self,
            completion: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> "asyncio.Future[Dict[str, Any]]":
        """
        Get statistics about the cache.

        Returns:
            Future resolving to a dictionary containing:
            - entries: Number of entry files
            - total_bytes: Combined size of those files
            - directory: The cache directory
            - codec: Name of the codec in use
        """
        return self._queue.submit(self._stats, callback=completion)

    async def join(self) -> None:
        """Wait for every operation submitted so far to finish."""
        await self._queue.join()

    @property
    def pending(self) -> int:
        """Number of queued or running operations."""
        return self._queue.pending

    def path_for_key(self, key: str) -> str:
        """
        Map a key to its file path.

        Raises:
            InvalidKeyError: If the key is not a single, safe file name
        """
        validate_key(key)
        return os.path.join(self.directory, key)

    # ------------------------------------------------------------------
    # Filesystem work (runs in the executor)
    # ------------------------------------------------------------------

    def _read(self, path: str) -> Optional[T]:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            self._report("get", path, e)
            return None

        try:
            value = self.codec.decode(data)
        except Exception as e:
            # Corrupt or foreign files read as a miss
            logger.debug(f"Could not decode {path}: {e!r}")
            self._report("decode", path, e)
            return None

        if self.value_type is not None and not isinstance(value, self.value_type):
            logger.debug(
                f"Discarding {path}: expected {self.value_type.__name__}, "
                f"got {type(value).__name__}"
            )
            return None
        return value

    def _write(self, path: str, value: T) -> None:
        if os.path.lexists(path):
            self._delete(path, "set")

        try:
            data = self.codec.encode(value)
        except Exception as e:
            logger.warning(f"Could not encode value for {path}: {e!r}")
            self._report("encode", path, e)
            return

        # Temp file + rename so a crash never leaves a truncated entry
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.directory, prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX
            )
        except OSError as e:
            logger.warning(f"Could not create temp file for {path}: {e!r}")
            self._report("set", path, e)
            return

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning(f"Could not write {path}: {e!r}")
            self._report("set", path, e)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass

    def _delete(self, path: str, operation: str) -> None:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path)
            else:
                os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not delete {path}: {e!r}")
            self._report(operation, path, e)

    def _clear(self) -> None:
        try:
            names = os.listdir(self.directory)
        except OSError as e:
            logger.warning(f"Could not list {self.directory}: {e!r}")
            self._report("remove_all", self.directory, e)
            return

        for name in names:
            self._delete(os.path.join(self.directory, name), "remove_all")
        logger.debug(f"Cleared {len(names)} entries from {self.directory}")

    def _stats(self) -> Dict[str, Any]:
        entries = 0
        total_bytes = 0
        try:
            with os.scandir(self.directory) as it:
                for entry in it:
                    if _is_temp_name(entry.name):
                        continue
                    try:
                        if not entry.is_file():
                            continue
                        total_bytes += entry.stat().st_size
                    except OSError:
                        continue
                    entries += 1
        except OSError as e:
            self._report("stats", self.directory, e)

        return {
            "entries": entries,
            "total_bytes": total_bytes,
            "directory": self.directory,
            "codec": self.codec.name,
        }

    def _report(self, operation: str, path: str, exc: BaseException) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(operation, path, exc)
        except Exception:
            logger.exception(f"on_error hook failed for {operation} {path}")

    def __repr__(self) -> str:
        return f"DiskCache(directory={self.directory!r}, codec={self.codec!r})"


def validate_key(key: str) -> None:
    """
    Check that a key can be used verbatim as a file name in the cache
    directory without escaping it.

    Raises:
        InvalidKeyError: For non-str, empty, "." or "..", keys containing a
            path separator or NUL, names of in-progress writes, and keys
            longer than settings.MAX_KEY_LENGTH bytes in UTF-8
    """
    if not isinstance(key, str):
        raise InvalidKeyError(key, "must be a str")
    if not key:
        raise InvalidKeyError(key, "must not be empty")
    if key in (".", ".."):
        raise InvalidKeyError(key, "reserved path name")
    if _is_temp_name(key):
        raise InvalidKeyError(key, "reserved for temporary files")

    separators = {"/", "\0", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in key for sep in separators):
        raise InvalidKeyError(key, "contains a path separator or NUL")

    try:
        encoded = key.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidKeyError(key, "not encodable as UTF-8") from None
    if len(encoded) > settings.MAX_KEY_LENGTH:
        raise InvalidKeyError(key, f"longer than {settings.MAX_KEY_LENGTH} bytes")


def _is_temp_name(name: str) -> bool:
    return name.startswith(TEMP_PREFIX) and name.endswith(TEMP_SUFFIX)


def _no_args(completion: Optional[Completion]) -> Optional[Callable[[Any], None]]:
    if completion is None:
        return None
    return lambda _result: completion()
