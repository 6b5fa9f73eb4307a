"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import threading
import time
import pytest
from pathlib import Path
from typing import Any, List, Tuple

from disk_cache.cache.codecs import Codec, JSONCodec, PickleCodec
from disk_cache.cache.disk import DiskCache
from disk_cache.cache.queue import BarrierQueue


# ============================================================================
# Directory Fixtures
# ============================================================================

@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A cache directory path that does not exist yet."""
    return tmp_path / "cache"


# ============================================================================
# DiskCache Fixtures
# ============================================================================

@pytest.fixture
def cache(cache_dir: Path) -> DiskCache:
    """Create a fresh DiskCache using the default pickle codec."""
    return DiskCache(str(cache_dir), codec=PickleCodec())


@pytest.fixture
def json_cache(tmp_path: Path) -> DiskCache:
    """Create a DiskCache storing values as JSON."""
    return DiskCache(str(tmp_path / "json-cache"), codec=JSONCodec())


@pytest.fixture
def error_log() -> List[Tuple[str, str, BaseException]]:
    """Collects calls made to a cache's on_error hook."""
    return []


@pytest.fixture
def observed_cache(cache_dir: Path, error_log) -> DiskCache:
    """DiskCache whose swallowed failures are appended to error_log."""
    return DiskCache(
        str(cache_dir),
        codec=PickleCodec(),
        on_error=lambda op, path, exc: error_log.append((op, path, exc)),
    )


# ============================================================================
# Queue Fixtures
# ============================================================================

@pytest.fixture
def queue() -> BarrierQueue:
    """Create a BarrierQueue on the loop's default executor."""
    return BarrierQueue()


class EventRecorder:
    """
    Thread-safe log of start/end events for queued work.

    Usage:
        recorder = EventRecorder()
        queue.submit(recorder.job("a", delay=0.05))
        ...
        assert recorder.index("a", "end") < recorder.index("b", "start")
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.events: List[Tuple[str, str]] = []

    def record(self, name: str, kind: str) -> None:
        with self._lock:
            self.events.append((name, kind))

    def job(self, name: str, delay: float = 0.0, result: Any = None):
        """Build a blocking callable that records when it runs."""
        def run():
            self.record(name, "start")
            if delay:
                time.sleep(delay)
            self.record(name, "end")
            return result if result is not None else name
        return run

    def index(self, name: str, kind: str) -> int:
        return self.events.index((name, kind))


@pytest.fixture
def recorder() -> EventRecorder:
    """Create an EventRecorder."""
    return EventRecorder()


# ============================================================================
# Codec helpers
# ============================================================================

class FailingCodec(Codec):
    """Codec whose encode() always raises."""

    name = "failing"

    def encode(self, value: Any) -> bytes:
        raise TypeError("cannot encode")

    def decode(self, data: bytes) -> Any:
        raise ValueError("cannot decode")


class RendezvousCodec(PickleCodec):
    """
    Pickle codec whose decode() blocks until `parties` decodes are in
    progress at once. Proves reads overlap; times out instead of hanging.
    """

    name = "rendezvous"

    def __init__(self, parties: int, timeout: float = 5.0):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=timeout)

    def decode(self, data: bytes) -> Any:
        self.barrier.wait()
        return super().decode(data)


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

