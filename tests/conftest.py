"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import os
import random
import pytest

from filecache.cache.record import key_digest
from filecache.cache.store import FileCache


class FakeClock:
    """
    Controllable clock for expiration tests.

    Usage:
        clock = FakeClock(1000)
        cache = FileCache(path, clock=clock)
        clock.advance(300)
    """

    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def advance(self, seconds: int) -> None:
        self.now += seconds

    def __call__(self) -> int:
        return self.now


def cache_file(cache: FileCache, key: str) -> str:
    """Path of the file a cache stores `key` in, computed independently."""
    return os.path.join(cache.directory, f"{key_digest(key, cache.digest)}.{cache.extension}")


def write_raw(cache: FileCache, key: str, data: bytes) -> str:
    """Write raw bytes where the cache expects the record for `key`."""
    path = cache_file(cache, key)
    with open(path, "wb") as fh:
        fh.write(data)
    return path


def mutated_payloads(data: bytes, count: int = 200, seed: int = 1234):
    """Yield copies of `data` with one to three bytes overwritten at random."""
    rng = random.Random(seed)
    for _ in range(count):
        damaged = bytearray(data)
        for _ in range(rng.randint(1, 3)):
            damaged[rng.randrange(len(damaged))] = rng.randrange(256)
        yield bytes(damaged)


# ============================================================================
# FileCache Fixtures
# ============================================================================

@pytest.fixture
def cache_dir(tmp_path) -> str:
    """Create an empty cache directory."""
    path = tmp_path / "cache"
    path.mkdir()
    return str(path)


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock frozen at a fixed timestamp."""
    return FakeClock()


@pytest.fixture
def cache(cache_dir: str) -> FileCache:
    """Create a FileCache on the real clock with the default TTL (250s)."""
    return FileCache(cache_dir, default_ttl=250)


@pytest.fixture
def clocked_cache(cache_dir: str, clock: FakeClock) -> FileCache:
    """Create a FileCache driven by the fake clock."""
    return FileCache(cache_dir, default_ttl=250, clock=clock)


@pytest.fixture
def legacy_cache(cache_dir: str) -> FileCache:
    """Create a FileCache using 32 character md5 file names."""
    return FileCache(cache_dir, digest="md5")


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
