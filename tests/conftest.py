"""Shared pytest fixtures for swatchkit tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from swatchkit.core.caching import CacheConfig, PersistentCache
from swatchkit.core.executor import TaskExecutor

# ============================================================================
# Palette Fixtures
# ============================================================================


@pytest.fixture
def primaries() -> list[str]:
    """White, black and the three primaries."""
    return ["#FFFFFF", "#000000", "#FF0000", "#00FF00", "#0000FF"]


@pytest.fixture
def mono_palette() -> list[str]:
    """White, black and navy: exactly two AA-compliant pairs."""
    return ["white", "black", "navy"]


# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def cache_db(tmp_path: Path) -> Path:
    """Path for an isolated SQLite cache file."""
    return tmp_path / "cache" / "swatchkit.db"


@pytest.fixture
async def cache(cache_db: Path, clock: FakeClock):
    """Initialized PersistentCache on a temp database."""
    c = PersistentCache(CacheConfig(db_path=cache_db), clock=clock)
    await c.initialize("test-scope")
    yield c
    await c.close()


@pytest.fixture
async def executor():
    """Initialized two-unit thread executor."""
    ex = TaskExecutor(max_workers=2)
    ex.initialize()
    yield ex
    await ex.shutdown()
