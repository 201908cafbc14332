"""Tests for PersistentCache (async)."""

from __future__ import annotations

import asyncio
import sqlite3
from contextlib import closing
from pathlib import Path

import pytest

from swatchkit.core.caching import CacheConfig, NullAssetCache, PersistentCache


def _config(db: Path, **overrides) -> CacheConfig:
    return CacheConfig(db_path=db, **overrides)


class TestInitialization:
    """Tests for cache lifecycle."""

    async def test_uninitialized_cache_fails_open(self, cache_db: Path):
        """Test operations before initialize() are misses, not errors."""
        cache = PersistentCache(_config(cache_db))

        assert await cache.store("k", b"v") is False
        assert await cache.retrieve("k") is None
        assert await cache.has("k") is False
        assert await cache.remove("k") is False
        assert await cache.clear() is False
        assert await cache.cleanup() == 0

    async def test_initialize_creates_database(self, cache_db: Path):
        """Test the database file and parent directory are created."""
        cache = PersistentCache(_config(cache_db))
        assert await cache.initialize("scope-a")
        assert cache_db.exists()
        assert cache.scope_key == "scope-a"
        await cache.close()

    async def test_empty_scope_rejected(self, cache_db: Path):
        """Test scope keys must be non-empty."""
        with pytest.raises(ValueError):
            await PersistentCache(_config(cache_db)).initialize("")

    async def test_in_memory_store(self):
        """Test db_path=None keeps everything in memory."""
        cache = PersistentCache(CacheConfig())
        await cache.initialize("mem")
        assert await cache.store("k", "v")
        asset = await cache.retrieve("k")
        assert asset is not None and asset.text() == "v"
        await cache.close()


class TestStoreRetrieve:
    """Tests for store, retrieve, has and remove."""

    async def test_round_trip_bytes(self, cache: PersistentCache):
        """Test bytes come back unchanged with metadata."""
        assert await cache.store("font:inter", b"\x00\x01font", {"type": "font", "family": "Inter"})

        asset = await cache.retrieve("font:inter")

        assert asset is not None
        assert asset.data == b"\x00\x01font"
        assert asset.metadata.type == "font"
        assert asset.metadata.model_extra == {"family": "Inter"}
        assert not asset.metadata.compressed

    async def test_round_trip_text(self, cache: PersistentCache):
        """Test str payloads are stored as UTF-8."""
        await cache.store("note", "héllo")
        asset = await cache.retrieve("note")
        assert asset is not None
        assert asset.text() == "héllo"
        assert asset.metadata.model_extra == {"encoding": "utf-8"}

    async def test_reserved_metadata_is_ignored(self, cache: PersistentCache):
        """Test callers cannot override size bookkeeping."""
        await cache.store("k", b"abc", {"original_size": 999, "compressed": True})
        asset = await cache.retrieve("k")
        assert asset is not None
        assert asset.metadata.original_size == 3
        assert asset.metadata.compressed is False

    async def test_large_payload_is_compressed(self, cache: PersistentCache):
        """Test compressible payloads above the threshold are gzipped transparently."""
        payload = b"swatch" * 1000
        await cache.store("big", payload)

        asset = await cache.retrieve("big")

        assert asset is not None
        assert asset.data == payload
        assert asset.metadata.compressed
        assert asset.metadata.compressed_size < asset.metadata.original_size
        assert cache.stats().total_size == asset.metadata.compressed_size

    async def test_compression_disabled(self, cache_db: Path):
        """Test payloads are stored raw when compression is off."""
        cache = PersistentCache(_config(cache_db, compression_enabled=False))
        await cache.initialize("s")
        await cache.store("big", b"a" * 5000)
        assert cache.stats().total_size == 5000
        await cache.close()

    async def test_overwrite_replaces_entry(self, cache: PersistentCache):
        """Test storing an existing key replaces it without double counting."""
        await cache.store("k", b"one")
        await cache.store("k", b"three")

        asset = await cache.retrieve("k")
        assert asset is not None and asset.data == b"three"
        stats = cache.stats()
        assert stats.item_count == 1
        assert stats.total_size == 5

    async def test_has_and_remove(self, cache: PersistentCache):
        """Test has() reflects presence and remove() deletes."""
        await cache.store("k", b"v")
        assert await cache.has("k")

        assert await cache.remove("k")
        assert not await cache.has("k")
        assert await cache.remove("k")
        assert cache.stats().item_count == 0

    async def test_hits_and_misses_counted(self, cache: PersistentCache):
        """Test lookups update statistics."""
        await cache.store("k", b"v")
        await cache.retrieve("k")
        await cache.retrieve("missing")

        stats = cache.stats()
        assert (stats.hits, stats.misses) == (1, 1)
        assert stats.hit_rate == 0.5

    async def test_clear(self, cache: PersistentCache):
        """Test clear() removes every entry and resets statistics."""
        for i in range(3):
            await cache.store(f"k{i}", b"v")
        await cache.retrieve("k0")

        assert await cache.clear()

        assert cache.stats().item_count == 0
        assert cache.stats().hits == 0
        assert await cache.retrieve("k0") is None


class TestExpiry:
    """Tests for age-based expiry."""

    async def test_expired_entry_is_a_miss(self, cache_db: Path, clock):
        """Test entries older than max_age are deleted on retrieve."""
        cache = PersistentCache(_config(cache_db, max_age_seconds=60), clock=clock)
        await cache.initialize("s")
        await cache.store("k", b"v")

        clock.advance(30)
        assert await cache.retrieve("k") is not None

        clock.advance(31)
        assert not await cache.has("k")
        assert await cache.retrieve("k") is None
        stats = cache.stats()
        assert stats.item_count == 0
        assert stats.misses == 1
        await cache.close()

    async def test_expiry_counts_from_creation(self, cache_db: Path, clock):
        """Test access does not extend an entry's lifetime."""
        cache = PersistentCache(_config(cache_db, max_age_seconds=60), clock=clock)
        await cache.initialize("s")
        await cache.store("k", b"v")
        for _ in range(5):
            clock.advance(15)
            await cache.retrieve("k")

        assert await cache.retrieve("k") is None
        await cache.close()

    async def test_cleanup_purges_expired(self, cache_db: Path, clock):
        """Test cleanup() removes expired entries without eviction pressure."""
        cache = PersistentCache(_config(cache_db, max_age_seconds=60), clock=clock)
        await cache.initialize("s")
        await cache.store("old", b"v")
        clock.advance(45)
        await cache.store("new", b"v")
        clock.advance(20)

        assert await cache.cleanup() == 1
        assert await cache.has("new")
        await cache.close()


class TestScopesAndPersistence:
    """Tests for scope isolation and durable statistics."""

    async def test_scope_isolation(self, cache_db: Path):
        """Test one scope never sees another scope's entries."""
        a = PersistentCache(_config(cache_db))
        b = PersistentCache(_config(cache_db))
        await a.initialize("device-a")
        await b.initialize("device-b")

        await a.store("shared-key", b"from-a")

        assert await b.retrieve("shared-key") is None
        assert b.stats().item_count == 0
        asset = await a.retrieve("shared-key")
        assert asset is not None and asset.data == b"from-a"
        await a.close()
        await b.close()

    async def test_stats_survive_reopen(self, cache_db: Path):
        """Test statistics are reloaded from the database."""
        first = PersistentCache(_config(cache_db))
        await first.initialize("s")
        await first.store("a", b"12345")
        await first.store("b", b"123")
        await first.retrieve("a")
        await first.retrieve("zzz")
        await first.close()

        second = PersistentCache(_config(cache_db))
        await second.initialize("s")

        stats = second.stats()
        assert stats.item_count == 2
        assert stats.total_size == 8
        assert (stats.hits, stats.misses) == (1, 1)
        assert (await second.retrieve("b")).data == b"123"  # type: ignore[union-attr]
        await second.close()

    async def test_concurrent_stores_keep_aggregates(self, cache_db: Path):
        """Test parallel stores to distinct keys keep exact size and count."""
        first = PersistentCache(_config(cache_db, auto_cleanup=False))
        await first.initialize("s")

        results = await asyncio.gather(*(first.store(f"k{i}", b"x" * 10) for i in range(50)))
        stats = first.stats()
        await first.close()

        assert all(results)
        assert (stats.item_count, stats.total_size) == (50, 500)

        second = PersistentCache(_config(cache_db))
        await second.initialize("s")
        reloaded = second.stats()
        await second.close()
        assert (reloaded.item_count, reloaded.total_size) == (50, 500)

    async def test_corrupt_metadata_is_a_miss(self, cache: PersistentCache, cache_db: Path):
        """Test an undecodable entry row fails open."""
        await cache.store("k", b"payload")
        with closing(sqlite3.connect(cache_db)) as conn, conn:
            conn.execute(
                "UPDATE entries SET metadata_json = ? WHERE key = ?",
                ("{not json", cache.storage_key("k")),
            )

        assert await cache.retrieve("k") is None
        assert await cache.has("k") is False

    async def test_storage_key_format(self, cache: PersistentCache):
        """Test keys are namespaced by prefix and scope."""
        assert cache.storage_key("k") == "wcag_test-scope:k"


class TestEviction:
    """Tests for size- and count-based eviction."""

    async def test_cleanup_evicts_to_target(self, cache_db: Path, clock):
        """Test cleanup shrinks usage to the target fraction of the budget."""
        config = _config(
            cache_db,
            max_size_bytes=10_000,
            compression_enabled=False,
            auto_cleanup=False,
        )
        cache = PersistentCache(config, clock=clock)
        await cache.initialize("s")
        for i in range(25):
            clock.advance(1)
            await cache.store(f"k{i}", b"x" * 500)
        assert cache.stats().total_size == 12_500

        removed = await cache.cleanup()

        assert removed == 11
        assert cache.stats().total_size <= config.target_size_bytes
        await cache.close()

    async def test_frequently_used_entries_survive(self, cache_db: Path, clock):
        """Test eviction prefers idle, unused entries."""
        config = _config(
            cache_db, max_size_bytes=10_000, compression_enabled=False, auto_cleanup=False
        )
        cache = PersistentCache(config, clock=clock)
        await cache.initialize("s")
        for i in range(20):
            clock.advance(1)
            await cache.store(f"k{i}", b"x" * 500)
        for _ in range(5):
            await cache.retrieve("k0")

        await cache.cleanup(urgent=True)

        assert await cache.has("k0")
        assert not await cache.has("k1")
        await cache.close()

    async def test_auto_cleanup_after_store(self, cache_db: Path, clock):
        """Test stores past the threshold trigger eviction."""
        config = _config(cache_db, max_size_bytes=10_000, compression_enabled=False)
        cache = PersistentCache(config, clock=clock)
        await cache.initialize("s")
        for i in range(30):
            clock.advance(1)
            await cache.store(f"k{i}", b"x" * 500)

        assert cache.stats().total_size <= config.cleanup_size_bytes
        await cache.close()

    async def test_large_entry_triggers_urgent_cleanup(self, cache_db: Path, clock):
        """Test an entry over 10% of the budget makes room first."""
        config = _config(
            cache_db, max_size_bytes=10_000, compression_enabled=False, auto_cleanup=False
        )
        cache = PersistentCache(config, clock=clock)
        await cache.initialize("s")
        for i in range(16):
            clock.advance(1)
            await cache.store(f"k{i}", b"x" * 500)

        await cache.store("big", b"y" * 2000)

        stats = cache.stats()
        assert stats.item_count == 15
        assert stats.total_size == 9000
        assert await cache.has("big")
        await cache.close()

    async def test_item_count_limit(self, cache_db: Path, clock):
        """Test max_items triggers eviction down to target_items."""
        config = _config(cache_db, max_items=10, target_items=5, auto_cleanup=False)
        cache = PersistentCache(config, clock=clock)
        await cache.initialize("s")
        for i in range(12):
            clock.advance(1)
            await cache.store(f"k{i}", b"v")

        await cache.cleanup()

        assert cache.stats().item_count == 5
        await cache.close()


class TestNullCache:
    """Tests for the no-op cache."""

    async def test_null_cache(self):
        """Test every lookup misses and nothing is stored."""
        cache = NullAssetCache()
        assert await cache.initialize("s")
        assert not await cache.store("k", b"v")
        assert await cache.retrieve("k") is None
        assert not await cache.has("k")
        assert await cache.cleanup() == 0
        assert cache.stats().item_count == 0
        await cache.close()
