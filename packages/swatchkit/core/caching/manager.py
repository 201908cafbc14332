"""Scoped persistent cache with expiry, compression and eviction.

Keys are stored as ``{key_prefix}{scope_key}:{key}``. Storage calls are
blocking and run in ``asyncio.to_thread``; those are the only suspension
points. Storage failures never reach the caller: they are logged and
reported as a miss, ``False`` or ``0``.
"""

from __future__ import annotations

import asyncio
import gzip
import logging
import time
import zlib
from collections.abc import Callable, Mapping
from typing import Any

from swatchkit.core.caching.backends.sqlite import SQLiteCacheStorage
from swatchkit.core.caching.eviction import needs_eviction, select_victims
from swatchkit.core.caching.models import (
    CacheConfig,
    CachedAsset,
    CacheEntry,
    CacheEntryMetadata,
    CacheStats,
)
from swatchkit.core.caching.protocols import CacheStorage
from swatchkit.core.caching.stats import CacheStatsCounter
from swatchkit.core.errors import CacheIOError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class PersistentCache:
    """Durable key-value cache namespaced by a scope key.

    Args:
        config: Cache configuration.
        storage: Durable store. A SQLiteCacheStorage built from the config is
            used when omitted.
        clock: Time source in seconds; injectable for expiry tests.

    Example:
        >>> cache = PersistentCache(CacheConfig(db_path=Path("cache.db")))
        >>> await cache.initialize("device-1234")
        >>> await cache.store("font:inter", font_bytes, {"type": "font"})
        True
        >>> asset = await cache.retrieve("font:inter")
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        storage: CacheStorage | None = None,
        clock: Clock = time.time,
    ) -> None:
        self.config = config or CacheConfig()
        self._storage: CacheStorage = storage or SQLiteCacheStorage(
            self.config.db_path, enable_wal=self.config.enable_wal
        )
        self._clock = clock
        self._counter = CacheStatsCounter()
        self._scope_key: str | None = None
        self._init_lock = asyncio.Lock()
        self._cleanup_lock = asyncio.Lock()

    @property
    def scope_key(self) -> str | None:
        return self._scope_key

    @property
    def initialized(self) -> bool:
        return self._scope_key is not None

    def storage_key(self, key: str) -> str:
        """Fully-qualified key as stored."""
        if self._scope_key is None:
            raise RuntimeError("Cache not initialized")
        return f"{self.config.key_prefix}{self._scope_key}:{key}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self, scope_key: str) -> bool:
        """Open the store for a scope and load its persisted statistics.

        Re-initializing with the same scope is a no-op.

        Returns:
            False if the store could not be opened.
        """
        if not scope_key:
            raise ValueError("scope_key must be a non-empty string")

        async with self._init_lock:
            if self._scope_key == scope_key:
                return True
            try:
                await asyncio.to_thread(self._storage.open)
                await asyncio.to_thread(self._storage.ensure_scope, scope_key)
                stats = await asyncio.to_thread(self._storage.load_stats, scope_key)
            except CacheIOError as exc:
                logger.error("Cache initialization failed: %s", exc)
                return False

            self._counter.load(stats)
            self._scope_key = scope_key
            logger.debug(
                "Cache initialized for scope %s (%d items, %d bytes)",
                scope_key,
                stats.item_count,
                stats.total_size,
            )
            return True

    async def close(self) -> None:
        await asyncio.to_thread(self._storage.close)
        self._scope_key = None

    async def __aenter__(self) -> PersistentCache:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def store(
        self, key: str, data: bytes | str, metadata: Mapping[str, Any] | None = None
    ) -> bool:
        """Store a payload, compressing it when worthwhile.

        A payload whose stored size exceeds ``urgent_entry_fraction`` of the
        budget triggers an urgent cleanup first. Storing an existing key
        replaces it.

        Returns:
            True if stored.
        """
        if not self._check_ready("store"):
            return False

        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        payload, compressed = self._compress(raw)
        extras = dict(metadata or {})
        entry_type = str(extras.pop("type", "unknown"))
        for reserved in ("original_size", "compressed_size", "compressed"):
            extras.pop(reserved, None)
        if isinstance(data, str):
            extras.setdefault("encoding", "utf-8")

        meta = CacheEntryMetadata(
            type=entry_type,
            original_size=len(raw),
            compressed_size=len(payload),
            compressed=compressed,
            **extras,
        )

        if len(payload) > self.config.max_size_bytes * self.config.urgent_entry_fraction:
            logger.info(
                "Entry %s is %d bytes (over %.0f%% of budget), running urgent cleanup",
                key,
                len(payload),
                self.config.urgent_entry_fraction * 100,
            )
            await self.cleanup(urgent=True)

        now = self._clock()
        entry = CacheEntry(
            key=self.storage_key(key),
            scope=self._scope_key or "",
            data=payload,
            metadata=meta,
            created_at=now,
            last_accessed_at=now,
            access_count=0,
            size_bytes=len(payload),
        )
        try:
            size_delta, count_delta = await asyncio.to_thread(self._storage.put, entry)
        except CacheIOError as exc:
            logger.error("Failed to store %s: %s", key, exc)
            return False

        self._counter.apply(size_delta, count_delta)

        if self.config.auto_cleanup and needs_eviction(self._counter.snapshot(), self.config):
            await self.cleanup()
        return True

    async def retrieve(self, key: str) -> CachedAsset | None:
        """Return the payload, or None on miss, expiry or storage error.

        Hits bump the entry's access count and last-accessed time. Expired
        entries are deleted on the way out.
        """
        if not self._check_ready("retrieve"):
            return None

        storage_key = self.storage_key(key)
        scope = self._scope_key or ""
        try:
            entry = await asyncio.to_thread(self._storage.get, storage_key)
            now = self._clock()

            if entry is None or entry.is_expired(now, self.config.max_age_seconds):
                if entry is not None:
                    logger.debug("Cache entry %s expired", key)
                    await self._delete(storage_key)
                await self._record_lookup(scope, hit=False)
                return None

            data = self._decompress(entry) if entry.metadata.compressed else entry.data
            await asyncio.to_thread(self._storage.touch, storage_key, now)
            await self._record_lookup(scope, hit=True)
        except CacheIOError as exc:
            logger.error("Failed to retrieve %s: %s", key, exc)
            self._counter.record_miss()
            return None

        return CachedAsset(data=data, metadata=entry.metadata, created_at=entry.created_at)

    async def has(self, key: str) -> bool:
        """True if an unexpired entry exists. Does not count as an access."""
        if not self.initialized:
            return False
        try:
            entry = await asyncio.to_thread(self._storage.get, self.storage_key(key))
        except CacheIOError as exc:
            logger.warning("Cache has(%s) failed: %s", key, exc)
            return False
        return entry is not None and not entry.is_expired(self._clock(), self.config.max_age_seconds)

    async def remove(self, key: str) -> bool:
        """Delete an entry. Removing a missing key succeeds."""
        if not self.initialized:
            return False
        try:
            await self._delete(self.storage_key(key))
        except CacheIOError as exc:
            logger.error("Failed to remove %s: %s", key, exc)
            return False
        return True

    async def clear(self) -> bool:
        """Delete every entry of this scope and reset its statistics."""
        if not self.initialized:
            return False
        try:
            removed = await asyncio.to_thread(self._storage.clear_scope, self._scope_key)
        except CacheIOError as exc:
            logger.error("Failed to clear cache: %s", exc)
            return False
        self._counter.reset()
        logger.info("Cache cleared (%d entries)", removed)
        return True

    async def cleanup(self, urgent: bool = False) -> int:
        """Purge expired entries, then evict lowest-score entries if needed.

        Eviction runs when usage exceeds ``cleanup_threshold`` of the budget,
        the item count exceeds ``max_items``, or ``urgent`` is set, and stops
        once both targets are met. A single entry that fails to delete is
        logged and skipped.

        Returns:
            Number of entries removed.
        """
        if not self.initialized:
            return 0

        async with self._cleanup_lock:
            try:
                entries = await asyncio.to_thread(self._storage.list_entries, self._scope_key)
            except CacheIOError as exc:
                logger.error("Cache cleanup failed: %s", exc)
                return 0

            now = self._clock()
            removed = 0
            live = []
            for entry in entries:
                if entry.is_expired(now, self.config.max_age_seconds):
                    removed += await self._delete_quietly(entry.key)
                else:
                    live.append(entry)

            stats = self._counter.snapshot()
            if needs_eviction(stats, self.config, urgent):
                victims = select_victims(
                    live, now, stats.total_size, stats.item_count, self.config
                )
                for victim in victims:
                    removed += await self._delete_quietly(victim.key)

            if removed:
                logger.info("Cleaned up %d cache entries", removed)
            return removed

    def stats(self) -> CacheStats:
        return self._counter.snapshot()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_ready(self, operation: str) -> bool:
        if not self.initialized:
            logger.warning("Cache %s called before initialize()", operation)
            return False
        return True

    async def _delete(self, storage_key: str) -> bool:
        size = await asyncio.to_thread(self._storage.delete, storage_key)
        if size is None:
            return False
        self._counter.apply(-size, -1)
        return True

    async def _delete_quietly(self, storage_key: str) -> int:
        try:
            return 1 if await self._delete(storage_key) else 0
        except CacheIOError as exc:
            logger.warning("Skipping cache entry %s during cleanup: %s", storage_key, exc)
            return 0

    async def _record_lookup(self, scope: str, hit: bool) -> None:
        if hit:
            self._counter.record_hit()
        else:
            self._counter.record_miss()
        await asyncio.to_thread(
            self._storage.record_lookups, scope, int(hit), int(not hit)
        )

    def _compress(self, raw: bytes) -> tuple[bytes, bool]:
        if not self.config.compression_enabled or len(raw) <= self.config.compression_threshold:
            return raw, False
        try:
            packed = gzip.compress(raw)
        except (OSError, ValueError, zlib.error) as exc:
            logger.warning("Compression failed, storing raw bytes: %s", exc)
            return raw, False
        if len(packed) >= len(raw):
            return raw, False
        return packed, True

    @staticmethod
    def _decompress(entry: CacheEntry) -> bytes:
        try:
            return gzip.decompress(entry.data)
        except (OSError, EOFError, zlib.error) as exc:
            raise CacheIOError(f"Corrupt compressed entry {entry.key}: {exc}") from exc


__all__ = [
    "Clock",
    "PersistentCache",
]
