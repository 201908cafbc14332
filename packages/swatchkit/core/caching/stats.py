"""In-memory cache statistics owned by one cache instance."""

from __future__ import annotations

import threading

from swatchkit.core.caching.models import CacheStats


class CacheStatsCounter:
    """Lock-guarded hit/miss/size/count aggregate.

    Every update is an increment or decrement applied under the lock, so
    concurrent stores to different keys cannot lose updates. Totals never go
    below zero.
    """

    def __init__(self, initial: CacheStats | None = None) -> None:
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._total_size = 0
        self._item_count = 0
        if initial is not None:
            self.load(initial)

    def load(self, stats: CacheStats) -> None:
        """Replace the counters with persisted values."""
        with self._lock:
            self._hits = stats.hits
            self._misses = stats.misses
            self._total_size = max(0, stats.total_size)
            self._item_count = max(0, stats.item_count)

    def record_hit(self, count: int = 1) -> None:
        with self._lock:
            self._hits += count

    def record_miss(self, count: int = 1) -> None:
        with self._lock:
            self._misses += count

    def apply(self, size_delta: int = 0, count_delta: int = 0) -> None:
        """Adjust resident size and item count."""
        with self._lock:
            self._total_size = max(0, self._total_size + size_delta)
            self._item_count = max(0, self._item_count + count_delta)

    def reset(self) -> None:
        with self._lock:
            self._hits = self._misses = self._total_size = self._item_count = 0

    def snapshot(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                total_size=self._total_size,
                item_count=self._item_count,
            )


__all__ = [
    "CacheStatsCounter",
]
