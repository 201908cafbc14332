"""Eviction scoring and victim selection.

Higher score means keep longer: frequently used entries score high, while
long-idle and large entries score low.
"""

from __future__ import annotations

from collections.abc import Iterable

from swatchkit.core.caching.models import (
    SECONDS_PER_DAY,
    CacheConfig,
    CacheEntryInfo,
    CacheStats,
    EvictionWeights,
)

# Floor for entry age so brand-new entries do not divide by zero.
MIN_AGE_SECONDS = 1.0


def keep_score(entry: CacheEntryInfo, now: float, weights: EvictionWeights | None = None) -> float:
    """Score an entry for eviction priority (lowest is evicted first)."""
    w = weights or EvictionWeights()
    age_days = max(now - entry.created_at, MIN_AGE_SECONDS) / SECONDS_PER_DAY
    idle_seconds = max(0.0, now - entry.last_accessed_at)
    size_kib = entry.size_bytes / 1024
    return (entry.access_count / age_days) * w.access - idle_seconds * w.recency - size_kib * w.size


def needs_eviction(stats: CacheStats, config: CacheConfig, urgent: bool = False) -> bool:
    """True when usage is past the cleanup thresholds or cleanup is urgent."""
    return (
        urgent
        or stats.total_size > config.cleanup_size_bytes
        or stats.item_count > config.max_items
    )


def select_victims(
    entries: Iterable[CacheEntryInfo],
    now: float,
    total_size: int,
    item_count: int,
    config: CacheConfig,
) -> list[CacheEntryInfo]:
    """Pick the lowest-scoring entries until usage reaches the targets.

    Ties keep the older entry evicted first.
    """
    ranked = sorted(
        entries, key=lambda e: (keep_score(e, now, config.weights), e.created_at)
    )
    victims: list[CacheEntryInfo] = []
    size, count = total_size, item_count
    for entry in ranked:
        if size <= config.target_size_bytes and count <= config.target_items:
            break
        victims.append(entry)
        size -= entry.size_bytes
        count -= 1
    return victims


__all__ = [
    "MIN_AGE_SECONDS",
    "keep_score",
    "needs_eviction",
    "select_victims",
]
