"""Persistent cache for SwatchKit.

Memoizes search results and stores externally-sourced assets (fonts and the
like) for presentation layers.

Key features:
- Scope isolation (``{prefix}{scope}:{key}``)
- Expiry from creation time
- Transparent gzip compression above a size threshold
- Hybrid LRU/size/age eviction scoring
- Statistics that survive restarts
- Fail-open semantics (storage errors are misses)
"""

from swatchkit.core.caching.backends.null import NullAssetCache
from swatchkit.core.caching.backends.sqlite import SQLiteCacheStorage
from swatchkit.core.caching.eviction import keep_score, needs_eviction, select_victims
from swatchkit.core.caching.fingerprint import compute_fingerprint, make_cache_key
from swatchkit.core.caching.manager import PersistentCache
from swatchkit.core.caching.models import (
    CacheConfig,
    CachedAsset,
    CacheEntry,
    CacheEntryInfo,
    CacheEntryMetadata,
    CacheKey,
    CacheStats,
    EvictionWeights,
)
from swatchkit.core.caching.protocols import AssetCache, CacheStorage
from swatchkit.core.caching.stats import CacheStatsCounter

__all__ = [
    # Core
    "AssetCache",
    "CacheStorage",
    "PersistentCache",
    # Models
    "CacheConfig",
    "CacheEntry",
    "CacheEntryInfo",
    "CacheEntryMetadata",
    "CacheKey",
    "CacheStats",
    "CachedAsset",
    "EvictionWeights",
    # Backends
    "NullAssetCache",
    "SQLiteCacheStorage",
    # Utils
    "CacheStatsCounter",
    "compute_fingerprint",
    "keep_score",
    "make_cache_key",
    "needs_eviction",
    "select_victims",
]
