"""Models for the persistent cache.

Provides configuration, entry, statistics and key models.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

SECONDS_PER_DAY = 86_400
DEFAULT_MAX_AGE_SECONDS = 7 * SECONDS_PER_DAY
DEFAULT_MAX_SIZE_BYTES = 100 * 1024 * 1024


class CacheKey(BaseModel):
    """
    Stable identifier for a memoized computation.

    Combines:
    - Step identity (id + version)
    - Input fingerprint (SHA256 of canonicalized inputs)
    """

    model_config = ConfigDict(frozen=True)

    step_id: str = Field(description="Stable step identifier (e.g., 'search.swatches')")
    step_version: str = Field(description="Step version string (bump on logic/schema changes)")
    input_fingerprint: str = Field(description="SHA256 hex digest of canonicalized inputs")

    @property
    def storage_key(self) -> str:
        """Logical key passed to the cache."""
        return f"{self.step_id}:{self.step_version}:{self.input_fingerprint}"

    def __str__(self) -> str:
        return f"{self.step_id}:{self.step_version}:{self.input_fingerprint[:12]}"


class EvictionWeights(BaseModel):
    """Weights of the keep-score.

    ``score = (access_count / age_days) * access
    - seconds_since_last_access * recency - size_kib * size``
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    access: float = Field(default=1000.0, ge=0)
    recency: float = Field(default=1.0, ge=0)
    size: float = Field(default=1.0, ge=0)


class CacheConfig(BaseModel):
    """Persistent cache configuration.

    Args:
        enabled: Use the SQLite cache; a null cache is used otherwise.
        db_path: SQLite database file. None keeps the store in memory.
        key_prefix: Prefix of every stored key.
        max_age_seconds: Entry lifetime measured from creation.
        max_size_bytes: Size budget for one scope.
        compression_enabled: Gzip payloads above the threshold.
        compression_threshold: Minimum payload size (bytes) to compress.
        max_items: Item count that triggers eviction.
        target_items: Item count eviction shrinks to.
        cleanup_threshold: Fraction of max_size that triggers eviction.
        target_fraction: Fraction of max_size eviction shrinks to.
        urgent_entry_fraction: A single entry above this fraction of
            max_size triggers an urgent cleanup before it is written.
        auto_cleanup: Run cleanup after a store pushes usage past the thresholds.
        enable_wal: Enable SQLite WAL journal mode.
        weights: Eviction score weights.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    db_path: Path | None = None
    key_prefix: str = "wcag_"
    max_age_seconds: float = Field(default=DEFAULT_MAX_AGE_SECONDS, gt=0)
    max_size_bytes: int = Field(default=DEFAULT_MAX_SIZE_BYTES, gt=0)
    compression_enabled: bool = True
    compression_threshold: int = Field(default=1024, ge=0)
    max_items: int = Field(default=1000, ge=1)
    target_items: int = Field(default=800, ge=0)
    cleanup_threshold: float = Field(default=0.9, gt=0, le=1.0)
    target_fraction: float = Field(default=0.7, gt=0, le=1.0)
    urgent_entry_fraction: float = Field(default=0.1, gt=0, le=1.0)
    auto_cleanup: bool = True
    enable_wal: bool = True
    weights: EvictionWeights = Field(default_factory=EvictionWeights)

    @model_validator(mode="after")
    def _check_targets(self) -> CacheConfig:
        if self.target_items > self.max_items:
            raise ValueError("target_items cannot exceed max_items")
        if self.target_fraction > self.cleanup_threshold:
            raise ValueError("target_fraction cannot exceed cleanup_threshold")
        return self

    @property
    def target_size_bytes(self) -> int:
        return int(self.max_size_bytes * self.target_fraction)

    @property
    def cleanup_size_bytes(self) -> int:
        return int(self.max_size_bytes * self.cleanup_threshold)


class CacheEntryMetadata(BaseModel):
    """Entry metadata. Caller-supplied extras are kept alongside the fixed fields."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = "unknown"
    original_size: int = 0
    compressed_size: int = 0
    compressed: bool = False


class CacheEntryInfo(BaseModel):
    """Entry bookkeeping without the payload; what eviction scores."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    created_at: float
    last_accessed_at: float
    access_count: int = Field(default=0, ge=0)
    size_bytes: int = Field(default=0, ge=0)

    def is_expired(self, now: float, max_age_seconds: float) -> bool:
        return now - self.created_at > max_age_seconds


class CacheEntry(CacheEntryInfo):
    """A stored entry: payload bytes (possibly compressed) plus metadata."""

    scope: str
    data: bytes
    metadata: CacheEntryMetadata = Field(default_factory=CacheEntryMetadata)


class CachedAsset(BaseModel):
    """Result of a cache retrieve."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: bytes
    metadata: CacheEntryMetadata
    created_at: float

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)


class CacheStats(BaseModel):
    """Aggregate cache statistics for one scope."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    hits: int = 0
    misses: int = 0
    total_size: int = 0
    item_count: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CacheEntryInfo",
    "CacheEntryMetadata",
    "CacheKey",
    "CacheStats",
    "CachedAsset",
    "DEFAULT_MAX_AGE_SECONDS",
    "DEFAULT_MAX_SIZE_BYTES",
    "EvictionWeights",
    "SECONDS_PER_DAY",
]
