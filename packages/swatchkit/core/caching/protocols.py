"""Protocols for the persistent cache.

``AssetCache`` is the async surface callers use; ``CacheStorage`` is the
blocking durable store behind it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from swatchkit.core.caching.models import CacheEntry, CacheEntryInfo, CachedAsset, CacheStats


class AssetCache(Protocol):
    """
    Protocol for scoped asset caches (async-first).

    All implementations must support:
    - Scope isolation (keys of one scope are invisible to another)
    - Expiry measured from creation time
    - Miss-on-error semantics (storage failure -> miss / False / 0)
    """

    async def initialize(self, scope_key: str) -> bool:
        """
        Open the cache for a scope.

        Args:
            scope_key: Opaque per-caller/per-device identity

        Returns:
            True if the cache is ready
        """
        ...

    async def store(
        self, key: str, data: bytes | str, metadata: Mapping[str, Any] | None = None
    ) -> bool:
        """Store a payload; False on failure."""
        ...

    async def retrieve(self, key: str) -> CachedAsset | None:
        """Payload, metadata and creation time, or None on miss/expiry/error."""
        ...

    async def has(self, key: str) -> bool:
        """True if an unexpired entry exists."""
        ...

    async def remove(self, key: str) -> bool:
        """Delete an entry; True unless storage failed."""
        ...

    async def clear(self) -> bool:
        """Delete every entry of the scope and reset its statistics."""
        ...

    async def cleanup(self, urgent: bool = False) -> int:
        """Purge expired entries, then evict if over budget; returns count removed."""
        ...

    def stats(self) -> CacheStats:
        """Current statistics for the scope."""
        ...

    async def close(self) -> None:
        """Release the underlying store."""
        ...


class CacheStorage(Protocol):
    """Blocking durable store used by PersistentCache. Raises CacheIOError."""

    def open(self) -> None: ...

    def close(self) -> None: ...

    def ensure_scope(self, scope: str) -> None: ...

    def load_stats(self, scope: str) -> CacheStats: ...

    def record_lookups(self, scope: str, hits: int = 0, misses: int = 0) -> None: ...

    def get(self, key: str) -> CacheEntry | None: ...

    def put(self, entry: CacheEntry) -> tuple[int, int]: ...

    def touch(self, key: str, now: float) -> None: ...

    def delete(self, key: str) -> int | None: ...

    def delete_many(self, keys: Iterable[str]) -> int: ...

    def list_entries(self, scope: str) -> list[CacheEntryInfo]: ...

    def clear_scope(self, scope: str) -> int: ...
