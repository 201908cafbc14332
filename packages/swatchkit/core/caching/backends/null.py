"""No-op cache used when caching is disabled.

Always reports a miss and discards stores.
"""

from collections.abc import Mapping
from typing import Any

from swatchkit.core.caching.models import CachedAsset, CacheStats


class NullAssetCache:
    """
    No-op async cache with the PersistentCache surface.

    Every lookup is a miss; every store is dropped and reported as not stored.
    """

    def __init__(self) -> None:
        self.scope_key: str | None = None

    async def initialize(self, scope_key: str) -> bool:
        """Record the scope and report ready."""
        self.scope_key = scope_key
        return True

    async def store(
        self, key: str, data: bytes | str, metadata: Mapping[str, Any] | None = None
    ) -> bool:
        """Discard (async)."""
        return False

    async def retrieve(self, key: str) -> CachedAsset | None:
        """Always returns None (async)."""
        return None

    async def has(self, key: str) -> bool:
        """Always returns False (async)."""
        return False

    async def remove(self, key: str) -> bool:
        """No-op (async)."""
        return True

    async def clear(self) -> bool:
        """No-op (async)."""
        return True

    async def cleanup(self, urgent: bool = False) -> int:
        """Nothing to remove (async)."""
        return 0

    def stats(self) -> CacheStats:
        return CacheStats()

    async def close(self) -> None:
        """No-op (async)."""
        pass
