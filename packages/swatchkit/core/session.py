"""SwatchKit session coordinator.

The session owns the long-lived components and wires them from one AppConfig:
- Task executor (worker pool sized from config or the host)
- Persistent cache scoped to the device fingerprint
- Validation and search engines
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from swatchkit.core.caching import NullAssetCache, PersistentCache
from swatchkit.core.caching.models import CacheStats
from swatchkit.core.caching.protocols import AssetCache
from swatchkit.core.color import ColorLike, ContrastResult, TextSize, WcagLevel, check_compliance
from swatchkit.core.config.models import AppConfig
from swatchkit.core.device import device_fingerprint
from swatchkit.core.executor import ExecutorStats, TaskExecutor
from swatchkit.core.search import SearchResult, SwatchSearchEngine
from swatchkit.core.validation import (
    SwatchInput,
    ValidationEngine,
    ValidationOptions,
    ValidationReport,
)

logger = logging.getLogger(__name__)


class SessionStatus(BaseModel):
    """Point-in-time view of a session."""

    model_config = ConfigDict(frozen=True)

    started: bool
    scope_key: str | None = Field(default=None, description="Cache scope in use")
    cache_enabled: bool
    executor: ExecutorStats
    cache: CacheStats
    rules: list[str] = Field(default_factory=list)


class SwatchSession:
    """Lifecycle owner for the executor, cache and engines.

    Components are created lazily on first access; ``start()`` initializes
    the executor and opens the cache.

    Example:
        >>> async with SwatchSession() as session:
        ...     result = await session.search_swatches(["white", "black", "navy"], arity=2)
    """

    def __init__(
        self,
        app_config: AppConfig | Path | str | None = None,
        *,
        scope_key: str | None = None,
    ) -> None:
        """Initialize session with config.

        Args:
            app_config: AppConfig instance, path, or None (uses default path)
            scope_key: Cache scope. Defaults to the device fingerprint.

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
            ValidationError: If config is invalid
        """
        self.app_config: AppConfig = self._resolve_config(app_config)
        self._scope_key = scope_key
        self._started = False
        logger.debug(
            f"Session created: workers={self.app_config.executor.max_threads}, "
            f"cache={'on' if self.app_config.cache.enabled else 'off'}"
        )

    @staticmethod
    def _resolve_config(value: Any) -> AppConfig:
        if value is None:
            return AppConfig.load_or_default()
        elif isinstance(value, (Path, str)):
            return AppConfig.load_or_default(Path(value))
        elif isinstance(value, AppConfig):
            return value
        else:
            raise TypeError(f"Expected AppConfig, Path, str, or None; got {type(value).__name__}")

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def executor(self) -> TaskExecutor:
        """Task executor (lazy). Not initialized until ``start()``."""
        if not hasattr(self, "_executor"):
            cfg = self.app_config.executor
            self._executor = TaskExecutor(max_workers=cfg.max_threads, backend=cfg.backend)
        return self._executor

    @property
    def cache(self) -> AssetCache:
        """Persistent cache, or a null cache when disabled (lazy)."""
        if not hasattr(self, "_cache"):
            cache: AssetCache
            if self.app_config.cache.enabled:
                cache = PersistentCache(self.app_config.cache)
            else:
                cache = NullAssetCache()
            self._cache = cache
        return self._cache

    @property
    def validation_engine(self) -> ValidationEngine:
        if not hasattr(self, "_validation_engine"):
            self._validation_engine = ValidationEngine()
        return self._validation_engine

    @property
    def search_engine(self) -> SwatchSearchEngine:
        if not hasattr(self, "_search_engine"):
            engine_cfg = self.app_config.engine
            self._search_engine = SwatchSearchEngine(
                self.executor,
                cache=self.cache,
                batch_size=engine_cfg.batch_size,
                exhaustive_orderings=engine_cfg.exhaustive_orderings,
            )
        return self._search_engine

    @property
    def scope_key(self) -> str:
        if self._scope_key is None:
            self._scope_key = device_fingerprint()
        return self._scope_key

    @property
    def started(self) -> bool:
        return self._started

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Initialize the executor and open the cache. Idempotent."""
        if self._started:
            return
        self.executor.initialize()
        if not await self.cache.initialize(self.scope_key):
            logger.warning("Cache unavailable; continuing without persistence")
        self._started = True
        logger.info("Session started (scope %s)", self.scope_key)

    async def shutdown(self) -> None:
        """Stop the executor and close the cache."""
        if not self._started:
            return
        await self.executor.shutdown()
        await self.cache.close()
        # A terminated pool cannot be reused; start() builds a fresh one
        del self._executor
        if hasattr(self, "_search_engine"):
            del self._search_engine
        self._started = False
        logger.info("Session shut down")

    async def __aenter__(self) -> SwatchSession:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _level(self, level: WcagLevel | str | None) -> WcagLevel:
        return WcagLevel(level) if level is not None else self.app_config.engine.wcag_level

    def _text_size(self, text_size: TextSize | str | None) -> TextSize:
        return TextSize(text_size) if text_size is not None else self.app_config.engine.text_size

    def contrast(
        self,
        color1: ColorLike,
        color2: ColorLike,
        level: WcagLevel | str | None = None,
        text_size: TextSize | str | None = None,
    ) -> ContrastResult:
        """Check a pair against the configured (or given) WCAG threshold."""
        return check_compliance(color1, color2, self._level(level), self._text_size(text_size))

    def default_validation_options(self) -> ValidationOptions:
        engine_cfg = self.app_config.engine
        return ValidationOptions(
            wcag_level=engine_cfg.wcag_level,
            text_size=engine_cfg.text_size,
            min_colors=engine_cfg.min_colors,
            max_colors=engine_cfg.max_colors,
        )

    def validate_swatch(self, colors: SwatchInput, **overrides: Any) -> ValidationReport:
        """Validate with configured defaults; keyword arguments override them."""
        return self.validation_engine.validate_swatch(
            colors, self.default_validation_options(), **overrides
        )

    async def search_swatches(
        self,
        palette: list[ColorLike],
        arity: int,
        wcag_level: WcagLevel | str | None = None,
        text_size: TextSize | str | None = None,
        exhaustive: bool | None = None,
        use_cache: bool = True,
    ) -> SearchResult:
        """Search the palette; starts the session if needed."""
        await self.start()
        return await self.search_engine.search(
            palette,
            arity,
            wcag_level=self._level(wcag_level),
            text_size=self._text_size(text_size),
            exhaustive=exhaustive,
            use_cache=use_cache,
        )

    def status(self) -> SessionStatus:
        return SessionStatus(
            started=self._started,
            scope_key=self._scope_key,
            cache_enabled=self.app_config.cache.enabled,
            executor=self.executor.stats(),
            cache=self.cache.stats(),
            rules=self.validation_engine.registry.registered_ids,
        )


__all__ = [
    "SessionStatus",
    "SwatchSession",
]
