"""Application configuration models."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from swatchkit.core.caching.models import CacheConfig
from swatchkit.core.color.models import TextSize, WcagLevel
from swatchkit.core.device import MAX_WORKERS, MIN_WORKERS, detect_concurrency
from swatchkit.core.search.models import DEFAULT_BATCH_SIZE
from swatchkit.core.utils.logging import DEFAULT_FORMAT
from swatchkit.core.validation.models import MAX_SWATCH_COLORS, MIN_SWATCH_COLORS


def default_cache_path() -> Path:
    """Default SQLite cache location (``$XDG_CACHE_HOME/swatchkit/cache.db``)."""
    base = os.environ.get("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return root / "swatchkit" / "cache.db"


class ConfigBase(BaseModel):
    """Base class for file-backed configurations.

    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path, falling back to the default path.

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
            ValidationError: If config is invalid
        """
        from swatchkit.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
            if not Path(path).exists():
                return cls()
        return cls.model_validate(load_config(path))


class EngineConfig(BaseModel):
    """Defaults for validation and search."""

    model_config = ConfigDict(extra="forbid")

    wcag_level: WcagLevel = WcagLevel.AA
    text_size: TextSize = TextSize.NORMAL
    min_colors: int = Field(default=MIN_SWATCH_COLORS, ge=1, le=MAX_SWATCH_COLORS)
    max_colors: int = Field(default=5, ge=1, le=MAX_SWATCH_COLORS)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1, description="Orderings per task")
    exhaustive_orderings: bool = Field(
        default=False, description="Try every cyclic arrangement of each subset"
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.min_colors > self.max_colors:
            raise ValueError(
                f"min_colors ({self.min_colors}) must not exceed max_colors ({self.max_colors})"
            )
        return self


class ExecutorConfig(BaseModel):
    """Task executor settings."""

    model_config = ConfigDict(extra="forbid")

    max_threads: int = Field(default_factory=detect_concurrency, ge=MIN_WORKERS, le=MAX_WORKERS)
    backend: Literal["thread", "process"] = "thread"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = DEFAULT_FORMAT
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file; stdout when unset")


def _default_cache_config() -> CacheConfig:
    return CacheConfig(db_path=default_cache_path())


class AppConfig(ConfigBase):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    engine: EngineConfig = Field(default_factory=EngineConfig)
    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    cache: CacheConfig = Field(default_factory=_default_cache_config)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("swatchkit.yaml")


__all__ = [
    "AppConfig",
    "ConfigBase",
    "EngineConfig",
    "ExecutorConfig",
    "LoggingConfig",
    "default_cache_path",
]
