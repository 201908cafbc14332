"""Configuration management for SwatchKit."""

from swatchkit.core.config.loader import (
    configure_logging,
    detect_format,
    find_config_path,
    load_app_config,
    load_config,
)
from swatchkit.core.config.models import (
    AppConfig,
    ConfigBase,
    EngineConfig,
    ExecutorConfig,
    LoggingConfig,
    default_cache_path,
)

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "find_config_path",
    "detect_format",
    "configure_logging",
    # Models
    "AppConfig",
    "ConfigBase",
    "EngineConfig",
    "ExecutorConfig",
    "LoggingConfig",
    "default_cache_path",
]
