"""Read swatchkit.yaml / swatchkit.json into a validated AppConfig."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import IO, Any

import yaml

from swatchkit.core.config.models import AppConfig
from swatchkit.core.utils.logging import configure_logging as _configure_root_logging

logger = logging.getLogger(__name__)

# Searched in order when no path is given
DEFAULT_CONFIG_PATHS = (Path("swatchkit.yaml"), Path("swatchkit.yml"), Path("swatchkit.json"))

ENV_LOG_LEVEL = "SWATCHKIT_LOG_LEVEL"
ENV_CACHE_DB = "SWATCHKIT_CACHE_DB"
ENV_MAX_THREADS = "SWATCHKIT_MAX_THREADS"

_FORMATS_BY_SUFFIX = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}

_PARSERS: dict[str, tuple[Callable[[IO[str]], Any], type[Exception]]] = {
    "json": (json.load, json.JSONDecodeError),
    "yaml": (yaml.safe_load, yaml.YAMLError),
}


def detect_format(file_path: Path | str) -> str:
    """Map a config file extension to ``"json"`` or ``"yaml"``.

    Raises:
        ValueError: For any other extension.

    Example:
        >>> detect_format("swatchkit.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()
    try:
        return _FORMATS_BY_SUFFIX[suffix]
    except KeyError:
        raise ValueError(f"Unsupported config format: {suffix or '(none)'}") from None


def load_config(path: str | Path) -> dict[str, Any]:
    """Parse a config file into a plain mapping.

    An empty file yields ``{}``.

    Raises:
        FileNotFoundError: If the file is missing.
        ValueError: On an unknown extension, a parse error, or a root that is
            not a mapping.
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Config file not found: {source}")

    fmt = detect_format(source)
    parse, parse_error = _PARSERS[fmt]
    with source.open(encoding="utf-8") as fh:
        try:
            content = parse(fh)
        except parse_error as e:
            raise ValueError(f"Invalid {fmt.upper()} in {source}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Config root in {source} must be a mapping, got {type(content).__name__}")
    return content


def find_config_path(candidates: tuple[Path, ...] = DEFAULT_CONFIG_PATHS) -> Path | None:
    """Return the first existing default config file, if any."""
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(config: AppConfig, environ: Mapping[str, str]) -> AppConfig:
    updates: dict[str, Any] = {}

    level = environ.get(ENV_LOG_LEVEL)
    if level:
        updates["logging"] = config.logging.model_copy(update={"level": level.upper()})

    db_path = environ.get(ENV_CACHE_DB)
    if db_path:
        updates["cache"] = config.cache.model_copy(update={"db_path": Path(db_path)})

    threads = environ.get(ENV_MAX_THREADS)
    if threads:
        updates["executor"] = config.executor.model_copy(update={"max_threads": int(threads)})

    if not updates:
        return config
    logger.debug("Applying environment overrides: %s", sorted(updates))
    # Round-trip so overridden values are validated
    merged = config.model_copy(update=updates)
    return AppConfig.model_validate(merged.model_dump())


def load_app_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> AppConfig:
    """Build the AppConfig from a file (or defaults) plus environment overrides.

    ``SWATCHKIT_LOG_LEVEL``, ``SWATCHKIT_CACHE_DB`` and
    ``SWATCHKIT_MAX_THREADS`` override the file values.

    Args:
        path: Path to app config file. When None the first of
            swatchkit.yaml, swatchkit.yml and swatchkit.json in the working
            directory is used, or defaults if none exists.
        environ: Environment mapping; ``os.environ`` when None.

    Returns:
        Validated AppConfig; missing sections take their defaults.

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValidationError: If config is invalid
    """
    resolved = Path(path) if path is not None else find_config_path()

    if resolved is not None:
        config = AppConfig.model_validate(load_config(resolved))
        logger.debug("Loaded app config from %s", resolved)
    else:
        config = AppConfig()

    return _apply_env_overrides(config, os.environ if environ is None else environ)


def configure_logging(config: AppConfig | None = None) -> None:
    """Apply the ``logging`` section of ``config`` (or the discovered config)."""
    section = (config if config is not None else load_app_config()).logging
    _configure_root_logging(
        level=section.level,
        format_string=section.format,
        filename=section.filename,
        structured=section.structured,
    )


__all__ = [
    "DEFAULT_CONFIG_PATHS",
    "configure_logging",
    "detect_format",
    "find_config_path",
    "load_app_config",
    "load_config",
]
