"""Logging configuration utilities for SwatchKit.

Provides centralized logging configuration with:
- Output to stdout or a file
- Custom format strings or structured JSON lines
- Context-aware logging with LoggerAdapter
"""

from __future__ import annotations

import functools
import inspect
import json
import logging
import sys
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

PERFORMANCE_LOGGER = "swatchkit.performance"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else arrived via ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_RECORD_FIELDS = (
    ("logger_name", "name"),
    ("module", "module"),
    ("function", "funcName"),
    ("line", "lineno"),
    ("thread_name", "threadName"),
    ("process", "process"),
)


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per record: level, message, UTC timestamp and a
    ``context`` mapping with the call site, exception details and any
    ``extra`` fields."""

    def _exception_context(self, record: logging.LogRecord) -> dict[str, Any]:
        if not record.exc_info:
            return {}
        exc_type, exc, _ = record.exc_info
        return {
            "error_type": exc_type.__name__ if exc_type else None,
            "error_message": str(exc) if exc else None,
            "stack_trace": record.exc_text or self.formatException(record.exc_info),
        }

    def format(self, record: logging.LogRecord) -> str:
        context = {key: getattr(record, attr) for key, attr in _RECORD_FIELDS}
        context.update(self._exception_context(record))
        context.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        created = datetime.fromtimestamp(record.created, tz=UTC)
        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": created.isoformat(),
                "context": context,
            },
            default=str,
        )


def _suppress_noisy_loggers() -> None:
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure application-wide logging.

    Can be called multiple times; each call replaces the root handlers.

    Args:
        level: Logging level name, case-insensitive.
        format_string: Format for text output. Ignored if structured=True.
        filename: Path to log file. If None, logs to stdout.
        structured: Emit JSON lines instead of text.

    Raises:
        ValueError: If ``level`` is not a logging level name.

    Examples:
        >>> configure_logging(level="DEBUG", structured=True, filename="swatchkit.jsonl")
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    handler: logging.Handler = (
        logging.FileHandler(filename, encoding="utf-8")
        if filename
        else logging.StreamHandler(sys.stdout)
    )
    if structured:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    logging.basicConfig(level=numeric, handlers=[handler], force=True)
    _suppress_noisy_loggers()


def get_logger(name: str, **kwargs: Any) -> logging.Logger | logging.LoggerAdapter:
    """Logger for ``name``; keyword context (scope, task_id, ...) yields a
    LoggerAdapter that stamps it on every record."""
    base = logging.getLogger(name)
    return logging.LoggerAdapter(base, kwargs) if kwargs else base


def log_performance(func: F) -> F:
    """Log the wall time of each call at DEBUG. Works on sync and async functions."""
    perf_logger = logging.getLogger(PERFORMANCE_LOGGER)

    def _report(started: float) -> None:
        perf_logger.debug(
            f"Function {func.__qualname__!r} took {time.perf_counter() - started:.4f} seconds"
        )

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                _report(started)

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            _report(started)

    return wrapper  # type: ignore[return-value]


__all__ = [
    "DEFAULT_FORMAT",
    "PERFORMANCE_LOGGER",
    "StructuredJSONFormatter",
    "configure_logging",
    "get_logger",
    "log_performance",
]
