"""Functional entry points for one-off use.

These wrap the engines with default configuration. Long-running callers should
hold a SwatchSession instead so the worker pool and cache are reused.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from swatchkit.core.color import (
    Color,
    ColorLike,
    ContrastResult,
    TextSize,
    WcagLevel,
    check_compliance,
)
from swatchkit.core.color import parse_color as _parse_color
from swatchkit.core.executor import TaskExecutor
from swatchkit.core.search import SearchResult, SwatchSearchEngine
from swatchkit.core.utils.logging import log_performance
from swatchkit.core.validation import (
    SwatchInput,
    ValidationEngine,
    ValidationOptions,
    ValidationReport,
)

logger = logging.getLogger(__name__)

_engine: ValidationEngine | None = None


def _validation_engine() -> ValidationEngine:
    global _engine
    if _engine is None:
        _engine = ValidationEngine()
    return _engine


def parse_color(text: ColorLike) -> Color:
    """Parse hex (3 or 6 digit, ``#`` optional) or an HTML color name.

    Raises:
        FormatError: If the input is not a recognizable color.
    """
    return _parse_color(text)


def contrast(
    color1: ColorLike,
    color2: ColorLike,
    level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
) -> ContrastResult:
    """Contrast ratio of a pair and whether it meets the given threshold.

    Raises:
        FormatError: If either color cannot be parsed.
    """
    return check_compliance(color1, color2, level, text_size)


def validate_swatch(colors: SwatchInput | str, **options: Any) -> ValidationReport:
    """Validate a swatch with the built-in rules.

    Data problems (bad colors, duplicates, wrong count, low contrast) are
    reported in the returned report, never raised. Invalid options raise
    ``pydantic.ValidationError``.

    Args:
        colors: Color entries, a Swatch, or a single color string.
        **options: ValidationOptions fields, e.g. ``wcag_level="AAA"``.
    """
    opts = ValidationOptions(**options)
    if isinstance(colors, str):
        colors = [colors]
    try:
        entries = list(colors)
    except TypeError:
        logger.debug("validate_swatch got non-iterable %s", type(colors).__name__)
        return ValidationReport(
            valid=False,
            errors=[f"Expected a sequence of colors, got {type(colors).__name__}"],
        )
    return _validation_engine().validate_swatch(entries, opts)


@log_performance
async def search_swatches(
    palette: Sequence[ColorLike],
    arity: int,
    wcag_level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
    max_workers: int | None = None,
) -> SearchResult:
    """Search a palette on a short-lived executor, without a cache.

    Raises:
        RangeError: If arity is outside [2, 7].
    """
    async with TaskExecutor(max_workers=max_workers) as executor:
        engine = SwatchSearchEngine(executor)
        return await engine.search(palette, arity, wcag_level, text_size, use_cache=False)


__all__ = [
    "contrast",
    "parse_color",
    "search_swatches",
    "validate_swatch",
]
