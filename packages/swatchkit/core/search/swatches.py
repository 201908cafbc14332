"""Building, ranking and filtering swatches."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Sequence

from swatchkit.core.color.contrast import adjacent_contrasts
from swatchkit.core.color.models import Color, TextSize, WcagLevel
from swatchkit.core.color.parser import ColorLike, parse_color, try_parse_color
from swatchkit.core.errors import DuplicateError, RangeError
from swatchkit.core.search.models import SwatchCriteria
from swatchkit.core.validation.models import MAX_SWATCH_COLORS, MIN_SWATCH_COLORS, Swatch


def swatch_id(colors: Sequence[Color]) -> str:
    """Deterministic id for an ordered color sequence."""
    joined = "|".join(c.hex for c in colors)
    return "sw_" + hashlib.sha256(joined.encode("ascii")).hexdigest()[:12]


def build_swatch(
    colors: Sequence[ColorLike],
    level: WcagLevel | str = WcagLevel.AA,
    text_size: TextSize | str = TextSize.NORMAL,
) -> Swatch:
    """Build and evaluate a swatch from an ordered color list.

    Raises:
        RangeError: If fewer than 2 or more than 7 colors are given.
        FormatError: If a color cannot be parsed.
        DuplicateError: If two entries share a canonical color.
    """
    if not MIN_SWATCH_COLORS <= len(colors) <= MAX_SWATCH_COLORS:
        raise RangeError(len(colors), MIN_SWATCH_COLORS, MAX_SWATCH_COLORS, what="swatch size")

    parsed = [parse_color(c) for c in colors]
    seen: set[str] = set()
    duplicates: list[str] = []
    for color in parsed:
        if color.hex in seen and color.hex not in duplicates:
            duplicates.append(color.hex)
        seen.add(color.hex)
    if duplicates:
        raise DuplicateError(duplicates)

    summary = adjacent_contrasts(parsed, level, text_size)
    return Swatch(
        id=swatch_id(parsed),
        colors=tuple(parsed),
        wcag_level=WcagLevel(level),
        text_size=TextSize(text_size),
        adjacent_contrasts=tuple(summary.pairs),
        overall_rating=summary.lowest_ratio or 1.0,
        compliant=summary.all_compliant,
    )


def rank_swatches(swatches: Iterable[Swatch]) -> list[Swatch]:
    """Sort by overall rating, best first. Ties keep their input order."""
    return sorted(swatches, key=lambda s: s.overall_rating, reverse=True)


def best_swatch(swatches: Iterable[Swatch]) -> Swatch | None:
    """Highest-rated swatch, earliest on ties; None for no swatches."""
    best: Swatch | None = None
    for swatch in swatches:
        if best is None or swatch.overall_rating > best.overall_rating:
            best = swatch
    return best


def _canonical_set(colors: Iterable[str]) -> set[Color]:
    result: set[Color] = set()
    for value in colors:
        parsed = try_parse_color(value)
        if parsed is not None:
            result.add(parsed)
    return result


def filter_swatches(swatches: Iterable[Swatch], criteria: SwatchCriteria | None = None) -> list[Swatch]:
    """Filter and optionally sort swatches.

    Unparseable entries in ``include_colors``/``exclude_colors`` are ignored.
    """
    c = criteria or SwatchCriteria()
    include = _canonical_set(c.include_colors)
    exclude = _canonical_set(c.exclude_colors)

    selected: list[Swatch] = []
    for swatch in swatches:
        if c.color_count is not None and swatch.size != c.color_count:
            continue
        if c.wcag_level is not None and swatch.wcag_level != c.wcag_level:
            continue
        if c.min_rating is not None and swatch.overall_rating < c.min_rating:
            continue
        if c.max_rating is not None and swatch.overall_rating > c.max_rating:
            continue
        members = set(swatch.colors)
        if not include <= members or exclude & members:
            continue
        selected.append(swatch)

    if c.sort == "rating_desc":
        selected = rank_swatches(selected)
    elif c.sort == "rating_asc":
        selected = sorted(selected, key=lambda s: s.overall_rating)

    if c.limit is not None:
        selected = selected[: c.limit]
    return selected


__all__ = [
    "best_swatch",
    "build_swatch",
    "filter_swatches",
    "rank_swatches",
    "swatch_id",
]
