"""Search request, statistics and result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from swatchkit.core.color.models import TextSize, WcagLevel
from swatchkit.core.validation.models import MAX_SWATCH_COLORS, MIN_SWATCH_COLORS, Swatch

DEFAULT_BATCH_SIZE = 100


class SearchStats(BaseModel):
    """Counters for one search.

    Attributes:
        total_combinations: C(n, k) over the de-duplicated palette.
        generated: Subsets visited.
        validated: Orderings checked for compliance.
        compliant: Orderings that passed.
        duplicates_skipped: Orderings skipped as rotations of one already tried.
        failed: Palette entries that failed to parse plus orderings in failed batches.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_combinations: int = 0
    generated: int = 0
    validated: int = 0
    compliant: int = 0
    duplicates_skipped: int = 0
    failed: int = 0


class SearchResult(BaseModel):
    """Compliant swatches in combination-generation order plus statistics."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    valid_swatches: list[Swatch] = Field(default_factory=list)
    stats: SearchStats = Field(default_factory=SearchStats)
    arity: int
    wcag_level: WcagLevel = WcagLevel.AA
    text_size: TextSize = TextSize.NORMAL
    processing_ms: float = 0.0
    fingerprint: str | None = Field(default=None, description="Cache fingerprint of the request")
    from_cache: bool = False


class SearchRequest(BaseModel):
    """Normalized search inputs; also the cache fingerprint payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    palette: tuple[str, ...] = Field(description="Canonical hex values, first occurrence order")
    arity: int = Field(ge=MIN_SWATCH_COLORS, le=MAX_SWATCH_COLORS)
    wcag_level: WcagLevel = WcagLevel.AA
    text_size: TextSize = TextSize.NORMAL
    exhaustive: bool = False


class SwatchCriteria(BaseModel):
    """Filter and sort options for ``filter_swatches``.

    Attributes:
        color_count: Keep swatches of exactly this size.
        wcag_level: Keep swatches checked against this level.
        min_rating: Keep swatches whose overall rating is at least this.
        max_rating: Keep swatches whose overall rating is at most this.
        include_colors: Every listed color must be present.
        exclude_colors: None of the listed colors may be present.
        sort: Order by overall rating; ``None`` keeps input order.
        limit: Keep at most this many after sorting.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    color_count: int | None = Field(default=None, ge=MIN_SWATCH_COLORS, le=MAX_SWATCH_COLORS)
    wcag_level: WcagLevel | None = None
    min_rating: float | None = None
    max_rating: float | None = None
    include_colors: tuple[str, ...] = ()
    exclude_colors: tuple[str, ...] = ()
    sort: Literal["rating_desc", "rating_asc"] | None = None
    limit: int | None = Field(default=None, ge=1)


__all__ = [
    "DEFAULT_BATCH_SIZE",
    "SearchRequest",
    "SearchResult",
    "SearchStats",
    "SwatchCriteria",
]
