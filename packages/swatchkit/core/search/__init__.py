"""Swatch search: combinatorial enumeration with rotation-invariant dedup."""

from swatchkit.core.search.combinatorics import (
    Ordering,
    PlanCounters,
    RotationMemo,
    canonical_rotation,
    count_combinations,
    iter_orderings,
    plan_orderings,
    rotations,
)
from swatchkit.core.search.engine import SEARCH_STEP_ID, SEARCH_STEP_VERSION, SwatchSearchEngine
from swatchkit.core.search.models import (
    DEFAULT_BATCH_SIZE,
    SearchRequest,
    SearchResult,
    SearchStats,
    SwatchCriteria,
)
from swatchkit.core.search.swatches import (
    best_swatch,
    build_swatch,
    filter_swatches,
    rank_swatches,
    swatch_id,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "Ordering",
    "PlanCounters",
    "RotationMemo",
    "SEARCH_STEP_ID",
    "SEARCH_STEP_VERSION",
    "SearchRequest",
    "SearchResult",
    "SearchStats",
    "SwatchCriteria",
    "SwatchSearchEngine",
    "best_swatch",
    "build_swatch",
    "canonical_rotation",
    "count_combinations",
    "filter_swatches",
    "iter_orderings",
    "plan_orderings",
    "rank_swatches",
    "rotations",
    "swatch_id",
]
