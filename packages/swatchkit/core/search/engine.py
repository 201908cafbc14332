"""Swatch search engine.

Enumerates arity-sized subsets of a palette, keeps one ordering per rotation
class, validates orderings in batches on the task executor and collects the
compliant ones as swatches. Results are optionally memoized in the persistent
cache under a fingerprint of the request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from swatchkit.core.caching.fingerprint import make_cache_key
from swatchkit.core.caching.models import CacheKey
from swatchkit.core.caching.protocols import AssetCache
from swatchkit.core.color.models import Color, TextSize, WcagLevel
from swatchkit.core.color.parser import ColorLike, parse_color
from swatchkit.core.errors import (
    CacheIOError,
    ExecutorTerminatedError,
    FormatError,
    RangeError,
    TaskExecutionError,
)
from swatchkit.core.executor.models import TaskType
from swatchkit.core.search.combinatorics import (
    Ordering,
    PlanCounters,
    RotationMemo,
    chunked,
    iter_orderings,
)
from swatchkit.core.search.models import (
    DEFAULT_BATCH_SIZE,
    SearchRequest,
    SearchResult,
    SearchStats,
)
from swatchkit.core.search.swatches import build_swatch
from swatchkit.core.validation.models import MAX_SWATCH_COLORS, MIN_SWATCH_COLORS, Swatch

if TYPE_CHECKING:
    from swatchkit.core.executor.pool import TaskExecutor

logger = logging.getLogger(__name__)

SEARCH_STEP_ID = "search.swatches"
SEARCH_STEP_VERSION = "1"


class SwatchSearchEngine:
    """Brute-force search for WCAG-compliant swatches.

    Args:
        executor: Initialized task executor that runs ``validate_batch`` tasks.
        cache: Optional cache for search results. Cache failures are misses.
        batch_size: Orderings per ``validate_batch`` task.
        exhaustive_orderings: Default for ``search(exhaustive=...)``.
        max_in_flight: Batches submitted ahead of their results. Defaults to
            twice the executor size.

    Example:
        >>> async with TaskExecutor(max_workers=4) as executor:
        ...     engine = SwatchSearchEngine(executor)
        ...     result = await engine.search(["white", "black", "navy"], arity=2)
        >>> result.stats.compliant
        2
    """

    def __init__(
        self,
        executor: TaskExecutor,
        cache: AssetCache | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        exhaustive_orderings: bool = False,
        max_in_flight: int | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._executor = executor
        self._cache = cache
        self._batch_size = batch_size
        self._exhaustive = exhaustive_orderings
        self._max_in_flight = max_in_flight or max(2, executor.max_workers * 2)

    async def search(
        self,
        palette: Sequence[ColorLike],
        arity: int,
        wcag_level: WcagLevel | str = WcagLevel.AA,
        text_size: TextSize | str = TextSize.NORMAL,
        exhaustive: bool | None = None,
        use_cache: bool = True,
    ) -> SearchResult:
        """Find every compliant rotation class of ``arity`` palette colors.

        Args:
            palette: Colors to choose from. Unparseable entries are skipped
                and counted as failed; duplicates keep their first occurrence.
            arity: Colors per swatch, 2-7.
            wcag_level: AA or AAA.
            text_size: normal or large.
            exhaustive: Try every cyclic arrangement, not just one per subset.
            use_cache: Consult and populate the result cache.

        Returns:
            SearchResult with swatches in combination-generation order.

        Raises:
            RangeError: If arity is outside [2, 7].
        """
        if not MIN_SWATCH_COLORS <= arity <= MAX_SWATCH_COLORS:
            raise RangeError(arity, MIN_SWATCH_COLORS, MAX_SWATCH_COLORS, what="arity")

        started = time.perf_counter()
        level = WcagLevel(wcag_level)
        size = TextSize(text_size)
        colors, parse_failures = self._prepare_palette(palette)
        request = SearchRequest(
            palette=tuple(c.hex for c in colors),
            arity=arity,
            wcag_level=level,
            text_size=size,
            exhaustive=self._exhaustive if exhaustive is None else exhaustive,
        )
        cache_key = make_cache_key(
            SEARCH_STEP_ID, SEARCH_STEP_VERSION, request.model_dump(mode="json")
        )

        if use_cache and self._cache is not None:
            cached = await self._load_cached(cache_key)
            if cached is not None:
                logger.debug("Search cache hit %s", cache_key)
                return cached.model_copy(
                    update={
                        "stats": cached.stats.model_copy(
                            update={"failed": cached.stats.failed + parse_failures}
                        ),
                        "from_cache": True,
                        "processing_ms": (time.perf_counter() - started) * 1000,
                    }
                )

        swatches, stats = await self._run(colors, request)
        batch_failures = stats.failed
        stats = stats.model_copy(update={"failed": stats.failed + parse_failures})
        result = SearchResult(
            valid_swatches=swatches,
            stats=stats,
            arity=arity,
            wcag_level=level,
            text_size=size,
            processing_ms=(time.perf_counter() - started) * 1000,
            fingerprint=cache_key.input_fingerprint,
        )
        logger.info(
            "Search %d-of-%d (%s/%s): %d compliant, %d validated, %d duplicates skipped",
            arity,
            len(colors),
            level.value,
            size.value,
            stats.compliant,
            stats.validated,
            stats.duplicates_skipped,
        )

        if use_cache and self._cache is not None and batch_failures == 0:
            # Parse failures belong to this request, not to the fingerprinted palette
            stored_stats = stats.model_copy(update={"failed": batch_failures})
            await self._store_cached(cache_key, result.model_copy(update={"stats": stored_stats}))
        return result

    # ------------------------------------------------------------------
    # Search internals
    # ------------------------------------------------------------------

    @staticmethod
    def _prepare_palette(palette: Sequence[ColorLike]) -> tuple[list[Color], int]:
        colors: list[Color] = []
        seen: set[str] = set()
        failed = 0
        for entry in palette:
            try:
                color = parse_color(entry)
            except FormatError as exc:
                logger.warning("Skipping palette entry %r: %s", entry, exc)
                failed += 1
                continue
            if color.hex not in seen:
                seen.add(color.hex)
                colors.append(color)
        return colors, failed

    async def _run(self, colors: list[Color], request: SearchRequest) -> tuple[list[Swatch], SearchStats]:
        counters = PlanCounters()
        orderings = iter_orderings(
            len(colors), request.arity, request.exhaustive, RotationMemo(), counters
        )
        batches: Iterator[tuple[int, list[Ordering]]] = enumerate(
            chunked(orderings, self._batch_size)
        )

        hex_palette = list(request.palette)
        in_flight: dict[asyncio.Future[Any], str] = {}
        by_task: dict[str, tuple[int, list[Ordering]]] = {}
        compliant_by_batch: dict[int, list[Ordering]] = {}
        validated = 0
        failed = 0

        def _submit_next() -> bool:
            try:
                seq, batch = next(batches)
            except StopIteration:
                return False
            task_id, future = self._executor.submit_with_id(
                TaskType.VALIDATE_BATCH,
                {
                    "colors": hex_palette,
                    "orderings": [list(o) for o in batch],
                    "level": request.wcag_level.value,
                    "text_size": request.text_size.value,
                },
            )
            in_flight[future] = task_id
            by_task[task_id] = (seq, batch)
            return True

        while len(in_flight) < self._max_in_flight and _submit_next():
            pass

        while in_flight:
            done, _ = await asyncio.wait(list(in_flight), return_when=asyncio.FIRST_COMPLETED)
            for future in done:
                task_id = in_flight.pop(future)
                seq, batch = by_task.pop(task_id)
                try:
                    rows = future.result()
                except (TaskExecutionError, ExecutorTerminatedError) as exc:
                    logger.warning("Batch %d (%s) failed: %s", seq, task_id, exc)
                    failed += len(batch)
                    continue
                validated += len(rows)
                compliant_by_batch[seq] = [tuple(r["ordering"]) for r in rows if r["compliant"]]
            while len(in_flight) < self._max_in_flight and _submit_next():
                pass

        swatches: list[Swatch] = []
        for seq in sorted(compliant_by_batch):
            for ordering in compliant_by_batch[seq]:
                swatches.append(
                    build_swatch(
                        [colors[i] for i in ordering], request.wcag_level, request.text_size
                    )
                )

        stats = SearchStats(
            total_combinations=counters.total_combinations,
            generated=counters.generated,
            validated=validated,
            compliant=len(swatches),
            duplicates_skipped=counters.duplicates_skipped,
            failed=failed,
        )
        return swatches, stats

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    async def _load_cached(self, key: CacheKey) -> SearchResult | None:
        assert self._cache is not None
        try:
            asset = await self._cache.retrieve(key.storage_key)
            if asset is None:
                return None
            return SearchResult.model_validate_json(asset.data)
        except (CacheIOError, ValidationError, ValueError) as exc:
            logger.warning("Ignoring unusable cached search result %s: %s", key, exc)
            return None

    async def _store_cached(self, key: CacheKey, result: SearchResult) -> None:
        assert self._cache is not None
        try:
            stored = await self._cache.store(
                key.storage_key,
                result.model_dump_json().encode("utf-8"),
                {"type": "search_result", "arity": result.arity, "compliant": result.stats.compliant},
            )
        except CacheIOError as exc:
            logger.warning("Failed to cache search result %s: %s", key, exc)
            return
        if not stored:
            logger.debug("Search result %s not cached", key)


__all__ = [
    "SEARCH_STEP_ID",
    "SEARCH_STEP_VERSION",
    "SwatchSearchEngine",
]
