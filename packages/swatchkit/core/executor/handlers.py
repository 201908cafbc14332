"""Task bodies run inside worker units.

Handlers are pure, top-level functions so they pickle by reference for the
process backend. Payloads and return values are plain data.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from swatchkit.core.color.contrast import check_compliance, contrast_ratio, required_ratio
from swatchkit.core.color.parser import parse_color
from swatchkit.core.executor.models import TaskOutcome, TaskType
from swatchkit.core.search.combinatorics import plan_orderings
from swatchkit.core.validation.engine import ValidationEngine
from swatchkit.core.validation.models import ValidationOptions

logger = logging.getLogger(__name__)

TaskHandler = Callable[[Any], Any]


def handle_contrast(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Contrast check for one pair.

    Payload: ``color1``, ``color2``, optional ``level`` and ``text_size``.
    """
    result = check_compliance(
        payload["color1"],
        payload["color2"],
        payload.get("level", "AA"),
        payload.get("text_size", "normal"),
    )
    return result.model_dump(mode="json")


def handle_permutations(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Rotation-deduplicated orderings of palette indices.

    Payload: ``size``, ``arity``, optional ``exhaustive``.
    """
    orderings, counters = plan_orderings(
        int(payload["size"]), int(payload["arity"]), bool(payload.get("exhaustive", False))
    )
    return {
        "orderings": [list(o) for o in orderings],
        "total_combinations": counters.total_combinations,
        "generated": counters.generated,
        "duplicates_skipped": counters.duplicates_skipped,
    }


_ENGINE: ValidationEngine | None = None


def _engine() -> ValidationEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = ValidationEngine()
    return _ENGINE


def handle_validate_swatch(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Full rule-set validation with the built-in rules.

    Payload: ``colors`` and optional ``options`` (ValidationOptions fields).
    """
    options = ValidationOptions.model_validate(payload.get("options") or {})
    report = _engine().validate_swatch(list(payload["colors"]), options)
    return report.model_dump(mode="json")


def handle_validate_batch(payload: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Check a batch of orderings for cyclic-adjacent compliance.

    Payload: ``colors`` (canonical hex palette), ``orderings`` (index tuples),
    ``level``, ``text_size``. Pair ratios are memoized within the batch.

    Returns:
        One entry per ordering, in input order: ``ordering``, ``compliant``,
        ``lowest_ratio``.
    """
    palette = [parse_color(c) for c in payload["colors"]]
    needed = required_ratio(payload.get("level", "AA"), payload.get("text_size", "normal"))
    ratios: dict[tuple[int, int], float] = {}

    def _ratio(i: int, j: int) -> float:
        key = (i, j) if i < j else (j, i)
        if key not in ratios:
            ratios[key] = contrast_ratio(palette[key[0]], palette[key[1]])
        return ratios[key]

    results: list[dict[str, Any]] = []
    for ordering in payload["orderings"]:
        n = len(ordering)
        pair_ratios = [_ratio(ordering[i], ordering[(i + 1) % n]) for i in range(n)]
        lowest = min(pair_ratios)
        results.append(
            {
                "ordering": list(ordering),
                "compliant": lowest >= needed,
                "lowest_ratio": lowest,
            }
        )
    return results


HANDLERS: dict[str, TaskHandler] = {
    TaskType.CONTRAST.value: handle_contrast,
    TaskType.PERMUTATIONS.value: handle_permutations,
    TaskType.VALIDATE_SWATCH.value: handle_validate_swatch,
    TaskType.VALIDATE_BATCH.value: handle_validate_batch,
}


def run_task(handler: TaskHandler, task_id: str, payload: Any) -> TaskOutcome:
    """Run a handler and wrap its result or error in a TaskOutcome.

    Never raises; the error travels back as text so it survives pickling.
    """
    try:
        return TaskOutcome.success(task_id, handler(payload))
    except Exception as exc:
        logger.debug("Task %s failed: %s", task_id, exc)
        return TaskOutcome.failure(task_id, str(exc), type(exc).__name__)


__all__ = [
    "HANDLERS",
    "TaskHandler",
    "handle_contrast",
    "handle_permutations",
    "handle_validate_batch",
    "handle_validate_swatch",
    "run_task",
]
