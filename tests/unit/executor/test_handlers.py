"""Tests for executor task handlers."""

from __future__ import annotations

from swatchkit.core.executor.handlers import (
    HANDLERS,
    handle_permutations,
    handle_validate_batch,
    handle_validate_swatch,
    run_task,
)
from swatchkit.core.executor.models import TaskType


class TestHandlers:
    """Tests for the built-in handlers."""

    def test_every_task_type_has_a_handler(self):
        """Test the registry covers TaskType."""
        assert set(HANDLERS) == {t.value for t in TaskType}

    def test_validate_batch(self):
        """Test per-ordering compliance and lowest ratio."""
        rows = handle_validate_batch(
            {
                "colors": ["#FFFFFF", "#000000", "#000080"],
                "orderings": [[0, 1], [1, 2], [0, 2]],
                "level": "AA",
                "text_size": "normal",
            }
        )

        assert [r["compliant"] for r in rows] == [True, False, True]
        assert rows[0] == {"ordering": [0, 1], "compliant": True, "lowest_ratio": 21.0}

    def test_permutations(self):
        """Test the plan matches the combinatorics counters."""
        result = handle_permutations({"size": 5, "arity": 3})
        assert len(result["orderings"]) == 10
        assert result["duplicates_skipped"] == 20

    def test_validate_swatch(self):
        """Test the handler returns a JSON-ready report."""
        report = handle_validate_swatch(
            {"colors": ["white", "black"], "options": {"wcag_level": "AAA"}}
        )
        assert report["valid"] is True
        assert isinstance(report["timestamp"], str)


class TestRunTask:
    """Tests for run_task."""

    def test_success(self):
        """Test values are wrapped with the task id."""
        outcome = run_task(lambda p: p * 2, "task-1", 21)
        assert outcome.ok
        assert outcome.task_id == "task-1"
        assert outcome.value == 42

    def test_failure_never_raises(self):
        """Test exceptions become failed outcomes."""

        def _fail(payload: object) -> None:
            raise KeyError("missing")

        outcome = run_task(_fail, "task-2", None)
        assert not outcome.ok
        assert outcome.error_type == "KeyError"
        assert "missing" in (outcome.error or "")
