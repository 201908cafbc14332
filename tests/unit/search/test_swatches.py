"""Tests for building, ranking and filtering swatches."""

from __future__ import annotations

import pytest

from swatchkit.core.errors import DuplicateError, FormatError, RangeError
from swatchkit.core.search import (
    SwatchCriteria,
    best_swatch,
    build_swatch,
    filter_swatches,
    rank_swatches,
    swatch_id,
)


@pytest.fixture
def swatches():
    return [
        build_swatch(["white", "navy"]),
        build_swatch(["white", "black"]),
        build_swatch(["black", "yellow", "navy"], text_size="large"),
    ]


class TestBuildSwatch:
    """Tests for build_swatch."""

    def test_builds_compliant_swatch(self):
        """Test contrasts and rating are filled in."""
        swatch = build_swatch(["#FFFFFF", "#000000"])

        assert swatch.compliant
        assert swatch.overall_rating == 21.0
        assert swatch.hex_values == ["#FFFFFF", "#000000"]
        assert len(swatch.adjacent_contrasts) == 2
        assert swatch.id.startswith("sw_")

    def test_id_is_deterministic(self):
        """Test the same ordered colors give the same id."""
        assert build_swatch(["white", "black"]).id == build_swatch(["#fff", "#000"]).id
        assert swatch_id(build_swatch(["white", "black"]).colors) != swatch_id(
            build_swatch(["black", "white"]).colors
        )

    def test_non_compliant_swatch(self):
        """Test a low-contrast swatch is built but flagged."""
        swatch = build_swatch(["white", "#777777"])
        assert not swatch.compliant
        assert swatch.overall_rating == 4.48

    @pytest.mark.parametrize("colors", [["white"], [f"#00000{i}" for i in range(1, 9)]])
    def test_size_out_of_range(self, colors: list[str]):
        """Test 2-7 colors are required."""
        with pytest.raises(RangeError):
            build_swatch(colors)

    def test_duplicates_rejected(self):
        """Test equal canonical colors raise DuplicateError."""
        with pytest.raises(DuplicateError) as exc_info:
            build_swatch(["white", "#FFF"])
        assert exc_info.value.duplicates == ["#FFFFFF"]

    def test_bad_color_rejected(self):
        """Test parse errors propagate."""
        with pytest.raises(FormatError):
            build_swatch(["white", "nope"])

    def test_includes(self):
        """Test membership by canonical value."""
        swatch = build_swatch(["white", "black"])
        assert swatch.includes("#fff")
        assert not swatch.includes("red")
        assert not swatch.includes("nope")


class TestRanking:
    """Tests for ranking helpers."""

    def test_rank_best_first(self, swatches):
        """Test descending overall rating."""
        ranked = rank_swatches(swatches)
        assert ranked[0].hex_values == ["#FFFFFF", "#000000"]
        assert [s.overall_rating for s in ranked] == sorted(
            (s.overall_rating for s in swatches), reverse=True
        )

    def test_best_swatch_tie_keeps_first(self):
        """Test the earliest swatch wins ties."""
        first = build_swatch(["white", "black"])
        second = build_swatch(["black", "white"])
        assert best_swatch([first, second]) is first

    def test_best_swatch_empty(self):
        """Test no swatches gives None."""
        assert best_swatch([]) is None


class TestFilter:
    """Tests for filter_swatches."""

    def test_no_criteria_keeps_all(self, swatches):
        """Test default criteria are a no-op."""
        assert filter_swatches(swatches) == swatches

    def test_color_count(self, swatches):
        """Test filter by size."""
        assert len(filter_swatches(swatches, SwatchCriteria(color_count=3))) == 1

    def test_include_and_exclude(self, swatches):
        """Test include/exclude by canonical color."""
        with_navy = filter_swatches(swatches, SwatchCriteria(include_colors=("#000080",)))
        assert len(with_navy) == 2
        no_black = filter_swatches(swatches, SwatchCriteria(exclude_colors=("black",)))
        assert [s.hex_values for s in no_black] == [["#FFFFFF", "#000080"]]

    def test_rating_bounds_sort_and_limit(self, swatches):
        """Test rating window, ascending sort and limit."""
        result = filter_swatches(
            swatches, SwatchCriteria(min_rating=2.0, sort="rating_asc", limit=1)
        )
        assert len(result) == 1
        assert result[0].overall_rating == min(
            s.overall_rating for s in swatches if s.overall_rating >= 2.0
        )
