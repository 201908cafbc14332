"""Tests for combination enumeration and rotation dedup."""

from __future__ import annotations

import math

import pytest

from swatchkit.core.search.combinatorics import (
    PlanCounters,
    RotationMemo,
    canonical_rotation,
    chunked,
    count_combinations,
    iter_orderings,
    plan_orderings,
    rotations,
)


class TestRotations:
    """Tests for rotation helpers."""

    def test_rotations(self):
        """Test all k rotations, identity first."""
        assert rotations((0, 1, 2)) == [(0, 1, 2), (1, 2, 0), (2, 0, 1)]

    def test_canonical_rotation_shared_by_class(self):
        """Test every rotation maps to the same representative."""
        assert {canonical_rotation(r) for r in rotations((3, 1, 2))} == {(1, 2, 3)}

    def test_mirror_is_a_different_class(self):
        """Test reflections are not rotations."""
        assert canonical_rotation((0, 1, 2)) != canonical_rotation((0, 2, 1))

    def test_memo_rejects_rotations(self):
        """Test the memo keeps one ordering per rotation class."""
        memo = RotationMemo()
        assert memo.try_ordering((0, 1, 2))
        assert not memo.try_ordering((1, 2, 0))
        assert memo.try_ordering((0, 2, 1))
        assert len(memo) == 2


class TestIterOrderings:
    """Tests for ordering enumeration."""

    @pytest.mark.parametrize("n,k", [(3, 2), (5, 3), (6, 4), (7, 7)])
    def test_one_ordering_per_subset(self, n: int, k: int):
        """Test default mode yields C(n, k) orderings and skips k-1 rotations each."""
        orderings, counters = plan_orderings(n, k)

        assert len(orderings) == math.comb(n, k)
        assert counters.total_combinations == math.comb(n, k)
        assert counters.generated == math.comb(n, k)
        assert counters.duplicates_skipped == math.comb(n, k) * (k - 1)
        assert len({canonical_rotation(o) for o in orderings}) == len(orderings)

    def test_subsets_in_lexicographic_order(self):
        """Test generation order follows itertools.combinations."""
        orderings, _ = plan_orderings(4, 2)
        assert orderings == [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]

    def test_exhaustive_yields_every_cyclic_arrangement(self):
        """Test exhaustive mode keeps (k-1)! classes per subset."""
        orderings, counters = plan_orderings(5, 5, exhaustive=True)

        assert len(orderings) == math.factorial(4)
        assert counters.duplicates_skipped == math.factorial(5) - math.factorial(4)
        assert len({canonical_rotation(o) for o in orderings}) == len(orderings)

    def test_arity_above_palette_is_empty(self):
        """Test k > n yields nothing."""
        orderings, counters = plan_orderings(3, 4)
        assert orderings == []
        assert counters.total_combinations == 0

    def test_counters_update_lazily(self):
        """Test counters advance with the generator."""
        counters = PlanCounters()
        gen = iter_orderings(4, 3, counters=counters)
        next(gen)
        assert counters.generated == 1
        list(gen)
        assert counters.generated == count_combinations(4, 3)

    def test_count_combinations_bounds(self):
        """Test out-of-range k gives 0."""
        assert count_combinations(5, 6) == 0
        assert count_combinations(5, -1) == 0
        assert count_combinations(5, 5) == 1


class TestChunked:
    """Tests for batching."""

    def test_chunked(self):
        """Test the last batch may be short."""
        batches = list(chunked(iter([(i,) for i in range(5)]), 2))
        assert [len(b) for b in batches] == [2, 2, 1]

    def test_invalid_size(self):
        """Test batch size must be positive."""
        with pytest.raises(ValueError):
            list(chunked(iter([]), 0))
