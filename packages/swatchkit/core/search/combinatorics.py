"""Combination enumeration and rotation-invariant deduplication.

Colors are referenced by palette index throughout, so an ordering is a tuple
of ints. Two orderings that differ only by cyclic rotation share every
adjacent pair and therefore validate identically; the memo keeps one
representative per rotation class.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from itertools import combinations, islice, permutations

Ordering = tuple[int, ...]


def count_combinations(n: int, k: int) -> int:
    """C(n, k), or 0 when k is outside [0, n]."""
    if k < 0 or k > n:
        return 0
    return math.comb(n, k)


def rotations(ordering: Sequence[int]) -> list[Ordering]:
    """All ``k`` cyclic rotations, starting with the ordering itself."""
    items = tuple(ordering)
    return [items[i:] + items[:i] for i in range(len(items))]


def canonical_rotation(ordering: Sequence[int]) -> Ordering:
    """Lexicographically smallest rotation; identical for a whole rotation class."""
    return min(rotations(ordering), default=())


def composition_key(ordering: Sequence[int]) -> Ordering:
    """Sorted composition, shared by every arrangement of the same colors."""
    return tuple(sorted(ordering))


class RotationMemo:
    """Sorted composition key -> rotation classes already tried.

    A fresh memo per search keeps duplicate counts reproducible.
    """

    def __init__(self) -> None:
        self._tried: dict[Ordering, set[Ordering]] = {}
        self._processed: set[Ordering] = set()

    def is_processed(self, key: Ordering) -> bool:
        return key in self._processed

    def mark_processed(self, key: Ordering) -> None:
        self._processed.add(key)

    def try_ordering(self, ordering: Sequence[int]) -> bool:
        """Record an ordering; False if its rotation class was already tried."""
        canonical = canonical_rotation(ordering)
        seen = self._tried.setdefault(composition_key(ordering), set())
        if canonical in seen:
            return False
        seen.add(canonical)
        return True

    def __len__(self) -> int:
        return sum(len(v) for v in self._tried.values())


@dataclass
class PlanCounters:
    """Running totals while orderings are enumerated."""

    total_combinations: int = 0
    generated: int = 0
    duplicates_skipped: int = 0
    retained: int = 0


def iter_orderings(
    size: int,
    arity: int,
    exhaustive: bool = False,
    memo: RotationMemo | None = None,
    counters: PlanCounters | None = None,
) -> Iterator[Ordering]:
    """Yield one ordering per untried rotation class, in generation order.

    Subsets are visited in lexicographic index order. In the default mode each
    subset contributes its ``k`` rotations (one class); with ``exhaustive``
    every permutation is considered, so each subset contributes ``(k-1)!``
    classes.

    Args:
        size: Palette size ``n``.
        arity: Colors per swatch ``k``.
        exhaustive: Enumerate every cyclic arrangement, not just rotations.
        memo: Rotation memo to share; a new one is used when omitted.
        counters: Updated in place as the generator advances.
    """
    memo = memo if memo is not None else RotationMemo()
    counters = counters if counters is not None else PlanCounters()
    counters.total_combinations = count_combinations(size, arity)
    if counters.total_combinations == 0 or arity < 1:
        return

    for subset in combinations(range(size), arity):
        counters.generated += 1
        key = composition_key(subset)
        if memo.is_processed(key):
            counters.duplicates_skipped += 1
            continue

        arrangements = permutations(subset) if exhaustive else rotations(subset)
        for ordering in arrangements:
            if memo.try_ordering(ordering):
                counters.retained += 1
                yield tuple(ordering)
            else:
                counters.duplicates_skipped += 1
        memo.mark_processed(key)


def plan_orderings(size: int, arity: int, exhaustive: bool = False) -> tuple[list[Ordering], PlanCounters]:
    """Materialize ``iter_orderings`` with a fresh memo."""
    counters = PlanCounters()
    orderings = list(iter_orderings(size, arity, exhaustive, RotationMemo(), counters))
    return orderings, counters


def chunked(items: Iterator[Ordering], size: int) -> Iterator[list[Ordering]]:
    """Group an iterator into lists of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    while batch := list(islice(items, size)):
        yield batch


__all__ = [
    "Ordering",
    "PlanCounters",
    "RotationMemo",
    "canonical_rotation",
    "chunked",
    "composition_key",
    "count_combinations",
    "iter_orderings",
    "plan_orderings",
    "rotations",
]
