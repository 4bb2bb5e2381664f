"""
Property helpers for validating sorting results.

Two flavours:
- value sequences (lists of comparable values), used by the list adapters
- record buffers (nmemb records of size bytes plus a three-way comparator),
  used by the engine tests

Public API (stable):
    is_nondecreasing(xs) -> bool
    first_nondecreasing_violation_index(xs) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    assert_no_mutation(before, after) -> None
    split_records(buffer, nmemb, size) -> list[bytes]
    records_nondecreasing(buffer, nmemb, size, cmp) -> bool
    first_record_violation_index(buffer, nmemb, size, cmp) -> int | None
    records_permutation(before, after, nmemb, size) -> bool

Stability is not checked: the engine does not promise it.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "split_records",
    "records_nondecreasing",
    "first_record_violation_index",
    "records_permutation",
]

Cmp = Callable[[memoryview, memoryview], int]


# ------------------------- value sequences ------------------------- #


def is_nondecreasing(xs: Sequence[Any]) -> bool:
    """Return True iff xs[i] <= xs[i+1] for all i."""
    return first_nondecreasing_violation_index(xs) is None


def first_nondecreasing_violation_index(xs: Sequence[Any]) -> Optional[int]:
    """
    Return the first index i where xs[i] > xs[i+1], or None if nondecreasing.

    Handy for assertion messages:
        i = first_nondecreasing_violation_index(out)
        assert i is None, f"not nondecreasing at i={i}: {out[i]} > {out[i+1]}"
    """
    for i in range(len(xs) - 1):
        if xs[i] > xs[i + 1]:
            return i
    return None


def is_permutation(a: Sequence[Hashable], b: Sequence[Hashable]) -> bool:
    """True iff `a` and `b` hold the same multiset of values."""
    return len(a) == len(b) and Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Hashable], b: Sequence[Hashable]) -> Dict[Hashable, int]:
    """
    Map value -> count_a - count_b for every value whose counts differ.

    Empty dict means identical multiplicities.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """Raise AssertionError naming the first changed index if `after` differs from `before`."""
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x}, after={y}")


# ------------------------- record buffers ------------------------- #


def split_records(buffer: Any, nmemb: int, size: int) -> List[bytes]:
    """Copy the first `nmemb` records of `buffer` out as a list of `bytes`."""
    data = bytes(memoryview(buffer).cast("B")[: nmemb * size])
    return [data[i * size:(i + 1) * size] for i in range(nmemb)]


def first_record_violation_index(buffer: Any, nmemb: int, size: int, cmp: Cmp) -> Optional[int]:
    """First i with cmp(rec[i], rec[i+1]) > 0, or None."""
    recs = split_records(buffer, nmemb, size)
    for i in range(nmemb - 1):
        if cmp(memoryview(recs[i]), memoryview(recs[i + 1])) > 0:
            return i
    return None


def records_nondecreasing(buffer: Any, nmemb: int, size: int, cmp: Cmp) -> bool:
    """True iff every adjacent pair of records compares <= 0."""
    return first_record_violation_index(buffer, nmemb, size, cmp) is None


def records_permutation(before: Any, after: Any, nmemb: int, size: int) -> bool:
    """True iff both buffers hold the same multiset of records, byte for byte."""
    return Counter(split_records(before, nmemb, size)) == Counter(split_records(after, nmemb, size))
