"""
Oracle for sorting correctness.

Python's built-in `sorted()` is the ground truth:
- integer lists are sorted directly
- record buffers are split into `size`-byte records and sorted with the same
  three-way comparator the engine uses, via `functools.cmp_to_key`

Because `sorted()` is stable and the engine is not, record oracles are only
byte-for-byte comparable when equal-comparing records are also byte-identical
(true for the packed layouts in `recsort.datasets.records`). Otherwise compare
keys, or check ordering and permutation separately.

Public API (stable):
    oracle_sort(a: list[int]) -> list[int]
    equals_oracle(a: list[int], out: list[int]) -> bool
    oracle_sort_records(buffer, nmemb, size, cmp) -> bytes
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, List

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle", "oracle_sort_records"]


def oracle_sort(a: List[int]) -> List[int]:
    """Return a new, nondecreasing list with the elements of `a`; `a` is untouched."""
    return sorted(a)


def equals_oracle(a: List[int], out: List[int]) -> bool:
    """True iff `out` equals `oracle_sort(a)` exactly."""
    return out == oracle_sort(a)


def oracle_sort_records(
    buffer: Any, nmemb: int, size: int, cmp: Callable[[memoryview, memoryview], int]
) -> bytes:
    """
    Return the first `nmemb` records of `buffer` as a new sorted `bytes` object.

    The input buffer is not modified.
    """
    data = bytes(memoryview(buffer).cast("B")[: nmemb * size])
    recs = [data[i * size:(i + 1) * size] for i in range(nmemb)]
    recs.sort(key=cmp_to_key(lambda x, y: cmp(memoryview(x), memoryview(y))))
    return b"".join(recs)
