"""
Hybrid iterative quicksort over fixed-size records.

Stages (all operating on inclusive index ranges of a RecordBuffer):
- median_of_three     order rec[low] <= rec[mid] <= rec[high] and return mid
- partition           Hoare scheme against a byte snapshot of the pivot
- partition_in_place  fallback for records wider than the snapshot scratch:
                      the pivot is parked in slot `low` and compared in place
- insertion_sort      adjacent-swap insertion sort for short ranges
- QuickSorter.sort    explicit-stack driver; pushes the larger half of every
                      split and keeps working on the smaller one, so at most
                      log2(nmemb) ranges are ever pending

Public API (stable):
    qsort(buffer, nmemb, size, cmp, *, config=None) -> None
    QuickSorter(config=None).sort(buffer, nmemb, size, cmp) -> None

The comparator receives two read-only memoryviews of `size` bytes each and
returns a negative, zero or positive int. It must be a consistent total order
for the duration of the call; violations are not detected. The sort is not
stable.
"""

from __future__ import annotations

import logging
import operator
from typing import Any, Callable, List, Optional, Tuple

from recsort.config import SortConfig
from recsort.engine.records import RecordBuffer
from recsort.errors import BufferLayoutError, ElementTooLargeError, WorkStackOverflowError

Comparator = Callable[[memoryview, memoryview], int]

__all__ = [
    "Comparator",
    "median_of_three",
    "partition",
    "partition_in_place",
    "insertion_sort",
    "QuickSorter",
    "qsort",
]

logger = logging.getLogger(__name__)


def median_of_three(records: RecordBuffer, low: int, high: int, cmp: Comparator) -> int:
    """
    Sort the records at low, mid and high among themselves and return mid.

    Afterwards rec[low] <= rec[mid] <= rec[high]; rec[mid] is the pivot.
    """
    mid = low + ((high - low) >> 1)
    ref = records.ref
    if cmp(ref(low), ref(mid)) > 0:
        records.swap(low, mid)
    if cmp(ref(low), ref(high)) > 0:
        records.swap(low, high)
    if cmp(ref(mid), ref(high)) > 0:
        records.swap(mid, high)
    return mid


def partition(
    records: RecordBuffer, low: int, high: int, cmp: Comparator, scratch: bytearray
) -> int:
    """
    Hoare-partition [low, high] and return the split index p, low <= p < high.

    Every record in [low, p] compares <= pivot and every record in [p+1, high]
    compares >= pivot. The pivot is compared from its copy in `scratch`, since
    its original slot may be swapped away while the cursors walk. Records equal
    to the pivot stop both cursors, so runs of duplicates end up on both sides.
    """
    pidx = median_of_three(records, low, high, cmp)
    pivot = records.snapshot(pidx, scratch)
    ref = records.ref
    lo = low
    hi = high
    while True:
        while cmp(ref(lo), pivot) < 0:
            lo += 1
        while cmp(ref(hi), pivot) > 0:
            hi -= 1
        if lo >= hi:
            return hi
        records.swap(lo, hi)
        lo += 1
        hi -= 1


def partition_in_place(records: RecordBuffer, low: int, high: int, cmp: Comparator) -> int:
    """
    Partition without a pivot copy; same contract as `partition`.

    The median is moved to slot `low`, which the cursors never visit, so it can
    be compared directly. At the end it is swapped into its final slot j. The
    split returned is j, or high - 1 when the pivot lands on `high`, so both
    halves are always non-empty.
    """
    mid = median_of_three(records, low, high, cmp)
    records.swap(low, mid)
    ref = records.ref
    pivot = ref(low)
    i = low
    j = high + 1
    while True:
        i += 1
        while i < high and cmp(ref(i), pivot) < 0:
            i += 1
        j -= 1
        while cmp(ref(j), pivot) > 0:
            j -= 1
        if i >= j:
            break
        records.swap(i, j)
    records.swap(low, j)
    return j if j < high else high - 1


def insertion_sort(records: RecordBuffer, low: int, high: int, cmp: Comparator) -> None:
    """Insertion sort of [low, high] (inclusive) by adjacent swaps."""
    ref = records.ref
    swap = records.swap
    for i in range(low + 1, high + 1):
        j = i
        while j > low and cmp(ref(j), ref(j - 1)) < 0:
            swap(j, j - 1)
            j -= 1


class QuickSorter:
    """
    Configured sort engine. Holds configuration only, so one instance can be
    reused for any number of calls.
    """

    def __init__(self, config: Optional[SortConfig] = None) -> None:
        self.config = config if config is not None else SortConfig()

    def __repr__(self) -> str:
        return f"QuickSorter({self.config!r})"

    def sort(self, buffer: Any, nmemb: int, size: int, cmp: Comparator) -> None:
        """
        Sort `nmemb` records of `size` bytes in `buffer` in place, ascending by `cmp`.

        Raises
        ------
        BufferLayoutError
            Bad counts, or a buffer that is read-only, non-contiguous or too short.
        ElementTooLargeError
            `size` exceeds `scratch_capacity` and the oversize policy is "reject".
        WorkStackOverflowError
            More than `stack_capacity` ranges were pending at once.
        """
        nmemb = _check_count("nmemb", nmemb)
        size = _check_count("size", size)
        if nmemb < 2 or size == 0:
            return
        if not callable(cmp):
            raise TypeError(f"cmp must be callable; got {type(cmp).__name__}")

        cfg = self.config
        in_place = size > cfg.scratch_capacity
        if in_place and cfg.oversize == "reject":
            raise ElementTooLargeError(size, cfg.scratch_capacity)

        logger.debug(
            "qsort nmemb=%d size=%d pivot=%s threshold=%d",
            nmemb, size, "in-place" if in_place else "snapshot", cfg.insertion_threshold,
        )
        with RecordBuffer(buffer, nmemb, size) as records:
            self._run(records, cmp, in_place)

    def _run(self, records: RecordBuffer, cmp: Comparator, in_place: bool) -> None:
        cfg = self.config
        threshold = cfg.insertion_threshold
        capacity = cfg.stack_capacity
        scratch = None if in_place else bytearray(cfg.scratch_capacity)

        stack: List[Tuple[int, int]] = [(0, 0)] * capacity
        stack[0] = (0, records.nmemb - 1)
        top = 1

        while top > 0:
            top -= 1
            low, high = stack[top]

            while high > low:
                if high - low + 1 <= threshold:
                    insertion_sort(records, low, high, cmp)
                    break

                if scratch is None:
                    p = partition_in_place(records, low, high, cmp)
                else:
                    p = partition(records, low, high, cmp, scratch)

                # Park the larger half, keep splitting the smaller one.
                if p - low + 1 < high - p:
                    if p + 1 < high:
                        if top == capacity:
                            raise WorkStackOverflowError(capacity)
                        stack[top] = (p + 1, high)
                        top += 1
                    high = p
                else:
                    if low < p:
                        if top == capacity:
                            raise WorkStackOverflowError(capacity)
                        stack[top] = (low, p)
                        top += 1
                    low = p + 1


_DEFAULT_SORTER = QuickSorter()


def qsort(
    buffer: Any,
    nmemb: int,
    size: int,
    cmp: Comparator,
    *,
    config: Optional[SortConfig] = None,
) -> None:
    """Sort `nmemb` records of `size` bytes in `buffer` in place. See QuickSorter.sort."""
    sorter = _DEFAULT_SORTER if config is None else QuickSorter(config)
    sorter.sort(buffer, nmemb, size, cmp)


# ------------------------- helpers ------------------------- #


def _check_count(name: str, value: Any) -> int:
    # Python ints and NumPy integer scalars, not bools
    if isinstance(value, bool):
        raise BufferLayoutError(f"{name} must be an int; got {value!r}")
    try:
        count = operator.index(value)
    except TypeError as e:
        raise BufferLayoutError(f"{name} must be an int; got {value!r}") from e
    if count < 0:
        raise BufferLayoutError(f"{name} must be nonnegative; got {count}")
    return count
