"""
Sort engine public API.

Re-export the engine so callers can write:
    from recsort.engine import qsort, QuickSorter, RecordBuffer
"""

from .quicksort import (
    Comparator,
    QuickSorter,
    insertion_sort,
    median_of_three,
    partition,
    partition_in_place,
    qsort,
)
from .records import RecordBuffer

__all__ = [
    "Comparator",
    "QuickSorter",
    "RecordBuffer",
    "insertion_sort",
    "median_of_three",
    "partition",
    "partition_in_place",
    "qsort",
]
