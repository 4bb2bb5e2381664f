"""
List adapter for the record sort engine.

The input integers are packed into fixed-size records (see
`recsort.datasets.records`), sorted in place by `recsort.engine.qsort`, and
unpacked into a new list.

Config keys:
    record_size          bytes per record, 4 or >= 8 (default 8); wide records
                         exercise the generic swap path and, past
                         scratch_capacity, the in-place pivot
    insertion_threshold, scratch_capacity, stack_capacity, oversize
                         forwarded to SortConfig
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from recsort.config import SortConfig
from recsort.datasets.records import key_comparator, pack_records, unpack_records
from recsort.engine import QuickSorter

__all__ = ["sort"]


def sort(a: List[int], *, config: Optional[Dict[str, Any]] = None) -> List[int]:
    opts = dict(config or {})
    size = opts.pop("record_size", 8)
    sorter = QuickSorter(SortConfig.from_dict(opts))

    buf = pack_records(a, size)
    sorter.sort(buf, len(a), size, key_comparator(size))
    return unpack_records(buf, len(a), size)
