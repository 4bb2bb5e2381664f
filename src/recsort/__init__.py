"""
recsort: in-place hybrid quicksort over fixed-size records.

    from recsort import qsort

    buf = bytearray(...)            # nmemb records of `size` bytes each
    qsort(buf, nmemb, size, cmp)    # cmp(a, b) -> negative / zero / positive

Subpackages:
    recsort.engine      the sort engine
    recsort.algorithms  list-level adapters, sort(a, *, config=None) -> list[int]
    recsort.datasets    input generators and record packing
    recsort.validate    oracle and property checks
    recsort.bench       timing, comparison counting, benchmark sweeps
"""

from .config import SortConfig, load_config
from .engine import QuickSorter, qsort
from .errors import (
    BufferLayoutError,
    ConfigError,
    ElementTooLargeError,
    RecsortError,
    WorkStackOverflowError,
)

__version__ = "0.2.0"

__all__ = [
    "SortConfig",
    "load_config",
    "QuickSorter",
    "qsort",
    "RecsortError",
    "ConfigError",
    "BufferLayoutError",
    "ElementTooLargeError",
    "WorkStackOverflowError",
    "__version__",
]
