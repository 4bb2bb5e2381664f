"""
Exception hierarchy for recsort.

Hierarchy:
    RecsortError
    ├── ConfigError               (also ValueError)  bad SortConfig values
    ├── BufferLayoutError         (also ValueError)  read-only / short buffer, bad counts
    ├── ElementTooLargeError      (also ValueError)  record wider than the pivot scratch
    └── WorkStackOverflowError                       pending-range stack exhausted

Input-validation errors are raised before the buffer is touched. Stack
overflow is raised mid-sort and leaves the buffer permuted but not sorted.
"""

from __future__ import annotations

__all__ = [
    "RecsortError",
    "ConfigError",
    "BufferLayoutError",
    "ElementTooLargeError",
    "WorkStackOverflowError",
]


class RecsortError(Exception):
    """Base class for every error raised by recsort."""


class ConfigError(RecsortError, ValueError):
    """Invalid configuration value."""


class BufferLayoutError(RecsortError, ValueError):
    """The buffer cannot hold `nmemb` records of `size` bytes, or is not writable."""


class ElementTooLargeError(RecsortError, ValueError):
    """Record size exceeds the pivot scratch capacity under the "reject" policy."""

    def __init__(self, size: int, capacity: int) -> None:
        super().__init__(
            f"element size {size} exceeds pivot scratch capacity {capacity}; "
            f"raise scratch_capacity or use oversize='relocate'"
        )
        self.size = size
        self.capacity = capacity


class WorkStackOverflowError(RecsortError):
    """The explicit work stack ran out of slots."""

    def __init__(self, capacity: int) -> None:
        super().__init__(f"work stack exhausted (capacity={capacity} ranges)")
        self.capacity = capacity
