"""
Sort engine configuration.

The constants are fixed per `QuickSorter` instance, never per call:

    insertion_threshold : int   ranges of at most this many records are
                                insertion-sorted (default 24; 0 disables)
    scratch_capacity    : int   bytes reserved for the pivot snapshot (default 512)
    stack_capacity      : int   pending ranges the work stack can hold (default 64)
    oversize            : str   what to do with records wider than the scratch:
                                "reject" (raise ElementTooLargeError) or
                                "relocate" (partition against an in-buffer pivot slot)

A config can be built in code, from a mapping, or from a YAML file:

    # sort.yaml
    insertion_threshold: 16
    oversize: relocate

The YAML mapping may also be nested under a top-level "sort" key so the same
file can carry benchmark settings next to it.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from recsort.errors import ConfigError

DEFAULT_INSERTION_THRESHOLD = 24
DEFAULT_SCRATCH_CAPACITY = 512
DEFAULT_STACK_CAPACITY = 64
OVERSIZE_POLICIES = {"reject", "relocate"}

__all__ = [
    "DEFAULT_INSERTION_THRESHOLD",
    "DEFAULT_SCRATCH_CAPACITY",
    "DEFAULT_STACK_CAPACITY",
    "OVERSIZE_POLICIES",
    "SortConfig",
    "load_config",
]


@dataclass(frozen=True)
class SortConfig:
    insertion_threshold: int = DEFAULT_INSERTION_THRESHOLD
    scratch_capacity: int = DEFAULT_SCRATCH_CAPACITY
    stack_capacity: int = DEFAULT_STACK_CAPACITY
    oversize: str = "reject"

    def __post_init__(self) -> None:
        _require_int("insertion_threshold", self.insertion_threshold, minimum=0)
        _require_int("scratch_capacity", self.scratch_capacity, minimum=1)
        _require_int("stack_capacity", self.stack_capacity, minimum=1)
        if self.oversize not in OVERSIZE_POLICIES:
            raise ConfigError(
                f"oversize must be one of {sorted(OVERSIZE_POLICIES)}; got {self.oversize!r}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "SortConfig":
        """Build a config from a mapping; unknown keys are an error."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"sort config must be a mapping; got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown sort config keys: {unknown}. Known: {sorted(known)}")
        return cls(**dict(data))


def load_config(path: Union[str, Path]) -> SortConfig:
    """Load a SortConfig from a YAML file (flat, or nested under "sort")."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse sort config {p}: {e}") from e
    if raw is None:
        return SortConfig()
    if isinstance(raw, dict) and "sort" in raw:
        raw = raw["sort"]
    return SortConfig.from_dict(raw)


# ------------------------- helpers ------------------------- #


def _require_int(name: str, value: Any, *, minimum: int) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer; got {value!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}; got {value}")
