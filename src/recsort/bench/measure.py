"""
Timing and comparison counting for sort calls.

Timing measures exactly one call to an adapter's `sort(a, config=...)` per
sample with `time.perf_counter_ns`. Copies, GC and warmup stay outside the
timed block.

Public API (stable):
    CountingComparator(cmp)                      -> callable, counts calls
    count_comparisons(values, *, record_size=8, config=None) -> int
    time_sort_call(...)                          -> dict

time_sort_call result schema:
    {
        "algo": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns per completed sample
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # set when status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index of the timeout
    }
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from recsort.config import SortConfig
from recsort.datasets.records import key_comparator, pack_records
from recsort.engine import QuickSorter

__all__ = ["CountingComparator", "count_comparisons", "time_sort_call"]

logger = logging.getLogger(__name__)


class CountingComparator:
    """Wrap a three-way comparator and count how often it is called."""

    __slots__ = ("cmp", "calls")

    def __init__(self, cmp: Callable[[memoryview, memoryview], int]) -> None:
        self.cmp = cmp
        self.calls = 0

    def __call__(self, a: memoryview, b: memoryview) -> int:
        self.calls += 1
        return self.cmp(a, b)

    def reset(self) -> None:
        self.calls = 0


def count_comparisons(
    values: Sequence[int],
    *,
    record_size: int = 8,
    config: Optional[SortConfig] = None,
) -> int:
    """Sort a packed copy of `values` with the engine and return the comparator call count."""
    buf = pack_records(values, record_size)
    counter = CountingComparator(key_comparator(record_size))
    QuickSorter(config).sort(buf, len(values), record_size, counter)
    return counter.calls


def time_sort_call(
    *,
    algo_name: str,
    algo_fn: Callable[..., List[int]],
    a: List[int],
    config: Optional[Dict[str, Any]],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    defensive_copy: bool,
) -> Dict[str, Any]:
    """
    Time `repeats` calls of `algo_fn(a, config=config)`.

    Parameters
    ----------
    algo_name : str
        Name recorded in the result.
    algo_fn : Callable[..., list[int]]
        sort(a: list[int], *, config: dict | None) -> list[int]
    a : list[int]
        Input; must not be mutated by the algorithm.
    config : dict | None
        Passed through unchanged.
    repeats : int
        Timed samples to collect.
    warmup : bool
        Make one untimed call first.
    disable_gc : bool
        Collect, then disable GC for the timed loop; restored afterwards.
    timeout_seconds : float
        A sample slower than this marks status="timeout" and ends sampling.
    defensive_copy : bool
        Hand each call a fresh copy of `a` (made outside the timed block).
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    samples: List[int] = []
    result: Dict[str, Any] = {
        "algo": algo_name,
        "repeats": repeats,
        "samples_ns": samples,
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    if warmup and repeats > 0:
        try:
            algo_fn(list(a) if defensive_copy else a, config=config)
        except Exception as e:
            logger.warning("%s: warmup failed: %r", algo_name, e)
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    gc_was_enabled = gc.isenabled()
    if disable_gc:
        gc.collect()
        gc.disable()
    try:
        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            arg = list(a) if defensive_copy else a
            try:
                t0 = time.perf_counter_ns()
                algo_fn(arg, config=config)
                t1 = time.perf_counter_ns()
            except Exception as e:
                logger.warning("%s: repeat %d failed: %r", algo_name, r, e)
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            samples.append(elapsed)
            if elapsed > threshold_ns:
                logger.info("%s: repeat %d exceeded %.3fs", algo_name, r, timeout_seconds)
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Only re-enable what we disabled; respect a caller who had GC off.
        if disable_gc and gc_was_enabled:
            gc.enable()

    return result
