"""
Integer input generators for sort tests and benchmarks.

Distributions (spec["dist"]):
- "random":        uniform integers from params["range"] = [lo, hi] (inclusive, required)
- "small_range":   uniform integers from a small domain; params["min_val"]/["max_val"]
                   (default 0..255) or params["range"]
- "few_uniques":   at most params["k"] distinct values (optional inclusive "range",
                   default [0, 2**31 - 1]) sampled with replacement
- "nearly_sorted": [0..n-1] degraded by ceil(params["swap_frac"] * n) random swaps
                   (swap_frac default 0.05)
- "sorted":        [0, 1, ..., n-1]
- "reversed":      [n-1, ..., 0]
- "organ_pipe":    ascending to the middle then descending, e.g. [0, 1, 2, 2, 1, 0]
- "all_equal":     n copies of params["value"] (default 0)

"sorted", "reversed" and "organ_pipe" are the classic shapes that drive a
first/last-element-pivot quicksort quadratic; "all_equal" stresses duplicate
handling in the partition step. Deterministic distributions ignore the RNG.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[int]
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

import numpy as np

__all__ = ["SUPPORTED_DISTS", "make_dataset"]

_Params = Dict[str, Any]


def _random(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    lo, hi = _parse_inclusive_range(params, required=True, default=(0, 0))
    # Generator.integers is half-open; +1 makes hi inclusive.
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _small_range(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    if "range" in params:
        lo, hi = _parse_inclusive_range(params, required=True, default=(0, 255))
    else:
        lo_raw = params.get("min_val", 0)
        hi_raw = params.get("max_val", 255)
        if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
            raise ValueError("small_range params.min_val/max_val must be integers")
        lo, hi = int(lo_raw), int(hi_raw)
        if lo > hi:
            raise ValueError(f"small_range invalid: min > max ({lo} > {hi})")
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _few_uniques(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    k = params.get("k")
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    lo, hi = _parse_inclusive_range(params, required=False, default=(0, 2**31 - 1))
    if n == 0:
        return []
    actual_k = min(k, n, hi - lo + 1)
    # Draw from the caller's RNG (not `random`) so runs stay reproducible from one seed.
    chosen: List[int] = []
    seen = set()
    while len(chosen) < actual_k:
        for v in map(int, rng.integers(lo, hi + 1, size=2 * (actual_k - len(chosen)))):
            if v not in seen:
                seen.add(v)
                chosen.append(v)
                if len(chosen) == actual_k:
                    break
    picks = rng.integers(0, actual_k, size=n)
    return [chosen[int(t)] for t in picks]


def _nearly_sorted(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    raw = params.get("swap_frac", 0.05)
    try:
        frac = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {raw!r}"
        ) from e
    if not (0.0 <= frac <= 1.0):
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {frac}")
    out = list(range(n))
    swaps = int(np.ceil(frac * n))
    if n == 0 or swaps == 0:
        return out
    idxs = rng.integers(0, n, size=(swaps, 2))
    for i, j in idxs.tolist():
        out[i], out[j] = out[j], out[i]
    return out


def _sorted(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    return list(range(n))


def _reversed(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    return list(range(n - 1, -1, -1))


def _organ_pipe(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    half = (n + 1) // 2
    up = list(range(half))
    return up + up[: n - half][::-1]


def _all_equal(n: int, params: _Params, rng: np.random.Generator) -> List[int]:
    value = params.get("value", 0)
    if not _is_int_like(value):
        raise ValueError(f"all_equal.params.value must be an integer; got {value!r}")
    return [int(value)] * n


_GENERATORS: Dict[str, Callable[[int, _Params, np.random.Generator], List[int]]] = {
    "random": _random,
    "small_range": _small_range,
    "few_uniques": _few_uniques,
    "nearly_sorted": _nearly_sorted,
    "sorted": _sorted,
    "reversed": _reversed,
    "organ_pipe": _organ_pipe,
    "all_equal": _all_equal,
}

SUPPORTED_DISTS = frozenset(_GENERATORS)


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Generate `n` integers following `spec`, drawing randomness from `rng`.

    Parameters
    ----------
    n : int
        Number of elements, >= 0.
    spec : dict
        {"dist": <name>, "params": {...}}; see the module docstring.
    rng : numpy.random.Generator
        Caller-owned, seeded generator. Unused by deterministic shapes.

    Returns
    -------
    list[int]

    Raises
    ------
    ValueError
        Invalid `n`, unknown distribution, or bad parameters.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist")
    gen = _GENERATORS.get(dist)  # type: ignore[arg-type]
    if gen is None:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"{dist}.params must be a dict")
    return gen(n, params, rng)


# ------------------------- helpers ------------------------- #


def _parse_inclusive_range(
    params: _Params, *, required: bool, default: Tuple[int, int]
) -> Tuple[int, int]:
    if "range" not in params:
        if required:
            raise ValueError("params.range must be provided as [min, max] (inclusive)")
        return default
    bounds = params["range"]
    if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = bounds
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _is_int_like(x: Any) -> bool:
    # Python ints and NumPy integer scalars, not bools
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
