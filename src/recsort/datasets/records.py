"""
Integer lists <-> fixed-size record buffers.

Record layout for `size` bytes:
    size == 4 : little-endian int32 key
    size >= 8 : little-endian int64 key in bytes [0, 8), then `size - 8` payload
                bytes, each equal to (key & 0xFF)

The payload makes wide records (hundreds of bytes) cheap to build while still
letting permutation checks notice a record that was torn or half-copied.

Public API (stable):
    key_width(size: int) -> int
    pack_records(values: Sequence[int], size: int = 8) -> bytearray
    unpack_records(buffer, nmemb: int, size: int = 8) -> list[int]
    key_comparator(size: int = 8) -> Callable[[memoryview, memoryview], int]
"""

from __future__ import annotations

from typing import Any, Callable, List, Sequence

import numpy as np

__all__ = ["key_width", "pack_records", "unpack_records", "key_comparator"]

_KEY_DTYPES = {4: np.dtype("<i4"), 8: np.dtype("<i8")}


def key_width(size: int) -> int:
    """Width in bytes of the integer key stored at the front of a record."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValueError(f"record size must be an int; got {size!r}")
    if size == 4:
        return 4
    if size >= 8:
        return 8
    raise ValueError(f"record size must be 4 or >= 8; got {size}")


def pack_records(values: Sequence[int], size: int = 8) -> bytearray:
    """Pack `values` into a new bytearray of len(values) records of `size` bytes."""
    k = key_width(size)
    dtype = _KEY_DTYPES[k]
    info = np.iinfo(dtype)
    n = len(values)
    if n == 0:
        return bytearray()
    lo, hi = min(values), max(values)
    if lo < info.min or hi > info.max:
        raise ValueError(f"values [{lo}, {hi}] do not fit a {k}-byte key")

    keys = np.asarray(values, dtype=dtype)
    out = np.zeros((n, size), dtype=np.uint8)
    out[:, :k] = keys.view(np.uint8).reshape(n, k)
    if size > k:
        out[:, k:] = (keys & 0xFF).astype(np.uint8)[:, None]
    return bytearray(out.tobytes())


def unpack_records(buffer: Any, nmemb: int, size: int = 8) -> List[int]:
    """Read the keys of the first `nmemb` records of `buffer`."""
    k = key_width(size)
    if nmemb == 0:
        return []
    raw = np.frombuffer(buffer, dtype=np.uint8, count=nmemb * size).reshape(nmemb, size)
    keys = np.ascontiguousarray(raw[:, :k]).view(_KEY_DTYPES[k]).ravel()
    return keys.tolist()


def key_comparator(size: int = 8) -> Callable[[memoryview, memoryview], int]:
    """Three-way comparator ordering records by their signed integer key."""
    k = key_width(size)

    def cmp(a: memoryview, b: memoryview) -> int:
        x = int.from_bytes(a[:k], "little", signed=True)
        y = int.from_bytes(b[:k], "little", signed=True)
        return (x > y) - (x < y)

    return cmp
