"""
Fixed-size record addressing over a caller-owned buffer.

`RecordBuffer` turns element indices into byte offsets (index * size) over a
flat unsigned-byte view of the buffer. It is the only place that writes to the
buffer: every reordering done by the sort engine goes through `swap`.

Swap paths:
- size == 4 and size == 8: the buffer is additionally viewed as native words of
  that width, and a swap is a single item exchange on that view.
- any other size: slice copy through a temporary `bytes` object.

Comparator arguments are read-only views, so a comparator cannot write through
the references it is handed.
"""

from __future__ import annotations

import struct
from typing import Any, Dict, Optional

from recsort.errors import BufferLayoutError

__all__ = ["RecordBuffer", "WORD_FORMATS"]


def _word_formats() -> Dict[int, str]:
    out: Dict[int, str] = {}
    for fmt in ("Q", "L", "I", "H"):
        out.setdefault(struct.calcsize(fmt), fmt)
    return {k: v for k, v in out.items() if k in (4, 8)}


# element size -> native memoryview format of that width
WORD_FORMATS: Dict[int, str] = _word_formats()


class RecordBuffer:
    """Index-addressed view of `nmemb` records of `size` bytes."""

    __slots__ = ("nmemb", "size", "raw", "_words")

    def __init__(self, buffer: Any, nmemb: int, size: int) -> None:
        try:
            view = memoryview(buffer)
        except TypeError as e:
            raise BufferLayoutError(
                f"buffer must support the buffer protocol; got {type(buffer).__name__}"
            ) from e
        nbytes = nmemb * size
        try:
            if view.readonly:
                raise BufferLayoutError("buffer is read-only; the sort works in place")
            if not view.c_contiguous:
                raise BufferLayoutError("buffer must be C-contiguous")
            if view.nbytes < nbytes:
                raise BufferLayoutError(
                    f"buffer holds {view.nbytes} bytes; "
                    f"{nmemb} records of {size} bytes need {nbytes}"
                )
        except BufferLayoutError:
            # Unlock the caller's buffer; the traceback may outlive this frame.
            view.release()
            raise

        self.nmemb = nmemb
        self.size = size
        self.raw = view.cast("B")[:nbytes]
        fmt = WORD_FORMATS.get(size)
        self._words: Optional[memoryview] = self.raw.cast(fmt) if fmt else None

    # ------------------------- access ------------------------- #

    def ref(self, i: int) -> memoryview:
        """Read-only view of record `i` (live: reflects later swaps)."""
        s = self.size
        off = i * s
        return self.raw[off:off + s].toreadonly()

    def snapshot(self, i: int, scratch: bytearray) -> memoryview:
        """Copy record `i` into the front of `scratch` and return a read-only view of the copy."""
        s = self.size
        off = i * s
        if s > len(scratch):
            raise BufferLayoutError(
                f"scratch holds {len(scratch)} bytes; record needs {s}"
            )
        scratch[:s] = self.raw[off:off + s]
        return memoryview(scratch)[:s].toreadonly()

    # ------------------------- mutation ------------------------- #

    def swap(self, i: int, j: int) -> None:
        """Exchange records `i` and `j`; no-op when they are the same record."""
        if i == j:
            return
        words = self._words
        if words is not None:
            words[i], words[j] = words[j], words[i]
            return
        s = self.size
        a = i * s
        b = j * s
        raw = self.raw
        tmp = bytes(raw[a:a + s])
        raw[a:a + s] = raw[b:b + s]
        raw[b:b + s] = tmp

    # ------------------------- lifetime ------------------------- #

    def release(self) -> None:
        """Drop the views so the caller may resize its buffer again."""
        if self._words is not None:
            self._words.release()
            self._words = None
        self.raw.release()

    def __enter__(self) -> "RecordBuffer":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()

    def __len__(self) -> int:
        return self.nmemb
