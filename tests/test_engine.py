"""
Engine tests: record swap, pivot selection, partitioning, insertion sort and
the stack-driven driver, on raw record buffers.

What we check:
- Ordering and permutation preservation for every record size class
  (4 bytes, 8 bytes, odd sizes, wide records)
- Degenerate inputs are no-ops; bad inputs fail before the buffer changes
- Insertion-sort threshold hand-off (one below, at and one above)
- Classic quicksort stress shapes sort within comparison budgets
- Bounded work stack, including the overflow error
- Scratch-capacity boundary: at capacity sorts, one byte over is rejected,
  and sorts under the in-place pivot policy
"""

from __future__ import annotations

import math
from typing import List

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from recsort import (
    BufferLayoutError,
    ElementTooLargeError,
    QuickSorter,
    SortConfig,
    WorkStackOverflowError,
    qsort,
)
from recsort.bench.measure import CountingComparator
from recsort.datasets import key_comparator, make_dataset, pack_records, unpack_records
from recsort.engine import (
    RecordBuffer,
    insertion_sort,
    median_of_three,
    partition,
    partition_in_place,
)
from recsort.validate import (
    oracle_sort_records,
    records_nondecreasing,
    records_permutation,
    split_records,
)

SCENARIO = [42, 17, 8, 99, 4, 75, 23, 5, 1, 88, 2, 77, 55, 31, 19, 66, 87, 234, 2929]
SCENARIO_SORTED = [1, 2, 4, 5, 8, 17, 19, 23, 31, 42, 55, 66, 75, 77, 87, 88, 99, 234, 2929]


# ------------------------- helpers ------------------------- #


def int32_cmp(a: memoryview, b: memoryview) -> int:
    x = a.cast("i")[0]
    y = b.cast("i")[0]
    return (x > y) - (x < y)


def bytes_cmp(a: memoryview, b: memoryview) -> int:
    x, y = bytes(a), bytes(b)
    return (x > y) - (x < y)


def _sort_keys(values: List[int], size: int = 8, config: SortConfig | None = None) -> List[int]:
    buf = pack_records(values, size)
    before = bytes(buf)
    qsort(buf, len(values), size, key_comparator(size), config=config)
    assert records_permutation(before, buf, len(values), size)
    return unpack_records(buf, len(values), size)


def _dataset(dist: str, n: int) -> List[int]:
    return make_dataset(n, {"dist": dist}, np.random.default_rng(0))


# ------------------------- concrete scenario ------------------------- #


@pytest.mark.parametrize("threshold", [0, 24])
def test_concrete_scenario_native_int32(threshold: int) -> None:
    arr = np.array(SCENARIO, dtype=np.int32)
    qsort(arr, len(arr), arr.itemsize, int32_cmp, config=SortConfig(insertion_threshold=threshold))
    assert arr.tolist() == SCENARIO_SORTED
    assert arr[0] == 1
    assert arr[-1] == 2929


def test_concrete_scenario_int64_records() -> None:
    assert _sort_keys(SCENARIO) == SCENARIO_SORTED


# ------------------------- swap ------------------------- #


@pytest.mark.parametrize("size", [1, 3, 4, 8, 16])
def test_swap_exchanges_whole_records(size: int) -> None:
    buf = bytearray(range(3 * size))
    original = split_records(buf, 3, size)
    with RecordBuffer(buf, 3, size) as recs:
        recs.swap(0, 2)
    assert split_records(buf, 3, size) == [original[2], original[1], original[0]]


@pytest.mark.parametrize("size", [3, 4, 8])
def test_swap_with_itself_is_noop(size: int) -> None:
    buf = bytearray(range(2 * size))
    with RecordBuffer(buf, 2, size) as recs:
        recs.swap(1, 1)
    assert buf == bytearray(range(2 * size))


def test_record_buffer_ignores_trailing_bytes() -> None:
    buf = bytearray(b"\x02\x00\x00\x00\x01\x00\x00\x00\xff")
    qsort(buf, 2, 4, bytes_cmp)
    assert buf[-1] == 0xFF
    assert buf[:8] == bytearray(b"\x01\x00\x00\x00\x02\x00\x00\x00")


def test_buffer_released_after_sort() -> None:
    buf = pack_records([3, 1, 2])
    qsort(buf, 3, 8, key_comparator())
    buf.extend(b"\x00" * 8)  # would raise BufferError while a view is still exported
    assert len(buf) == 32


def test_comparator_sees_readonly_records_of_record_size() -> None:
    seen = []

    def cmp(a: memoryview, b: memoryview) -> int:
        seen.append((a.readonly, b.readonly, a.nbytes, b.nbytes))
        return bytes_cmp(a, b)

    buf = bytearray(b"zyxwvutsrqponmlkjihgfedcba" * 3)
    qsort(buf, 26, 3, cmp)
    assert seen
    assert all(s == (True, True, 3, 3) for s in seen)


# ------------------------- stages ------------------------- #


def test_median_of_three_orders_samples() -> None:
    buf = pack_records([9, 4, 7, 1, 5])
    cmp = key_comparator()
    with RecordBuffer(buf, 5, 8) as recs:
        mid = median_of_three(recs, 0, 4, cmp)
    keys = unpack_records(buf, 5)
    assert mid == 2
    assert keys[0] <= keys[2] <= keys[4]
    assert (keys[0], keys[2], keys[4]) == (5, 7, 9)
    assert keys[1] == 4 and keys[3] == 1


@pytest.mark.parametrize("in_place", [False, True])
@pytest.mark.parametrize("dist", ["random", "sorted", "reversed", "organ_pipe", "all_equal"])
def test_partition_contract(dist: str, in_place: bool) -> None:
    if dist == "random":
        values = make_dataset(101, {"dist": "random", "params": {"range": [0, 30]}},
                              np.random.default_rng(3))
    else:
        values = _dataset(dist, 101)
    buf = pack_records(values)
    cmp = key_comparator()
    low, high = 5, 95
    with RecordBuffer(buf, len(values), 8) as recs:
        if in_place:
            p = partition_in_place(recs, low, high, cmp)
        else:
            p = partition(recs, low, high, cmp, bytearray(8))
    keys = unpack_records(buf, len(values))

    assert low <= p < high
    assert max(keys[low:p + 1]) <= min(keys[p + 1:high + 1])
    assert keys[:low] == values[:low]
    assert keys[high + 1:] == values[high + 1:]
    assert sorted(keys) == sorted(values)


def test_partition_on_two_records() -> None:
    buf = pack_records([5, 2])
    cmp = key_comparator()
    with RecordBuffer(buf, 2, 8) as recs:
        p = partition(recs, 0, 1, cmp, bytearray(8))
    assert p == 0
    assert unpack_records(buf, 2) == [2, 5]


def test_insertion_sort_only_touches_its_range() -> None:
    values = [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]
    buf = pack_records(values)
    with RecordBuffer(buf, 10, 8) as recs:
        insertion_sort(recs, 2, 6, key_comparator())
    assert unpack_records(buf, 10) == [9, 8, 3, 4, 5, 6, 7, 2, 1, 0]


# ------------------------- degenerate & invalid input ------------------------- #


@pytest.mark.parametrize("values", [[], [7]])
def test_zero_and_one_records_unchanged(values: List[int]) -> None:
    buf = pack_records(values)
    before = bytes(buf)
    qsort(buf, len(values), 8, key_comparator())
    assert bytes(buf) == before


def test_zero_size_is_noop() -> None:
    buf = bytearray(b"\x03\x02\x01")
    qsort(buf, 3, 0, bytes_cmp)
    assert buf == bytearray(b"\x03\x02\x01")


def test_degenerate_call_never_touches_comparator() -> None:
    counter = CountingComparator(bytes_cmp)
    qsort(bytearray(b"\x01"), 1, 1, counter)
    qsort(bytearray(), 0, 8, counter)
    assert counter.calls == 0


@pytest.mark.parametrize(
    "buffer, nmemb, size",
    [
        (b"\x02\x01", 2, 1),                       # read-only
        (bytearray(b"\x02\x01"), 3, 1),            # too short
        (np.arange(8, dtype=np.int32)[::2], 4, 4),  # not contiguous
        (bytearray(4), -1, 1),                     # negative count
        (bytearray(4), 2, 1.5),                    # non-int size
        (bytearray(4), True, 1),                   # bool count
        (object(), 2, 1),                          # no buffer protocol
    ],
)
def test_invalid_buffers_rejected(buffer, nmemb, size) -> None:
    with pytest.raises(BufferLayoutError):
        qsort(buffer, nmemb, size, bytes_cmp)


def test_numpy_integer_counts_accepted() -> None:
    a = np.array([3, 1, 2], dtype=np.int32)
    qsort(a, np.int64(3), np.int64(4), int32_cmp)
    assert a.tolist() == [1, 2, 3]


def test_rejected_buffer_is_not_left_locked() -> None:
    buf = bytearray(b"\x02\x01")
    with pytest.raises(BufferLayoutError) as excinfo:
        qsort(buf, 3, 1, bytes_cmp)
    # excinfo keeps the traceback (and its frames) alive here
    assert excinfo.value is not None
    buf.extend(b"\x00")
    assert len(buf) == 3


def test_non_callable_comparator_rejected() -> None:
    with pytest.raises(TypeError):
        qsort(bytearray(b"\x02\x01"), 2, 1, None)  # type: ignore[arg-type]


# ------------------------- invariants ------------------------- #


@pytest.mark.parametrize("n", [23, 24, 25])
@pytest.mark.parametrize("threshold", [0, 24])
def test_threshold_boundary(n: int, threshold: int) -> None:
    values = _dataset("reversed", n)
    cfg = SortConfig(insertion_threshold=threshold)
    assert _sort_keys(values, config=cfg) == sorted(values)


def test_all_equal_records() -> None:
    values = [5] * 500
    assert _sort_keys(values) == values


def test_idempotent() -> None:
    values = make_dataset(300, {"dist": "few_uniques", "params": {"k": 20}}, np.random.default_rng(9))
    buf = pack_records(values)
    cmp = key_comparator()
    qsort(buf, 300, 8, cmp)
    once = bytes(buf)
    qsort(buf, 300, 8, cmp)
    assert bytes(buf) == once


def test_sorter_instance_is_reusable() -> None:
    sorter = QuickSorter(SortConfig(insertion_threshold=8))
    cmp = key_comparator()
    for seed in range(3):
        values = make_dataset(200, {"dist": "random", "params": {"range": [-50, 50]}},
                              np.random.default_rng(seed))
        buf = pack_records(values)
        sorter.sort(buf, 200, 8, cmp)
        assert unpack_records(buf, 200) == sorted(values)


@pytest.mark.parametrize("dist", ["sorted", "reversed", "all_equal", "nearly_sorted"])
def test_stress_shapes_within_nlogn_budget(dist: str) -> None:
    n = 2048
    values = _dataset(dist, n)
    buf = pack_records(values)
    counter = CountingComparator(key_comparator())
    qsort(buf, n, 8, counter)
    assert unpack_records(buf, n) == sorted(values)
    assert counter.calls <= 2 * n * math.log2(n)


@pytest.mark.parametrize("threshold", [0, 24])
def test_organ_pipe_sorts_with_bounded_stack(threshold: int) -> None:
    # Median-of-three keeps organ-pipe splits balanced enough for an n log n
    # budget; the pending-range stack never grows past log2(n).
    n = 1024
    values = _dataset("organ_pipe", n)
    buf = pack_records(values)
    counter = CountingComparator(key_comparator())
    cfg = SortConfig(insertion_threshold=threshold, stack_capacity=int(math.log2(n)))
    qsort(buf, n, 8, counter, config=cfg)
    assert unpack_records(buf, n) == sorted(values)
    assert counter.calls <= 4 * n * math.log2(n)


def test_stack_overflow_is_detected() -> None:
    values = list(range(100))
    buf = pack_records(values)
    with pytest.raises(WorkStackOverflowError) as exc:
        qsort(buf, 100, 8, key_comparator(),
              config=SortConfig(insertion_threshold=0, stack_capacity=1))
    assert exc.value.capacity == 1
    assert sorted(unpack_records(buf, 100)) == values


# ------------------------- scratch capacity ------------------------- #


def test_record_at_scratch_capacity_sorts() -> None:
    values = _dataset("reversed", 60)
    assert _sort_keys(values, size=512) == sorted(values)


def test_record_over_scratch_capacity_rejected_before_mutation() -> None:
    values = _dataset("reversed", 60)
    buf = pack_records(values, 513)
    before = bytes(buf)
    counter = CountingComparator(key_comparator(513))
    with pytest.raises(ElementTooLargeError) as exc:
        qsort(buf, 60, 513, counter)
    assert (exc.value.size, exc.value.capacity) == (513, 512)
    assert bytes(buf) == before
    assert counter.calls == 0


@pytest.mark.parametrize("size, capacity", [(513, 512), (8, 4), (37, 16)])
@pytest.mark.parametrize("dist", ["random", "organ_pipe", "all_equal"])
def test_oversized_records_sort_with_in_place_pivot(size: int, capacity: int, dist: str) -> None:
    if dist == "random":
        values = make_dataset(150, {"dist": "random", "params": {"range": [0, 40]}},
                              np.random.default_rng(1))
    else:
        values = _dataset(dist, 150)
    cfg = SortConfig(scratch_capacity=capacity, oversize="relocate", insertion_threshold=4)
    assert _sort_keys(values, size=size, config=cfg) == sorted(values)


# ------------------------- property-based tests ------------------------- #


@settings(deadline=None, max_examples=80)
@given(
    st.integers(min_value=1, max_value=12).flatmap(
        lambda size: st.tuples(
            st.just(size),
            st.lists(st.binary(min_size=size, max_size=size), min_size=0, max_size=150),
        )
    ),
    st.sampled_from([0, 3, 24]),
)
def test_property_arbitrary_byte_records(case, threshold: int) -> None:
    size, recs = case
    buf = bytearray(b"".join(recs))
    expected = oracle_sort_records(buf, len(recs), size, bytes_cmp)
    qsort(buf, len(recs), size, bytes_cmp, config=SortConfig(insertion_threshold=threshold))
    assert bytes(buf) == expected
    assert records_nondecreasing(buf, len(recs), size, bytes_cmp)


@settings(deadline=None, max_examples=60)
@given(st.lists(st.integers(min_value=-1000, max_value=1000), min_size=0, max_size=300))
def test_property_native_int32_array(values: List[int]) -> None:
    arr = np.array(values, dtype=np.int32)
    qsort(arr, len(arr), 4, int32_cmp)
    assert arr.tolist() == sorted(values)
