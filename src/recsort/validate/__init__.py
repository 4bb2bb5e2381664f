"""
Validation utilities public API.

Re-exports:
    - Oracle:
        ORACLE_NAME
        oracle_sort
        equals_oracle
        oracle_sort_records

    - Property checks (value sequences):
        is_nondecreasing
        first_nondecreasing_violation_index
        is_permutation
        permutation_counter_diff
        assert_no_mutation

    - Property checks (record buffers):
        split_records
        records_nondecreasing
        first_record_violation_index
        records_permutation
"""

from .oracle import ORACLE_NAME, equals_oracle, oracle_sort, oracle_sort_records
from .properties import (
    assert_no_mutation,
    first_nondecreasing_violation_index,
    first_record_violation_index,
    is_nondecreasing,
    is_permutation,
    permutation_counter_diff,
    records_nondecreasing,
    records_permutation,
    split_records,
)

__all__ = [
    "ORACLE_NAME",
    "oracle_sort",
    "equals_oracle",
    "oracle_sort_records",
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "split_records",
    "records_nondecreasing",
    "first_record_violation_index",
    "records_permutation",
]
