"""
Datasets package public API.

Re-export the generators and record helpers so callers can write:
    from recsort.datasets import make_dataset, pack_records, key_comparator
"""

from .generators import SUPPORTED_DISTS, make_dataset
from .records import key_comparator, key_width, pack_records, unpack_records

__all__ = [
    "SUPPORTED_DISTS",
    "make_dataset",
    "key_comparator",
    "key_width",
    "pack_records",
    "unpack_records",
]
