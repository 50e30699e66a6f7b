"""Utility functions for torchtopo."""

from torchtopo.utilities._index_sets import (
    as_index_set,
    as_int_list,
    check_index_range,
    difference,
    is_subset,
    union,
)

__all__ = [
    "as_index_set",
    "as_int_list",
    "check_index_range",
    "difference",
    "is_subset",
    "union",
]
