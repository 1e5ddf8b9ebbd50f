"""Sorted arrays that report every index of a searched value."""
from .search import binary_search, find_boundary, find_first_and_last, search_range
from .sorted_array import Ascending, Descending, Order, SortedArray

__all__ = [
    "Ascending",
    "Descending",
    "Order",
    "SortedArray",
    "binary_search",
    "find_boundary",
    "find_first_and_last",
    "search_range",
]
