"""Find every index at which a value occurs in a :class:`SortedArray`.

The search runs in two phases.  A standard binary search probes for *any*
matching element; once one is known to exist, two independent full-range
binary searches locate the first and the last matching index.  Both phases
compare through the array's own :class:`~sortedsearch.sorted_array.Order`,
so descending arrays report mirrored index ranges.
"""
from __future__ import annotations

import logging
from typing import List, TypeVar

from .observability import inc_search, inc_search_miss
from .sorted_array import SortedArray

T = TypeVar("T")

logger = logging.getLogger(__name__)


def binary_search(item: T, arr: SortedArray[T]) -> List[int]:
    """Return the indices of all occurrences of ``item`` in ``arr``.

    The list is strictly increasing and empty when ``item`` is missing.
    """
    result = list(search_range(item, arr))
    logger.debug(
        "binary search finished",
        extra={"order": arr.order.value, "size": len(arr), "matches": len(result)},
    )
    return result


def search_range(item: T, arr: SortedArray[T]) -> range:
    """Like :func:`binary_search` but return the matches as a ``range``."""
    inc_search()
    items = arr.as_view()
    compare = arr.order.compare
    left, right = 0, len(items)

    while left < right:
        mid = left + (right - left) // 2
        cmp = compare(item, items[mid])
        if cmp < 0:
            right = mid
        elif cmp > 0:
            left = mid + 1
        else:
            return find_first_and_last(item, arr)

    inc_search_miss()
    return range(0)


def find_boundary(item: T, arr: SortedArray[T], find_first: bool) -> int:
    """Return the first (or last) index holding ``item``.

    Only meaningful once ``item`` is known to be present; otherwise ``0``.
    """
    items = arr.as_view()
    compare = arr.order.compare
    left, right = 0, len(items)
    boundary = 0

    while left < right:
        mid = left + (right - left) // 2
        cmp = compare(items[mid], item)
        if cmp == 0:
            boundary = mid
            if find_first:
                right = mid
            else:
                left = mid + 1
        elif cmp < 0:
            left = mid + 1
        else:
            right = mid

    return boundary


def find_first_and_last(item: T, arr: SortedArray[T]) -> range:
    first = find_boundary(item, arr, True)
    last = find_boundary(item, arr, False)
    return range(first, last + 1)


__all__ = ["binary_search", "search_range", "find_boundary", "find_first_and_last"]
