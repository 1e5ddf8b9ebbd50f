"""An immutable sorted array tagged with its sort direction.

The array is sorted exactly once, when it is built, and never changes
afterwards.  The direction is stored on the instance and every comparison the
search routines make goes through :meth:`Order.compare`, so index ``0`` is
always the first element under that direction.
"""
from __future__ import annotations

from bisect import bisect_left
from enum import Enum
from typing import Any, Generic, Iterable, Iterator, Tuple, TypeVar, overload

T = TypeVar("T")


class Order(Enum):
    """Sort direction of a :class:`SortedArray`."""

    ASCENDING = "ascending"
    DESCENDING = "descending"

    def compare(self, a: Any, b: Any) -> int:
        """Return -1, 0 or 1 depending on how ``a`` orders against ``b``."""
        if self is Order.DESCENDING:
            a, b = b, a
        if a < b:
            return -1
        if b < a:
            return 1
        return 0

    @classmethod
    def parse(cls, value: "Order | str") -> "Order":
        """Accept an ``Order`` or one of its names, ``asc``/``desc`` included."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name in {"asc", "ascending"}:
            return cls.ASCENDING
        if name in {"desc", "descending"}:
            return cls.DESCENDING
        raise ValueError(f"Invalid order {value!r}")


Ascending = Order.ASCENDING
Descending = Order.DESCENDING


class SortedArray(Generic[T]):
    """Read-only sequence sorted once according to ``order``."""

    __slots__ = ("_items", "_order")

    def __init__(self, iterable: Iterable[T] = (), order: Order | str = Order.ASCENDING) -> None:
        order = Order.parse(order)
        items: Tuple[T, ...] = tuple(sorted(iterable, reverse=order is Order.DESCENDING))
        object.__setattr__(self, "_items", items)
        object.__setattr__(self, "_order", order)

    @classmethod
    def ascending(cls, iterable: Iterable[T] = ()) -> "SortedArray[T]":
        return cls(iterable, Order.ASCENDING)

    @classmethod
    def descending(cls, iterable: Iterable[T] = ()) -> "SortedArray[T]":
        return cls(iterable, Order.DESCENDING)

    @property
    def order(self) -> Order:
        return self._order

    def as_view(self) -> Tuple[T, ...]:
        """Return the sorted values."""
        return self._items

    def length(self) -> int:
        return len(self._items)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __contains__(self, value: object) -> bool:
        # bisect only knows ascending order, so descending arrays search a
        # reversed view and never copy the data.
        items = self._items
        if self._order is Order.ASCENDING:
            idx = bisect_left(items, value)
            return idx < len(items) and items[idx] == value
        view = _Reversed(items)
        idx = bisect_left(view, value)
        return idx < len(view) and view[idx] == value

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[T, ...]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortedArray):
            return NotImplemented
        return self._order is other._order and self._items == other._items

    def __hash__(self) -> int:
        return hash((self._order, self._items))

    def __repr__(self) -> str:
        return f"SortedArray({list(self._items)!r}, order={self._order.value!r})"


class _Reversed:
    """Index-reversed view over a tuple, used for bisecting descending data."""

    __slots__ = ("_items",)

    def __init__(self, items: Tuple[Any, ...]) -> None:
        self._items = items

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Any:
        return self._items[len(self._items) - 1 - index]
