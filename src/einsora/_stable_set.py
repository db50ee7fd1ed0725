from __future__ import annotations

__all__ = ["StableSet", "argfind"]

from typing import Callable, Hashable, Iterable, Iterator, MutableSet, TypeVar

Element = TypeVar("Element", bound=Hashable, covariant=True)
T = TypeVar("T")


class StableSet(MutableSet[Element]):
    def __init__(self, *items: Element):
        # Rely on stable dictionary
        self._items = {item: None for item in items}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, x: Element) -> bool:
        return x in self._items

    def __iter__(self) -> Iterator[Element]:
        return iter(self._items)

    def __eq__(self, other: StableSet[Element]):
        if isinstance(other, StableSet):
            return self._items == other._items
        else:
            return NotImplemented

    def __repr__(self) -> str:
        return f"StableSet({', '.join(repr(item) for item in self._items)})"

    def add(self, element: Element, /) -> None:
        self._items[element] = None

    def insert(self, element: Element, /) -> bool:
        """Add the element if absent.

        Returns:
            True if the element was added, False if it was already present.
        """
        if element in self._items:
            return False
        self._items[element] = None
        return True

    def discard(self, element: Element, /) -> None:
        self._items.pop(element, None)


def argfind(items: Iterable[T], target: T | None = None, *, key: Callable[[T], bool] | None = None):
    """Position of the first element equal to `target` or satisfying `key`, else None."""
    for i, item in enumerate(items):
        if key is None:
            if item == target:
                return i
        elif key(item):
            return i
    return None
