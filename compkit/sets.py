"""A mutable set with the helpers used across the package."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Mapping
from typing import Any


class Set:
    """A set of hashable items (strings, ints, bytes values, ...)."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Hashable] = ()) -> None:
        self._items: set[Hashable] = set(items)

    def insert(self, *args: Hashable) -> "Set":
        """Add items to the set and return it."""
        self._items.update(args)
        return self

    def delete(self, *args: Hashable) -> "Set":
        """Remove the given items, if present, and return the set."""
        self._items.difference_update(args)
        return self

    def has(self, item: Hashable) -> bool:
        """Return True if the item is in the set."""
        return item in self._items

    def has_all(self, *args: Hashable) -> bool:
        """Return True if every given item is in the set."""
        return all(item in self._items for item in args)

    def has_any(self, *args: Hashable) -> bool:
        """Return True if at least one given item is in the set."""
        return any(item in self._items for item in args)

    def difference(self, other: "Set") -> "Set":
        """Return the items of this set that are not in ``other``."""
        return Set(item for item in self._items if item not in other)

    def union(self, other: "Set") -> "Set":
        """Return a new set holding the items of both sets."""
        return Set(self._items | set(other))

    def intersection(self, other: "Set") -> "Set":
        """Return a new set holding the items present in both sets."""
        walk, probe = (self, other) if len(self) < len(other) else (other, self)
        return Set(item for item in walk if item in probe)

    def is_superset(self, other: "Set") -> bool:
        """Return True if every item of ``other`` is in this set."""
        return all(item in self._items for item in other)

    def equal(self, other: "Set") -> bool:
        """Return True if both sets hold exactly the same items."""
        return len(self) == len(other) and self.is_superset(other)

    def list(self) -> list[Any]:
        """Return the items as a sorted list."""
        return sorted(self._items)

    def unsorted_list(self) -> list[Any]:
        """Return the items in no particular order."""
        return list(self._items)

    def pop_any(self) -> Any:
        """Remove and return an arbitrary item; raise KeyError if empty."""
        try:
            return self._items.pop()
        except KeyError:
            raise KeyError("pop from an empty set") from None

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Set):
            return self._items == other._items
        if isinstance(other, (set, frozenset)):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        try:
            shown = self.list()
        except TypeError:
            shown = self.unsorted_list()
        return f"Set({shown!r})"


def key_set(mapping: Mapping[Hashable, Any]) -> Set:
    """Build a set from the keys of a mapping."""
    return Set(mapping.keys())