"""Paths from a root object to one of its fields, used in validation errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class Path:
    """One element of a field path.

    ``name`` is the field name, or "" when this element is a subscript, in
    which case ``subscript`` holds the index or map key. ``parent`` is None
    for the root element.
    """

    name: str = ""
    subscript: str = ""
    parent: Optional["Path"] = None

    def root(self) -> "Path":
        """Return the root element of this path."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def child(self, name: str, *args: str) -> "Path":
        """Return a new path extending this one by one or more field names."""
        result = new_path(name, *args)
        result.root().parent = self
        return result

    def index(self, index: int) -> "Path":
        """Return a new path subscripting this one by an integer."""
        return Path(subscript=str(index), parent=self)

    def key(self, key: str) -> "Path":
        """Return a new path subscripting this one by a string key."""
        return Path(subscript=key, parent=self)

    def _chain(self) -> list["Path"]:
        elements: list[Path] = []
        node: Optional[Path] = self
        while node is not None:
            elements.append(node)
            node = node.parent
        elements.reverse()
        return elements

    def __str__(self) -> str:
        parts: list[str] = []
        for element in self._chain():
            if element.name:
                if element.parent is not None:
                    parts.append(".")
                parts.append(element.name)
            else:
                parts.append(f"[{element.subscript}]")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"


def new_path(name: str, *args: str) -> Path:
    """Create a root path, optionally followed by further field names."""
    result = Path(name=name)
    for another in args:
        result = Path(name=another, parent=result)
    return result