"""Small helpers for working with lists."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any


def remove_string(items: Iterable[str], remove: Callable[[str], bool]) -> list[str]:
    """Return the items for which ``remove`` is false, in their original order."""
    return [item for item in items if not remove(item)]


def find(items: Iterable[Any], target: Any) -> bool:
    """Return True if ``target`` is among ``items``."""
    return any(item == target for item in items)