"""String helpers: list differences, case conversion, reversal and base64."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Sequence


def diff(base: Iterable[str], exclude: Iterable[str]) -> list[str]:
    """Return the items of ``base`` that are not in ``exclude``, in order."""
    excluded = set(exclude)
    return [item for item in base if item not in excluded]


def unique(items: Iterable[str]) -> list[str]:
    """Return the distinct items, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


def camel_case_to_underscore(text: str) -> str:
    """Convert ``CamelCase`` to ``camel_case``; digits stay in their segment."""
    segments: list[str] = []
    segment: list[str] = []
    for ch in text:
        if not ch.islower() and ch != "_" and not ch.isnumeric():
            if segment:
                segments.append("".join(segment))
            segment = []
        segment.append(ch.lower())
    if segment:
        segments.append("".join(segment))
    return "_".join(segments)


def _is_separator(ch: str) -> bool:
    if ord(ch) <= 0x7F:
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def underscore_to_camel_case(text: str) -> str:
    """Convert ``under_score`` to ``UnderScore``."""
    words = text.lower().replace("_", " ")
    titled: list[str] = []
    previous = " "
    for ch in words:
        titled.append(ch.upper() if _is_separator(previous) else ch)
        previous = ch
    return "".join(titled).replace(" ", "")


def find_string(items: Sequence[str], text: str) -> int:
    """Return the index of ``text`` in ``items``, or -1 if absent."""
    for index, item in enumerate(items):
        if item == text:
            return index
    return -1


def string_in(text: str, items: Sequence[str]) -> bool:
    """Return True if ``text`` is one of ``items``."""
    return find_string(items, text) > -1


def reverse(text: str) -> str:
    """Reverse a string character by character."""
    return text[::-1]


def decode_base64(text: str) -> bytes:
    """Decode standard, padded base64; line breaks are ignored.

    Raises ValueError on malformed input.
    """
    cleaned = text.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(cleaned, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"illegal base64 data: {exc}") from exc