"""JSON encoding helpers, a navigable JSON document and raw JSON fragments."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_WHITESPACE = " \t\n\r"
_DECODER = json.JSONDecoder()


def _escape_html(text: str) -> str:
    for raw, escaped in _HTML_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON value {name}")


def _loads(data: Union[bytes, str]) -> Any:
    text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    return json.loads(text, parse_constant=_reject_constant)


def encode(obj: Any) -> bytes:
    """Encode ``obj`` as compact JSON with sorted keys and HTML-safe escaping."""
    text = json.dumps(
        obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False, allow_nan=False
    )
    return _escape_html(text).encode("utf-8")


def decode(data: Union[bytes, str]) -> Any:
    """Decode a JSON document; raise ValueError if it is malformed."""
    return _loads(data)


def to_string(obj: Any) -> str:
    """Return ``obj`` as JSON text, or "" if it cannot be encoded."""
    try:
        return encode(obj).decode("utf-8")
    except (TypeError, ValueError):
        return ""


def _type_error(expected: str) -> TypeError:
    return TypeError(f"type assertion to {expected} failed")


class Json:
    """A JSON value that can be walked, modified and converted."""

    def __init__(self, data: Any) -> None:
        self.data = data

    def __repr__(self) -> str:
        return f"Json({self.data!r})"

    def encode(self) -> bytes:
        """Return the value as compact JSON."""
        return encode(self.data)

    def encode_pretty(self) -> bytes:
        """Return the value as JSON indented by two spaces."""
        text = json.dumps(
            self.data, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False
        )
        return _escape_html(text).encode("utf-8")

    def set(self, key: str, value: Any) -> None:
        """Set ``key`` when the value is an object; otherwise do nothing."""
        if isinstance(self.data, dict):
            self.data[key] = value

    def set_path(self, branch: Sequence[str], value: Any) -> None:
        """Set a nested value, creating or replacing objects along the way."""
        if not branch:
            self.data = value
            return
        if not isinstance(self.data, dict):
            self.data = {}
        current = self.data
        for name in branch[:-1]:
            child = current.get(name)
            if not isinstance(child, dict):
                child = {}
                current[name] = child
            current = child
        current[branch[-1]] = value

    def delete(self, key: str) -> None:
        """Remove ``key`` when the value is an object and holds it."""
        if isinstance(self.data, dict):
            self.data.pop(key, None)

    def get(self, key: str) -> "Json":
        """Return the member ``key``; a missing member gives Json(None)."""
        found = self.check_get(key)
        return found if found is not None else Json(None)

    def get_path(self, *args: str) -> "Json":
        """Follow a chain of member names."""
        node = self
        for key in args:
            node = node.get(key)
        return node

    def check_get(self, key: str) -> Optional["Json"]:
        """Return the member ``key``, or None if there is no such member."""
        if isinstance(self.data, dict) and key in self.data:
            return Json(self.data[key])
        return None

    def as_dict(self) -> dict[str, Any]:
        if isinstance(self.data, dict):
            return self.data
        raise _type_error("map[string]interface{}")

    def as_list(self) -> list[Any]:
        if isinstance(self.data, list):
            return self.data
        raise _type_error("[]interface{}")

    def as_bool(self) -> bool:
        if isinstance(self.data, bool):
            return self.data
        raise _type_error("bool")

    def as_str(self) -> str:
        if isinstance(self.data, str):
            return self.data
        raise _type_error("string")

    def as_bytes(self) -> bytes:
        return self.as_str().encode("utf-8")

    def as_str_list(self) -> list[str]:
        """Return a list of strings; null elements become ""."""
        result: list[str] = []
        for item in self.as_list():
            if item is None:
                result.append("")
            elif isinstance(item, str):
                result.append(item)
            else:
                raise _type_error("string")
        return result

    def as_float(self) -> float:
        if isinstance(self.data, (int, float)) and not isinstance(self.data, bool):
            return float(self.data)
        raise TypeError("invalid value type")

    def as_int(self) -> int:
        if isinstance(self.data, (int, float)) and not isinstance(self.data, bool):
            return int(self.data)
        raise TypeError("invalid value type")


def new_json(data: Union[bytes, str]) -> Json:
    """Parse a JSON document into a Json value; raise ValueError if malformed."""
    return Json(_loads(data))


def to_json(obj: Any) -> Json:
    """Convert ``obj`` into a Json value by encoding and decoding it.

    On failure the problem is logged and an empty object is returned.
    """
    try:
        raw = encode(obj)
    except (TypeError, ValueError) as exc:
        logger.warning("Failed to encode [%r] to bytes, error: %s", obj, exc)
        return Json({})
    try:
        return new_json(raw)
    except ValueError as exc:
        logger.warning("Failed to decode [%r] to Json, error: %s", obj, exc)
        return Json({})


def _skip(text: str, index: int) -> int:
    while index < len(text) and text[index] in _WHITESPACE:
        index += 1
    return index


def _raw_members(text: str, keyed: bool) -> list[tuple[Optional[str], str]]:
    """Split a validated JSON object or array into raw member texts."""
    close = "}" if keyed else "]"
    index = _skip(text, _skip(text, 0) + 1)
    members: list[tuple[Optional[str], str]] = []
    if text[index] == close:
        return members
    while True:
        key = None
        if keyed:
            key, index = _DECODER.raw_decode(text, index)
            index = _skip(text, _skip(text, index) + 1)
        _, end = _DECODER.raw_decode(text, index)
        members.append((key, text[index:end]))
        index = _skip(text, end)
        if text[index] == close:
            return members
        index = _skip(text, index + 1)


class RawMessage(bytes):
    """Undecoded JSON text that can be taken apart piece by piece."""

    def _text(self) -> str:
        return bytes(self).decode("utf-8")

    def find(self, key: str) -> Optional["RawMessage"]:
        """Return the raw value of member ``key``, or None."""
        try:
            text = self._text()
            value = _loads(text)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"cannot unmarshal {type(value).__name__} into an object")
        except ValueError as exc:
            print(f"Resolve JSON Key failed, find key ={key}, err={exc}", end="")
            return None
        if value is None:
            return None
        found = dict(_raw_members(text, keyed=True)).get(key)
        return None if found is None else RawMessage(found.encode("utf-8"))

    def to_list(self) -> Optional[list["RawMessage"]]:
        """Return the raw elements of a JSON array, or None if it is not one."""
        try:
            text = self._text()
            value = _loads(text)
            if value is not None and not isinstance(value, list):
                raise ValueError(f"cannot unmarshal {type(value).__name__} into an array")
        except ValueError as exc:
            print(f"Resolve JSON List failed, err={exc}", end="")
            return None
        if value is None:
            return []
        return [RawMessage(raw.encode("utf-8")) for _, raw in _raw_members(text, keyed=False)]

    def to_string(self) -> str:
        """Return the text with every double quote removed."""
        return self._text().replace('"', "")