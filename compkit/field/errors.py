"""Field-level validation errors and lists of them."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Iterator
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from compkit.field.path import Path

Matcher = Callable[[BaseException], bool]


class ErrorType(str, Enum):
    """Machine-readable reason why a field is invalid."""

    NOT_FOUND = "FieldValueNotFound"
    REQUIRED = "FieldValueRequired"
    DUPLICATE = "FieldValueDuplicate"
    INVALID = "FieldValueInvalid"
    NOT_SUPPORTED = "FieldValueNotSupported"
    FORBIDDEN = "FieldValueForbidden"
    TOO_LONG = "FieldValueTooLong"
    TOO_MANY = "FieldValueTooMany"
    INTERNAL = "InternalError"

    def __str__(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorType.NOT_FOUND: "Not found",
    ErrorType.REQUIRED: "Required value",
    ErrorType.DUPLICATE: "Duplicate value",
    ErrorType.INVALID: "Invalid value",
    ErrorType.NOT_SUPPORTED: "Unsupported value",
    ErrorType.FORBIDDEN: "Forbidden",
    ErrorType.TOO_LONG: "Too long",
    ErrorType.TOO_MANY: "Too many",
    ErrorType.INTERNAL: "Internal error",
}

_VALUELESS = {ErrorType.REQUIRED, ErrorType.FORBIDDEN, ErrorType.TOO_LONG, ErrorType.INTERNAL}

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    out = ['"']
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif ord(ch) < 0x80:
            out.append(f"\\x{ord(ch):02x}")
        elif ord(ch) < 0x10000:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(f"\\U{ord(ch):08x}")
    out.append('"')
    return "".join(out)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"
    parts = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in parts.digits)
    point = len(digits) + int(parts.exponent)
    exponent = point - 1
    if exponent < -4 or exponent >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "-" if exponent < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


def _describe(value: Any) -> str:
    if value is None:
        return _quote("null")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return _quote(value)
    if type(value).__str__ is not object.__str__:
        return str(value)
    return repr(value)


class FieldError(Exception):
    """A validation error attached to one field."""

    def __init__(self, type: ErrorType, field: str, bad_value: Any = None, detail: str = "") -> None:
        super().__init__(type, field, bad_value, detail)
        self.type = type
        self.field = field
        self.bad_value = bad_value
        self.detail = detail

    def error_body(self) -> str:
        """Return the message without the field path."""
        if self.type in _VALUELESS:
            body = str(self.type)
        else:
            body = f"{self.type}: {_describe(self.bad_value)}"
        if self.detail:
            body += f": {self.detail}"
        return body

    def __str__(self) -> str:
        return f"{self.field}: {self.error_body()}"

    def __repr__(self) -> str:
        return (
            f"FieldError(type={self.type.name}, field={self.field!r}, "
            f"bad_value={self.bad_value!r}, detail={self.detail!r})"
        )


class Aggregate(Exception):
    """Several errors reported together."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self._errors = list(errors)
        super().__init__(*self._errors)

    @property
    def errors(self) -> list[BaseException]:
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self._errors)

    def __str__(self) -> str:
        messages = [str(err) for err in self._errors]
        if len(messages) == 1:
            return messages[0]
        return "[" + ", ".join(messages) + "]"


class ErrorList(list):
    """A list of FieldError values."""

    def to_aggregate(self) -> Optional[Aggregate]:
        """Return the distinct errors as an Aggregate, or None if there are none."""
        seen: set[str] = set()
        unique: list[FieldError] = []
        for err in self:
            message = str(err)
            if message in seen:
                continue
            seen.add(message)
            unique.append(err)
        return Aggregate(unique) if unique else None

    def filter(self, *args: Matcher) -> "ErrorList":
        """Return the distinct errors that match none of the given matchers."""
        aggregate = self.to_aggregate()
        if aggregate is None:
            return ErrorList()
        return ErrorList(err for err in aggregate if not any(match(err) for match in args))


def _field_text(field: Optional[Path]) -> str:
    return "" if field is None else str(field)


def not_found(field: Optional[Path], value: Any) -> FieldError:
    """Report a requested value that could not be found."""
    return FieldError(ErrorType.NOT_FOUND, _field_text(field), value, "")


def required(field: Optional[Path], detail: str) -> FieldError:
    """Report a required value that was not provided."""
    return FieldError(ErrorType.REQUIRED, _field_text(field), "", detail)


def duplicate(field: Optional[Path], value: Any) -> FieldError:
    """Report a value that must be unique but is not."""
    return FieldError(ErrorType.DUPLICATE, _field_text(field), value, "")


def invalid(field: Optional[Path], value: Any, detail: str) -> FieldError:
    """Report a malformed value."""
    return FieldError(ErrorType.INVALID, _field_text(field), value, detail)


def not_supported(field: Optional[Path], value: Any, valid_values: Iterable[str] | None) -> FieldError:
    """Report a value outside an enumeration, listing the supported ones."""
    values = list(valid_values or [])
    detail = ""
    if values:
        detail = "supported values: " + ", ".join(_quote(v) for v in values)
    return FieldError(ErrorType.NOT_SUPPORTED, _field_text(field), value, detail)


def forbidden(field: Optional[Path], detail: str) -> FieldError:
    """Report a well-formed value that is not permitted here."""
    return FieldError(ErrorType.FORBIDDEN, _field_text(field), "", detail)


def too_long(field: Optional[Path], value: Any, max_length: int) -> FieldError:
    """Report a value that is too long."""
    return FieldError(
        ErrorType.TOO_LONG, _field_text(field), value, f"must have at most {max_length} bytes"
    )


def too_many(field: Optional[Path], actual_quantity: int, max_quantity: int) -> FieldError:
    """Report a list holding too many items."""
    return FieldError(
        ErrorType.TOO_MANY,
        _field_text(field),
        actual_quantity,
        f"must have at most {max_quantity} items",
    )


def internal_error(field: Optional[Path], err: BaseException) -> FieldError:
    """Report an error not caused by user input."""
    return FieldError(ErrorType.INTERNAL, _field_text(field), None, str(err))


def new_error_type_matcher(error_type: ErrorType) -> Matcher:
    """Return a matcher that is true for FieldErrors of the given type."""

    def match(err: BaseException) -> bool:
        return isinstance(err, FieldError) and err.type == error_type

    return match