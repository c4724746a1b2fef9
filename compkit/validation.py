"""Validators for names, labels, addresses, ports, percentages and passwords."""

from __future__ import annotations

import ipaddress
import re
import unicodedata
from typing import Optional, Union

from compkit.field.errors import ErrorList, invalid
from compkit.field.path import Path

_QNAME_CHAR_FMT = "[A-Za-z0-9]"
_QNAME_EXT_CHAR_FMT = "[-A-Za-z0-9_.]"
QUALIFIED_NAME_FMT = "(" + _QNAME_CHAR_FMT + _QNAME_EXT_CHAR_FMT + "*)?" + _QNAME_CHAR_FMT
_QUALIFIED_NAME_ERR_MSG = (
    "must consist of alphanumeric characters, '-', '_' or '.', "
    "and must start and end with an alphanumeric character"
)
QUALIFIED_NAME_MAX_LENGTH = 63
_QUALIFIED_NAME_RE = re.compile(QUALIFIED_NAME_FMT)

LABEL_VALUE_FMT = "(" + QUALIFIED_NAME_FMT + ")?"
_LABEL_VALUE_ERR_MSG = (
    "a valid label must be an empty string or consist of alphanumeric characters, "
    "'-', '_' or '.', and must start and end with an alphanumeric character"
)
LABEL_VALUE_MAX_LENGTH = 63
_LABEL_VALUE_RE = re.compile(LABEL_VALUE_FMT)

DNS1123_LABEL_FMT = "[a-z0-9]([-a-z0-9]*[a-z0-9])?"
_DNS1123_LABEL_ERR_MSG = (
    "a DNS-1123 label must consist of lower case alphanumeric characters or '-', "
    "and must start and end with an alphanumeric character"
)
DNS1123_LABEL_MAX_LENGTH = 63
_DNS1123_LABEL_RE = re.compile(DNS1123_LABEL_FMT)

DNS1123_SUBDOMAIN_FMT = DNS1123_LABEL_FMT + "(\\." + DNS1123_LABEL_FMT + ")*"
_DNS1123_SUBDOMAIN_ERR_MSG = (
    "a DNS-1123 subdomain must consist of lower case alphanumeric characters, '-' or '.', "
    "and   must start and end with an alphanumeric character"
)
DNS1123_SUBDOMAIN_MAX_LENGTH = 253
_DNS1123_SUBDOMAIN_RE = re.compile(DNS1123_SUBDOMAIN_FMT)

PERCENT_FMT = "[0-9]+%"
_PERCENT_ERR_MSG = "a valid percent string must be a numeric string followed by an ending '%'"
_PERCENT_RE = re.compile(PERCENT_FMT)

MIN_PASS_LENGTH = 8
MAX_PASS_LENGTH = 16

_DIGITS = frozenset("0123456789")


def _byte_len(value: str) -> int:
    return len(value.encode("utf-8"))


def max_len_error(length: int) -> str:
    """Describe a "string too long" failure."""
    return f"must be no more than {length} characters"


def regex_error(msg: str, fmt: str, *args: str) -> str:
    """Describe a regular-expression failure, with optional examples."""
    if not args:
        return f"{msg} (regex used for validation is '{fmt}')"
    examples = " or ".join(f"'{example}', " for example in args)
    return f"{msg} (e.g. {examples}regex used for validation is '{fmt}')"


def empty_error() -> str:
    """Describe a "must not be empty" failure."""
    return "must be non-empty"


def inclusive_range_error(lo: int, hi: int) -> str:
    """Describe a "must be between" failure."""
    return f"must be between {lo} and {hi}, inclusive"


def is_qualified_name(value: str) -> list[str]:
    """Check a qualified name with an optional DNS subdomain prefix.

    Returns the list of problems; empty when the value is valid.
    """
    errs: list[str] = []
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix:
            errs.append("prefix part " + empty_error())
        else:
            errs.extend("prefix part " + msg for msg in is_dns1123_subdomain(prefix))
    else:
        return errs + [
            "a qualified name "
            + regex_error(_QUALIFIED_NAME_ERR_MSG, QUALIFIED_NAME_FMT, "MyName", "my.name", "123-abc")
            + " with an optional DNS subdomain prefix and '/' (e.g. 'example.com/MyName')"
        ]

    if not name:
        errs.append("name part " + empty_error())
    elif _byte_len(name) > QUALIFIED_NAME_MAX_LENGTH:
        errs.append("name part " + max_len_error(QUALIFIED_NAME_MAX_LENGTH))
    if not _QUALIFIED_NAME_RE.fullmatch(name):
        errs.append(
            "name part "
            + regex_error(_QUALIFIED_NAME_ERR_MSG, QUALIFIED_NAME_FMT, "MyName", "my.name", "123-abc")
        )
    return errs


def is_valid_label_value(value: str) -> list[str]:
    """Check a label value; return the list of problems."""
    errs: list[str] = []
    if _byte_len(value) > LABEL_VALUE_MAX_LENGTH:
        errs.append(max_len_error(LABEL_VALUE_MAX_LENGTH))
    if not _LABEL_VALUE_RE.fullmatch(value):
        errs.append(regex_error(_LABEL_VALUE_ERR_MSG, LABEL_VALUE_FMT, "MyValue", "my_value", "12345"))
    return errs


def is_dns1123_label(value: str) -> list[str]:
    """Check an RFC 1123 DNS label; return the list of problems."""
    errs: list[str] = []
    if _byte_len(value) > DNS1123_LABEL_MAX_LENGTH:
        errs.append(max_len_error(DNS1123_LABEL_MAX_LENGTH))
    if not _DNS1123_LABEL_RE.fullmatch(value):
        errs.append(regex_error(_DNS1123_LABEL_ERR_MSG, DNS1123_LABEL_FMT, "my-name", "123-abc"))
    return errs


def is_dns1123_subdomain(value: str) -> list[str]:
    """Check an RFC 1123 DNS subdomain; return the list of problems."""
    errs: list[str] = []
    if _byte_len(value) > DNS1123_SUBDOMAIN_MAX_LENGTH:
        errs.append(max_len_error(DNS1123_SUBDOMAIN_MAX_LENGTH))
    if not _DNS1123_SUBDOMAIN_RE.fullmatch(value):
        errs.append(regex_error(_DNS1123_SUBDOMAIN_ERR_MSG, DNS1123_SUBDOMAIN_FMT, "example.com"))
    return errs


def is_valid_port_num(port: int) -> list[str]:
    """Check for a non-zero port number."""
    if 1 <= port <= 65535:
        return []
    return [inclusive_range_error(1, 65535)]


def is_in_range(value: int, min_value: int, max_value: int) -> list[str]:
    """Check that a value lies in an inclusive range."""
    if min_value <= value <= max_value:
        return []
    return [inclusive_range_error(min_value, max_value)]


_IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def _parse_ipv4(value: str) -> Optional[ipaddress.IPv4Address]:
    fields = value.split(".")
    if len(fields) != 4:
        return None
    octets = []
    for part in fields:
        if not part or not set(part) <= _DIGITS:
            return None
        number = int(part)
        if number > 255:
            return None
        octets.append(number)
    return ipaddress.IPv4Address(bytes(octets))


def _parse_ip(value: str) -> Optional[_IPAddress]:
    for ch in value:
        if ch == ".":
            return _parse_ipv4(value)
        if ch == ":":
            if "%" in value:
                return None
            try:
                return ipaddress.IPv6Address(value)
            except ValueError:
                return None
    return None


def _is_v4(address: _IPAddress) -> bool:
    return isinstance(address, ipaddress.IPv4Address) or address.ipv4_mapped is not None


def is_valid_ip(value: str) -> list[str]:
    """Check for a valid IPv4 or IPv6 address."""
    if _parse_ip(value) is None:
        return ["must be a valid IP address, (e.g. 10.9.8.7)"]
    return []


def is_valid_ipv4_address(fld_path: Optional[Path], value: str) -> ErrorList:
    """Check for a valid IPv4 address, reporting field errors."""
    address = _parse_ip(value)
    if address is None or not _is_v4(address):
        return ErrorList([invalid(fld_path, value, "must be a valid IPv4 address")])
    return ErrorList()


def is_valid_ipv6_address(fld_path: Optional[Path], value: str) -> ErrorList:
    """Check for a valid IPv6 address, reporting field errors."""
    address = _parse_ip(value)
    if address is None or _is_v4(address):
        return ErrorList([invalid(fld_path, value, "must be a valid IPv6 address")])
    return ErrorList()


def is_valid_percent(percent: str) -> list[str]:
    """Check for a string such as ``42%``."""
    if not _PERCENT_RE.fullmatch(percent):
        return [regex_error(_PERCENT_ERR_MSG, PERCENT_FMT, "1%", "93%")]
    return []


def is_valid_password(password: str) -> None:
    """Check password strength; raise ValueError listing every problem."""
    has_upper = has_lower = has_number = has_special = False
    length = 0
    for ch in password:
        category = unicodedata.category(ch)
        if category.startswith("N"):
            has_number = True
        elif category == "Lu":
            has_upper = True
        elif category == "Ll":
            has_lower = True
        elif category[0] in ("P", "S"):
            has_special = True
        elif ch != " ":
            continue
        length += 1

    problems: list[str] = []
    if not has_lower:
        problems.append("lowercase letter missing")
    if not has_upper:
        problems.append("uppercase letter missing")
    if not has_number:
        problems.append("at least one numeric character required")
    if not has_special:
        problems.append("special character missing")
    if not MIN_PASS_LENGTH <= length <= MAX_PASS_LENGTH:
        problems.append(
            f"password length must be between {MIN_PASS_LENGTH} to {MAX_PASS_LENGTH} characters long"
        )
    if problems:
        raise ValueError(", ".join(problems))