"""A --version command-line flag that prints version information."""

from __future__ import annotations

import argparse
import sys
from enum import Enum

from compkit import version

_RAW = "raw"
_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class VersionValue(Enum):
    """What the version flag asks for."""

    FALSE = 0
    TRUE = 1
    RAW = 2

    def __str__(self) -> str:
        if self is VersionValue.RAW:
            return _RAW
        return "true" if self is VersionValue.TRUE else "false"


def parse_version_value(text: str) -> VersionValue:
    """Parse "raw" or a boolean word; raise ValueError otherwise."""
    if text == _RAW:
        return VersionValue.RAW
    if text in _TRUE_WORDS:
        return VersionValue.TRUE
    if text in _FALSE_WORDS:
        return VersionValue.FALSE
    raise ValueError(f"invalid syntax for version flag: {text!r}")


def _argument_type(text: str) -> VersionValue:
    try:
        return parse_version_value(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def add_flags(parser: argparse.ArgumentParser) -> None:
    """Register ``--version`` on a parser; a bare flag means true."""
    parser.add_argument(
        "--version",
        nargs="?",
        const=VersionValue.TRUE,
        default=VersionValue.FALSE,
        type=_argument_type,
        metavar="version",
        help="Print version information and quit.",
    )


def print_and_exit_if_requested(value: VersionValue) -> None:
    """Print version information and exit if the flag asked for it."""
    if value is VersionValue.RAW:
        print(repr(version.get()))
        sys.exit(0)
    if value is VersionValue.TRUE:
        print(str(version.get()))
        sys.exit(0)