"""Generators for unique numeric ids and random secret strings."""

from __future__ import annotations

import secrets
import threading
import time
from datetime import datetime, timezone
from functools import lru_cache

from compkit.iputil import get_local_ip

ALPHABET62 = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"
ALPHABET36 = "abcdefghijklmnopqrstuvwxyz1234567890"

_BIT_LEN_TIME = 39
_BIT_LEN_SEQUENCE = 8
_BIT_LEN_MACHINE_ID = 16
_TIME_UNIT = 0.01  # seconds
_EPOCH = datetime(2014, 9, 1, tzinfo=timezone.utc).timestamp()


class _Sonyflake:
    """Time-ordered 63-bit id generator: time, sequence and machine id."""

    def __init__(self, machine_id: int) -> None:
        self._lock = threading.Lock()
        self._machine_id = machine_id & ((1 << _BIT_LEN_MACHINE_ID) - 1)
        self._elapsed = 0
        self._sequence = (1 << _BIT_LEN_SEQUENCE) - 1

    @staticmethod
    def _current_elapsed() -> int:
        return int((time.time() - _EPOCH) / _TIME_UNIT)

    def next_id(self) -> int:
        mask = (1 << _BIT_LEN_SEQUENCE) - 1
        with self._lock:
            current = self._current_elapsed()
            if self._elapsed < current:
                self._elapsed = current
                self._sequence = 0
            else:
                self._sequence = (self._sequence + 1) & mask
                if self._sequence == 0:
                    self._elapsed += 1
                    overtime = self._elapsed - current
                    time.sleep(max(overtime * _TIME_UNIT - time.time() % _TIME_UNIT, 0.0))
            if self._elapsed >= 1 << _BIT_LEN_TIME:
                raise RuntimeError("over the time limit")
            return (
                self._elapsed << (_BIT_LEN_SEQUENCE + _BIT_LEN_MACHINE_ID)
                | self._sequence << _BIT_LEN_MACHINE_ID
                | self._machine_id
            )


def _machine_id() -> int:
    # Taken from the third and fourth bytes of the local address text.
    raw = get_local_ip().encode("ascii")
    return (raw[2] << 8) + raw[3]


@lru_cache(maxsize=None)
def _generator() -> _Sonyflake:
    return _Sonyflake(_machine_id())


def get_int_id() -> int:
    """Return a unique, time-ordered integer id."""
    return _generator().next_id()


def rand_string(letters: str, n: int) -> str:
    """Return ``n`` characters drawn from ``letters`` using secure randomness."""
    size = len(letters)
    return "".join(letters[byte % size] for byte in secrets.token_bytes(n))


def new_secret_id() -> str:
    """Return a new 36-character secret id."""
    return rand_string(ALPHABET62, 36)


def new_secret_key() -> str:
    """Return a new 32-character secret key."""
    return rand_string(ALPHABET62, 32)