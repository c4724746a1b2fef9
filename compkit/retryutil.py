"""Retry an operation at a fixed interval until it succeeds or time runs out."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Optional, TypeVar

T = TypeVar("T")


class RetryableError(Exception):
    """Raised by an operation to ask for another attempt."""

    def __init__(self, message: str = "retry") -> None:
        super().__init__(message)


class RetryTimeoutError(Exception):
    """Raised when the retry timeout elapses."""

    def __init__(self, message: str = "timeout") -> None:
        super().__init__(message)


class RetryCancelledError(Exception):
    """Raised when the stop event is set while waiting to retry."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


def _pause(stop: Optional[threading.Event], seconds: float) -> bool:
    seconds = max(seconds, 0.0)
    if stop is None:
        time.sleep(seconds)
        return False
    return stop.wait(seconds)


def retry_until_timeout(
    interval: float,
    timeout: float,
    do: Callable[[], T],
    stop: Optional[threading.Event] = None,
) -> T:
    """Call ``do`` until it returns, retrying every ``interval`` seconds.

    ``do`` raises RetryableError to ask for another attempt; any other
    exception propagates. A ``timeout`` of 0 means no time limit.
    """
    try:
        return do()
    except RetryableError:
        pass

    deadline = None if timeout == 0 else time.monotonic() + timeout
    while True:
        expires = False
        wait = interval
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= interval:
                wait, expires = remaining, True
        if _pause(stop, wait):
            raise RetryCancelledError()
        if expires:
            raise RetryTimeoutError()
        try:
            return do()
        except RetryableError:
            continue