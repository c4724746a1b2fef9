"""Crash and error handling helpers: logging, handler hooks and recovery."""

from __future__ import annotations

import inspect
import logging
import threading
import time
import traceback
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Optional

logger = logging.getLogger(__name__)

REALLY_CRASH = True
"""When true, handle_crash re-raises after running the handlers."""


class AbortHandlerError(Exception):
    """Raised to abort a request handler without logging a stack trace."""

    def __init__(self, message: str = "abort handler") -> None:
        super().__init__(message)


def _log_panic(exc: BaseException) -> None:
    if isinstance(exc, AbortHandlerError):
        return
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error("Observed a panic: %r (%s)\n%s", exc, exc, stack)


PANIC_HANDLERS: list[Callable[[BaseException], None]] = [_log_panic]
"""Functions called with the exception whenever handle_crash sees one."""


@contextmanager
def handle_crash(*args: Callable[[BaseException], None]) -> Iterator[None]:
    """Run the panic handlers, then ``args``, on any exception in the block.

    The exception is re-raised afterwards unless REALLY_CRASH is false.
    """
    try:
        yield
    except Exception as exc:
        for handler in PANIC_HANDLERS:
            handler(exc)
        for handler in args:
            handler(exc)
        if REALLY_CRASH:
            raise


def _log_error(err: BaseException) -> None:
    logger.error("%s", err, stacklevel=3)


class _RudimentaryErrorBackoff:
    """Blocks when errors are reported more often than ``min_period`` seconds."""

    def __init__(self, min_period: float) -> None:
        self._min_period = min_period
        self._lock = threading.Lock()
        self._last_error_time = time.monotonic()

    def on_error(self, err: BaseException) -> None:
        with self._lock:
            elapsed = time.monotonic() - self._last_error_time
            if 0 <= elapsed < self._min_period:
                time.sleep(self._min_period - elapsed)
            self._last_error_time = time.monotonic()


ERROR_HANDLERS: list[Callable[[BaseException], None]] = [
    _log_error,
    _RudimentaryErrorBackoff(0.001).on_error,
]
"""Functions called by handle_error for every reported error."""


def handle_error(err: Optional[BaseException]) -> None:
    """Report an error that cannot be returned to a caller; None is ignored."""
    if err is None:
        return
    for handler in ERROR_HANDLERS:
        handler(err)


def get_caller() -> str:
    """Return the name of the caller of the function that calls this one."""
    frame = inspect.currentframe()
    try:
        caller = frame.f_back if frame is not None else None
        target = caller.f_back if caller is not None else None
        if target is None:
            return "Unable to find caller"
        module = inspect.getmodule(target)
        if module is not None:
            module_name = module.__name__
        else:
            module_name = inspect.getmodulename(target.f_code.co_filename) or "?"
        return f"{module_name}.{target.f_code.co_name}"
    finally:
        del frame


@contextmanager
def recover_from_panic() -> Iterator[None]:
    """Turn any exception in the block into a RuntimeError carrying its stack."""
    try:
        yield
    except Exception as exc:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        raise RuntimeError(
            f"recovered from panic {str(exc)!r}. (err={exc!r}) Call stack:\n{stack}"
        ) from exc


def must(err: Optional[BaseException]) -> None:
    """Raise ``err`` if it is not None."""
    if err is not None:
        raise err