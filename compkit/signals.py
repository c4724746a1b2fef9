"""Turn shutdown signals into a stop event."""

from __future__ import annotations

import os
import signal
import sys
import threading

if sys.platform.startswith("win"):
    SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT,)
else:
    SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)

_lock = threading.Lock()
_installed = False


def setup_signal_handler() -> threading.Event:
    """Install handlers for the shutdown signals and return a stop event.

    The event is set on the first signal; a second signal terminates the
    process with exit code 1. Calling this twice raises RuntimeError. It
    must be called from the main thread.
    """
    global _installed
    with _lock:
        if _installed:
            raise RuntimeError("signal handler has already been set up")
        _installed = True

    stop = threading.Event()

    def handle(signum, frame):
        if stop.is_set():
            os._exit(1)
        stop.set()

    for sig in SHUTDOWN_SIGNALS:
        signal.signal(sig, handle)
    return stop