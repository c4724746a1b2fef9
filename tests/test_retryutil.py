import threading

import pytest

from compkit.retryutil import (
    RetryableError,
    RetryCancelledError,
    RetryTimeoutError,
    retry_until_timeout,
)


def test_returns_first_result():
    calls = []

    def do():
        calls.append(1)
        return "ok"

    assert retry_until_timeout(0.001, 1.0, do) == "ok"
    assert len(calls) == 1


def test_retries_until_success():
    calls = []

    def do():
        calls.append(1)
        if len(calls) < 3:
            raise RetryableError()
        return len(calls)

    assert retry_until_timeout(0.001, 5.0, do) == 3


def test_other_errors_propagate():
    calls = []

    def do():
        calls.append(1)
        raise KeyError("boom")

    with pytest.raises(KeyError):
        retry_until_timeout(0.001, 1.0, do)
    assert len(calls) == 1


def test_times_out():
    def do():
        raise RetryableError()

    with pytest.raises(RetryTimeoutError) as info:
        retry_until_timeout(0.001, 0.02, do)
    assert str(info.value) == "timeout"


def test_cancelled_by_stop_event():
    stop = threading.Event()
    stop.set()
    calls = []

    def do():
        calls.append(1)
        raise RetryableError()

    with pytest.raises(RetryCancelledError):
        retry_until_timeout(0.001, 0, do, stop)
    assert len(calls) == 1


def test_zero_timeout_waits_for_success():
    calls = []

    def do():
        calls.append(1)
        if len(calls) < 5:
            raise RetryableError()
        return "done"

    assert retry_until_timeout(0.001, 0, do) == "done"
    assert len(calls) == 5


def test_retryable_error_message():
    assert str(RetryableError()) == "retry"