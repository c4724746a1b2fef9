import signal

import pytest

from compkit import signals


@pytest.fixture
def fresh_handler(monkeypatch):
    saved = {sig: signal.getsignal(sig) for sig in signals.SHUTDOWN_SIGNALS}
    monkeypatch.setattr(signals, "_installed", False)
    try:
        yield
    finally:
        for sig, handler in saved.items():
            signal.signal(sig, handler)


def test_stop_event_set_on_interrupt(fresh_handler):
    stop = signals.setup_signal_handler()
    assert not stop.is_set()
    signal.raise_signal(signal.SIGINT)
    assert stop.is_set()


def test_second_setup_raises(fresh_handler):
    signals.setup_signal_handler()
    with pytest.raises(RuntimeError):
        signals.setup_signal_handler()


def test_every_shutdown_signal_sets_event(fresh_handler):
    stop = signals.setup_signal_handler()
    handlers = [signal.getsignal(sig) for sig in signals.SHUTDOWN_SIGNALS]
    assert len(set(handlers)) == 1
    handlers[0](signals.SHUTDOWN_SIGNALS[-1], None)
    assert stop.is_set()