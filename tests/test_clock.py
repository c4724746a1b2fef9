import queue
import threading
from datetime import datetime, timedelta, timezone

import pytest

from compkit.clock import (
    FakeClock,
    FakePassiveClock,
    IntervalClock,
    RealClock,
)

MS = timedelta(milliseconds=1)
US = timedelta(microseconds=1)
SECOND = timedelta(seconds=1)


def _received(q):
    try:
        q.get_nowait()
    except queue.Empty:
        return False
    return True


def _start():
    return datetime.now(timezone.utc)


def _exercise_passive_clock(pc):
    t1 = _start()
    t2 = t1 + timedelta(hours=1)
    pc.set_time(t1)
    assert pc.now() == t1
    assert pc.since(t1) == timedelta(0)
    pc.set_time(t2)
    assert pc.since(t1) == timedelta(hours=1)
    assert pc.now() == t2


def test_fake_passive_clock():
    _exercise_passive_clock(FakePassiveClock(_start()))


def test_fake_clock():
    start = _start()
    tc = FakeClock(start)
    _exercise_passive_clock(tc)
    tc.set_time(start)
    tc.step(SECOND)
    assert tc.now() - start == SECOND


def test_fake_clock_step_accepts_seconds():
    start = _start()
    tc = FakeClock(start)
    tc.step(2.5)
    assert tc.since(start) == timedelta(seconds=2.5)


def test_fake_clock_sleep():
    start = _start()
    tc = FakeClock(start)
    tc.sleep(timedelta(hours=1))
    assert tc.now() - start == timedelta(hours=1)


def test_fake_after():
    tc = FakeClock(_start())
    assert not tc.has_waiters()
    one_sec = tc.after(SECOND)
    assert tc.has_waiters()
    one_oh_one_sec = tc.after(SECOND + MS)
    two_sec = tc.after(2 * SECOND)
    assert not any(_received(q) for q in (one_sec, one_oh_one_sec, two_sec))

    tc.step(999 * MS)
    assert not any(_received(q) for q in (one_sec, one_oh_one_sec, two_sec))

    tc.step(MS)
    assert _received(one_sec)
    assert not _received(one_oh_one_sec)
    assert not _received(two_sec)

    tc.step(MS)
    assert not _received(one_sec)
    assert _received(one_oh_one_sec)
    assert not _received(two_sec)


def test_fake_after_func():
    tc = FakeClock(_start())
    assert not tc.has_waiters()
    fired = {"one": 0, "one_oh_one": 0, "two": 0}

    def counter(name):
        def bump():
            fired[name] += 1

        return bump

    tc.after_func(SECOND, counter("one"))
    assert tc.has_waiters()
    tc.after_func(SECOND + MS, counter("one_oh_one"))
    two_sec_timer = tc.after_func(2 * SECOND, counter("two"))

    tc.step(999 * MS)
    assert fired == {"one": 0, "one_oh_one": 0, "two": 0}

    tc.step(MS)
    assert fired == {"one": 1, "one_oh_one": 0, "two": 0}

    tc.step(MS)
    assert fired == {"one": 1, "one_oh_one": 1, "two": 0}

    assert two_sec_timer.stop() is True
    tc.step(SECOND)
    assert fired == {"one": 1, "one_oh_one": 1, "two": 0}


def test_fake_timer():
    tc = FakeClock(_start())
    assert not tc.has_waiters()
    one_sec = tc.new_timer(SECOND)
    two_sec = tc.new_timer(2 * SECOND)
    tre_sec = tc.new_timer(3 * SECOND)
    assert tc.has_waiters()
    timers = (one_sec, two_sec, tre_sec)
    assert not any(_received(t.c()) for t in timers)

    tc.step(999999 * US)
    assert not any(_received(t.c()) for t in timers)

    tc.step(US)
    assert not _received(two_sec.c())
    assert not _received(tre_sec.c())
    assert _received(one_sec.c())

    tc.step(US)
    assert not any(_received(t.c()) for t in timers)

    assert one_sec.stop() is False
    assert two_sec.stop() is True

    tc.step(SECOND)
    assert not any(_received(t.c()) for t in timers)

    assert two_sec.reset(SECOND) is True
    assert tre_sec.reset(SECOND) is True

    tc.step(999999 * US)
    assert not any(_received(t.c()) for t in timers)

    tc.step(US)
    assert not _received(one_sec.c())
    assert _received(two_sec.c())
    assert _received(tre_sec.c())


def test_fake_timer_delivers_clock_time():
    start = _start()
    tc = FakeClock(start)
    timer = tc.new_timer(SECOND)
    tc.step(SECOND)
    assert timer.c().get_nowait() == start + SECOND


def test_fake_tick():
    tc = FakeClock(_start())
    assert not tc.has_waiters()
    one_sec = tc.new_ticker(SECOND).c()
    assert tc.has_waiters()
    one_oh_one_sec = tc.new_ticker(SECOND + MS).c()
    two_sec = tc.new_ticker(2 * SECOND).c()
    assert not any(_received(q) for q in (one_sec, one_oh_one_sec, two_sec))

    tc.step(999 * MS)
    assert not any(_received(q) for q in (one_sec, one_oh_one_sec, two_sec))

    tc.step(MS)
    assert _received(one_sec)
    assert not _received(one_oh_one_sec)
    assert not _received(two_sec)

    tc.step(MS)
    assert not _received(one_sec)
    assert _received(one_oh_one_sec)
    assert not _received(two_sec)

    for _ in range(4):
        tc.step(SECOND)

    accumulated = 0
    while _received(one_sec):
        accumulated += 1
    assert accumulated == 1


def test_fake_ticker_stop_removes_waiter():
    tc = FakeClock(_start())
    ticker = tc.new_ticker(SECOND)
    ticker.stop()
    assert not tc.has_waiters()
    tc.step(2 * SECOND)
    assert not _received(ticker.c())


def test_interval_clock_advances_on_each_read():
    start = _start()
    ic = IntervalClock(start, SECOND)
    assert ic.now() == start + SECOND
    assert ic.now() == start + 2 * SECOND
    assert ic.since(start) == 2 * SECOND


def test_real_clock_since_is_non_negative():
    rc = RealClock()
    before = rc.now()
    assert rc.since(before) >= timedelta(0)


def test_real_clock_after_delivers_time():
    rc = RealClock()
    before = rc.now()
    fired_at = rc.after(0.01).get(timeout=5)
    assert fired_at >= before


def test_real_timer_stop_before_firing():
    timer = RealClock().new_timer(60)
    assert timer.stop() is True
    assert timer.stop() is False


def test_real_timer_reset_after_firing():
    timer = RealClock().new_timer(0.01)
    timer.c().get(timeout=5)
    assert timer.reset(60) is False
    assert timer.stop() is True


def test_real_after_func_runs():
    done = threading.Event()
    RealClock().after_func(0.01, done.set)
    assert done.wait(5)


def test_real_ticker_ticks_until_stopped():
    ticker = RealClock().new_ticker(0.01)
    first = ticker.c().get(timeout=5)
    second = ticker.c().get(timeout=5)
    ticker.stop()
    assert second >= first


def test_real_ticker_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        RealClock().new_ticker(0)