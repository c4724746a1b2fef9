"""Real and fake clocks, timers and tickers for code that depends on time.

Times are timezone-aware ``datetime`` values. Durations may be given as
``timedelta`` or as a number of seconds. Timer and ticker channels are
``queue.Queue`` objects that hold at most one pending time.
"""

from __future__ import annotations

import abc
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

Duration = Union[timedelta, float, int]

_ZERO = timedelta(0)


def _duration(d: Duration) -> timedelta:
    if isinstance(d, timedelta):
        return d
    return timedelta(seconds=d)


def _seconds(d: Duration) -> float:
    return _duration(d).total_seconds()


class PassiveClock(abc.ABC):
    """A clock that can be read but cannot schedule anything."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current time."""

    @abc.abstractmethod
    def since(self, ts: datetime) -> timedelta:
        """Return the time elapsed since ``ts``."""


class Timer(abc.ABC):
    """A single-shot timer."""

    @abc.abstractmethod
    def c(self) -> "queue.Queue[datetime]":
        """Return the queue that receives the firing time."""

    @abc.abstractmethod
    def stop(self) -> bool:
        """Stop the timer; return True if it had not yet fired or been stopped."""

    @abc.abstractmethod
    def reset(self, d: Duration) -> bool:
        """Make the timer fire ``d`` from now."""


class Ticker(abc.ABC):
    """A periodic ticker."""

    @abc.abstractmethod
    def c(self) -> "queue.Queue[datetime]":
        """Return the queue that receives tick times."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Stop delivering ticks."""


class Clock(PassiveClock):
    """A clock that can also schedule timers, tickers and sleeps."""

    @abc.abstractmethod
    def after(self, d: Duration) -> "queue.Queue[datetime]":
        """Return a queue that receives the time once ``d`` has passed."""

    @abc.abstractmethod
    def after_func(self, d: Duration, f: Callable[[], None]) -> Timer:
        """Call ``f`` once ``d`` has passed."""

    @abc.abstractmethod
    def new_timer(self, d: Duration) -> Timer:
        """Return a timer that fires once ``d`` has passed."""

    @abc.abstractmethod
    def new_ticker(self, d: Duration) -> Ticker:
        """Return a ticker that ticks every ``d``."""

    @abc.abstractmethod
    def sleep(self, d: Duration) -> None:
        """Pause for ``d``."""


class _RealTimer(Timer):
    def __init__(self, d: Duration, func: Optional[Callable[[], None]] = None) -> None:
        self._queue: "queue.Queue[datetime]" = queue.Queue(maxsize=1)
        self._func = func
        self._lock = threading.Lock()
        self._generation = 0
        self._active = False
        self._thread: Optional[threading.Timer] = None
        with self._lock:
            self._start_locked(d)

    def _start_locked(self, d: Duration) -> None:
        self._generation += 1
        generation = self._generation
        self._active = True
        self._thread = threading.Timer(max(_seconds(d), 0.0), self._fire, args=(generation,))
        self._thread.daemon = True
        self._thread.start()

    def _cancel_locked(self) -> bool:
        was_active = self._active
        self._active = False
        self._generation += 1
        if self._thread is not None:
            self._thread.cancel()
            self._thread = None
        return was_active

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or not self._active:
                return
            self._active = False
        if self._func is not None:
            self._func()
            return
        try:
            self._queue.put_nowait(datetime.now(timezone.utc))
        except queue.Full:
            pass

    def c(self) -> "queue.Queue[datetime]":
        return self._queue

    def stop(self) -> bool:
        with self._lock:
            return self._cancel_locked()

    def reset(self, d: Duration) -> bool:
        with self._lock:
            was_active = self._cancel_locked()
            self._start_locked(d)
            return was_active


class _RealTicker(Ticker):
    def __init__(self, d: Duration) -> None:
        period = _seconds(d)
        if period <= 0:
            raise ValueError("non-positive interval for ticker")
        self._period = period
        self._queue: "queue.Queue[datetime]" = queue.Queue(maxsize=1)
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        deadline = time.monotonic() + self._period
        while not self._stopped.wait(max(deadline - time.monotonic(), 0.0)):
            try:
                self._queue.put_nowait(datetime.now(timezone.utc))
            except queue.Full:
                pass
            deadline += self._period
            now = time.monotonic()
            if deadline < now:
                # Skip ticks that a slow reader missed.
                deadline = now + self._period

    def c(self) -> "queue.Queue[datetime]":
        return self._queue

    def stop(self) -> None:
        self._stopped.set()


class RealClock(Clock):
    """A clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def since(self, ts: datetime) -> timedelta:
        return self.now() - ts

    def after(self, d: Duration) -> "queue.Queue[datetime]":
        return self.new_timer(d).c()

    def after_func(self, d: Duration, f: Callable[[], None]) -> Timer:
        return _RealTimer(d, f)

    def new_timer(self, d: Duration) -> Timer:
        return _RealTimer(d)

    def new_ticker(self, d: Duration) -> Ticker:
        return _RealTicker(d)

    def sleep(self, d: Duration) -> None:
        time.sleep(max(_seconds(d), 0.0))


class FakePassiveClock(PassiveClock):
    """A passive clock that reports a settable time."""

    def __init__(self, t: datetime) -> None:
        self._lock = threading.RLock()
        self._time = t

    def now(self) -> datetime:
        with self._lock:
            return self._time

    def since(self, ts: datetime) -> timedelta:
        with self._lock:
            return self._time - ts

    def set_time(self, t: datetime) -> None:
        """Set the reported time."""
        with self._lock:
            self._time = t


@dataclass
class _Waiter:
    target_time: datetime
    dest: "queue.Queue[datetime]"
    step_interval: timedelta = _ZERO
    skip_if_blocked: bool = False
    after_func: Optional[Callable[[], None]] = None


class _FakeTimer(Timer):
    def __init__(self, clock: "FakeClock", dest: "queue.Queue[datetime]") -> None:
        self._clock = clock
        self._dest = dest

    def c(self) -> "queue.Queue[datetime]":
        return self._dest

    def stop(self) -> bool:
        clock = self._clock
        with clock._lock:
            kept = [w for w in clock._waiters if w.dest is not self._dest]
            stopped = len(kept) != len(clock._waiters)
            clock._waiters = kept
            return stopped

    def reset(self, d: Duration) -> bool:
        clock = self._clock
        with clock._lock:
            target = clock._time + _duration(d)
            for waiter in clock._waiters:
                if waiter.dest is self._dest:
                    waiter.target_time = target
                    return True
            # Already fired or stopped: arm it again.
            clock._waiters.append(_Waiter(target_time=target, dest=self._dest))
            return True


class _FakeTicker(Ticker):
    def __init__(self, clock: "FakeClock", dest: "queue.Queue[datetime]") -> None:
        self._clock = clock
        self._dest = dest

    def c(self) -> "queue.Queue[datetime]":
        return self._dest

    def stop(self) -> None:
        clock = self._clock
        with clock._lock:
            clock._waiters = [w for w in clock._waiters if w.dest is not self._dest]


class FakeClock(FakePassiveClock, Clock):
    """A clock whose time only moves when told to; it fires due waiters."""

    def __init__(self, t: datetime) -> None:
        super().__init__(t)
        self._waiters: list[_Waiter] = []

    def after(self, d: Duration) -> "queue.Queue[datetime]":
        with self._lock:
            dest: "queue.Queue[datetime]" = queue.Queue(maxsize=1)
            self._waiters.append(_Waiter(target_time=self._time + _duration(d), dest=dest))
            return dest

    def after_func(self, d: Duration, f: Callable[[], None]) -> Timer:
        with self._lock:
            dest: "queue.Queue[datetime]" = queue.Queue(maxsize=1)
            self._waiters.append(
                _Waiter(target_time=self._time + _duration(d), dest=dest, after_func=f)
            )
            return _FakeTimer(self, dest)

    def new_timer(self, d: Duration) -> Timer:
        with self._lock:
            dest: "queue.Queue[datetime]" = queue.Queue(maxsize=1)
            self._waiters.append(_Waiter(target_time=self._time + _duration(d), dest=dest))
            return _FakeTimer(self, dest)

    def new_ticker(self, d: Duration) -> Ticker:
        interval = _duration(d)
        with self._lock:
            dest: "queue.Queue[datetime]" = queue.Queue(maxsize=1)
            self._waiters.append(
                _Waiter(
                    target_time=self._time + interval,
                    dest=dest,
                    step_interval=interval,
                    skip_if_blocked=True,
                )
            )
            return _FakeTicker(self, dest)

    def step(self, d: Duration) -> None:
        """Move the clock forward by ``d`` and fire every waiter that is due."""
        with self._lock:
            self._set_time_locked(self._time + _duration(d))

    def set_time(self, t: datetime) -> None:
        with self._lock:
            self._set_time_locked(t)

    def _set_time_locked(self, t: datetime) -> None:
        self._time = t
        kept: list[_Waiter] = []
        for waiter in self._waiters:
            if waiter.target_time > t:
                kept.append(waiter)
                continue
            if waiter.skip_if_blocked:
                try:
                    waiter.dest.put_nowait(t)
                except queue.Full:
                    pass
            else:
                waiter.dest.put(t)
            if waiter.after_func is not None:
                waiter.after_func()
            if waiter.step_interval > _ZERO:
                while waiter.target_time <= t:
                    waiter.target_time += waiter.step_interval
                kept.append(waiter)
        self._waiters = kept

    def has_waiters(self) -> bool:
        """Return True if some timer, ticker or after-call is still pending."""
        with self._lock:
            return bool(self._waiters)

    def sleep(self, d: Duration) -> None:
        self.step(d)


class IntervalClock(PassiveClock):
    """A passive clock that moves forward by ``duration`` on every read."""

    def __init__(self, time: datetime, duration: Duration) -> None:
        self.time = time
        self.duration = _duration(duration)

    def now(self) -> datetime:
        self.time = self.time + self.duration
        return self.time

    def since(self, ts: datetime) -> timedelta:
        return self.time - ts