from __future__ import annotations

"""Timer helpers for countdown sessions and delayed UI actions.

Both default to `threading.Timer`; pass `timer_factory(interval, fn)` to
drive them manually. A factory returns an object with `start()` and `cancel()`.
"""

import threading
from typing import Any, Callable, Optional

TimerFactory = Callable[[float, Callable[[], None]], Any]


def thread_timer(interval: float, fn: Callable[[], None]) -> threading.Timer:
    t = threading.Timer(interval, fn)
    t.daemon = True
    return t


class Countdown:
    """Fixed-interval countdown: `on_tick(remaining)` per interval, `on_expire()` once."""

    def __init__(
        self,
        seconds: float,
        on_tick: Optional[Callable[[float], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
        *,
        interval: float = 1.0,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.remaining = float(seconds)
        self.interval = float(interval)
        self.on_tick = on_tick
        self.on_expire = on_expire
        self._factory = timer_factory or thread_timer
        self._timer: Any = None
        self._lock = threading.RLock()
        self._cancelled = False
        self._expired = False

    @property
    def running(self) -> bool:
        return self._timer is not None and not (self._cancelled or self._expired)

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self) -> None:
        with self._lock:
            if self._timer is not None or self._cancelled:
                return
            self._schedule()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()

    def _schedule(self) -> None:
        self._timer = self._factory(self.interval, self._fire)
        self._timer.start()

    def _fire(self) -> None:
        # callbacks run outside the lock; they may take the session lock,
        # whose holder can be waiting in cancel()
        with self._lock:
            if self._cancelled or self._expired:
                return
            self.remaining = max(0.0, self.remaining - self.interval)
            remaining = self.remaining
            done = remaining <= 0
            if done:
                self._expired = True
        if self.on_tick is not None:
            self.on_tick(remaining)
        if done:
            if self.on_expire is not None:
                self.on_expire()
            return
        with self._lock:
            if not self._cancelled:
                self._schedule()


class DelayedAction:
    """Run `action` after `delay` seconds, only if `guard()` still holds then."""

    def __init__(
        self,
        delay: float,
        guard: Callable[[], bool],
        action: Callable[[], None],
        *,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.delay = float(delay)
        self.guard = guard
        self.action = action
        self._factory = timer_factory or thread_timer
        self._timer: Any = None
        self._cancelled = False
        self.fired = False

    def start(self) -> "DelayedAction":
        self._timer = self._factory(self.delay, self._fire)
        self._timer.start()
        return self

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def _fire(self) -> None:
        if self._cancelled or not self.guard():
            return
        self.fired = True
        self.action()
