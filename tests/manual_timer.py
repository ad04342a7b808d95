"""Deterministic stand-in for threading.Timer used by timer-driven tests."""

from __future__ import annotations


class ManualTimer:
    def __init__(self, interval, fn, owner) -> None:
        self.interval = interval
        self.fn = fn
        self.owner = owner
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled and not self.fired:
            self.fired = True
            self.fn()


class ManualTimers:
    """Timer factory: collects timers, fires them on demand."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, interval, fn) -> ManualTimer:
        t = ManualTimer(interval, fn, self)
        self.timers.append(t)
        return t

    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_next(self) -> bool:
        pend = self.pending()
        if not pend:
            return False
        pend[0].fire()
        return True

    def run_all(self, limit: int = 1000) -> int:
        n = 0
        while n < limit and self.fire_next():
            n += 1
        return n
