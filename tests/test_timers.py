import threading
import unittest

from studytrainer.app.timers import Countdown, DelayedAction

from manual_timer import ManualTimers


class CountdownTests(unittest.TestCase):
    def test_ticks_then_expires_once(self) -> None:
        timers = ManualTimers()
        ticks, expired = [], []
        cd = Countdown(3, on_tick=ticks.append, on_expire=lambda: expired.append(True), timer_factory=timers)
        cd.start()
        self.assertTrue(cd.running)
        fired = timers.run_all()
        self.assertEqual(fired, 3)
        self.assertEqual(ticks, [2.0, 1.0, 0.0])
        self.assertEqual(expired, [True])
        self.assertTrue(cd.expired)
        self.assertFalse(cd.running)

    def test_cancel_stops_ticks(self) -> None:
        timers = ManualTimers()
        ticks = []
        cd = Countdown(5, on_tick=ticks.append, timer_factory=timers)
        cd.start()
        timers.fire_next()
        cd.cancel()
        self.assertEqual(timers.run_all(), 0)
        self.assertEqual(ticks, [4.0])
        self.assertFalse(cd.expired)

    def test_callbacks_run_without_holding_the_lock(self) -> None:
        timers = ManualTimers()
        blocked = []

        def cancel_from_other_thread(*_args) -> None:
            t = threading.Thread(target=cd.cancel, daemon=True)
            t.start()
            t.join(timeout=2.0)
            blocked.append(t.is_alive())

        cd = Countdown(2, on_tick=cancel_from_other_thread, on_expire=cancel_from_other_thread, timer_factory=timers)
        cd.start()
        timers.fire_next()
        self.assertEqual(blocked, [False])
        self.assertEqual(timers.run_all(), 0)

        timers = ManualTimers()
        blocked.clear()
        cd = Countdown(1, on_expire=cancel_from_other_thread, timer_factory=timers)
        cd.start()
        timers.run_all()
        self.assertEqual(blocked, [False])
        self.assertTrue(cd.expired)

    def test_bad_interval(self) -> None:
        with self.assertRaises(ValueError):
            Countdown(5, interval=0)


class DelayedActionTests(unittest.TestCase):
    def test_runs_when_guard_holds(self) -> None:
        timers = ManualTimers()
        ran = []
        act = DelayedAction(0.5, guard=lambda: True, action=lambda: ran.append(1), timer_factory=timers).start()
        timers.run_all()
        self.assertEqual(ran, [1])
        self.assertTrue(act.fired)
        self.assertEqual(timers.timers[0].interval, 0.5)

    def test_stale_guard_skips(self) -> None:
        timers = ManualTimers()
        ran = []
        state = {"phase": "answered"}
        DelayedAction(1.0, guard=lambda: state["phase"] == "answered", action=lambda: ran.append(1),
                      timer_factory=timers).start()
        state["phase"] = "presenting"
        timers.run_all()
        self.assertEqual(ran, [])

    def test_cancelled(self) -> None:
        timers = ManualTimers()
        ran = []
        act = DelayedAction(1.0, guard=lambda: True, action=lambda: ran.append(1), timer_factory=timers).start()
        act.cancel()
        timers.run_all()
        self.assertEqual(ran, [])


if __name__ == "__main__":
    unittest.main()
