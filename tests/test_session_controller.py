import random
import unittest

from studytrainer.app.events import EventBus
from studytrainer.drills.items import Item, ItemPool
from studytrainer.drills.session import (
    Phase,
    SessionController,
    casefold_match,
    tolerance_match,
)


def _pool(n: int = 3) -> ItemPool:
    return ItemPool(Item(id=f"i{k}", front=f"q{k}", back=f"a{k}") for k in range(n))


class LifecycleTests(unittest.TestCase):
    def test_start_presents_first_item(self) -> None:
        ctl = SessionController(_pool(), options=lambda it, _st, _rng: [it.back, "x"])
        st = ctl.start()
        self.assertEqual(st.phase, Phase.PRESENTING)
        self.assertEqual(st.current_index, 0)
        self.assertEqual(st.options, ["a0", "x"])

    def test_start_twice_raises(self) -> None:
        ctl = SessionController(_pool())
        ctl.start()
        with self.assertRaises(RuntimeError):
            ctl.start()

    def test_empty_pool_completes_immediately(self) -> None:
        calls = []
        ctl = SessionController([], on_complete=calls.append)
        st = ctl.start()
        self.assertEqual(st.phase, Phase.COMPLETE)
        self.assertEqual(st.total_answered, 0)
        self.assertEqual(ctl.percent, 0.0)
        self.assertEqual(len(calls), 1)

    def test_walk_to_completion(self) -> None:
        calls = []
        ctl = SessionController(_pool(2), on_complete=calls.append)
        ctl.start()
        ctl.submit_answer("a0")
        ctl.advance()
        self.assertEqual(ctl.state.current_index, 1)
        ctl.submit_answer("nope")
        ctl.advance()
        self.assertEqual(ctl.phase, Phase.COMPLETE)
        self.assertEqual(ctl.state.summary(), {
            "total": 2, "correct": 1, "score": 1, "best_streak": 1, "percent": 50.0,
        })
        ctl.finish()
        self.assertEqual(len(calls), 1)

    def test_advance_requires_answer(self) -> None:
        ctl = SessionController(_pool())
        ctl.start()
        ctl.advance()
        self.assertEqual(ctl.state.current_index, 0)
        self.assertEqual(ctl.phase, Phase.PRESENTING)

    def test_advance_if_checks_index(self) -> None:
        ctl = SessionController(_pool())
        ctl.start()
        self.assertFalse(ctl.advance_if(0))
        ctl.submit_answer("a0")
        self.assertFalse(ctl.advance_if(1))
        self.assertTrue(ctl.advance_if(0))
        self.assertEqual((ctl.phase, ctl.state.current_index), (Phase.PRESENTING, 1))
        ctl.submit_answer("a1")
        ctl.advance()
        ctl.submit_answer("a2")
        self.assertFalse(ctl.advance_if(1))
        self.assertEqual(ctl.state.current_index, 2)

    def test_finish_early(self) -> None:
        calls = []
        ctl = SessionController(_pool(), on_complete=calls.append)
        ctl.start()
        ctl.finish()
        self.assertEqual(ctl.phase, Phase.COMPLETE)
        self.assertIsNone(ctl.submit_answer("a0"))
        self.assertEqual(len(calls), 1)

    def test_restart_resets_counters(self) -> None:
        ctl = SessionController(_pool())
        ctl.start()
        ctl.submit_answer("a0")
        st = ctl.restart()
        self.assertEqual(st.phase, Phase.PRESENTING)
        self.assertEqual((st.score, st.total_answered, st.streak), (0, 0, 0))


class ScoringTests(unittest.TestCase):
    def test_second_submission_is_ignored(self) -> None:
        ctl = SessionController(_pool())
        ctl.start()
        self.assertTrue(ctl.submit_answer("a0"))
        self.assertIsNone(ctl.submit_answer("a0"))
        self.assertIsNone(ctl.submit_answer("wrong"))
        self.assertEqual(ctl.state.score, 1)
        self.assertEqual(ctl.state.total_answered, 1)

    def test_streaks(self) -> None:
        ctl = SessionController(ItemPool(Item(id=str(k), front="", back="ok") for k in range(4)))
        ctl.start()
        for ans in ("ok", "ok", "bad", "ok"):
            ctl.submit_answer(ans)
            ctl.advance()
        st = ctl.state
        self.assertEqual(st.streak, 1)
        self.assertEqual(st.best_streak, 2)
        self.assertEqual(st.correct, 3)
        self.assertAlmostEqual(ctl.accuracy, 0.75)

    def test_custom_points_and_award(self) -> None:
        ctl = SessionController(_pool(), points=lambda it, st: 10 + st.streak)
        ctl.start()
        ctl.submit_answer("a0")
        ctl.advance()
        ctl.submit_answer("a1")
        self.assertEqual(ctl.state.score, 10 + 11)
        ctl.award(50)
        self.assertEqual(ctl.state.score, 71)

    def test_matchers(self) -> None:
        self.assertTrue(casefold_match("  Victoria ", "victoria"))
        self.assertFalse(casefold_match("Victori", "Victoria"))
        match = tolerance_match(0.01)
        self.assertTrue(match(78.545, 78.54))
        self.assertFalse(match(78.56, 78.54))
        self.assertFalse(match("abc", 1.0))


class RefillAndEventsTests(unittest.TestCase):
    def test_refill_extends_session(self) -> None:
        counter = {"n": 0}

        def refill(state, _rng):
            if len(state.items) >= 3:
                return None
            counter["n"] += 1
            return Item(id=f"extra{counter['n']}", front="", back="z")

        ctl = SessionController([Item(id="first", front="", back="z")], refill=refill)
        ctl.start()
        for _ in range(3):
            ctl.submit_answer("z")
            ctl.advance()
        self.assertEqual([it.id for it in ctl.state.items], ["first", "extra1", "extra2"])
        self.assertEqual(ctl.phase, Phase.COMPLETE)
        self.assertEqual(ctl.state.score, 3)

    def test_events_in_order(self) -> None:
        bus = EventBus()
        seen = []
        for ev in ("session_started", "answered", "advanced", "completed"):
            bus.subscribe(ev, lambda payload, ev=ev: seen.append(ev))
        ctl = SessionController(_pool(2), events=bus, rng=random.Random(0))
        ctl.start()
        ctl.submit_answer("a0")
        ctl.advance()
        ctl.submit_answer("a1")
        ctl.advance()
        self.assertEqual(seen, ["session_started", "answered", "advanced", "answered", "completed"])


if __name__ == "__main__":
    unittest.main()
