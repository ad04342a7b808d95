import json
import tempfile
import unittest
from pathlib import Path

from studytrainer.app import explain
from studytrainer.app.events import EventBus
from studytrainer.stats.stats import accuracy_percent, format_summary, new_session_stats, update_stats, write_stats


class StatsTests(unittest.TestCase):
    def test_summary_weakest_first(self) -> None:
        st = new_session_stats()
        update_stats(st, "easy", True)
        update_stats(st, "easy", True)
        update_stats(st, "hard", False)
        update_stats(st, "hard", True)
        self.assertEqual((st["total"], st["correct"]), (4, 3))
        lines = format_summary(st).splitlines()
        self.assertEqual(lines[0], "Total: 3/4 correct (75%)")
        self.assertEqual(lines[1:], ["  hard: 1/2", "  easy: 2/2"])

    def test_percentage_safe_on_zero(self) -> None:
        self.assertEqual(accuracy_percent(0, 0), 0.0)
        self.assertEqual(format_summary(new_session_stats()), "Total: 0/0 correct (0%)")

    def test_write_stats(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "out" / "stats.json"
            st = new_session_stats()
            update_stats(st, "q1", True)
            write_stats(st, str(p))
            self.assertEqual(json.loads(p.read_text(encoding="utf-8"))["per_item"]["q1"], {"asked": 1, "correct": 1})


class EventAndTraceTests(unittest.TestCase):
    def tearDown(self) -> None:
        explain.enable(False)
        explain.set_sink(None)

    def test_failing_subscriber_is_isolated(self) -> None:
        bus = EventBus()
        seen = []

        def boom(_payload):
            raise RuntimeError("subscriber bug")

        bus.subscribe("answered", boom)
        bus.subscribe("answered", seen.append)
        bus.emit("answered", {"id": "a"})
        self.assertEqual(seen, [{"id": "a"}])
        bus.unsubscribe("answered", seen.append)
        bus.emit("answered", {"id": "b"})
        self.assertEqual(len(seen), 1)

    def test_trace_lines(self) -> None:
        lines = []
        explain.set_sink(lines.append)
        explain.trace("quiet", {})
        explain.enable(True)
        explain.trace("pool_saved", {"scope": "vocab-food"})
        self.assertEqual(lines, ['[EXPLAIN] pool_saved :: {"scope":"vocab-food"}'])


if __name__ == "__main__":
    unittest.main()
