import tempfile
import unittest
from pathlib import Path

from manual_timer import ManualTimers

from storage.records import RecordStore
from storage.store import SESSIONS_FILE, load_sessions
from studytrainer.app.events import EventBus
from studytrainer.app.module_registry import game_center, get_module, list_modules, make_module, resolve_params
from studytrainer.app.session_manager import SessionManager
from studytrainer.config.config import validate_config
from studytrainer.drills.flashcards import FlashcardDrill
from studytrainer.drills.math_quiz import MathQuizDrill


def _choice_ui(sm):
    def ask(_prompt):
        truth = sm.drill.controller.truth_of_current()
        return str(sm.drill.state.options.index(truth) + 1)

    return {"ask": ask, "inform": lambda _m: None}


class RegistryTests(unittest.TestCase):
    def test_every_module_has_default_preset(self) -> None:
        ids = [m.id for m in list_modules()]
        self.assertEqual(len(ids), 8)
        for m in list_modules():
            self.assertIn("default", m.presets)
        with self.assertRaises(KeyError):
            get_module("chess")

    def test_resolve_params(self) -> None:
        params = resolve_params("math", "timer", {"difficulty": "hard", "questions": None})
        self.assertEqual((params["mode"], params["difficulty"]), ("timer", "hard"))
        self.assertNotIn("questions", params)
        with self.assertRaises(KeyError):
            resolve_params("math", "marathon")

    def test_make_module(self) -> None:
        drill = make_module("math", params=resolve_params("math", "timer"))
        self.assertIsInstance(drill, MathQuizDrill)
        self.assertEqual(drill.mode, "timer")
        self.assertIsInstance(make_module("flashcards", params={"mode": "match"}), FlashcardDrill)

    def test_game_center(self) -> None:
        records = RecordStore()
        records.put("spelling.high_score", 420)
        rows = {r["id"]: r for r in game_center(records)}
        self.assertEqual(rows["spelling"]["records"]["High score"], 420)
        self.assertIsNone(rows["math"]["records"]["Total solved"])


class SessionManagerTests(unittest.TestCase):
    def test_memory_run(self) -> None:
        events = EventBus()
        completed = []
        events.subscribe("completed", completed.append)
        sm = SessionManager(validate_config({"storage": {"backend": "memory"}}), events=events)
        sm.start_session("periodic_table", "quick", seed=1)
        summary = sm.run(_choice_ui(sm))
        self.assertEqual((summary["total"], summary["correct"], summary["score"]), (4, 4, 4))
        self.assertEqual(summary["percent"], 100.0)
        self.assertEqual(len(completed), 1)
        self.assertEqual(sm.records.get("periodic_table.best_score"), 4)
        self.assertIn("best_score", summary["extra"]["new_records"])

    def test_params_layering(self) -> None:
        cfg = validate_config({"storage": {"backend": "memory"}, "modules": {"math": {"difficulty": "medium"}}})
        sm = SessionManager(cfg, timer_factory=ManualTimers())
        sm.start_session("math", "practice", {"questions": 2})
        params = sm.preview_params()
        self.assertEqual((params["difficulty"], params["questions"]), ("easy", 2))
        sm.start_session("vocab", "default", {"direction": "en_fr"})
        self.assertEqual(sm.preview_params()["mode"], "en_fr")
        self.assertEqual(sm.preview_params()["mastery_threshold"], 0.8)

    def test_disk_run_appends_session_row(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            cfg = validate_config({"storage": {"backend": "disk", "data_dir": d,
                                               "records_path": str(Path(d) / "records.json")}})
            sm = SessionManager(cfg)
            sm.start_session("periodic_table", "quick", seed=2)
            sm.run(_choice_ui(sm))
            df = load_sessions(Path(d))
            self.assertEqual(len(df), 1)
            self.assertEqual(str(df["module"].iloc[0]), "periodic_table")
            self.assertEqual(int(df["Q"].iloc[0]), 4)
            self.assertEqual(RecordStore(Path(d) / "records.json").get("periodic_table.best_score"), 4)

    def test_empty_or_disabled_sessions_are_not_recorded(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            cfg = validate_config({"storage": {"data_dir": d, "records_path": str(Path(d) / "r.json")},
                                   "session": {"stats_disable": True}})
            sm = SessionManager(cfg)
            sm.start_session("periodic_table", "quick", seed=3)
            sm.run(_choice_ui(sm))
            self.assertFalse((Path(d) / SESSIONS_FILE).exists())

            cfg = validate_config({"storage": {"data_dir": d, "records_path": str(Path(d) / "r.json")}})
            sm = SessionManager(cfg)
            sm.start_session("geometry", "default", {"questions": 0})
            summary = sm.run(_choice_ui(sm))
            self.assertEqual(summary["total"], 0)
            self.assertFalse((Path(d) / SESSIONS_FILE).exists())


if __name__ == "__main__":
    unittest.main()
