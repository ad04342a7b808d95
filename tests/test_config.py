import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from studytrainer.config.config import load_config, validate_config


class ConfigTests(unittest.TestCase):
    def test_packaged_defaults(self) -> None:
        cfg = validate_config(load_config())
        self.assertEqual(cfg["storage"]["backend"], "disk")
        self.assertEqual(cfg["modules"]["math"]["difficulty"], "easy")
        self.assertEqual(cfg["mastery"]["bonus_threshold"], 0.8)
        self.assertEqual(set(cfg["modules"]), {"vocab", "flashcards", "geography", "periodic_table",
                                               "math", "geometry", "spelling", "typing"})

    def test_yaml_file(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "cfg.yml"
            p.write_text("storage:\n  backend: memory\nmodules:\n  math:\n    difficulty: hard\n", encoding="utf-8")
            cfg = validate_config(load_config(str(p)))
        self.assertEqual(cfg["storage"]["backend"], "memory")
        self.assertEqual(cfg["modules"]["math"]["difficulty"], "hard")
        self.assertEqual(cfg["modules"]["vocab"]["direction"], "fr_en")

    def test_invalid_values_fall_back_with_warning(self) -> None:
        buf = io.StringIO()
        with redirect_stdout(buf):
            cfg = validate_config({
                "storage": {"backend": "cloud"},
                "mastery": {"bonus_threshold": 3},
                "modules": {"math": {"difficulty": "insane"}, "flashcards": {"mode": "speed"}},
            })
        self.assertEqual(cfg["storage"]["backend"], "disk")
        self.assertEqual(cfg["modules"]["math"]["difficulty"], "easy")
        self.assertEqual(cfg["modules"]["flashcards"]["mode"], "classic")
        self.assertEqual(cfg["mastery"]["bonus_threshold"], 0.8)
        self.assertEqual(buf.getvalue().count("WARNING"), 4)

    def test_missing_file_exits(self) -> None:
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            load_config("/nonexistent/studytrainer.yml")


if __name__ == "__main__":
    unittest.main()
