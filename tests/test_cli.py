import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from studytrainer.app.cli import main


def _run(argv):
    buf = io.StringIO()
    with redirect_stdout(buf):
        code = main(argv)
    return code, buf.getvalue()


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.memory_cfg = self.dir / "memory.yml"
        self.memory_cfg.write_text("storage:\n  backend: memory\n", encoding="utf-8")
        self.disk_cfg = self.dir / "disk.yml"
        self.disk_cfg.write_text(
            f"storage:\n  backend: disk\n  data_dir: {self.dir / 'data'}\n"
            f"  records_path: {self.dir / 'data' / 'records.json'}\n",
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_geometry(self) -> None:
        code, out = _run(["geometry", "circle", "2"])
        self.assertEqual(code, 0)
        self.assertIn("Area: 12.57", out)

    def test_show_params(self) -> None:
        code, out = _run(["show-params", "--module", "math", "--preset", "timer"])
        self.assertEqual(code, 0)
        self.assertIn("Module math: Math Quiz", out)
        self.assertIn("timer", out)
        self.assertNotIn("timer_hard", out)

    def test_list_modules(self) -> None:
        code, out = _run(["list-modules", "--config", str(self.memory_cfg)])
        self.assertEqual(code, 0)
        self.assertIn("spelling: Spelling Bee", out)

    def test_convert_and_history(self) -> None:
        code, out = _run(["convert", "1", "km", "m", "--config", str(self.disk_cfg)])
        self.assertEqual(code, 0)
        self.assertIn("1 km = 1000 m", out)
        code, out = _run(["convert", "--history", "--config", str(self.disk_cfg)])
        self.assertIn("1 km = 1000 m", out)
        code, _ = _run(["convert", "--config", str(self.memory_cfg)])
        self.assertEqual(code, 2)

    def test_elements(self) -> None:
        code, out = _run(["elements", "--category", "Noble Gas"])
        self.assertEqual(code, 0)
        self.assertEqual(len(out.strip().splitlines()), 7)

    def test_cards(self) -> None:
        code, out = _run(["cards", "--config", str(self.disk_cfg), "add", "--deck", "Birds",
                          "--front", "corvid", "--back", "crow family"])
        self.assertEqual(code, 0)
        self.assertIn("to Birds (1 cards)", out)
        code, out = _run(["cards", "--config", str(self.disk_cfg), "list", "--deck", "birds"])
        self.assertIn("corvid -> crow family", out)

    def test_run_quit_and_empty_stats(self) -> None:
        with mock.patch("builtins.input", return_value="q"):
            code, out = _run(["run", "--module", "geometry", "--config", str(self.memory_cfg), "--seed", "1"])
        self.assertEqual(code, 0)
        self.assertIn("Session Summary:", out)
        code, out = _run(["stats", "--config", str(self.disk_cfg)])
        self.assertIn("No sessions recorded yet.", out)


if __name__ == "__main__":
    unittest.main()
