import math
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pandas as pd

from analytics import AnalyticsConfig, build_report, compute_metrics, ewma_by_session, load_and_prepare
from storage.schema import SessionRow
from storage.store import append_session_rows, validate_records

T0 = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


def _write_sessions(data_dir: Path) -> None:
    rows = [
        SessionRow(session_id="a", session_start=T0, module="math", mode="timer", Q=10, C=8, T_ms=40000),
        SessionRow(session_id="b", session_start=T0 + timedelta(hours=1), module="math", mode="practice",
                   Q=5, C=5, T_ms=10000),
        SessionRow(session_id="c", session_start=T0 + timedelta(hours=2), module="vocab", mode="fr_en",
                   Q=12, C=9, T_ms=60000),
    ]
    append_session_rows(validate_records(rows), data_dir)


class MetricsTests(unittest.TestCase):
    def test_compute_metrics(self) -> None:
        df = pd.DataFrame({"Q": [4, 0], "C": [2, 0], "T_ms": [20000, 0]})
        out = compute_metrics(df, AnalyticsConfig())
        self.assertAlmostEqual(float(out["acc"][0]), 0.5)
        self.assertAlmostEqual(float(out["t_mean_ms"][0]), 5000.0)
        self.assertAlmostEqual(float(out["time_factor"][0]), math.exp(-0.5), places=5)
        self.assertAlmostEqual(float(out["mark"][0]), 0.5 * math.exp(-0.5), places=5)
        self.assertEqual(float(out["acc"][1]), 0.0)
        self.assertEqual(float(out["time_factor"][1]), 1.0)
        self.assertEqual(float(out["mark"][1]), 0.0)
        self.assertNotIn("acc", df.columns)

    def test_config_bounds(self) -> None:
        with self.assertRaises(ValueError):
            AnalyticsConfig(alpha=0)
        with self.assertRaises(ValueError):
            AnalyticsConfig(smoothing_span=1)


class ReportTests(unittest.TestCase):
    def test_prepare_and_smooth(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            _write_sessions(Path(d))
            df = load_and_prepare(Path(d), AnalyticsConfig())
        self.assertEqual(list(df["session_id"]), ["a", "b", "c"])
        self.assertEqual(list(df["session_idx"]), [0, 1, 2])
        smooth = ewma_by_session(df, value_col="acc", span=3)
        self.assertIn("acc_smooth", smooth.columns)
        # first session of each module is its own EWMA value
        self.assertAlmostEqual(float(smooth["acc_smooth"].iloc[2]), 0.75, places=5)

    def test_build_report_writes_files(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            _write_sessions(Path(d))
            out = Path(d) / "reports"
            written = build_report(Path(d), out)
            names = sorted(p.name for p in written)
            self.assertEqual(names, [
                "analytics_snapshot.csv",
                "heatmap_module_mode_mark.png",
                "module_summary_acc.png",
                "trend_math_mark.png",
                "trend_vocab_mark.png",
            ])
            self.assertTrue(all(p.exists() for p in written))
            snap = pd.read_csv(out / "analytics_snapshot.csv")
            self.assertEqual(len(snap), 3)
            self.assertIn("mark", snap.columns)


if __name__ == "__main__":
    unittest.main()
