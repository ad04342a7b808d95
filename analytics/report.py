from __future__ import annotations

"""Session report: metrics, smoothed trends and plots written to a folder.

Loads the sessions table, computes metrics, smooths trends per module and
generates basic plots plus a CSV snapshot.
"""

from pathlib import Path
from typing import List, Optional

from .config import AnalyticsConfig
from .prepare import load_and_prepare
from .smoothing import ewma_by_session
from .plots import plot_trend, plot_heatmap, plot_module_summary

SNAPSHOT_COLS = [
    "session_id",
    "session_start",
    "module",
    "mode",
    "Q",
    "C",
    "score",
    "best_streak",
    "T_ms",
    "acc",
    "t_mean_ms",
    "time_factor",
    "mark",
]


def build_report(data_dir: Path, outdir: Path, cfg: Optional[AnalyticsConfig] = None) -> List[Path]:
    """Write plots and `analytics_snapshot.csv` to `outdir`. Returns the written files."""
    cfg = cfg or AnalyticsConfig()
    df = load_and_prepare(Path(data_dir), cfg)

    # Build smoothed columns for mark & acc per module
    for col in ["mark", "acc"]:
        df = ewma_by_session(df, value_col=col, span=cfg.smoothing_span, group_cols=["module"])

    outdir = Path(outdir)
    outdir.mkdir(exist_ok=True, parents=True)
    written: List[Path] = []

    for module in sorted(df["module"].astype("string").dropna().unique()):
        p = outdir / f"trend_{module}_mark.png"
        if plot_trend(df, module=module, value_col="mark", save_path=p):
            written.append(p)
    p = outdir / "heatmap_module_mode_mark.png"
    if plot_heatmap(df, value_col="mark", save_path=p):
        written.append(p)
    p = outdir / "module_summary_acc.png"
    if plot_module_summary(df, value_col="acc", save_path=p):
        written.append(p)

    snap = outdir / "analytics_snapshot.csv"
    df[[c for c in SNAPSHOT_COLS if c in df.columns]].to_csv(snap, index=False)
    written.append(snap)
    return written
