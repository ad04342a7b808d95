from __future__ import annotations

"""Load the sessions table and compute derived metrics."""

from pathlib import Path
import pandas as pd
from storage.store import SESSIONS_FILE
from .config import AnalyticsConfig
from .metrics import compute_metrics


def load_and_prepare(path: Path, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Read the sessions Parquet and compute metrics with consistent dtypes.

    - `path` is the Parquet file or the data directory holding it.
    - Ensures 'module' and 'mode' are categorical.
    - Sorts by (session_start, session_id).
    - Computes metrics and adds a stable session index 'session_idx'.
    """
    path = Path(path)
    if path.is_dir():
        path = path / SESSIONS_FILE
    df = pd.read_parquet(path, engine="pyarrow")
    for col in ("module", "mode"):
        if col in df.columns:
            df[col] = df[col].astype("string").astype("category")
    df = df.sort_values(["session_start", "session_id"], kind="stable")

    df = compute_metrics(df, cfg)
    # Stable session order index
    df["session_idx"] = pd.factorize(df["session_id"])[0]
    return df.reset_index(drop=True)
