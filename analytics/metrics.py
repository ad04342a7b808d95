from __future__ import annotations

"""Metric computations for per-session analytics."""

import numpy as np
import pandas as pd
from .config import AnalyticsConfig


def compute_metrics(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Compute accuracy, mean time per item, time factor, and composite mark.

    Returns a copy with added columns:
    - acc, t_mean_ms, time_factor, mark

    Sessions with no answered items get acc = 0 and t_mean_ms = 0.
    """
    out = df.copy()
    q_raw = out["Q"].astype("float32").to_numpy()
    answered = q_raw > 0
    q = np.where(answered, q_raw, 1.0)
    out["acc"] = np.where(answered, out["C"].astype("float32").to_numpy() / q, 0.0).astype("float32")
    out["t_mean_ms"] = np.where(answered, out["T_ms"].astype("float32").to_numpy() / q, 0.0).astype("float32")

    # Time factor: exp(-alpha * t_mean/T_ref)
    out["time_factor"] = np.exp(-float(cfg.alpha) * (out["t_mean_ms"] / float(cfg.T_ref_ms))).astype("float32")

    # Composite mark
    out["mark"] = (out["acc"] * out["time_factor"]).clip(0, 1).astype("float32")
    return out
