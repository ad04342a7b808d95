from __future__ import annotations

"""Per-module trend smoothing over session order."""

import pandas as pd


def ewma_by_session(
    df: pd.DataFrame,
    value_col: str,
    span: int,
    group_cols: list[str] | None = None,
) -> pd.DataFrame:
    """Add `<value_col>_smooth`, the EWMA of `value_col` within each group.

    Rows come back ordered by `session_idx`. The first session of a group
    smooths to its own value.
    """
    keys = group_cols or ["module"]
    ordered = df.sort_values("session_idx").copy()
    grouped = ordered.groupby(keys, observed=True)[value_col]
    ordered[f"{value_col}_smooth"] = grouped.transform(lambda s: s.ewm(span=span).mean()).astype("float32")
    return ordered
