from __future__ import annotations

"""Matplotlib plots for trends, module/mode heatmaps, and module summaries."""

from typing import Optional
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def plot_trend(
    df: pd.DataFrame,
    *,
    module: Optional[str] = None,
    mode: Optional[str] = None,
    value_col: str = "mark",
    save_path: Optional[str | bytes | "os.PathLike[str]"] = None,
) -> bool:
    """Per-session values with the EWMA line when present. Returns False when there is nothing to draw."""
    g = df.copy()
    if module is not None:
        g = g[g["module"].astype("string") == module]
    if mode is not None:
        g = g[g["mode"].astype("string") == mode]
    if g.empty:
        return False
    g = g.sort_values("session_idx")
    plt.figure()
    plt.plot(g["session_idx"], g[value_col], marker="o", linestyle="", label=value_col)
    smooth_col = f"{value_col}_smooth"
    if smooth_col in g.columns:
        plt.plot(g["session_idx"], g[smooth_col], linewidth=2, label=f"{value_col} (EWMA)")
    plt.xlabel("Session")
    plt.ylabel(value_col)
    bits = [b for b in [module, mode] if b]
    plt.title("Trend: " + ", ".join(bits) if bits else "Trend")
    plt.legend()
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_heatmap(
    df: pd.DataFrame,
    *,
    value_col: str = "mark",
    save_path: Optional[str | bytes | "os.PathLike[str]"] = None,
) -> bool:
    if df.empty:
        return False
    pivot = (
        df.groupby(["module", "mode"], observed=True)[value_col].mean().unstack("mode").sort_index()
    )
    if pivot.empty:
        return False
    M = pivot.to_numpy(dtype="float32", na_value=np.nan)
    plt.figure()
    im = plt.imshow(M, aspect="auto", origin="lower")
    plt.colorbar(im, label=value_col)
    plt.xticks(ticks=np.arange(pivot.shape[1]), labels=pivot.columns.astype(str))
    plt.yticks(ticks=np.arange(pivot.shape[0]), labels=pivot.index.astype(str))
    plt.title(f"Heatmap ({value_col})")
    plt.xlabel("Mode")
    plt.ylabel("Module")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_module_summary(
    df: pd.DataFrame,
    *,
    value_col: str = "acc",
    save_path: Optional[str | bytes | "os.PathLike[str]"] = None,
) -> bool:
    """Bar chart of the mean value per module, labelled with session counts."""
    if df.empty:
        return False
    grouped = df.groupby("module", observed=True)[value_col]
    means = grouped.mean().sort_index()
    counts = grouped.size().reindex(means.index)
    plt.figure()
    x = np.arange(len(means))
    plt.bar(x, means.values)
    plt.xticks(ticks=x, labels=[f"{m}\n(n={n})" for m, n in zip(means.index.astype(str), counts.values)])
    plt.ylabel(value_col)
    plt.ylim(0, max(1.0, float(np.nanmax(means.values))))
    plt.title(f"Mean {value_col} by module")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True
