from .config import AnalyticsConfig
from .metrics import compute_metrics
from .prepare import load_and_prepare
from .smoothing import ewma_by_session
from .plots import plot_trend, plot_heatmap, plot_module_summary
from .report import build_report

__all__ = [
    "AnalyticsConfig",
    "compute_metrics",
    "load_and_prepare",
    "ewma_by_session",
    "plot_trend",
    "plot_heatmap",
    "plot_module_summary",
    "build_report",
]
