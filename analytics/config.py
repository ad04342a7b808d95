from __future__ import annotations

"""Settings for session analytics, validated with Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Knobs for the session mark and trend lines.

    mark = acc * exp(-alpha * t_mean_ms / T_ref_ms), where t_mean_ms is the
    mean time per answered question. A five second answer is the reference.
    """

    alpha: float = Field(0.5, gt=0)
    T_ref_ms: int = Field(5000, gt=0)
    smoothing_span: int = Field(10, gt=1, description="EWMA span, counted in sessions")
