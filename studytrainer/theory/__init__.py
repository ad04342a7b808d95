"""Subject content helpers: arithmetic, shape formulas, unit tables, typing metrics."""

from . import arithmetic, geometry, typing_metrics, units  # noqa: F401
