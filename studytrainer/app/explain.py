from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with `--explain` and emit terse one-line JSON traces at session,
answer, and storage milestones.
"""

import json
from typing import Any, Callable, Dict

_ENABLED = False
_SINK: Callable[[str], None] = print


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def enabled() -> bool:
    return _ENABLED


def set_sink(sink: Callable[[str], None] | None) -> None:
    """Redirect trace lines (tests capture them); None restores print."""
    global _SINK
    _SINK = sink or print


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    data = payload or {}
    try:
        line = f"[EXPLAIN] {event} :: {json.dumps(data, separators=(',', ':'), default=str)}"
    except (TypeError, ValueError):
        line = f"[EXPLAIN] {event}"
    _SINK(line)
