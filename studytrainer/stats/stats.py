from __future__ import annotations

"""Basic session stats: per-item aggregation and formatting."""

import json
from pathlib import Path
from typing import Dict


def new_session_stats() -> Dict:
    """Create a new, empty stats structure."""
    return {"total": 0, "correct": 0, "per_item": {}}


def update_stats(stats: Dict, key: str, correct: bool) -> None:
    """Update stats for a single question outcome."""
    stats["total"] = int(stats.get("total", 0)) + 1
    if correct:
        stats["correct"] = int(stats.get("correct", 0)) + 1
    per = stats.setdefault("per_item", {})
    bucket = per.setdefault(str(key), {"asked": 0, "correct": 0})
    bucket["asked"] += 1
    bucket["correct"] += 1 if correct else 0


def accuracy_percent(correct: int, total: int) -> float:
    """Percent correct; 0.0 when nothing was asked."""
    if total <= 0:
        return 0.0
    return correct / total * 100.0


def write_stats(stats: Dict, path: str) -> None:
    """Write stats as JSON to path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2)


def format_summary(stats: Dict) -> str:
    """Return a human-readable summary of stats, weakest items first."""
    total = int(stats.get("total", 0))
    correct = int(stats.get("correct", 0))
    lines = [f"Total: {correct}/{total} correct ({accuracy_percent(correct, total):.0f}%)"]
    per = stats.get("per_item", {})

    def _key(k: str):
        b = per[k]
        return (accuracy_percent(b.get("correct", 0), b.get("asked", 0)), k)

    for k in sorted(per.keys(), key=_key):
        asked = per[k].get("asked", 0)
        corr = per[k].get("correct", 0)
        lines.append(f"  {k}: {corr}/{asked}")
    return "\n".join(lines)
