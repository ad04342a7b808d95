from __future__ import annotations

"""Durable JSON store for persisted scalars and short histories.

Holds high scores, all-time best streaks, typing attempts, conversion
history and flashcard deck metadata. Shape:

{
  "schema": 1,
  "values": {"math.timer_high_score.easy": 14, "spelling.high_score": 420, ...},
  "lists": {"typing.attempts": [ {...}, ... ], "units.history": [ ... ]}
}

Lists are stored newest first and capped by the caller.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

SCHEMA = 1


def _fresh() -> Dict[str, Any]:
    return {"schema": SCHEMA, "values": {}, "lists": {}}


class RecordStore:
    """File-backed key/value + capped-list store. `path=None` keeps everything in memory."""

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return _fresh()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return _fresh()
        if not isinstance(data, dict) or data.get("schema") != SCHEMA:
            return _fresh()
        if not isinstance(data.get("values"), dict):
            data["values"] = {}
        if not isinstance(data.get("lists"), dict):
            data["lists"] = {}
        return data

    def reload(self) -> None:
        self._data = self._load()

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, default=str)
        tmp.replace(self.path)

    # --- scalars ---

    def get(self, key: str, default: Any = None) -> Any:
        return self._data["values"].get(key, default)

    def put(self, key: str, value: Any) -> None:
        self._data["values"][key] = value

    def number(self, key: str) -> Optional[float]:
        """Stored numeric value, or None when missing or not a number."""
        cur = self.get(key)
        if isinstance(cur, bool) or not isinstance(cur, (int, float)):
            return None
        return cur

    def bump_max(self, key: str, value: float) -> bool:
        """Keep the larger of the stored and given value. Returns True on a new record."""
        cur = self.number(key)
        if cur is None or value > cur:
            self.put(key, value)
            return True
        return False

    def increment(self, key: str, by: int = 1) -> int:
        val = int(self.number(key) or 0) + int(by)
        self.put(key, val)
        return val

    # --- lists ---

    def get_list(self, key: str) -> List[Any]:
        val = self._data["lists"].get(key, [])
        return list(val) if isinstance(val, list) else []

    def set_list(self, key: str, values: List[Any]) -> None:
        self._data["lists"][key] = list(values)

    def append_capped(self, key: str, entry: Any, cap: int) -> List[Any]:
        """Prepend `entry` and keep at most `cap` entries."""
        lst = self.get_list(key)
        lst.insert(0, entry)
        lst = lst[: max(0, int(cap))]
        self._data["lists"][key] = lst
        return lst

    def clear_list(self, key: str) -> None:
        self._data["lists"].pop(key, None)
