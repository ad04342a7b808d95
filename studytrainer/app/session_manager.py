from __future__ import annotations

"""Session Manager: orchestrates modules, presets, and persistence.

Resolves parameters (module config -> preset -> overrides), builds the
drill through the registry, runs it against UI callbacks and appends one
row to the sessions table. Statistics persistence never interrupts a
session: failures are traced and dropped.
"""

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from pydantic import ValidationError

from storage.records import RecordStore
from storage.schema import SessionRow
from storage.store import (
    append_session_rows as storage_append,
    init_store as storage_init_store,
    validate_records as storage_validate_records,
)

from ..drills.base_drill import BaseDrill, DrillResult
from ..stats.stats import write_stats
from ..util.randomness import make_rng
from .events import EventBus
from .explain import trace as xtrace
from .module_registry import get_module, make_module, resolve_params
from .persistence import PoolRepository, make_repository
from .timers import TimerFactory


@dataclass(frozen=True)
class SessionContext:
    started_at: datetime
    module_id: str
    preset: str
    params: Dict[str, Any]


class SessionManager:
    def __init__(
        self,
        cfg: Dict[str, Any],
        *,
        repository: Optional[PoolRepository] = None,
        records: Optional[RecordStore] = None,
        events: Optional[EventBus] = None,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.cfg = cfg
        storage_cfg = cfg.get("storage", {})
        self.memory = storage_cfg.get("backend", "disk") == "memory"
        self.data_dir = Path(storage_cfg.get("data_dir", "storage/data"))
        self.repository = repository if repository is not None else make_repository(cfg)
        if records is None:
            records = RecordStore(None if self.memory else storage_cfg.get("records_path"))
        self.records = records
        self.events = events or EventBus()
        self.timer_factory = timer_factory
        self.ctx: Optional[SessionContext] = None
        self._drill: Optional[BaseDrill] = None

    @property
    def drill(self) -> Optional[BaseDrill]:
        return self._drill

    def start_session(
        self,
        module_id: str,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
        *,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> BaseDrill:
        meta = get_module(module_id)
        base = dict(self.cfg.get("modules", {}).get(module_id) or {})
        params = {**base, **resolve_params(meta.id, preset, overrides)}
        if module_id == "vocab":
            params.setdefault("mastery_threshold", self.cfg.get("mastery", {}).get("bonus_threshold", 0.8))
            # the session row's mode follows the translation direction
            params["mode"] = params.get("direction", "fr_en")
        self.ctx = SessionContext(
            started_at=datetime.now(timezone.utc),
            module_id=module_id,
            preset=preset,
            params=params,
        )
        self._drill = make_module(
            module_id,
            params=params,
            rng=rng or make_rng(seed),
            records=self.records,
            repository=self.repository,
            events=self.events,
            timer_factory=self.timer_factory,
        )
        xtrace("session_configured", {"module": module_id, "preset": preset, "params": params})
        return self._drill

    def preview_params(self) -> Dict[str, Any]:
        assert self.ctx is not None
        return dict(self.ctx.params)

    def run(self, ui: Dict[str, Callable[[str], Any]]) -> Dict[str, Any]:
        assert self.ctx is not None and self._drill is not None
        result = self._drill.run(ui)
        ended_at = datetime.now(timezone.utc)
        summary = {
            "module": self.ctx.module_id,
            "mode": result.mode,
            "total": result.total,
            "correct": result.correct,
            "score": result.score,
            "best_streak": result.best_streak,
            "percent": result.percent,
            "per_item": result.per_item,
            "extra": result.extra,
            "started_at": self.ctx.started_at.isoformat(),
            "ended_at": ended_at.isoformat(),
        }
        xtrace("session_ended", {k: v for k, v in summary.items() if k != "per_item"})
        self.record_session(result)
        out_path = self.cfg.get("session", {}).get("stats_output_path")
        if out_path:
            try:
                write_stats(self._drill.stats, str(out_path))
            except OSError as e:
                xtrace("stats_write_failed", {"path": str(out_path), "error": str(e)})
        return summary

    def session_row(self, result: DrillResult) -> SessionRow:
        assert self.ctx is not None
        return SessionRow(
            session_id=str(uuid4()),
            session_start=self.ctx.started_at,
            module=self.ctx.module_id,
            mode=result.mode,
            Q=result.total,
            C=result.correct,
            best_streak=result.best_streak,
            score=result.score,
            T_ms=int(result.extra.get("elapsed_ms", 0) or 0),
        )

    def record_session(self, result: DrillResult) -> bool:
        """Append the session to the sessions table. Returns False when skipped or failed."""
        if self.memory or bool(self.cfg.get("session", {}).get("stats_disable", False)):
            return False
        if result.total <= 0:
            return False
        try:
            row = self.session_row(result)
            storage_init_store(self.data_dir)
            storage_append(storage_validate_records([row]), self.data_dir)
        except (OSError, ValueError, ValidationError) as e:
            xtrace("session_persist_failed", {"module": self.ctx.module_id if self.ctx else None, "error": str(e)})
            return False
        xtrace("session_persisted", {"module": self.ctx.module_id, "Q": result.total})
        return True
