from __future__ import annotations

"""Base drill abstractions and context/results models."""

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from storage.records import RecordStore

from ..app.events import EventBus
from ..app.explain import trace as xtrace
from ..app.persistence import MemoryPoolRepository, PoolRepository
from ..app.timers import TimerFactory
from ..stats.stats import accuracy_percent, new_session_stats, update_stats
from .items import Item
from .session import Phase, SessionController, SessionState


@dataclass
class DrillContext:
    """Context information for a drill session."""

    module_id: str
    mode: str = "default"
    params: Dict[str, Any] = field(default_factory=dict)
    rng: random.Random = field(default_factory=random.Random)
    records: RecordStore = field(default_factory=RecordStore)
    repository: PoolRepository = field(default_factory=MemoryPoolRepository)
    events: Optional[EventBus] = None
    timer_factory: Optional[TimerFactory] = None

    def param(self, name: str, default: Any = None) -> Any:
        val = self.params.get(name)
        return default if val is None else val


@dataclass
class DrillResult:
    """Aggregated result statistics for a drill session."""

    total: int
    correct: int
    score: int = 0
    best_streak: int = 0
    percent: float = 0.0
    mode: str = "default"
    per_item: Dict[str, Dict[str, int]] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


class BaseDrill:
    """Abstract base for drills.

    Subclasses build a `SessionController` for their content and may hook
    into answers (`after_submit`), advancing (`on_advance`) and the end of
    the session (`save_records`). Records are written once per session.
    """

    ask_label = "Answer (number or text, 'q' to quit): "

    def __init__(self, ctx: DrillContext) -> None:
        self.ctx = ctx
        self.rng = ctx.rng
        self.controller: Optional[SessionController] = None
        self.stats = new_session_stats()
        self.completion_hooks: List[Callable[[SessionState], None]] = []
        self.new_records: List[str] = []
        self._records_saved = False
        self._t0: Optional[float] = None
        self._t1: Optional[float] = None

    # --- to implement ---

    def build_controller(self) -> SessionController:
        raise NotImplementedError

    def prompt_text(self, item: Item) -> str:
        return str(item.front)

    def save_records(self, state: SessionState) -> None:
        """Persist high scores and histories for this module."""

    # --- hooks ---

    def after_submit(self, item: Item, correct: bool) -> None:
        pass

    def on_advance(self) -> None:
        pass

    def stat_key(self, item: Item) -> str:
        return item.id

    def option_label(self, option: Any) -> str:
        return str(option)

    def feedback(self, item: Item, correct: bool) -> str:
        if correct:
            return "Correct!\n"
        return f"Incorrect. Answer was {self.controller.truth(item)}.\n"

    # --- session driving ---

    @property
    def state(self) -> SessionState:
        assert self.controller is not None
        return self.controller.state

    @property
    def phase(self) -> Phase:
        return Phase.IDLE if self.controller is None else self.controller.phase

    def start(self) -> SessionState:
        self.controller = self.build_controller()
        self.controller.on_complete = self._on_complete
        self.stats = new_session_stats()
        self.new_records = []
        self._records_saved = False
        self._t0 = time.monotonic()
        self._t1 = None
        xtrace("drill_started", {"module": self.ctx.module_id, "mode": self.ctx.mode})
        return self.controller.start()

    def parse_answer(self, raw: str) -> Any:
        """Map a 1-based option number or an option's text to that option; else the stripped text."""
        text = raw.strip()
        options = self.state.options
        if options:
            if text.isdigit() and 1 <= int(text) <= len(options):
                return options[int(text) - 1]
            for opt in options:
                if str(opt).strip().lower() == text.lower():
                    return opt
        return text

    def submit(self, value: Any) -> Optional[bool]:
        assert self.controller is not None
        item = self.state.current_item
        correct = self.controller.submit_answer(value)
        if correct is None or item is None:
            return None
        update_stats(self.stats, self.stat_key(item), correct)
        self.after_submit(item, correct)
        return correct

    def advance(self) -> SessionState:
        assert self.controller is not None
        if self.controller.phase != Phase.ANSWERED:
            return self.controller.state
        self.on_advance()
        return self.controller.advance()

    def finish(self) -> SessionState:
        assert self.controller is not None
        return self.controller.finish()

    def _on_complete(self, state: SessionState) -> None:
        self._t1 = time.monotonic()
        for hook in self.completion_hooks:
            hook(state)
        if self._records_saved:
            return
        self._records_saved = True
        self.save_records(state)
        try:
            self.ctx.records.save()
        except OSError as e:
            xtrace("records_save_failed", {"module": self.ctx.module_id, "error": str(e)})

    def elapsed_ms(self) -> int:
        if self._t0 is None:
            return 0
        end = self._t1 if self._t1 is not None else time.monotonic()
        return int((end - self._t0) * 1000)

    def result_extra(self) -> Dict[str, Any]:
        return {}

    def result(self) -> DrillResult:
        st = self.state
        extra = {"elapsed_ms": self.elapsed_ms(), "new_records": list(self.new_records)}
        extra.update(self.result_extra())
        return DrillResult(
            total=st.total_answered,
            correct=st.correct,
            score=st.score,
            best_streak=st.best_streak,
            percent=round(accuracy_percent(st.correct, st.total_answered), 1),
            mode=self.ctx.mode,
            per_item=dict(self.stats.get("per_item", {})),
            extra=extra,
        )

    def header(self, state: SessionState) -> str:
        i = state.current_index + 1
        cap = self.ctx.param("questions")
        if self.controller is not None and self.controller.refill is None:
            return f"Q{i}/{len(state.items)}"
        if cap:
            return f"Q{i}/{cap}"
        return f"Q{i}"

    def run(self, ui_callbacks: Dict[str, Callable]) -> DrillResult:
        ask = ui_callbacks["ask"]
        inform = ui_callbacks["inform"]

        self.start()
        while self.phase != Phase.COMPLETE:
            st = self.state
            item = st.current_item
            if item is None:
                break
            inform(f"{self.header(st)}: {self.prompt_text(item)}")
            for n, opt in enumerate(st.options, start=1):
                inform(f"  {n}) {self.option_label(opt)}")
            ans = ask(self.ask_label)
            if ans.strip().lower() == "q":
                self.finish()
                break
            correct = self.submit(self.parse_answer(ans))
            if correct is None:
                # timer expiry or game over landed while waiting for input
                continue
            xtrace("graded", {"index": st.current_index, "answer": ans, "correct": correct})
            inform(self.feedback(item, correct))
            self.advance()

        return self.result()
