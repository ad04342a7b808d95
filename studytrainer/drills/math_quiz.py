from __future__ import annotations

"""Arithmetic quiz: endless practice or a 60 second race against the clock.

Each answered problem auto-advances after `feedback_delay_ms` unless the
session has moved on in the meantime. At the end the all-time totals and the
per-difficulty timer high score are updated.
"""

from typing import Any, Optional

from ..app.explain import trace as xtrace
from ..app.timers import Countdown, DelayedAction
from ..policy.distractors import integer_choices
from ..theory.arithmetic import DIFFICULTIES, Problem, generate
from .base_drill import BaseDrill
from .items import Item
from .session import Phase, SessionController, SessionState

MODES = ("practice", "timer")
TIME_LIMIT_S = 60
FEEDBACK_DELAY_MS = 1000


def problem_item(problem: Problem, n: int) -> Item:
    return Item(id=f"q{n}", front=problem.display, back=problem.answer, meta={"op": problem.op})


class MathQuizDrill(BaseDrill):
    ask_label = "Choice number, or =value ('q' to quit): "

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.mode = ctx.mode if ctx.mode in MODES else "practice"
        self.difficulty = str(ctx.param("difficulty", "easy"))
        if self.difficulty not in DIFFICULTIES:
            raise ValueError(f"Unknown difficulty: {self.difficulty}")
        self.time_limit = float(ctx.param("time_limit", TIME_LIMIT_S))
        self.feedback_delay = int(ctx.param("feedback_delay_ms", FEEDBACK_DELAY_MS)) / 1000.0
        self.auto_advance = bool(ctx.param("auto_advance", True))
        cap = ctx.param("questions")
        # a timed round is bounded by the clock only
        self.cap: Optional[int] = None if self.mode == "timer" or cap is None else int(cap)
        self.countdown: Optional[Countdown] = None
        self.pending: Optional[DelayedAction] = None
        self.time_left = self.time_limit

    def _next_item(self, n: int) -> Item:
        return problem_item(generate(self.difficulty, self.rng), n)

    def _refill(self, state: SessionState, _rng) -> Optional[Item]:
        if self.cap is not None and len(state.items) >= self.cap:
            return None
        return self._next_item(len(state.items) + 1)

    def build_controller(self) -> SessionController:
        first = [] if self.cap == 0 else [self._next_item(1)]
        return SessionController(
            first,
            options=lambda item, _st, rng: integer_choices(item.back, 3, rng),
            refill=self._refill,
            events=self.ctx.events,
            rng=self.rng,
        )

    def start(self) -> SessionState:
        self.completion_hooks = [self._stop_timers]
        self.time_left = self.time_limit
        state = super().start()
        if self.mode == "timer" and state.phase != Phase.COMPLETE:
            self.countdown = Countdown(
                self.time_limit,
                on_tick=self._tick,
                on_expire=self._time_up,
                timer_factory=self.ctx.timer_factory,
            )
            self.countdown.start()
        return state

    def _tick(self, remaining: float) -> None:
        self.time_left = remaining

    def _time_up(self) -> None:
        xtrace("time_up", {"score": self.state.score})
        self.finish()

    def _stop_timers(self, _state: SessionState) -> None:
        if self.countdown is not None:
            self.countdown.cancel()
        if self.pending is not None:
            self.pending.cancel()

    def parse_answer(self, raw: str) -> Any:
        text = raw.strip()
        if not text.startswith("="):
            return super().parse_answer(text)
        try:
            return int(text[1:].strip())
        except ValueError:
            return text

    def after_submit(self, item: Item, correct: bool) -> None:
        if not self.auto_advance:
            return
        index = self.state.current_index
        self.pending = DelayedAction(
            self.feedback_delay,
            guard=lambda: self.phase == Phase.ANSWERED and self.state.current_index == index,
            action=lambda: self.controller.advance_if(index),
            timer_factory=self.ctx.timer_factory,
        ).start()

    def header(self, state: SessionState) -> str:
        base = super().header(state)
        if self.mode == "timer":
            return f"{base} [{self.time_left:.0f}s]"
        return base

    def save_records(self, state: SessionState) -> None:
        recs = self.ctx.records
        recs.increment("math.total_solved", state.score)
        if recs.bump_max("math.best_streak", state.best_streak) and state.best_streak > 0:
            self.new_records.append("best_streak")
        if self.mode == "timer":
            if recs.bump_max(f"math.timer_high_score.{self.difficulty}", state.score) and state.score > 0:
                self.new_records.append("timer_high_score")

    def result_extra(self):
        return {"difficulty": self.difficulty, "total_solved": self.ctx.records.get("math.total_solved", 0)}
