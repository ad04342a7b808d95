from __future__ import annotations

"""Typing tutor: timed prompts with WPM, accuracy and error counts."""

import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..app.content import typing_prompts
from ..policy.selection import uniform_capped
from ..theory.typing_metrics import accuracy, error_count, is_finished, words_per_minute
from .base_drill import BaseDrill
from .items import Item
from .session import SessionController, SessionState, casefold_match

ATTEMPTS_KEY = "typing.attempts"
ATTEMPTS_CAP = 50


class TypingSession:
    """One prompt being typed. The clock starts at the first keystroke."""

    def __init__(self, prompt: str, clock: Optional[Callable[[], float]] = None) -> None:
        self.prompt = prompt
        self.clock = clock or time.monotonic
        self.typed = ""
        self.started_at: Optional[float] = None
        self.ended_at: Optional[float] = None

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = self.clock()

    def type(self, text: str) -> bool:
        """Replace the current input; returns True once the prompt is finished."""
        if self.finished:
            return True
        if text and self.started_at is None:
            self.start()
        self.typed = text
        if is_finished(self.prompt, text):
            self.ended_at = self.clock()
        return self.finished

    @property
    def finished(self) -> bool:
        return self.ended_at is not None

    @property
    def elapsed(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.ended_at if self.ended_at is not None else self.clock()
        return max(0.0, end - self.started_at)

    @property
    def wpm(self) -> float:
        return words_per_minute(self.typed, self.elapsed)

    @property
    def accuracy(self) -> float:
        return accuracy(self.prompt, self.typed)

    @property
    def errors(self) -> int:
        return error_count(self.prompt, self.typed)

    def attempt(self, difficulty: str) -> Dict[str, object]:
        return {
            "id": uuid.uuid4().hex,
            "date": datetime.now(timezone.utc).isoformat(),
            "wpm": round(self.wpm, 1),
            "accuracy": round(self.accuracy, 1),
            "errors": self.errors,
            "difficulty": difficulty,
        }


class TypingTutorDrill(BaseDrill):
    ask_label = "Type it: "

    def __init__(self, ctx, clock: Optional[Callable[[], float]] = None) -> None:
        super().__init__(ctx)
        prompts = typing_prompts()
        self.difficulty = str(ctx.param("difficulty", "beginner"))
        if self.difficulty not in prompts:
            raise KeyError(f"Unknown typing difficulty: {self.difficulty}")
        self.prompts = prompts[self.difficulty]
        self.questions = int(ctx.param("questions", 1))
        self.clock = clock
        self.typing: Optional[TypingSession] = None
        self.attempts: List[Dict[str, object]] = []

    def build_controller(self) -> SessionController:
        self.attempts = []
        items = [Item(id=f"{self.difficulty}:{i}", front=p, back=p) for i, p in enumerate(self.prompts)]
        return SessionController(
            items,
            select=lambda its, rng: uniform_capped(its, self.questions, rng),
            matcher=casefold_match,
            events=self.ctx.events,
            rng=self.rng,
        )

    def prompt_text(self, item: Item) -> str:
        self.typing = TypingSession(str(item.back), clock=self.clock)
        # a terminal reads whole lines, so the clock starts when the prompt is shown
        self.typing.start()
        return f"\n  {item.front}\n"

    def parse_answer(self, raw: str) -> str:
        return raw.rstrip("\r\n")

    def submit(self, value) -> Optional[bool]:
        item = self.state.current_item
        if self.typing is None or (item is not None and self.typing.prompt != item.back):
            self.typing = TypingSession(str(item.back) if item is not None else "", clock=self.clock)
        self.typing.type(str(value))
        if self.typing.ended_at is None:
            # submitted short of the prompt length
            self.typing.ended_at = self.typing.clock()
        correct = super().submit(value)
        if correct is not None:
            self.attempts.append(self.typing.attempt(self.difficulty))
        return correct

    def feedback(self, item: Item, correct: bool) -> str:
        t = self.typing
        return f"{t.wpm:.0f} WPM, {t.accuracy:.0f}% accuracy, {t.errors} errors\n"

    def save_records(self, state: SessionState) -> None:
        recs = self.ctx.records
        for a in self.attempts:
            recs.append_capped(ATTEMPTS_KEY, a, ATTEMPTS_CAP)
        if self.attempts:
            if recs.bump_max("typing.best_wpm", max(float(a["wpm"]) for a in self.attempts)):
                self.new_records.append("best_wpm")
            if recs.bump_max("typing.best_accuracy", max(float(a["accuracy"]) for a in self.attempts)):
                self.new_records.append("best_accuracy")

    def result_extra(self):
        return {"difficulty": self.difficulty, "attempts": list(self.attempts)}
