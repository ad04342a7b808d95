from __future__ import annotations

"""Practice/quiz session controller.

One controller drives every module: a selection policy materialises the
session items, each item is presented once, answers are matched and scored,
and the session terminates into a results summary.

Phases: Idle -> Presenting -> Answered -> Presenting | Complete.
"""

import copy
import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Union

from ..app.events import EventBus
from ..app.explain import trace as xtrace
from .items import Item, ItemPool


class Phase(str, Enum):
    IDLE = "idle"
    PRESENTING = "presenting"
    ANSWERED = "answered"
    COMPLETE = "complete"


@dataclass
class SessionState:
    """Ephemeral state of one session. Never persisted."""

    items: List[Item] = field(default_factory=list)
    current_index: int = 0
    score: int = 0
    correct: int = 0
    total_answered: int = 0
    streak: int = 0
    best_streak: int = 0
    phase: Phase = Phase.IDLE
    # per-item transient fields
    options: List[Any] = field(default_factory=list)
    selected_answer: Any = None
    last_correct: Optional[bool] = None

    @property
    def current_item(self) -> Optional[Item]:
        if 0 <= self.current_index < len(self.items):
            return self.items[self.current_index]
        return None

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.items) - 1

    @property
    def accuracy(self) -> float:
        """Fraction of answered items that were correct; 0.0 before any answer."""
        if self.total_answered <= 0:
            return 0.0
        return self.correct / self.total_answered

    @property
    def percent(self) -> float:
        return self.accuracy * 100.0

    def summary(self) -> dict:
        return {
            "total": self.total_answered,
            "correct": self.correct,
            "score": self.score,
            "best_streak": self.best_streak,
            "percent": round(self.percent, 1),
        }


# --- Matchers ---

def exact_match(value: Any, truth: Any) -> bool:
    return value == truth


def casefold_match(value: Any, truth: Any) -> bool:
    return str(value).strip().lower() == str(truth).strip().lower()


def tolerance_match(tol: float = 0.01) -> Callable[[Any, Any], bool]:
    def _match(value: Any, truth: Any) -> bool:
        try:
            return abs(float(value) - float(truth)) < tol
        except (TypeError, ValueError):
            return False

    return _match


Selector = Callable[[List[Item], random.Random], List[Item]]
OptionsBuilder = Callable[[Item, SessionState, random.Random], List[Any]]
Refill = Callable[[SessionState, random.Random], Optional[Item]]


def _keep_order(items: List[Item], _rng: random.Random) -> List[Item]:
    return items


class SessionController:
    """Generic session state machine.

    Mutators are serialised with a re-entrant lock since timer callbacks
    (countdown expiry, delayed auto-advance) arrive on timer threads.
    """

    def __init__(
        self,
        pool_items: Union[ItemPool, Iterable[Item]],
        select: Optional[Selector] = None,
        *,
        truth: Optional[Callable[[Item], Any]] = None,
        matcher: Callable[[Any, Any], bool] = exact_match,
        options: Optional[OptionsBuilder] = None,
        points: Optional[Callable[[Item, SessionState], int]] = None,
        tracker: Any = None,
        on_complete: Optional[Callable[[SessionState], None]] = None,
        refill: Optional[Refill] = None,
        events: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._source = pool_items if isinstance(pool_items, ItemPool) else list(pool_items)
        self.select = select or _keep_order
        self.truth = truth or (lambda it: it.back)
        self.matcher = matcher
        self.options_for = options
        self.points = points or (lambda _it, _st: 1)
        self.tracker = tracker
        self.on_complete = on_complete
        self.refill = refill
        self.events = events
        self.rng = rng or random.Random()
        self.state = SessionState()
        self._lock = threading.RLock()
        self._completed = False

    # --- lifecycle ---

    def _snapshot(self) -> List[Item]:
        if isinstance(self._source, ItemPool):
            return self._source.snapshot()
        return [copy.deepcopy(it) for it in self._source]

    def start(self) -> SessionState:
        with self._lock:
            if self.state.phase != Phase.IDLE:
                raise RuntimeError(f"Cannot start a session in phase {self.state.phase.value}")
            items = list(self.select(self._snapshot(), self.rng))
            self.state = SessionState(items=items)
            self._completed = False
            xtrace("session_started", {"items": len(items)})
            self._emit("session_started", {"items": len(items)})
            if not items:
                self._complete()
            else:
                self._present()
            return self.state

    def restart(self) -> SessionState:
        with self._lock:
            self.state.phase = Phase.IDLE
            return self.start()

    def finish(self) -> SessionState:
        """End the session early (timer expiry, out of lives, user quits)."""
        with self._lock:
            if self.state.phase not in (Phase.COMPLETE, Phase.IDLE):
                self._complete()
            return self.state

    # --- per-item ---

    def submit_answer(self, value: Any) -> Optional[bool]:
        """Grade the first answer for the current item; later submissions return None."""
        with self._lock:
            st = self.state
            item = st.current_item
            if st.phase != Phase.PRESENTING or item is None:
                return None
            correct = bool(self.matcher(value, self.truth(item)))
            st.selected_answer = value
            st.last_correct = correct
            if correct:
                st.score += int(self.points(item, st))
                st.correct += 1
                st.streak += 1
                st.best_streak = max(st.best_streak, st.streak)
            else:
                st.streak = 0
            st.total_answered += 1
            st.phase = Phase.ANSWERED
            if self.tracker is not None:
                self.tracker.record(item.id, correct)
            payload = {
                "index": st.current_index,
                "id": item.id,
                "correct": correct,
                "score": st.score,
                "streak": st.streak,
            }
            xtrace("answered", payload)
            self._emit("answered", payload)
            return correct

    def advance(self) -> SessionState:
        with self._lock:
            st = self.state
            if st.phase != Phase.ANSWERED:
                return st
            if not st.is_last:
                st.current_index += 1
                self._present()
            else:
                extra = self.refill(st, self.rng) if self.refill is not None else None
                if extra is None:
                    self._complete()
                    return st
                st.items.append(copy.deepcopy(extra))
                st.current_index += 1
                self._present()
            self._emit("advanced", {"index": st.current_index})
            return st

    def advance_if(self, index: int) -> bool:
        """Advance only if item `index` is still the answered one. Check and advance share the lock."""
        with self._lock:
            if self.state.phase != Phase.ANSWERED or self.state.current_index != index:
                return False
            self.advance()
            return True

    def award(self, points: int) -> None:
        with self._lock:
            self.state.score += int(points)
            xtrace("bonus_awarded", {"points": int(points), "score": self.state.score})

    # --- queries ---

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def accuracy(self) -> float:
        return self.state.accuracy

    @property
    def percent(self) -> float:
        return self.state.percent

    def truth_of_current(self) -> Any:
        item = self.state.current_item
        return None if item is None else self.truth(item)

    # --- internals ---

    def _present(self) -> None:
        st = self.state
        st.selected_answer = None
        st.last_correct = None
        item = st.current_item
        st.options = list(self.options_for(item, st, self.rng)) if (self.options_for and item) else []
        st.phase = Phase.PRESENTING

    def _complete(self) -> None:
        st = self.state
        st.phase = Phase.COMPLETE
        if self._completed:
            return
        self._completed = True
        if self.on_complete is not None:
            self.on_complete(st)
        summary = st.summary()
        xtrace("session_completed", summary)
        self._emit("completed", summary)

    def _emit(self, event: str, payload: Any) -> None:
        if self.events is not None:
            self.events.emit(event, payload)
