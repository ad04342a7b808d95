from __future__ import annotations

"""Mastery tracking: per-answer state transitions and the completion bonus.

Transitions:
- correct: correct_count += 1; Mastered (+7 days) from the third correct
  answer on, otherwise Learning (+1 day)
- miss: incorrect_count += 1; Learning, due again in 10 minutes
"""

from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from ..app.explain import trace as xtrace
from ..drills.items import ItemPool, Mastery, MasteryState, utcnow

MASTERED_AFTER = 3
MASTERED_INTERVAL = timedelta(days=7)
LEARNING_INTERVAL = timedelta(days=1)
RETRY_INTERVAL = timedelta(minutes=10)


def apply_outcome(state: MasteryState, correct: bool, now: datetime) -> MasteryState:
    state.last_reviewed = now
    if correct:
        state.correct_count += 1
        if state.correct_count >= MASTERED_AFTER:
            state.level = Mastery.MASTERED
            state.next_review_due = now + MASTERED_INTERVAL
        else:
            state.level = Mastery.LEARNING
            state.next_review_due = now + LEARNING_INTERVAL
    else:
        state.incorrect_count += 1
        state.level = Mastery.LEARNING
        state.next_review_due = now + RETRY_INTERVAL
    return state


class MasteryTracker:
    """Applies answer outcomes to the canonical pool and persists after each one.

    `on_update(pool)` is the save hook; the session's own item copies are
    never touched.
    """

    def __init__(
        self,
        pool: ItemPool,
        clock: Optional[Callable[[], datetime]] = None,
        on_update: Optional[Callable[[ItemPool], None]] = None,
    ) -> None:
        self.pool = pool
        self.clock = clock or utcnow
        self.on_update = on_update

    def _state(self, item_id: str) -> Optional[MasteryState]:
        item = self.pool.get(item_id)
        if item is None:
            xtrace("mastery_unknown_item", {"id": item_id})
            return None
        if item.mastery is None:
            item.mastery = MasteryState(next_review_due=self.clock())
        return item.mastery

    def record(self, item_id: str, correct: bool) -> None:
        state = self._state(item_id)
        if state is None:
            return
        apply_outcome(state, bool(correct), self.clock())
        xtrace("mastery_updated", {"id": item_id, "level": state.level.value, "correct": bool(correct)})
        self._saved()

    def promote(self, item_ids: Iterable[str]) -> None:
        now = self.clock()
        changed = False
        for iid in item_ids:
            state = self._state(iid)
            if state is None:
                continue
            state.level = Mastery.MASTERED
            state.last_reviewed = now
            state.next_review_due = now + MASTERED_INTERVAL
            changed = True
        if changed:
            self._saved()

    def _saved(self) -> None:
        if self.on_update is not None:
            self.on_update(self.pool)


def mastery_bonus(tracker: MasteryTracker, threshold: float = 0.8):
    """Completion hook: a session at or above `threshold` accuracy masters all its items."""

    def _hook(state) -> None:
        if state.total_answered <= 0:
            return
        if state.accuracy >= threshold:
            xtrace("mastery_bonus", {"accuracy": round(state.accuracy, 3), "items": len(state.items)})
            tracker.promote(it.id for it in state.items)

    return _hook
