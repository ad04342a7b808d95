from __future__ import annotations

"""Item pool models: quizzable items and their persistent mastery state."""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Mastery(str, Enum):
    NEW = "New"
    LEARNING = "Learning"
    MASTERED = "Mastered"


# Selection priority: New first, Mastered last.
MASTERY_RANK = {Mastery.NEW: 0, Mastery.LEARNING: 1, Mastery.MASTERED: 2}


@dataclass
class MasteryState:
    """Per-item study progress. Mutated only by the mastery tracker."""

    level: Mastery = Mastery.NEW
    correct_count: int = 0
    incorrect_count: int = 0
    last_reviewed: Optional[datetime] = None
    next_review_due: datetime = field(default_factory=utcnow)

    @property
    def mastered(self) -> bool:
        return self.level == Mastery.MASTERED


@dataclass
class Item:
    """A single quizzable unit (word, province, card, math problem, shape)."""

    id: str
    front: Any
    back: Any
    mastery: Optional[MasteryState] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def incorrect_count(self) -> int:
        return self.mastery.incorrect_count if self.mastery is not None else 0

    @property
    def mastered(self) -> bool:
        return self.mastery is not None and self.mastery.mastered


class ItemPool:
    """Canonical, ordered collection of items keyed by stable id.

    Sessions work on `snapshot()` copies; the mastery tracker writes here.
    """

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: Dict[str, Item] = {}
        for it in items:
            self.add(it)

    def add(self, item: Item) -> None:
        if item.id in self._items:
            raise ValueError(f"Duplicate item id: {item.id}")
        self._items[item.id] = item

    def remove(self, item_id: str) -> Item:
        return self._items.pop(item_id)

    def get(self, item_id: str) -> Optional[Item]:
        return self._items.get(item_id)

    def __getitem__(self, item_id: str) -> Item:
        return self._items[item_id]

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> List[Item]:
        return list(self._items.values())

    def snapshot(self) -> List[Item]:
        """Deep copies of the pool items, in pool order."""
        return [copy.deepcopy(it) for it in self._items.values()]
