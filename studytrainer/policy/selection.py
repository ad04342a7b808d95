from __future__ import annotations

"""Item selection policies: which items a session presents, and in what order.

- uniform: shuffle the pool, keep the first `cap`
- priority: spaced-repetition order (New, Learning, Mastered; then due date)
- failure_weighted: repeat items by past misses, shuffle, de-duplicate, cap
- head_shuffled: first `cap` items in pool order, shuffled
"""

import random
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from ..drills.items import MASTERY_RANK, Item, Mastery

POLICIES = ("uniform", "priority", "failure_weighted", "head_shuffled")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _cap(items: List[Item], cap: Optional[int]) -> List[Item]:
    if cap is None:
        return items
    return items[: max(0, int(cap))]


def uniform_capped(pool: Iterable[Item], cap: Optional[int], rng: random.Random) -> List[Item]:
    items = list(pool)
    rng.shuffle(items)
    return _cap(items, cap)


def _priority_key(item: Item):
    if item.mastery is None:
        return (MASTERY_RANK[Mastery.NEW], _EPOCH)
    return (MASTERY_RANK[item.mastery.level], item.mastery.next_review_due)


def priority_order(pool: Iterable[Item]) -> List[Item]:
    # sorted() is stable, so equal keys keep pool order
    return sorted(pool, key=_priority_key)


def repeat_count(item: Item) -> int:
    return max(1, item.incorrect_count + (0 if item.mastered else 1))


def weighted_multiset(pool: Iterable[Item]) -> List[Item]:
    out: List[Item] = []
    for it in pool:
        out.extend([it] * repeat_count(it))
    return out


def failure_weighted(pool: Iterable[Item], cap: Optional[int], rng: random.Random) -> List[Item]:
    weighted = weighted_multiset(pool)
    rng.shuffle(weighted)
    seen: set[str] = set()
    unique: List[Item] = []
    for it in weighted:
        if it.id in seen:
            continue
        seen.add(it.id)
        unique.append(it)
    return _cap(unique, cap)


def head_shuffled(pool: Iterable[Item], cap: Optional[int], rng: random.Random) -> List[Item]:
    items = _cap(list(pool), cap)
    rng.shuffle(items)
    return items


def select_items(
    pool: Sequence[Item],
    policy: str,
    *,
    cap: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Item]:
    """Dispatch to a selection policy by name."""
    rng = rng or random.Random()
    if policy == "uniform":
        return uniform_capped(pool, cap, rng)
    if policy == "priority":
        return _cap(priority_order(pool), cap)
    if policy == "failure_weighted":
        return failure_weighted(pool, cap, rng)
    if policy == "head_shuffled":
        return head_shuffled(pool, cap, rng)
    raise ValueError(f"Unknown selection policy: {policy}")
