import random
import unittest
from datetime import datetime, timedelta, timezone

from studytrainer.drills.items import Item, ItemPool, Mastery, MasteryState
from studytrainer.policy.selection import (
    failure_weighted,
    head_shuffled,
    priority_order,
    repeat_count,
    select_items,
    uniform_capped,
    weighted_multiset,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _items(n: int):
    return [Item(id=f"i{k}", front=f"f{k}", back=f"b{k}") for k in range(n)]


def _with_mastery(item_id: str, level: Mastery, due: datetime, incorrect: int = 0) -> Item:
    return Item(
        id=item_id,
        front=item_id,
        back=item_id,
        mastery=MasteryState(level=level, incorrect_count=incorrect, next_review_due=due),
    )


class UniformCappedTests(unittest.TestCase):
    def test_cap_and_unique_ids(self) -> None:
        out = uniform_capped(_items(30), 10, random.Random(1))
        self.assertEqual(len(out), 10)
        self.assertEqual(len({it.id for it in out}), 10)

    def test_cap_larger_than_pool_keeps_everything(self) -> None:
        out = uniform_capped(_items(5), 10, random.Random(2))
        self.assertEqual(sorted(it.id for it in out), [f"i{k}" for k in range(5)])

    def test_none_cap_is_whole_pool(self) -> None:
        self.assertEqual(len(uniform_capped(_items(7), None, random.Random(3))), 7)

    def test_same_seed_same_order(self) -> None:
        a = [it.id for it in uniform_capped(_items(20), 5, random.Random(9))]
        b = [it.id for it in uniform_capped(_items(20), 5, random.Random(9))]
        self.assertEqual(a, b)


class PriorityOrderTests(unittest.TestCase):
    def test_levels_then_due_date(self) -> None:
        pool = [
            _with_mastery("m", Mastery.MASTERED, T0),
            _with_mastery("l_late", Mastery.LEARNING, T0 + timedelta(days=2)),
            _with_mastery("n", Mastery.NEW, T0 + timedelta(days=5)),
            _with_mastery("l_early", Mastery.LEARNING, T0 + timedelta(days=1)),
        ]
        self.assertEqual([it.id for it in priority_order(pool)], ["n", "l_early", "l_late", "m"])

    def test_items_without_mastery_count_as_new(self) -> None:
        pool = [_with_mastery("l", Mastery.LEARNING, T0), Item(id="plain", front="x", back="y")]
        self.assertEqual([it.id for it in priority_order(pool)], ["plain", "l"])

    def test_every_item_once(self) -> None:
        pool = _items(6)
        self.assertEqual(len(priority_order(pool)), 6)


class FailureWeightedTests(unittest.TestCase):
    def test_repeat_counts(self) -> None:
        self.assertEqual(repeat_count(Item(id="a", front="", back="")), 1)
        self.assertEqual(repeat_count(_with_mastery("b", Mastery.LEARNING, T0, incorrect=2)), 3)
        self.assertEqual(repeat_count(_with_mastery("c", Mastery.MASTERED, T0, incorrect=0)), 1)
        self.assertEqual(repeat_count(_with_mastery("d", Mastery.MASTERED, T0, incorrect=2)), 2)

    def test_multiset_size_and_dedup(self) -> None:
        pool = [_with_mastery(f"i{k}", Mastery.LEARNING, T0, incorrect=c) for k, c in enumerate([0, 0, 0, 0, 3])]
        self.assertEqual(len(weighted_multiset(pool)), 8)
        out = failure_weighted(pool, 20, random.Random(4))
        self.assertEqual(len(out), 5)
        self.assertEqual({it.id for it in out}, {f"i{k}" for k in range(5)})

    def test_cap_applies_after_dedup(self) -> None:
        pool = [_with_mastery(f"i{k}", Mastery.LEARNING, T0, incorrect=k) for k in range(10)]
        out = failure_weighted(pool, 4, random.Random(5))
        self.assertEqual(len(out), 4)
        self.assertEqual(len({it.id for it in out}), 4)


class HeadShuffledTests(unittest.TestCase):
    def test_takes_head_of_pool(self) -> None:
        out = head_shuffled(_items(12), 8, random.Random(6))
        self.assertEqual({it.id for it in out}, {f"i{k}" for k in range(8)})


class DispatchTests(unittest.TestCase):
    def test_unknown_policy_raises(self) -> None:
        with self.assertRaises(ValueError):
            select_items(_items(3), "alphabetical")

    def test_empty_pool(self) -> None:
        for policy in ("uniform", "priority", "failure_weighted", "head_shuffled"):
            self.assertEqual(select_items([], policy, cap=5, rng=random.Random(0)), [])

    def test_pool_object_is_accepted(self) -> None:
        pool = ItemPool(_items(4))
        self.assertEqual(len(select_items(pool, "uniform", cap=2, rng=random.Random(0))), 2)


if __name__ == "__main__":
    unittest.main()
