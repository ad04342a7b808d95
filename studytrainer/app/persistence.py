from __future__ import annotations

"""Pool persistence: converts items to storage records and back.

`load_pool(scope)` never raises for missing or malformed data; it returns
an empty list and traces the reason. `save_pool(scope, items)` overwrites.
"""

import copy
from pathlib import Path
from typing import Dict, Iterable, List, Protocol

from pydantic import ValidationError

from storage.schema import ItemRecord
from storage import store as storage_store

from ..drills.items import Item, Mastery, MasteryState, utcnow
from .explain import trace as xtrace


def item_to_record(item: Item) -> ItemRecord:
    m = item.mastery or MasteryState()
    return ItemRecord(
        id=item.id,
        front=str(item.front),
        back=str(item.back),
        level=m.level.value,
        correct_count=m.correct_count,
        incorrect_count=m.incorrect_count,
        last_reviewed=m.last_reviewed,
        next_review_due=m.next_review_due,
    )


def record_to_item(rec: ItemRecord) -> Item:
    return Item(
        id=rec.id,
        front=rec.front,
        back=rec.back,
        mastery=MasteryState(
            level=Mastery(rec.level),
            correct_count=rec.correct_count,
            incorrect_count=rec.incorrect_count,
            last_reviewed=rec.last_reviewed,
            next_review_due=rec.next_review_due,
        ),
    )


class PoolRepository(Protocol):
    def load_pool(self, scope: str) -> List[Item]: ...

    def save_pool(self, scope: str, items: Iterable[Item]) -> None: ...


class ParquetPoolRepository:
    """Pools stored as one parquet file per scope under `data_dir/pools`."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def load_pool(self, scope: str) -> List[Item]:
        try:
            records = storage_store.load_pool(scope, self.data_dir)
        except FileNotFoundError:
            return []
        except (OSError, ValueError, KeyError, TypeError) as e:
            # pydantic's ValidationError and pyarrow's ArrowInvalid are ValueErrors
            xtrace("pool_load_failed", {"scope": scope, "error": type(e).__name__})
            return []
        return [record_to_item(r) for r in records]

    def save_pool(self, scope: str, items: Iterable[Item]) -> None:
        storage_store.save_pool(scope, [item_to_record(it) for it in items], self.data_dir)
        xtrace("pool_saved", {"scope": scope})

    def scopes(self, prefix: str = "") -> List[str]:
        return storage_store.list_scopes(self.data_dir, prefix)

    def delete_pool(self, scope: str) -> None:
        storage_store.delete_pool(scope, self.data_dir)


class MemoryPoolRepository:
    """In-process pools; round-trips through ItemRecord like the disk backend."""

    def __init__(self) -> None:
        self._pools: Dict[str, List[ItemRecord]] = {}

    def load_pool(self, scope: str) -> List[Item]:
        return [record_to_item(r) for r in copy.deepcopy(self._pools.get(scope, []))]

    def save_pool(self, scope: str, items: Iterable[Item]) -> None:
        try:
            self._pools[scope] = [item_to_record(it) for it in items]
        except ValidationError as e:
            raise ValueError(f"Invalid item in pool {scope}: {e}") from e

    def scopes(self, prefix: str = "") -> List[str]:
        return sorted(s for s in self._pools if s.startswith(prefix))

    def delete_pool(self, scope: str) -> None:
        self._pools.pop(scope, None)


def merge_saved(fresh: Iterable[Item], saved: Iterable[Item]) -> List[Item]:
    """Attach saved mastery state to freshly built content items by id.

    Content stays authoritative for front/back; unknown saved ids are dropped.
    """
    by_id = {it.id: it for it in saved}
    out: List[Item] = []
    for it in fresh:
        prev = by_id.get(it.id)
        if prev is not None and prev.mastery is not None:
            it.mastery = copy.deepcopy(prev.mastery)
        elif it.mastery is None:
            it.mastery = MasteryState(next_review_due=utcnow())
        out.append(it)
    return out


def make_repository(cfg: dict) -> PoolRepository:
    storage_cfg = cfg.get("storage", {}) if cfg else {}
    if storage_cfg.get("backend", "disk") == "memory":
        return MemoryPoolRepository()
    return ParquetPoolRepository(storage_cfg.get("data_dir", "storage/data"))
