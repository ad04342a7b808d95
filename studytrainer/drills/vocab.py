from __future__ import annotations

"""French vocabulary drill.

Words come from the content tables; mastery state is kept per category in
the pool repository (scope `vocab-<category>`). Selection leans on words
that were missed before.
"""

import re
from typing import List

from ..app.content import vocab_category
from ..app.persistence import merge_saved
from ..policy.distractors import build_options
from ..policy.mastery import MasteryTracker, mastery_bonus
from ..policy.selection import failure_weighted
from .base_drill import BaseDrill
from .items import Item, ItemPool
from .session import SessionController

DIRECTIONS = ("fr_en", "en_fr")
DEFAULT_CAP = 20


def slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def scope_for(category_id: str) -> str:
    return f"vocab-{category_id}"


def build_items(category_id: str, direction: str = "fr_en") -> List[Item]:
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction: {direction}")
    cat = vocab_category(category_id)
    out: List[Item] = []
    for w in cat.words:
        front, back = (w.french, w.english) if direction == "fr_en" else (w.english, w.french)
        out.append(
            Item(
                id=f"{cat.id}:{slug(w.french)}",
                front=front,
                back=back,
                meta={"phonetic": w.phonetic, "category": cat.name},
            )
        )
    return out


class VocabDrill(BaseDrill):
    """Multiple-choice translation of words from one category."""

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.category = str(ctx.param("category", "greetings"))
        self.direction = str(ctx.param("direction", "fr_en"))
        self.cap = int(ctx.param("questions", DEFAULT_CAP))
        self.threshold = float(ctx.param("mastery_threshold", 0.8))
        self.scope = scope_for(self.category)
        self.pool = ItemPool()
        self.tracker: MasteryTracker | None = None

    def _save(self, pool: ItemPool) -> None:
        self.ctx.repository.save_pool(self.scope, pool)

    def build_controller(self) -> SessionController:
        fresh = build_items(self.category, self.direction)
        saved = self.ctx.repository.load_pool(self.scope)
        self.pool = ItemPool(merge_saved(fresh, saved))
        self.tracker = MasteryTracker(self.pool, on_update=self._save)
        self.completion_hooks = [mastery_bonus(self.tracker, self.threshold)]
        backs = [it.back for it in self.pool]
        return SessionController(
            self.pool,
            select=lambda items, rng: failure_weighted(items, self.cap, rng),
            options=lambda item, _st, rng: build_options(item.back, backs, 3, rng),
            tracker=self.tracker,
            events=self.ctx.events,
            rng=self.rng,
        )

    def prompt_text(self, item: Item) -> str:
        if self.direction == "fr_en":
            phon = item.meta.get("phonetic")
            suffix = f" [{phon}]" if phon else ""
            return f"What does '{item.front}'{suffix} mean?"
        return f"How do you say '{item.front}' in French?"

    def save_records(self, state) -> None:
        if self.ctx.records.bump_max(f"vocab.best_percent.{self.category}", round(state.percent, 1)):
            self.new_records.append("best_percent")

    def result_extra(self):
        mastered = sum(1 for it in self.pool if it.mastered)
        return {"category": self.category, "mastered": mastered, "pool_size": len(self.pool)}
