from __future__ import annotations

"""Provinces and territories quiz."""

from typing import List, Sequence

from ..app.content import Province, provinces
from ..policy.distractors import build_options
from ..policy.selection import uniform_capped
from .base_drill import BaseDrill
from .items import Item
from .session import SessionController

MODES = ("name_province", "find_capital", "landmark_match")
DEFAULT_QUESTIONS = 10


def make_items(mode: str, table: Sequence[Province], rng) -> List[Item]:
    """One item per province for the given mode.

    Landmark questions only use provinces that have landmarks, each with
    one landmark picked at random.
    """
    out: List[Item] = []
    for p in table:
        if mode == "name_province":
            front = "Which province or territory is highlighted on the map?"
            back = p.name
            meta = {"clue": f"{p.region} region, largest city {p.largest_city}"}
        elif mode == "find_capital":
            front = f"What is the capital of {p.name}?"
            back = p.capital
            meta = {}
        elif mode == "landmark_match":
            if not p.landmarks:
                continue
            landmark = rng.choice(p.landmarks)
            front = f"Where is {landmark} located?"
            back = p.name
            meta = {"landmark": landmark}
        else:
            raise ValueError(f"Unknown geography mode: {mode}")
        out.append(Item(id=f"{mode}:{p.abbreviation}", front=front, back=back, meta=meta))
    return out


class GeographyDrill(BaseDrill):
    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.mode = ctx.mode if ctx.mode in MODES else "name_province"
        self.questions = int(ctx.param("questions", DEFAULT_QUESTIONS))
        self.table = provinces()

    def build_controller(self) -> SessionController:
        items = make_items(self.mode, self.table, self.rng)
        if self.mode == "find_capital":
            candidates = [p.capital for p in self.table]
        else:
            candidates = [p.name for p in self.table]
        return SessionController(
            items,
            select=lambda its, rng: uniform_capped(its, self.questions, rng),
            options=lambda item, _st, rng: build_options(item.back, candidates, 3, rng),
            events=self.ctx.events,
            rng=self.rng,
        )

    def prompt_text(self, item: Item) -> str:
        clue = item.meta.get("clue")
        return f"{item.front} ({clue})" if clue else str(item.front)

    def save_records(self, state) -> None:
        if self.ctx.records.bump_max(f"geography.best_score.{self.mode}", state.score):
            self.new_records.append("best_score")
