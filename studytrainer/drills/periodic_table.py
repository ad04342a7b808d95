from __future__ import annotations

"""Periodic table quiz and explorer filter.

Quiz questions alternate: even positions ask which element has a given
atomic number, odd positions ask for an element's symbol.
"""

from typing import Iterable, List, Optional, Tuple

from ..app.content import Element, elements
from ..policy.distractors import build_options
from .base_drill import BaseDrill
from .items import Item
from .session import SessionController

DEFAULT_QUESTIONS = 10


def categories(table: Optional[Iterable[Element]] = None) -> List[str]:
    seen: List[str] = []
    for e in table if table is not None else elements():
        if e.category not in seen:
            seen.append(e.category)
    return seen


def filter_elements(
    category: Optional[str] = None,
    query: str = "",
    table: Optional[Iterable[Element]] = None,
) -> List[Element]:
    """Elements in `category` (None or "all" for every category) matching `query`.

    The query is matched case-insensitively as a substring of the name,
    the symbol or the atomic number.
    """
    q = query.strip().lower()
    out: List[Element] = []
    for e in table if table is not None else elements():
        if category and category.lower() != "all" and e.category.lower() != category.lower():
            continue
        if q and not (q in e.name.lower() or q in e.symbol.lower() or q in str(e.number)):
            continue
        out.append(e)
    return out


def make_questions(table: Tuple[Element, ...], count: int, rng) -> List[Item]:
    picked = list(table)
    rng.shuffle(picked)
    out: List[Item] = []
    for i, e in enumerate(picked[: max(0, count)]):
        if i % 2 == 0:
            out.append(Item(id=f"name:{e.symbol}", front=f"What element has atomic number {e.number}?",
                            back=e.name, meta={"kind": "name"}))
        else:
            out.append(Item(id=f"symbol:{e.symbol}", front=f"What is the symbol for {e.name}?",
                            back=e.symbol, meta={"kind": "symbol"}))
    return out


class PeriodicTableDrill(BaseDrill):
    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        self.questions = int(ctx.param("questions", DEFAULT_QUESTIONS))
        self.table = elements()

    def build_controller(self) -> SessionController:
        items = make_questions(self.table, self.questions, self.rng)
        names = [e.name for e in self.table]
        symbols = [e.symbol for e in self.table]

        def _options(item: Item, _st, rng):
            pool = names if item.meta.get("kind") == "name" else symbols
            return build_options(item.back, pool, 3, rng)

        return SessionController(items, options=_options, events=self.ctx.events, rng=self.rng)

    def save_records(self, state) -> None:
        if self.ctx.records.bump_max("periodic_table.best_score", state.score):
            self.new_records.append("best_score")
