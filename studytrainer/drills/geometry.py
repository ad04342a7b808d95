from __future__ import annotations

"""Geometry explorer and shape quiz."""

from typing import List, Optional, Sequence

from ..policy.distractors import continuous_choices
from ..theory.geometry import SHAPES, format_number, get_shape, round_half_up
from .base_drill import BaseDrill
from .items import Item
from .session import SessionController, SessionState, tolerance_match

ANSWER_TOLERANCE = 0.01


def explore(shape_id: str, dimensions: Sequence[float] = ()) -> List[str]:
    """Text description of a shape: dimensions, formulas and results."""
    shape = get_shape(shape_id)
    dims = [float(x) for x in dimensions][: len(shape.defaults)]
    dims += list(shape.defaults[len(dims):])
    if any(d <= 0 for d in dims):
        raise ValueError("Dimensions must be positive")
    kind = "3D" if shape.three_d else "2D"
    lines = [f"{shape.name} ({kind})"]
    lines += [f"  {label}: {format_number(d)}" for label, d in zip(shape.labels, dims)]
    lines.append("Formulas:")
    lines += [f"  {f}" for f in shape.formulas]
    lines.append("Results:")
    lines += [f"  {label}: {format_number(round_half_up(v))}" for label, v in shape.calculate(dims)]
    return lines


def make_question(rng, n: int) -> Item:
    """Random shape with scaled dimensions; the answer is its first result."""
    shape = rng.choice(list(SHAPES.values()))
    dims = [round_half_up(d * rng.uniform(0.5, 2.0), 0.5) for d in shape.defaults]
    label, value = shape.calculate(dims)[0]
    return Item(
        id=f"q{n}",
        front=f"What is the {label.lower()} of this {shape.name.lower()}?",
        back=round_half_up(value, 0.01),
        meta={"shape": shape.id, "dimensions": dict(zip(shape.labels, dims))},
    )


class GeometryQuizDrill(BaseDrill):
    ask_label = "Choice number, or =value ('q' to quit): "

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        cap = ctx.param("questions")
        self.cap: Optional[int] = None if cap is None else int(cap)

    def _refill(self, state: SessionState, rng) -> Optional[Item]:
        if self.cap is not None and len(state.items) >= self.cap:
            return None
        return make_question(rng, len(state.items) + 1)

    def build_controller(self) -> SessionController:
        first = [] if self.cap == 0 else [make_question(self.rng, 1)]
        return SessionController(
            first,
            matcher=tolerance_match(ANSWER_TOLERANCE),
            options=lambda item, _st, rng: continuous_choices(item.back, 3, rng),
            refill=self._refill,
            events=self.ctx.events,
            rng=self.rng,
        )

    def prompt_text(self, item: Item) -> str:
        dims = ", ".join(f"{k} {format_number(v)}" for k, v in item.meta.get("dimensions", {}).items())
        return f"{item.front} ({dims})"

    def option_label(self, option) -> str:
        return f"{option:.2f}"

    def parse_answer(self, raw: str):
        text = raw.strip()
        if not text.startswith("="):
            return super().parse_answer(text)
        try:
            return float(text[1:].strip())
        except ValueError:
            return text

    def save_records(self, state: SessionState) -> None:
        if self.ctx.records.bump_max("geometry.best_streak", state.best_streak) and state.best_streak > 0:
            self.new_records.append("best_streak")
