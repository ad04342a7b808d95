from __future__ import annotations

"""2D and 3D shape formulas for the geometry explorer and quiz."""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

Result = Tuple[str, float]


def round_half_up(value: float, step: float = 0.01) -> float:
    """Round to the nearest multiple of `step`, halves away from zero."""
    q = abs(value) / step
    out = math.floor(q + 0.5) * step
    out = math.copysign(out, value)
    # keep binary noise out of e.g. 0.1 + 0.2 style results
    return round(out, 10)


def _circle(d: Sequence[float]) -> List[Result]:
    r = d[0]
    return [("Area", math.pi * r * r), ("Circumference", 2 * math.pi * r)]


def _rectangle(d: Sequence[float]) -> List[Result]:
    w, h = d[0], d[1]
    return [("Area", w * h), ("Perimeter", 2 * (w + h))]


def _triangle(d: Sequence[float]) -> List[Result]:
    b, h, a, side_b, c = d[0], d[1], d[2], d[3], d[4]
    return [("Area", 0.5 * b * h), ("Perimeter", a + side_b + c)]


def _trapezoid(d: Sequence[float]) -> List[Result]:
    top, bottom, h, side_a, side_b = d[0], d[1], d[2], d[3], d[4]
    return [("Area", 0.5 * (top + bottom) * h), ("Perimeter", top + bottom + side_a + side_b)]


def _parallelogram(d: Sequence[float]) -> List[Result]:
    b, h, s = d[0], d[1], d[2]
    return [("Area", b * h), ("Perimeter", 2 * (b + s))]


def _sphere(d: Sequence[float]) -> List[Result]:
    r = d[0]
    return [("Volume", (4.0 / 3.0) * math.pi * r ** 3), ("Surface Area", 4 * math.pi * r * r)]


def _cylinder(d: Sequence[float]) -> List[Result]:
    r, h = d[0], d[1]
    return [("Volume", math.pi * r * r * h), ("Surface Area", 2 * math.pi * r * (r + h))]


def _cone(d: Sequence[float]) -> List[Result]:
    r, h = d[0], d[1]
    slant = math.sqrt(r * r + h * h)
    return [
        ("Volume", (1.0 / 3.0) * math.pi * r * r * h),
        ("Surface Area", math.pi * r * (r + slant)),
        ("Slant Height", slant),
    ]


def _cube(d: Sequence[float]) -> List[Result]:
    s = d[0]
    return [("Volume", s ** 3), ("Surface Area", 6 * s * s)]


@dataclass(frozen=True)
class Shape:
    id: str
    name: str
    labels: Tuple[str, ...]
    defaults: Tuple[float, ...]
    formulas: Tuple[str, ...]
    three_d: bool
    _calc: Callable[[Sequence[float]], List[Result]]

    def calculate(self, dimensions: Sequence[float] = ()) -> List[Result]:
        """Results for the given dimensions; missing trailing values use the defaults."""
        dims = [float(x) for x in dimensions][: len(self.defaults)]
        dims += list(self.defaults[len(dims):])
        return self._calc(dims)


SHAPES: Dict[str, Shape] = {
    s.id: s
    for s in (
        Shape("circle", "Circle", ("Radius",), (5,),
              ("Area = pi * r^2", "Circumference = 2 * pi * r"), False, _circle),
        Shape("rectangle", "Rectangle", ("Width", "Height"), (8, 5),
              ("Area = w * h", "Perimeter = 2(w + h)"), False, _rectangle),
        Shape("triangle", "Triangle", ("Base", "Height", "Side A", "Side B", "Side C"), (6, 4, 5, 5, 6),
              ("Area = (1/2) * b * h", "Perimeter = a + b + c"), False, _triangle),
        Shape("trapezoid", "Trapezoid", ("Top Base", "Bottom Base", "Height", "Side A", "Side B"), (4, 8, 5, 4, 4),
              ("Area = (1/2)(a + b) * h", "Perimeter = a + b + c + d"), False, _trapezoid),
        Shape("parallelogram", "Parallelogram", ("Base", "Height", "Side"), (7, 4, 5),
              ("Area = b * h", "Perimeter = 2(b + s)"), False, _parallelogram),
        Shape("sphere", "Sphere", ("Radius",), (5,),
              ("Volume = (4/3) * pi * r^3", "Surface Area = 4 * pi * r^2"), True, _sphere),
        Shape("cylinder", "Cylinder", ("Radius", "Height"), (4, 8),
              ("Volume = pi * r^2 * h", "Surface Area = 2*pi*r*(r + h)"), True, _cylinder),
        Shape("cone", "Cone", ("Radius", "Height"), (4, 7),
              ("Volume = (1/3) * pi * r^2 * h", "Surface Area = pi*r*(r + slant)"), True, _cone),
        Shape("cube", "Cube", ("Side Length",), (5,),
              ("Volume = s^3", "Surface Area = 6 * s^2"), True, _cube),
    )
}


def get_shape(shape_id: str) -> Shape:
    try:
        return SHAPES[shape_id.lower()]
    except KeyError:
        raise KeyError(f"Unknown shape: {shape_id}") from None


def format_number(value: float) -> str:
    """Whole numbers without decimals (below 100000), everything else with two."""
    if value == round(value) and abs(value) < 100_000:
        return f"{value:.0f}"
    return f"{value:.2f}"
