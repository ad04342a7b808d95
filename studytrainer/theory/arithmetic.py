from __future__ import annotations

"""Arithmetic problem generation by difficulty.

Ranges:
- easy:   +/- on 1..9 (subtraction is big - small, never negative)
- medium: +/- on 10..99
- hard:   x on 2..12 x 2..12; / with divisor 2..12 and quotient 2..12
- expert: +/- on 100..999; x on 12..25 x 2..15; / with divisor 3..15 and quotient 5..25
"""

import random
from dataclasses import dataclass
from typing import Optional

DIFFICULTIES = ("easy", "medium", "hard", "expert")

ADD = "+"
SUB = "-"
MUL = "x"
DIV = "/"


@dataclass(frozen=True)
class Problem:
    a: int
    b: int
    op: str
    answer: int

    @property
    def display(self) -> str:
        return f"{self.a} {self.op} {self.b}"


def _add_or_sub(op: str, a: int, b: int) -> Problem:
    if op == ADD:
        return Problem(a, b, ADD, a + b)
    big, small = max(a, b), min(a, b)
    return Problem(big, small, SUB, big - small)


def _division(rng: random.Random, divisor: tuple[int, int], quotient: tuple[int, int]) -> Problem:
    b = rng.randint(*divisor)
    answer = rng.randint(*quotient)
    return Problem(b * answer, b, DIV, answer)


def generate(difficulty: str, rng: Optional[random.Random] = None) -> Problem:
    rng = rng or random.Random()
    if difficulty == "easy":
        op = rng.choice((ADD, SUB))
        return _add_or_sub(op, rng.randint(1, 9), rng.randint(1, 9))
    if difficulty == "medium":
        op = rng.choice((ADD, SUB))
        return _add_or_sub(op, rng.randint(10, 99), rng.randint(10, 99))
    if difficulty == "hard":
        op = rng.choice((MUL, DIV))
        if op == MUL:
            a, b = rng.randint(2, 12), rng.randint(2, 12)
            return Problem(a, b, MUL, a * b)
        return _division(rng, (2, 12), (2, 12))
    if difficulty == "expert":
        op = rng.choice((ADD, SUB, MUL, DIV))
        if op in (ADD, SUB):
            return _add_or_sub(op, rng.randint(100, 999), rng.randint(100, 999))
        if op == MUL:
            a, b = rng.randint(12, 25), rng.randint(2, 15)
            return Problem(a, b, MUL, a * b)
        return _division(rng, (3, 15), (5, 25))
    raise ValueError(f"Unknown difficulty: {difficulty}")
