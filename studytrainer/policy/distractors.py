from __future__ import annotations

"""Distractor generation for multiple-choice questions.

Pool-based distractors exclude by value, so duplicate content never yields
two identical options.
"""

import random
from typing import Any, Iterable, List, Optional


def pick_distractors(
    correct: Any,
    candidates: Iterable[Any],
    k: int = 3,
    rng: Optional[random.Random] = None,
) -> List[Any]:
    """Return up to k distinct candidate values that differ from `correct`."""
    rng = rng or random.Random()
    seen: list[Any] = []
    for c in candidates:
        if c == correct or c in seen:
            continue
        seen.append(c)
    rng.shuffle(seen)
    return seen[: max(0, int(k))]


def build_options(
    correct: Any,
    candidates: Iterable[Any],
    k: int = 3,
    rng: Optional[random.Random] = None,
) -> List[Any]:
    rng = rng or random.Random()
    opts = pick_distractors(correct, candidates, k, rng) + [correct]
    rng.shuffle(opts)
    return opts


def integer_choices(
    answer: int,
    k: int = 3,
    rng: Optional[random.Random] = None,
    *,
    allow_negative: bool = False,
    max_attempts: int = 100,
) -> List[int]:
    """Answer plus k nearby integers, shuffled.

    Candidates are `answer + randint(-spread, spread)`; when sampling runs out
    of attempts the remaining slots are filled with answer+1, answer+2, ...
    """
    rng = rng or random.Random()
    answer = int(answer)
    spread = max(5, abs(answer) // 3 + 1)
    opts: list[int] = [answer]
    attempts = 0
    while len(opts) < k + 1 and attempts < max_attempts:
        attempts += 1
        cand = answer + rng.randint(-spread, spread)
        if cand == answer or cand in opts:
            continue
        if cand < 0 and not allow_negative:
            continue
        opts.append(cand)
    step = 1
    while len(opts) < k + 1:
        cand = answer + step
        if cand not in opts:
            opts.append(cand)
        step += 1
    rng.shuffle(opts)
    return opts


def continuous_choices(
    correct: float,
    k: int = 3,
    rng: Optional[random.Random] = None,
    *,
    ratio: float = 0.4,
    floor: float = 10.0,
    decimals: int = 2,
    max_attempts: int = 100,
) -> List[float]:
    """Correct value plus k positive perturbations rounded to `decimals`."""
    rng = rng or random.Random()
    correct = round(float(correct), decimals)
    offset = max(floor, abs(correct) * ratio)
    opts: list[float] = [correct]
    attempts = 0
    while len(opts) < k + 1 and attempts < max_attempts:
        attempts += 1
        cand = round(correct + rng.uniform(-offset, offset), decimals)
        if cand <= 0 or cand in opts:
            continue
        opts.append(cand)
    step = 1.0
    while len(opts) < k + 1:
        cand = round(correct + step, decimals)
        if cand not in opts:
            opts.append(cand)
        step += 1.0
    rng.shuffle(opts)
    return opts
