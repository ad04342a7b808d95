from __future__ import annotations

"""Randomness helpers: seeding and injectable RNG construction."""

import os
import random
from typing import Optional


def env_seed() -> Optional[int]:
    """Return the integer SEED env var, or None when unset or invalid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def seed_if_needed() -> None:
    """Seed the global RNG if SEED env var is set."""
    s = env_seed()
    if s is not None:
        random.seed(s)


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build a private RNG for selectors and distractor generation.

    Explicit seed wins over SEED; with neither the RNG is seeded from the OS.
    """
    if seed is None:
        seed = env_seed()
    return random.Random(seed)
