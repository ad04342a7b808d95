from __future__ import annotations

"""Typing speed and accuracy metrics."""


def words_per_minute(typed: str, elapsed_s: float) -> float:
    """Whitespace-separated words typed per minute; 0 when no time has elapsed."""
    if elapsed_s <= 0:
        return 0.0
    return len(typed.split()) / elapsed_s * 60.0


def accuracy(prompt: str, typed: str) -> float:
    """Percent of typed characters matching the prompt position by position.

    Empty input counts as 100. Characters past the end of the prompt count
    against accuracy.
    """
    if not typed:
        return 100.0
    correct = sum(1 for a, b in zip(typed, prompt) if a == b)
    return correct / len(typed) * 100.0


def error_count(prompt: str, typed: str) -> int:
    return sum(1 for a, b in zip(typed, prompt) if a != b)


def is_finished(prompt: str, typed: str) -> bool:
    return bool(prompt) and len(typed) >= len(prompt)
