"""studytrainer package initialization.

Educational mini-apps (vocabulary, flashcards, geography, periodic table,
math, geometry, spelling, typing, unit conversion) built on one shared
practice/quiz session controller.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
