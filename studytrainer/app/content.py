from __future__ import annotations

"""Static content tables shipped as YAML under resources/content."""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

CONTENT_DIR = Path(__file__).resolve().parent.parent / "resources" / "content"


@dataclass(frozen=True)
class Province:
    name: str
    abbreviation: str
    capital: str
    largest_city: str
    region: str
    landmarks: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FrenchWord:
    french: str
    english: str
    phonetic: str = ""


@dataclass(frozen=True)
class VocabCategory:
    id: str
    name: str
    words: Tuple[FrenchWord, ...]


@dataclass(frozen=True)
class Element:
    number: int
    name: str
    symbol: str
    mass: str
    category: str
    state: str
    group: int
    period: int


@dataclass(frozen=True)
class SpellingWord:
    word: str
    definition: str = ""
    sentence: str = ""


@dataclass(frozen=True)
class SpellingGrade:
    id: str
    name: str
    words: Tuple[SpellingWord, ...]


@lru_cache(maxsize=None)
def load_content(name: str) -> Dict[str, Any]:
    path = CONTENT_DIR / f"{name}.yml"
    if not path.exists():
        raise KeyError(f"Unknown content table: {name}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def provinces() -> Tuple[Province, ...]:
    rows = load_content("provinces").get("provinces", [])
    return tuple(
        Province(
            name=str(r["name"]),
            abbreviation=str(r.get("abbreviation", "")),
            capital=str(r["capital"]),
            largest_city=str(r.get("largest_city", "")),
            region=str(r.get("region", "")),
            landmarks=tuple(str(x) for x in r.get("landmarks", []) or []),
        )
        for r in rows
    )


def vocab_categories() -> Tuple[VocabCategory, ...]:
    out = []
    for c in load_content("vocab").get("categories", []):
        words = tuple(
            FrenchWord(str(w["french"]), str(w["english"]), str(w.get("phonetic", "")))
            for w in c.get("words", [])
        )
        out.append(VocabCategory(id=str(c["id"]), name=str(c.get("name", c["id"])), words=words))
    return tuple(out)


def vocab_category(category_id: str) -> VocabCategory:
    for c in vocab_categories():
        if c.id == category_id:
            return c
    raise KeyError(f"Unknown vocabulary category: {category_id}")


def elements() -> Tuple[Element, ...]:
    return tuple(
        Element(
            number=int(e["number"]),
            name=str(e["name"]),
            symbol=str(e["symbol"]),
            mass=str(e.get("mass", "")),
            category=str(e.get("category", "")),
            state=str(e.get("state", "unknown")),
            group=int(e.get("group", 0)),
            period=int(e.get("period", 0)),
        )
        for e in load_content("elements").get("elements", [])
    )


def spelling_grades() -> Dict[str, SpellingGrade]:
    out: Dict[str, SpellingGrade] = {}
    for g in load_content("spelling").get("grades", []):
        words = tuple(
            SpellingWord(str(w["word"]), str(w.get("definition", "")), str(w.get("sentence", "")))
            for w in g.get("words", [])
        )
        out[str(g["id"])] = SpellingGrade(id=str(g["id"]), name=str(g.get("name", g["id"])), words=words)
    return out


def typing_prompts() -> Dict[str, Tuple[str, ...]]:
    raw = load_content("typing").get("prompts", {})
    return {str(k): tuple(str(p) for p in v) for k, v in raw.items()}


def sample_decks() -> Tuple[Dict[str, Any], ...]:
    return tuple(load_content("decks").get("decks", []))
