from __future__ import annotations

"""Module registry and metadata.

Discover learning modules, expose metadata and presets, and construct
drill instances via a simple factory. The game center view lists every
module with its best persisted records.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from storage.records import RecordStore

from ..drills.base_drill import BaseDrill, DrillContext
from ..drills.flashcards import FlashcardDrill
from ..drills.geography import GeographyDrill
from ..drills.geometry import GeometryQuizDrill
from ..drills.math_quiz import MathQuizDrill
from ..drills.periodic_table import PeriodicTableDrill
from ..drills.spelling import SpellingBeeDrill
from ..drills.typing_tutor import TypingTutorDrill
from ..drills.vocab import VocabDrill
from ..theory.arithmetic import DIFFICULTIES
from .events import EventBus
from .persistence import MemoryPoolRepository, PoolRepository
from .timers import TimerFactory
from . import presets as P


@dataclass(frozen=True)
class ModuleMeta:
    id: str
    name: str
    description: str
    parameters_schema: Dict[str, Any]
    presets: Dict[str, Dict[str, Any]]
    drill_cls: type
    # label -> record store key shown in the game center
    records: Dict[str, str] = field(default_factory=dict)


def _questions(default: Optional[int]) -> Dict[str, Any]:
    return {"type": ["integer", "null"], "minimum": 0, "default": default}


def list_modules() -> List[ModuleMeta]:
    return [
        ModuleMeta(
            id="vocab",
            name="French Vocabulary",
            description="Translate French words by category; missed words come back more often.",
            parameters_schema={
                "type": "object",
                "properties": {
                    "category": {"type": "string", "default": "greetings"},
                    "direction": {"type": "string", "enum": ["fr_en", "en_fr"], "default": "fr_en"},
                    "questions": _questions(20),
                    "mastery_threshold": {"type": "number", "default": 0.8},
                },
            },
            presets=P.VOCAB_PRESETS,
            drill_cls=VocabDrill,
            records={"Best %": "vocab.best_percent.greetings"},
        ),
        ModuleMeta(
            id="flashcards",
            name="Flashcards",
            description="Study your own decks: classic review, typed quiz or matching board.",
            parameters_schema={
                "type": "object",
                "properties": {
                    "mode": {"type": "string", "enum": ["classic", "quiz", "match"], "default": "classic"},
                    "deck": {"type": ["string", "null"], "default": None},
                },
            },
            presets=P.FLASHCARD_PRESETS,
            drill_cls=FlashcardDrill,
        ),
        ModuleMeta(
            id="geography",
            name="Canada Geography",
            description="Provinces and territories, capitals and landmarks.",
            parameters_schema={
                "type": "object",
                "properties": {
                    "mode": {"type": "string", "enum": ["name_province", "find_capital", "landmark_match"]},
                    "questions": _questions(10),
                },
            },
            presets=P.GEOGRAPHY_PRESETS,
            drill_cls=GeographyDrill,
            records={
                "Best provinces": "geography.best_score.name_province",
                "Best capitals": "geography.best_score.find_capital",
                "Best landmarks": "geography.best_score.landmark_match",
            },
        ),
        ModuleMeta(
            id="periodic_table",
            name="Periodic Table",
            description="Element names and symbols.",
            parameters_schema={"type": "object", "properties": {"questions": _questions(10)}},
            presets=P.PERIODIC_TABLE_PRESETS,
            drill_cls=PeriodicTableDrill,
            records={"Best score": "periodic_table.best_score"},
        ),
        ModuleMeta(
            id="math",
            name="Math Quiz",
            description="Arithmetic practice, or as many problems as you can in 60 seconds.",
            parameters_schema={
                "type": "object",
                "properties": {
                    "mode": {"type": "string", "enum": ["practice", "timer"], "default": "practice"},
                    "difficulty": {"type": "string", "enum": list(DIFFICULTIES), "default": "easy"},
                    "questions": _questions(None),
                    "time_limit": {"type": "number", "default": 60},
                    "feedback_delay_ms": {"type": "integer", "default": 1000},
                    "auto_advance": {"type": "boolean", "default": True},
                },
            },
            presets=P.MATH_PRESETS,
            drill_cls=MathQuizDrill,
            records={
                **{f"Timer {d}": f"math.timer_high_score.{d}" for d in DIFFICULTIES},
                "Total solved": "math.total_solved",
                "Best streak": "math.best_streak",
            },
        ),
        ModuleMeta(
            id="geometry",
            name="Geometry Quiz",
            description="Areas, perimeters and volumes of 2D and 3D shapes.",
            parameters_schema={"type": "object", "properties": {"questions": _questions(10)}},
            presets=P.GEOMETRY_PRESETS,
            drill_cls=GeometryQuizDrill,
            records={"Best streak": "geometry.best_streak"},
        ),
        ModuleMeta(
            id="spelling",
            name="Spelling Bee",
            description="Spell words from their definition; three lives, growing rounds.",
            parameters_schema={
                "type": "object",
                "properties": {
                    "grade": {"type": "string", "default": "grade4to5"},
                    "lives": {"type": "integer", "minimum": 1, "default": 3},
                    "round_size": {"type": "integer", "minimum": 1, "default": 5},
                    "max_round_size": {"type": "integer", "minimum": 1, "default": 10},
                    "perfect_bonus": {"type": "integer", "default": 50},
                },
            },
            presets=P.SPELLING_PRESETS,
            drill_cls=SpellingBeeDrill,
            records={"High score": "spelling.high_score", "Best streak": "spelling.best_streak"},
        ),
        ModuleMeta(
            id="typing",
            name="Typing Tutor",
            description="Type the prompt; words per minute and accuracy.",
            parameters_schema={
                "type": "object",
                "properties": {
                    "difficulty": {"type": "string", "enum": ["beginner", "intermediate", "advanced"]},
                    "questions": _questions(3),
                },
            },
            presets=P.TYPING_PRESETS,
            drill_cls=TypingTutorDrill,
            records={"Best WPM": "typing.best_wpm", "Best accuracy": "typing.best_accuracy"},
        ),
    ]


def get_module(module_id: str) -> ModuleMeta:
    for m in list_modules():
        if m.id == module_id:
            return m
    raise KeyError(f"Unknown module id: {module_id}")


def resolve_params(module_id: str, preset: str = "default", overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Preset values, then explicit overrides (None overrides are ignored)."""
    meta = get_module(module_id)
    if preset not in meta.presets:
        raise KeyError(f"Unknown preset '{preset}' for module {module_id}")
    params = dict(meta.presets[preset])
    params.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return params


def make_module(
    module_id: str,
    *,
    params: Dict[str, Any],
    rng: Optional[random.Random] = None,
    records: Optional[RecordStore] = None,
    repository: Optional[PoolRepository] = None,
    events: Optional[EventBus] = None,
    timer_factory: Optional[TimerFactory] = None,
) -> BaseDrill:
    """Factory that builds the concrete drill for a module."""
    meta = get_module(module_id)
    ctx = DrillContext(
        module_id=module_id,
        mode=str(params.get("mode") or "default"),
        params=dict(params),
        rng=rng or random.Random(),
        records=records if records is not None else RecordStore(),
        repository=repository if repository is not None else MemoryPoolRepository(),
        events=events,
        timer_factory=timer_factory,
    )
    return meta.drill_cls(ctx)


def game_center(records: RecordStore) -> List[Dict[str, Any]]:
    """One row per module with its best records (None when never played)."""
    rows = []
    for m in list_modules():
        rows.append({
            "id": m.id,
            "name": m.name,
            "description": m.description,
            "records": {label: records.get(key) for label, key in m.records.items()},
        })
    return rows
