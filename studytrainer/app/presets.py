from __future__ import annotations

"""Curated human-friendly parameter presets per module.

Presets help users select sensible defaults quickly without many flags.
"""

VOCAB_PRESETS = {
    "default": {"mode": "fr_en", "category": "greetings", "direction": "fr_en", "questions": 20},
    "reverse": {"mode": "en_fr", "category": "greetings", "direction": "en_fr", "questions": 20},
    "quick": {"mode": "fr_en", "category": "greetings", "direction": "fr_en", "questions": 5},
}

FLASHCARD_PRESETS = {
    "default": {"mode": "classic"},
    "classic": {"mode": "classic"},
    "quiz": {"mode": "quiz"},
    "match": {"mode": "match"},
}

GEOGRAPHY_PRESETS = {
    "default": {"mode": "name_province", "questions": 10},
    "capitals": {"mode": "find_capital", "questions": 10},
    "landmarks": {"mode": "landmark_match", "questions": 10},
}

PERIODIC_TABLE_PRESETS = {
    "default": {"mode": "quiz", "questions": 10},
    "quick": {"mode": "quiz", "questions": 4},
}

MATH_PRESETS = {
    "default": {"mode": "practice", "difficulty": "easy", "questions": 10, "feedback_delay_ms": 1000},
    "practice": {"mode": "practice", "difficulty": "easy", "questions": None, "feedback_delay_ms": 1000},
    "timer": {"mode": "timer", "difficulty": "easy", "time_limit": 60, "feedback_delay_ms": 1000},
    "timer_hard": {"mode": "timer", "difficulty": "hard", "time_limit": 60, "feedback_delay_ms": 1000},
    "expert": {"mode": "practice", "difficulty": "expert", "questions": 20, "feedback_delay_ms": 1000},
}

GEOMETRY_PRESETS = {
    "default": {"mode": "quiz", "questions": 10},
    "endless": {"mode": "quiz", "questions": None},
}

SPELLING_PRESETS = {
    "default": {"mode": "bee", "grade": "grade4to5", "lives": 3, "round_size": 5},
    "middle": {"mode": "bee", "grade": "grade6to7", "lives": 3, "round_size": 5},
    "junior_high": {"mode": "bee", "grade": "grade8to9", "lives": 3, "round_size": 5},
    "senior": {"mode": "bee", "grade": "grade10to12", "lives": 3, "round_size": 5},
}

TYPING_PRESETS = {
    "default": {"mode": "prompt", "difficulty": "beginner", "questions": 3},
    "intermediate": {"mode": "prompt", "difficulty": "intermediate", "questions": 3},
    "advanced": {"mode": "prompt", "difficulty": "advanced", "questions": 3},
}
