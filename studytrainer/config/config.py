from __future__ import annotations

"""Configuration loading and validation for studytrainer.

This module loads YAML configuration, applies defaults, and validates
that enumerations and paths are sane for the CLI.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..theory.arithmetic import DIFFICULTIES


ALLOWED_BACKENDS = {"disk", "memory"}
ALLOWED_DIFFICULTIES = set(DIFFICULTIES)
ALLOWED_DIRECTIONS = {"fr_en", "en_fr"}
ALLOWED_FLASHCARD_MODES = {"classic", "quiz", "match"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unsupported enum values are reported with a WARNING line and replaced
    by their default.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    cfg.setdefault("storage", {})
    cfg.setdefault("session", {})
    cfg.setdefault("mastery", {})
    cfg.setdefault("modules", {})

    storage = cfg["storage"]
    session = cfg["session"]
    mastery = cfg["mastery"]
    modules = cfg["modules"]

    storage.setdefault("backend", "disk")
    storage.setdefault("data_dir", "storage/data")
    storage.setdefault("records_path", "storage/data/records.json")

    session.setdefault("default_preset", "default")
    session.setdefault("stats_disable", False)
    session.setdefault("show_summary", True)
    session.setdefault("stats_output_path", None)

    mastery.setdefault("bonus_threshold", 0.8)

    for mid in ("vocab", "flashcards", "geography", "periodic_table", "math", "geometry", "spelling", "typing"):
        modules.setdefault(mid, {})
    modules["math"].setdefault("difficulty", "easy")
    modules["vocab"].setdefault("direction", "fr_en")
    modules["flashcards"].setdefault("mode", "classic")

    # Enum validations
    backend = storage.get("backend")
    if backend not in ALLOWED_BACKENDS:
        print(f"WARNING: Unsupported storage backend '{backend}', using 'disk'.")
        storage["backend"] = "disk"

    difficulty = modules["math"].get("difficulty")
    if difficulty not in ALLOWED_DIFFICULTIES:
        print(f"WARNING: Unsupported math difficulty '{difficulty}', using 'easy'.")
        modules["math"]["difficulty"] = "easy"

    direction = modules["vocab"].get("direction")
    if direction not in ALLOWED_DIRECTIONS:
        print(f"WARNING: Unsupported vocab direction '{direction}', using 'fr_en'.")
        modules["vocab"]["direction"] = "fr_en"

    fc_mode = modules["flashcards"].get("mode")
    if fc_mode not in ALLOWED_FLASHCARD_MODES:
        print(f"WARNING: Unsupported flashcard mode '{fc_mode}', using 'classic'.")
        modules["flashcards"]["mode"] = "classic"

    try:
        threshold = float(mastery.get("bonus_threshold"))
    except (TypeError, ValueError):
        threshold = -1.0
    if not 0.0 <= threshold <= 1.0:
        print("WARNING: mastery.bonus_threshold must be within 0..1, using 0.8.")
        threshold = 0.8
    mastery["bonus_threshold"] = threshold

    return cfg
