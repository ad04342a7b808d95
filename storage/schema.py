from __future__ import annotations

"""Schema constants and Pydantic models for Parquet-backed pools and session history."""

from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, field_validator, model_validator

# --- Constants ---

LEVELS = {"New", "Learning", "Mastered"}
MODULES = {
    "vocab",
    "flashcards",
    "geography",
    "periodic_table",
    "math",
    "geometry",
    "spelling",
    "typing",
}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


ITEM_DTYPES = {
    "id": "string",
    "front": "string",
    "back": "string",
    "level": _cat_dtype(LEVELS),
    "correct_count": "UInt32",
    "incorrect_count": "UInt32",
    # timezone-aware UTC timestamps
    "last_reviewed": pd.DatetimeTZDtype(tz="UTC"),
    "next_review_due": pd.DatetimeTZDtype(tz="UTC"),
}

DTYPES = {
    "session_id": "string",
    "session_start": pd.DatetimeTZDtype(tz="UTC"),
    "module": _cat_dtype(MODULES),
    "mode": "string",
    "Q": "UInt32",
    "C": "UInt32",
    "best_streak": "UInt32",
    "score": "Int64",
    "T_ms": "UInt32",
}


def _as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


# --- Pydantic models ---

class ItemRecord(BaseModel):
    """One persisted pool item with its mastery state."""

    id: str = Field(min_length=1)
    front: str
    back: str
    level: Literal["New", "Learning", "Mastered"] = "New"
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    last_reviewed: Optional[datetime] = None
    next_review_due: datetime

    @field_validator("last_reviewed", "next_review_due")
    @classmethod
    def _ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    @model_validator(mode="after")
    def _due_after_review(self) -> "ItemRecord":
        if self.last_reviewed is not None and self.next_review_due < self.last_reviewed:
            raise ValueError("next_review_due must be >= last_reviewed")
        return self


class SessionRow(BaseModel):
    """Summary of one completed session."""

    session_id: str
    session_start: datetime
    module: Literal[tuple(sorted(MODULES))]  # type: ignore[valid-type]
    mode: str = "default"
    Q: int = Field(ge=0, le=4294967295)
    C: int = Field(ge=0, le=4294967295)
    best_streak: int = Field(default=0, ge=0)
    score: int = 0
    T_ms: int = Field(default=0, ge=0, le=4294967295)

    @field_validator("session_start")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)  # type: ignore[return-value]

    @model_validator(mode="after")
    def _c_le_q(self) -> "SessionRow":
        if self.C > self.Q:
            raise ValueError("C must be <= Q")
        if self.best_streak > self.Q:
            raise ValueError("best_streak must be <= Q")
        return self
