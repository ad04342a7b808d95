from __future__ import annotations

"""Spelling bee: lives, growing rounds and a perfect-round bonus.

Scoring per correct word is `len(word) * 10 + streak * 5`, with the streak
taken before the word is counted. A miss costs a life and the streak; the
game ends when no lives are left. Every `round_size` words the round
closes: a round without misses earns the bonus, and the next round is one
word longer, up to `max_round_size`.
"""

import re
from typing import List, Optional, Sequence

from ..app.content import SpellingWord, spelling_grades
from ..app.explain import trace as xtrace
from .base_drill import BaseDrill
from .items import Item
from .session import SessionController, SessionState, casefold_match

LIVES = 3
ROUND_SIZE = 5
MAX_ROUND_SIZE = 10
PERFECT_BONUS = 50


def word_points(item: Item, state: SessionState) -> int:
    return len(str(item.back)) * 10 + state.streak * 5


def mask_word(text: str, word: str) -> str:
    return re.sub(re.escape(word), "_" * len(word), text, flags=re.IGNORECASE)


class WordBag:
    """Random words without repeats until the whole list has been used."""

    def __init__(self, words: Sequence[SpellingWord], rng) -> None:
        if not words:
            raise ValueError("Word list is empty")
        self.words = list(words)
        self.rng = rng
        self.used: set[int] = set()

    def draw(self) -> SpellingWord:
        if len(self.used) >= len(self.words):
            self.used.clear()
        free = [i for i in range(len(self.words)) if i not in self.used]
        idx = self.rng.choice(free)
        self.used.add(idx)
        return self.words[idx]


def word_item(word: SpellingWord, n: int) -> Item:
    return Item(
        id=f"{n}:{word.word.lower()}",
        front=word.definition,
        back=word.word,
        meta={"sentence": word.sentence},
    )


class SpellingBeeDrill(BaseDrill):
    ask_label = "Spell the word ('q' to quit): "

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        grades = spelling_grades()
        grade_id = str(ctx.param("grade", next(iter(grades))))
        if grade_id not in grades:
            raise KeyError(f"Unknown spelling grade: {grade_id}")
        self.grade = grades[grade_id]
        self.start_lives = int(ctx.param("lives", LIVES))
        self.start_round_size = int(ctx.param("round_size", ROUND_SIZE))
        self.max_round_size = int(ctx.param("max_round_size", MAX_ROUND_SIZE))
        self.bonus = int(ctx.param("perfect_bonus", PERFECT_BONUS))
        self.bag = WordBag(self.grade.words, self.rng)
        self._reset_game()

    def _reset_game(self) -> None:
        self.lives = self.start_lives
        self.round = 1
        self.round_size = self.start_round_size
        self.words_in_round = 0
        self.perfect_round = True
        self.bonuses: List[int] = []

    def _refill(self, state: SessionState, _rng) -> Optional[Item]:
        if self.lives <= 0:
            return None
        return word_item(self.bag.draw(), len(state.items) + 1)

    def build_controller(self) -> SessionController:
        self._reset_game()
        return SessionController(
            [word_item(self.bag.draw(), 1)],
            matcher=casefold_match,
            points=word_points,
            refill=self._refill,
            events=self.ctx.events,
            rng=self.rng,
        )

    def prompt_text(self, item: Item) -> str:
        sentence = mask_word(str(item.meta.get("sentence", "")), str(item.back))
        head = f"Round {self.round}, lives {self.lives}. Definition: {item.front}"
        return f"{head}\n  Sentence: {sentence}" if sentence else head

    def after_submit(self, item: Item, correct: bool) -> None:
        if correct:
            return
        self.lives -= 1
        self.perfect_round = False
        if self.lives <= 0:
            xtrace("game_over", {"score": self.state.score, "round": self.round})
            self.finish()

    def on_advance(self) -> None:
        self.words_in_round += 1
        if self.words_in_round < self.round_size:
            return
        if self.perfect_round:
            self.controller.award(self.bonus)
            self.bonuses.append(self.round)
        self.round += 1
        self.words_in_round = 0
        self.perfect_round = True
        self.round_size = min(self.max_round_size, self.round_size + 1)

    def save_records(self, state: SessionState) -> None:
        recs = self.ctx.records
        if recs.bump_max("spelling.high_score", state.score) and state.score > 0:
            self.new_records.append("high_score")
        if recs.bump_max("spelling.best_streak", state.best_streak) and state.best_streak > 0:
            self.new_records.append("best_streak")

    def result_extra(self):
        return {"grade": self.grade.name, "round": self.round, "lives": self.lives, "bonus_rounds": list(self.bonuses)}
