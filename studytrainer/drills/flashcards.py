from __future__ import annotations

"""Flashcard decks and their three study modes.

- classic: spaced-repetition order, the learner grades themselves
- quiz: every card once in random order, typed answers
- match: pair fronts with backs on a board of up to eight cards

Deck metadata lives in the record store list `flashcards.decks`; cards and
their mastery live in the pool repository under `deck-<id>`.
"""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..app.content import sample_decks
from ..app.explain import trace as xtrace
from ..app.timers import DelayedAction
from ..policy.mastery import MasteryTracker
from ..policy.selection import head_shuffled, priority_order, uniform_capped
from .base_drill import BaseDrill, DrillResult
from .items import Item, ItemPool, Mastery, MasteryState, utcnow
from .session import SessionController, casefold_match

MODES = ("classic", "quiz", "match")
DECKS_KEY = "flashcards.decks"
MATCH_SIZE = 8
MATCH_CLEAR_DELAY = 0.5


def deck_scope(deck_id: str) -> str:
    return f"deck-{deck_id}"


@dataclass
class Deck:
    id: str
    title: str
    subject: str = ""
    cards: List[Item] = field(default_factory=list)
    date_created: datetime = field(default_factory=utcnow)
    date_modified: datetime = field(default_factory=utcnow)

    @property
    def mastery_percentage(self) -> float:
        if not self.cards:
            return 0.0
        mastered = sum(1 for c in self.cards if c.mastered)
        return mastered / len(self.cards) * 100.0

    def counts(self) -> Dict[str, int]:
        out = {m.value: 0 for m in Mastery}
        for c in self.cards:
            level = c.mastery.level if c.mastery is not None else Mastery.NEW
            out[level.value] += 1
        return out

    def add_card(self, front: str, back: str) -> Item:
        front, back = front.strip(), back.strip()
        if not front or not back:
            raise ValueError("Card front and back must not be empty")
        card = Item(id=uuid.uuid4().hex[:12], front=front, back=back, mastery=MasteryState())
        self.cards.append(card)
        self.date_modified = utcnow()
        return card

    def remove_card(self, card_id: str) -> Item:
        for i, c in enumerate(self.cards):
            if c.id == card_id:
                self.date_modified = utcnow()
                return self.cards.pop(i)
        raise KeyError(f"Unknown card id: {card_id}")

    def meta(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "date_created": self.date_created.isoformat(),
            "date_modified": self.date_modified.isoformat(),
        }


def _parse_dt(value: Any) -> datetime:
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return utcnow()


class DeckStore:
    """Deck CRUD over a record store (metadata) and a pool repository (cards)."""

    def __init__(self, repository, records) -> None:
        self.repository = repository
        self.records = records

    def _metas(self) -> List[Dict[str, Any]]:
        return [m for m in self.records.get_list(DECKS_KEY) if isinstance(m, dict) and m.get("id")]

    def list_decks(self) -> List[Deck]:
        return [self._build(m) for m in self._metas()]

    def _build(self, meta: Dict[str, Any]) -> Deck:
        deck_id = str(meta["id"])
        return Deck(
            id=deck_id,
            title=str(meta.get("title", deck_id)),
            subject=str(meta.get("subject", "")),
            cards=self.repository.load_pool(deck_scope(deck_id)),
            date_created=_parse_dt(meta.get("date_created")),
            date_modified=_parse_dt(meta.get("date_modified")),
        )

    def find(self, key: str) -> Deck:
        """Look a deck up by id, then by case-insensitive title."""
        metas = self._metas()
        for m in metas:
            if m["id"] == key:
                return self._build(m)
        for m in metas:
            if str(m.get("title", "")).lower() == key.strip().lower():
                return self._build(m)
        raise KeyError(f"Unknown deck: {key}")

    def create(self, title: str, subject: str = "") -> Deck:
        title = title.strip()
        if not title:
            raise ValueError("Deck title must not be empty")
        deck = Deck(id=uuid.uuid4().hex[:12], title=title, subject=subject.strip())
        self.save(deck)
        return deck

    def save(self, deck: Deck) -> None:
        self.repository.save_pool(deck_scope(deck.id), deck.cards)
        metas = [m for m in self._metas() if m["id"] != deck.id]
        metas.insert(0, deck.meta())
        self.records.set_list(DECKS_KEY, metas)
        self.records.save()

    def save_cards(self, deck_id: str, pool: ItemPool) -> None:
        self.repository.save_pool(deck_scope(deck_id), pool)

    def delete(self, deck_id: str) -> None:
        self.repository.delete_pool(deck_scope(deck_id))
        self.records.set_list(DECKS_KEY, [m for m in self._metas() if m["id"] != deck_id])
        self.records.save()

    def seed_samples(self) -> List[Deck]:
        """Create the bundled sample decks when no deck exists yet."""
        if self._metas():
            return []
        created = []
        for raw in sample_decks():
            deck = Deck(id=uuid.uuid4().hex[:12], title=str(raw["title"]), subject=str(raw.get("subject", "")))
            for c in raw.get("cards", []):
                deck.add_card(str(c["front"]), str(c["back"]))
            self.save(deck)
            created.append(deck)
        xtrace("decks_seeded", {"count": len(created)})
        return created


class MatchBoard:
    """Front/back matching over the first `size` cards of a deck.

    Selecting one front and one back checks the pair. A wrong pair stays
    visible for `clear_delay` seconds, unless the learner has already moved on.
    """

    def __init__(
        self,
        cards: List[Item],
        rng,
        *,
        size: int = MATCH_SIZE,
        clear_delay: float = MATCH_CLEAR_DELAY,
        timer_factory=None,
        on_complete: Optional[Callable[["MatchBoard"], None]] = None,
    ) -> None:
        self.rng = rng
        self.cards = head_shuffled(cards, size, rng)
        self.fronts = list(self.cards)
        self.backs = list(self.cards)
        rng.shuffle(self.fronts)
        rng.shuffle(self.backs)
        self.clear_delay = clear_delay
        self.timer_factory = timer_factory
        self.on_complete = on_complete
        self.matched: set[str] = set()
        self.attempts = 0
        self.selected_front: Optional[str] = None
        self.selected_back: Optional[str] = None
        self.wrong_pair: Optional[tuple[str, str]] = None
        self._lock = threading.RLock()
        self._pending: Optional[DelayedAction] = None

    @property
    def complete(self) -> bool:
        return len(self.matched) == len(self.cards)

    def select_front(self, card_id: str) -> Optional[bool]:
        with self._lock:
            if card_id in self.matched:
                return None
            self._drop_wrong_pair()
            self.selected_front = card_id
            return self._check()

    def select_back(self, card_id: str) -> Optional[bool]:
        with self._lock:
            if card_id in self.matched:
                return None
            self._drop_wrong_pair()
            self.selected_back = card_id
            return self._check()

    def _drop_wrong_pair(self) -> None:
        if self.wrong_pair is not None:
            self.selected_front = self.selected_back = None
            self.wrong_pair = None

    def _check(self) -> Optional[bool]:
        if self.selected_front is None or self.selected_back is None:
            return None
        self.attempts += 1
        pair = (self.selected_front, self.selected_back)
        if pair[0] == pair[1]:
            self.matched.add(pair[0])
            self.selected_front = self.selected_back = None
            xtrace("match_found", {"id": pair[0], "attempts": self.attempts})
            if self.complete and self.on_complete is not None:
                self.on_complete(self)
            return True
        self.wrong_pair = pair
        self._pending = DelayedAction(
            self.clear_delay,
            guard=lambda: self.wrong_pair == pair,
            action=self._clear_wrong,
            timer_factory=self.timer_factory,
        ).start()
        return False

    def _clear_wrong(self) -> None:
        with self._lock:
            self.selected_front = self.selected_back = None
            self.wrong_pair = None

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()


class FlashcardDrill(BaseDrill):
    """Study one deck in classic, quiz or match mode."""

    def __init__(self, ctx) -> None:
        super().__init__(ctx)
        if ctx.mode not in MODES:
            raise ValueError(f"Unknown flashcard mode: {ctx.mode}")
        self.decks = DeckStore(ctx.repository, ctx.records)
        self.deck: Optional[Deck] = None
        self.board: Optional[MatchBoard] = None

    def _load_deck(self) -> Deck:
        key = self.ctx.param("deck")
        if key is None:
            decks = self.decks.list_decks() or self.decks.seed_samples()
            if not decks:
                raise KeyError("No flashcard decks available")
            return decks[0]
        return self.decks.find(str(key))

    def build_controller(self) -> SessionController:
        self.deck = self._load_deck()
        pool = ItemPool(self.deck.cards)
        deck_id = self.deck.id
        tracker = MasteryTracker(pool, on_update=lambda p: self.decks.save_cards(deck_id, p))
        if self.ctx.mode == "classic":
            self.ask_label = "Did you know it? [y/n, 'q' to quit]: "
            return SessionController(
                pool,
                select=lambda items, _rng: priority_order(items),
                truth=lambda _it: True,
                tracker=tracker,
                events=self.ctx.events,
                rng=self.rng,
            )
        self.ask_label = "Your answer ('q' to quit): "
        return SessionController(
            pool,
            select=lambda items, rng: uniform_capped(items, None, rng),
            matcher=casefold_match,
            tracker=tracker,
            events=self.ctx.events,
            rng=self.rng,
        )

    def parse_answer(self, raw: str) -> Any:
        if self.ctx.mode == "classic":
            return raw.strip().lower() in ("y", "yes", "1")
        return raw.strip()

    def feedback(self, item: Item, correct: bool) -> str:
        if self.ctx.mode == "classic":
            return f"Answer: {item.back}\n"
        return super().feedback(item, correct)

    def result_extra(self) -> Dict[str, Any]:
        if self.deck is None:
            return {}
        return {"deck": self.deck.title}

    # --- match mode ---

    def start_match(self) -> MatchBoard:
        self.deck = self._load_deck()
        self.board = MatchBoard(
            self.deck.cards,
            self.rng,
            timer_factory=self.ctx.timer_factory,
            on_complete=self._match_done,
        )
        xtrace("match_started", {"deck": self.deck.title, "cards": len(self.board.cards)})
        return self.board

    def _match_done(self, board: MatchBoard) -> None:
        key = f"flashcards.best_match_attempts.{self.deck.id}" if self.deck else "flashcards.best_match_attempts"
        best = self.ctx.records.number(key)
        if best is None or board.attempts < best:
            self.ctx.records.put(key, board.attempts)
            self.new_records.append("best_match_attempts")
        try:
            self.ctx.records.save()
        except OSError as e:
            xtrace("records_save_failed", {"module": self.ctx.module_id, "error": str(e)})

    def _run_match(self, ask, inform) -> DrillResult:
        board = self.start_match()
        letters = "ABCDEFGH"
        while not board.complete:
            inform("Fronts:")
            for n, c in enumerate(board.fronts, start=1):
                mark = " (matched)" if c.id in board.matched else ""
                inform(f"  {n}) {c.front}{mark}")
            inform("Backs:")
            for n, c in enumerate(board.backs):
                mark = " (matched)" if c.id in board.matched else ""
                inform(f"  {letters[n]}) {c.back}{mark}")
            ans = ask("Pair a front with a back, e.g. '1B' ('q' to quit): ").strip().upper()
            if ans == "Q":
                break
            if len(ans) < 2 or not ans[:-1].isdigit() or ans[-1] not in letters[: len(board.backs)]:
                inform("Enter a number then a letter.\n")
                continue
            fi = int(ans[:-1]) - 1
            if not 0 <= fi < len(board.fronts):
                inform("No such front.\n")
                continue
            front, back = board.fronts[fi], board.backs[letters.index(ans[-1])]
            if front.id in board.matched or back.id in board.matched:
                inform("Already matched.\n")
                continue
            board.select_front(front.id)
            ok = board.select_back(back.id)
            inform("Match!\n" if ok else "Not a pair.\n")
        board.cancel()
        return DrillResult(
            total=board.attempts,
            correct=len(board.matched),
            score=len(board.matched),
            percent=round(len(board.matched) / board.attempts * 100.0, 1) if board.attempts else 0.0,
            mode="match",
            extra={"complete": board.complete, "deck": self.deck.title, "new_records": list(self.new_records)},
        )

    def run(self, ui_callbacks) -> DrillResult:
        if self.ctx.mode == "match":
            return self._run_match(ui_callbacks["ask"], ui_callbacks["inform"])
        return super().run(ui_callbacks)

