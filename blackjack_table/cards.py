from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .constants import (
    ACE_HIGH,
    ACE_LOW,
    BLACKJACK,
    DECK_SIZE,
    FACE_CARD_VALUE,
    NUMBER_OF_DECKS,
    RESHUFFLE_THRESHOLD,
)


RANKS = ["A", "K", "Q", "J", "T", "9", "8", "7", "6", "5", "4", "3", "2"]
SUITS = ["C", "D", "H", "S"]
SUIT_SYMBOLS = {"C": "♣", "D": "♦", "H": "♥", "S": "♠"}


class InvalidCard(ValueError):
    """Raised when a card label cannot be parsed into a rank and suit."""


class ShoeExhausted(RuntimeError):
    """Raised when the shoe has no card to give even after a reshuffle."""


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    @classmethod
    def parse(cls, label: str) -> "Card":
        """Build a card from a label like 'AS' or 'TH'. '10' is accepted for 'T'."""
        text = (label or "").strip().upper()
        if text.startswith("10"):
            text = "T" + text[2:]
        if len(text) != 2 or text[0] not in RANKS or text[1] not in SUITS:
            raise InvalidCard(f"Not a card: {label!r}")
        return cls(text[0], text[1])

    def is_valid(self) -> bool:
        return self.rank in RANKS and self.suit in SUITS

    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    def symbol(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS.get(self.suit, self.suit)}"


def card_value(rank: str) -> int:
    if rank == "A":
        return ACE_HIGH
    if rank in ("K", "Q", "J", "T"):
        return FACE_CARD_VALUE
    return int(rank)


def hand_totals(cards: Iterable[Card]) -> Tuple[int, bool]:
    total = 0
    aces = 0
    for c in cards:
        if c.rank == "A":
            aces += 1
        total += card_value(c.rank)
    # downgrade aces from 11 to 1 one at a time
    while total > BLACKJACK and aces > 0:
        total -= ACE_HIGH - ACE_LOW
        aces -= 1
    # soft if at least one ace remains valued as 11
    return total, aces > 0


def max_hand_size(copies_per_rank: int = len(SUITS)) -> int:
    """Longest hand that stays at or under 21 drawing from one deck.

    Takes the cheapest cards first (aces as 1, then deuces, treys...) until the
    next one would bust. With four suits that is A,A,A,A,2,2,2,2,3,3,3.
    """
    total = 0
    count = 0
    for rank in RANKS[:1] + RANKS[:0:-1]:
        value = ACE_LOW if rank == "A" else card_value(rank)
        for _ in range(copies_per_rank):
            if total + value > BLACKJACK:
                return count
            total += value
            count += 1
    return count


def canonical_deck() -> List[Card]:
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


class Shoe:
    """Multi-deck shoe with a draw cursor and a reshuffle cut.

    Cards are never removed: drawing advances ``cursor``. Once fewer than
    ``reshuffle_threshold`` cards lie beyond the cursor, the whole shoe is
    shuffled again before the next card is dealt.
    """

    def __init__(
        self,
        num_decks: int = NUMBER_OF_DECKS,
        seed: Optional[int] = None,
        *,
        reshuffle_threshold: int = RESHUFFLE_THRESHOLD,
        rng: Optional[random.Random] = None,
    ):
        if num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        capacity = DECK_SIZE * num_decks
        if not 0 <= reshuffle_threshold < capacity:
            raise ValueError(f"reshuffle_threshold must be in [0, {capacity})")
        self.num_decks = num_decks
        self.reshuffle_threshold = reshuffle_threshold
        self.rng = rng if rng is not None else random.Random(seed)
        self.cursor = 0
        self.shuffle_count = 0
        self._cards: List[Card] = []
        self.initialize()
        self.shuffle()

    @property
    def capacity(self) -> int:
        return DECK_SIZE * self.num_decks

    def initialize(self) -> None:
        self._cards = [card for _ in range(self.num_decks) for card in canonical_deck()]
        self.cursor = 0

    def shuffle(self) -> None:
        self.rng.shuffle(self._cards)
        self.cursor = 0
        self.shuffle_count += 1

    def draw(self) -> Card:
        if self.cursor >= self.capacity - self.reshuffle_threshold:
            self.shuffle()
        if self.cursor >= len(self._cards):
            # cursor past the end; only possible if the shoe was tampered with
            self.shuffle()
            if self.cursor >= len(self._cards):
                raise ShoeExhausted(f"No cards left in a shoe of {len(self._cards)}")
        card = self._cards[self.cursor]
        self.cursor += 1
        return card

    def remaining(self) -> int:
        return len(self._cards) - self.cursor

    def cards(self) -> List[Card]:
        return list(self._cards)
