from __future__ import annotations

from typing import List

from .cards import Card, hand_totals, max_hand_size
from .constants import BLACKJACK, STARTING_CARDS
from .types import AddResult, HandView

MAX_HAND_SIZE = max_hand_size()
HIDDEN_CARD = "??"


class Hand:
    """Cards held by one participant for one round.

    The score is derived from the cards on every call. Cards beyond
    ``MAX_HAND_SIZE`` or malformed cards are refused with ``AddResult.REJECTED``
    and leave the hand as it was.
    """

    def __init__(self, owner: str, capacity: int = MAX_HAND_SIZE):
        self.owner = owner
        self.capacity = capacity
        self._cards: List[Card] = []

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    @property
    def num_cards(self) -> int:
        return len(self._cards)

    def is_full(self) -> bool:
        return len(self._cards) >= self.capacity

    def add_card(self, card: Card) -> AddResult:
        if self.is_full() or not isinstance(card, Card) or not card.is_valid():
            return AddResult.REJECTED
        self._cards.append(card)
        return AddResult.ACCEPTED

    def clear(self) -> None:
        self._cards.clear()

    def score(self) -> int:
        total, _ = hand_totals(self._cards)
        return total

    def is_soft(self) -> bool:
        _, soft = hand_totals(self._cards)
        return soft

    def is_bust(self) -> bool:
        return self.score() > BLACKJACK

    def is_natural(self) -> bool:
        return len(self._cards) == STARTING_CARDS and self.score() == BLACKJACK

    def labels(self) -> List[str]:
        return [c.label() for c in self._cards]

    def view(self, masked: bool = False) -> HandView:
        # masked: first card is the hole card, score withheld
        if masked and self._cards:
            return HandView(
                owner=self.owner,
                cards=[HIDDEN_CARD] + [c.label() for c in self._cards[1:]],
                score=None,
                is_soft=False,
                num_cards=len(self._cards),
            )
        total, soft = hand_totals(self._cards)
        return HandView(
            owner=self.owner,
            cards=self.labels(),
            score=total,
            is_soft=soft,
            num_cards=len(self._cards),
        )

    def __repr__(self) -> str:
        return f"Hand({self.owner!r}, {self.labels()}, score={self.score()})"
