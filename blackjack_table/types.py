from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class InvalidDecision(ValueError):
    """Raised when a hit/stand answer cannot be used."""


class Action(Enum):
    HIT = auto()
    STAND = auto()


class AddResult(Enum):
    ACCEPTED = auto()
    REJECTED = auto()


class Phase(Enum):
    DEALING = auto()
    BLACKJACK_CHECK = auto()
    EARLY_SETTLEMENT = auto()
    PLAYER_TURNS = auto()
    DEALER_TURN = auto()
    SETTLEMENT = auto()
    DONE = auto()


class Outcome(Enum):
    WIN = "win"
    BLACKJACK = "blackjack"
    LOSS = "loss"
    BUST = "bust"
    TIE = "tie"


@dataclass
class HandView:
    owner: str
    cards: List[str]
    score: Optional[int]  # None while the dealer's hole card is hidden
    is_soft: bool
    num_cards: int


@dataclass
class Observation:
    player: HandView
    dealer: HandView
    dealer_upcard: str
    player_index: int
    allowed_actions: List[Action] = field(default_factory=lambda: [Action.HIT, Action.STAND])
