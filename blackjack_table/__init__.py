from .cards import Card, Shoe
from .engine import RoundEngine, RoundResult, Table
from .hand import Hand
from .rules import Rules
from .stats import StatsLedger
from .types import Action, AddResult, HandView, Observation, Outcome, Phase

__all__ = [
    "Card",
    "Shoe",
    "Hand",
    "RoundEngine",
    "RoundResult",
    "Table",
    "Rules",
    "StatsLedger",
    "Action",
    "AddResult",
    "HandView",
    "Observation",
    "Outcome",
    "Phase",
]
