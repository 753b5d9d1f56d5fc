"""Shared utilities for decision providers."""

from __future__ import annotations

from typing import Any

from .cards import card_value
from .types import Action, InvalidDecision, Observation

_ACTION_WORDS = {
    "HIT": Action.HIT,
    "H": Action.HIT,
    "STAND": Action.STAND,
    "S": Action.STAND,
}


def parse_action(value: Any) -> Action:
    """Turn a provider's answer into an Action.

    Accepts an Action, or text such as 'hit', 'S', 'Action: STAND'.

    Raises:
        InvalidDecision: if the answer names neither HIT nor STAND.
    """
    if isinstance(value, Action):
        return value
    if not isinstance(value, str):
        raise InvalidDecision(f"Expected 'hit' or 'stand', got {value!r}")
    text = value.strip().upper()
    if text in _ACTION_WORDS:
        return _ACTION_WORDS[text]
    # allow variants like "Action: HIT" or "I'll STAND."
    found = [a for a in (Action.HIT, Action.STAND) if a.name in text]
    if len(found) == 1:
        return found[0]
    raise InvalidDecision(f"Expected 'hit' or 'stand', got {value!r}")


def parse_dealer_upcard(observation: Observation) -> int:
    """Numeric value of the dealer's up card (11 for an ace, 10 for T/J/Q/K)."""
    # dealer_upcard like '9H' or 'TS'; strip one-char suit
    return card_value(observation.dealer_upcard[:-1])


def extract_ranks_from_cards(cards: list[str]) -> str:
    """Comma-separated ranks from card labels, e.g. ['AH', 'TS'] -> 'A,T'."""
    return ",".join(card[:-1] for card in cards)
