"""Console collaborators: hit/stand prompts, player count and replay questions."""

from __future__ import annotations

from typing import Any, Callable, Optional

from ..agent_utils import parse_action
from ..cli_helpers import format_card, format_hand
from ..constants import MAX_PLAYER_COUNT, MIN_PLAYER_COUNT
from ..types import Action, InvalidDecision, Observation

InputFn = Callable[[str], str]
PrintFn = Callable[..., None]


class ConsoleAgent:
    """Asks a person at the terminal to hit or stand.

    Bad input is reported and raised as ``InvalidDecision`` so the table's
    guard asks again.
    """

    def __init__(self, input_fn: Optional[InputFn] = None, print_fn: Optional[PrintFn] = None):
        self.input_fn = input_fn or input
        self.print_fn = print_fn or print

    def act(self, observation: Observation, info: Any) -> Action:
        self.print_fn(format_hand(observation.player))
        self.print_fn(f"Dealer's up card: {format_card(observation.dealer_upcard)}")
        raw = self.input_fn(f"{observation.player.owner}: Would you like to hit or stand? ")
        word = (raw or "").strip().lower()
        if word not in ("hit", "stand", "h", "s"):
            self.print_fn("Invalid input. Please enter 'hit' or 'stand'.")
            raise InvalidDecision(f"Unrecognised answer {raw!r}")
        return parse_action(word)


def request_player_count(input_fn: Optional[InputFn] = None, print_fn: Optional[PrintFn] = None) -> int:
    input_fn = input_fn or input
    print_fn = print_fn or print
    while True:
        raw = input_fn(f"Welcome to Blackjack! How many players are there? ({MIN_PLAYER_COUNT}-{MAX_PLAYER_COUNT}): ")
        try:
            count = int((raw or "").strip())
        except ValueError:
            count = 0
        if MIN_PLAYER_COUNT <= count <= MAX_PLAYER_COUNT:
            return count
        print_fn(f"Invalid input. Please enter a number between {MIN_PLAYER_COUNT} and {MAX_PLAYER_COUNT}.")


def request_replay(input_fn: Optional[InputFn] = None) -> bool:
    input_fn = input_fn or input
    answer = (input_fn("Would you like to play again? (yes/no): ") or "").strip().lower()
    return answer in ("yes", "y")
