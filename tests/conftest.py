from __future__ import annotations

from typing import Any, Iterable, List

from blackjack_table.cards import Card, Shoe
from blackjack_table.engine import Table
from blackjack_table.hand import Hand
from blackjack_table.types import Action, Observation


def cards(*labels: str) -> List[Card]:
    return [Card.parse(label) for label in labels]


def hand_of(*labels: str, owner: str = "Player 1") -> Hand:
    hand = Hand(owner)
    for c in cards(*labels):
        hand.add_card(c)
    return hand


def stack_shoe(shoe: Shoe, labels: Iterable[str]) -> None:
    """Put the given cards next in line to be drawn."""
    seq = cards(*labels)
    shoe._cards[shoe.cursor:shoe.cursor + len(seq)] = seq


def stacked_table(num_players: int, labels: Iterable[str]) -> Table:
    table = Table(num_players, seed=0)
    stack_shoe(table.shoe, labels)
    return table


def observation(player: Iterable[str], upcard: str = "7H", index: int = 0) -> Observation:
    dealer = hand_of("2C", upcard, owner="Dealer")
    return Observation(
        player=hand_of(*player).view(),
        dealer=dealer.view(masked=True),
        dealer_upcard=upcard,
        player_index=index,
    )


class ScriptedAgent:
    """Answers from a fixed list, then stands."""

    def __init__(self, answers: Iterable[Any]):
        self.answers = list(answers)
        self.seen: List[Observation] = []

    def act(self, observation: Observation, info: Any) -> Any:
        self.seen.append(observation)
        if self.answers:
            answer = self.answers.pop(0)
            if isinstance(answer, Exception):
                raise answer
            return answer
        return Action.STAND
