from __future__ import annotations

from dataclasses import dataclass

from .constants import DECK_SIZE, NUMBER_OF_DECKS, RESHUFFLE_THRESHOLD


@dataclass(frozen=True)
class Rules:
    num_decks: int = NUMBER_OF_DECKS
    reshuffle_threshold: int = RESHUFFLE_THRESHOLD  # cards left behind the cut

    def __post_init__(self) -> None:
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if not 0 <= self.reshuffle_threshold < self.capacity:
            raise ValueError(
                f"reshuffle_threshold must be in [0, {self.capacity}) for {self.num_decks} deck(s)"
            )

    @property
    def capacity(self) -> int:
        return DECK_SIZE * self.num_decks
