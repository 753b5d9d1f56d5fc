from __future__ import annotations

import random
from typing import Any, Optional

from ..types import Action, Observation


class RandomAgent:
    """Coin-flip player: hits or stands uniformly among the allowed actions.

    Seeded so a simulation with the same seed replays the same choices.
    """

    def __init__(self, seed: int = 0, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def act(self, observation: Observation, info: Any) -> Action:
        choices = observation.allowed_actions or [Action.STAND]
        action = self.rng.choice(choices)
        if isinstance(info, dict):
            info["random_choices"] = [a.name for a in choices]
        return action
