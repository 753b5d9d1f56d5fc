from __future__ import annotations

from typing import Any

from ..constants import DEALER_STAND
from ..types import Action, Observation


class DealerMimicAgent:
    """Plays the dealer's rule: hit below 17, stand on any 17 or more."""

    def act(self, observation: Observation, info: Any) -> Action:
        return Action.HIT if observation.player.score < DEALER_STAND else Action.STAND
