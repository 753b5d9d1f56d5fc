from __future__ import annotations

from typing import Any

from ..agent_utils import parse_dealer_upcard
from ..types import Action, Observation


class BasicStrategyAgent:
    """Hit/stand basic strategy for a six-deck shoe, dealer stands on soft 17.

    Notes:
    - No doubling, splitting or surrender at this table, so hands the full
      chart would double are hit instead.
    - T, J, Q and K all count as 10 for the dealer's up card.
    """

    def act(self, observation: Observation, info: Any) -> Action:
        # Soft totals
        if observation.player.is_soft:
            return self._soft_total_decision(observation)

        # Hard totals
        return self._hard_total_decision(observation)

    def _soft_total_decision(self, obs: Observation) -> Action:
        up = parse_dealer_upcard(obs)
        total = obs.player.score
        if total <= 17:  # A,2 .. A,6
            return Action.HIT
        if total == 18:  # A,7
            if up in (9, 10, 11):
                return Action.HIT
            return Action.STAND
        # A,8 or better: stand
        return Action.STAND

    def _hard_total_decision(self, obs: Observation) -> Action:
        up = parse_dealer_upcard(obs)
        total = obs.player.score

        if total <= 11:
            return Action.HIT
        if total == 12:
            if up in (4, 5, 6):
                return Action.STAND
            return Action.HIT
        if 13 <= total <= 16:
            if up in (2, 3, 4, 5, 6):
                return Action.STAND
            return Action.HIT
        return Action.STAND
