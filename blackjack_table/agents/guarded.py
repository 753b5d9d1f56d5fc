from __future__ import annotations

from typing import Any, List

from ..agent_utils import parse_action
from ..constants import MAX_DECISION_ATTEMPTS
from ..types import Action, Observation


class GuardedAgent:
    """Wraps a decision provider so the table always gets HIT or STAND.

    - Answers that cannot be parsed, and providers that raise (an
      ``InvalidDecision`` or any other error such as a dropped connection),
      are logged in ``invalid_log`` and the provider is asked again.
    - After ``max_attempts`` bad answers the wrapper stands and counts a
      fallback in ``fallback_count``.
    """

    def __init__(self, agent: Any, max_attempts: int = MAX_DECISION_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.agent = agent
        self.max_attempts = max_attempts
        self.invalid_count = 0
        self.fallback_count = 0
        self.invalid_log: List[dict] = []

    def act(self, observation: Observation, info: Any) -> Action:
        # Ensure info is a dict we can enrich
        if not isinstance(info, dict):
            info = {}
        for attempt in range(1, self.max_attempts + 1):
            try:
                action = parse_action(self.agent.act(observation, info))
            except Exception as e:  # noqa: BLE001
                # unparseable answers and provider failures are both asked again
                self.invalid_count += 1
                self.invalid_log.append({"attempt": attempt, "error": f"{type(e).__name__}: {e}"})
                info["invalid_attempts"] = info.get("invalid_attempts", 0) + 1
                continue
            if action in observation.allowed_actions:
                return action
            self.invalid_count += 1
            self.invalid_log.append({
                "attempt": attempt,
                "attempted": action.name,
                "allowed": [a.name for a in observation.allowed_actions],
            })
            info["invalid_attempts"] = info.get("invalid_attempts", 0) + 1
        self.fallback_count += 1
        info["fallback_action"] = Action.STAND.name
        return Action.STAND
