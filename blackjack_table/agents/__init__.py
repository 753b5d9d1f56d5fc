from .basic import BasicStrategyAgent
from .random_agent import RandomAgent
from .dealer_agent import DealerMimicAgent
from .guarded import GuardedAgent
from .llm_agent import LLMAgent
from .console import ConsoleAgent

__all__ = ["BasicStrategyAgent", "RandomAgent", "DealerMimicAgent", "GuardedAgent", "LLMAgent", "ConsoleAgent"]
