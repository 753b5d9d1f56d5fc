from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .agents.guarded import GuardedAgent
from .engine import Table
from .rules import Rules


@dataclass
class SimulationMetrics:
    rounds: int
    decisions: int
    early_settlements: int
    dealer_busts: int
    shuffles: int
    invalid_decisions: int
    fallbacks: int
    invalid_rate: float


def run_simulation(
    agents: Any,
    rounds: int = 1000,
    num_players: int = 1,
    seed: int | None = 42,
    rules: Rules | None = None,
    *,
    log_fn: Optional[Callable[[Dict], None]] = None,
) -> Dict:
    """Play ``rounds`` rounds at one table with scripted decision providers.

    Returns a report with the ledger snapshot, per-player outcome counts and
    run metrics. Every engine event is passed to ``log_fn`` when given.
    """
    table = Table(num_players, rules=rules, seed=seed)
    seats = table.seat_agents(agents)
    guarded = [a if isinstance(a, GuardedAgent) else GuardedAgent(a) for a in seats]
    decisions = 0
    early = 0
    dealer_busts = 0
    outcome_counts: List[Counter] = [Counter() for _ in range(num_players)]
    traces: List[Dict] = []

    for _ in range(rounds):
        result = table.play_round(guarded, sink=log_fn)
        decisions += len(result.trace.get("decisions", []))
        early += int(result.early)
        dealer_busts += int(result.dealer_bust)
        for i, outcome in enumerate(result.outcomes):
            outcome_counts[i][outcome.value] += 1
        if len(traces) < 10:
            traces.append(result.to_dict())

    invalid = sum(g.invalid_count for g in guarded)
    metrics = SimulationMetrics(
        rounds=rounds,
        decisions=decisions,
        early_settlements=early,
        dealer_busts=dealer_busts,
        # the shoe is shuffled once when it is built
        shuffles=table.shoe.shuffle_count - 1,
        invalid_decisions=invalid,
        fallbacks=sum(g.fallback_count for g in guarded),
        invalid_rate=(invalid / decisions) if decisions else 0.0,
    )
    return {
        "metrics": metrics.__dict__,
        "stats": table.ledger.snapshot(),
        "outcomes": [dict(c) for c in outcome_counts],
        "samples": len(traces),
        "trace_preview": traces,
    }
