from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List

from .types import Outcome


@dataclass
class PlayerRecord:
    wins: int = 0
    losses: int = 0
    ties: int = 0
    blackjacks: int = 0


@dataclass
class DealerRecord:
    wins: int = 0
    blackjacks: int = 0


@dataclass
class StatsLedger:
    """Outcome counters for one table session.

    Counters only ever go up. The round engine is the only writer.
    """

    num_players: int
    players: List[PlayerRecord] = field(init=False)
    dealer: DealerRecord = field(init=False)
    total_rounds: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if self.num_players < 1:
            raise ValueError("StatsLedger needs at least one player")
        self.players = [PlayerRecord() for _ in range(self.num_players)]
        self.dealer = DealerRecord()
        self.total_rounds = 0

    def record_player(self, index: int, outcome: Outcome) -> None:
        rec = self.players[index]
        if outcome in (Outcome.WIN, Outcome.BLACKJACK):
            rec.wins += 1
            if outcome == Outcome.BLACKJACK:
                rec.blackjacks += 1
        elif outcome in (Outcome.LOSS, Outcome.BUST):
            rec.losses += 1
        elif outcome == Outcome.TIE:
            rec.ties += 1
        else:
            raise ValueError(f"Unknown outcome: {outcome!r}")

    def record_dealer_win(self, blackjack: bool = False) -> None:
        self.dealer.wins += 1
        if blackjack:
            self.dealer.blackjacks += 1

    def finish_round(self) -> None:
        self.total_rounds += 1

    def _rate(self, count: int) -> float:
        return (count / self.total_rounds) * 100 if self.total_rounds > 0 else 0.0

    def win_rate(self, index: int) -> float:
        return self._rate(self.players[index].wins)

    def loss_rate(self, index: int) -> float:
        return self._rate(self.players[index].losses)

    def tie_rate(self, index: int) -> float:
        return self._rate(self.players[index].ties)

    def snapshot(self) -> Dict:
        return {
            "total_rounds": self.total_rounds,
            "players": [
                {
                    **asdict(rec),
                    "win_pct": round(self.win_rate(i), 2),
                    "loss_pct": round(self.loss_rate(i), 2),
                    "tie_pct": round(self.tie_rate(i), 2),
                }
                for i, rec in enumerate(self.players)
            ],
            "dealer": asdict(self.dealer),
        }
