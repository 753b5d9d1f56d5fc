from __future__ import annotations

import random
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .agents.guarded import GuardedAgent
from .cards import Card, Shoe
from .constants import (
    DEALER,
    DEALER_STAND,
    MAX_DECISION_ATTEMPTS,
    MAX_PLAYER_COUNT,
    MIN_PLAYER_COUNT,
    STARTING_CARDS,
)
from .hand import Hand
from .rules import Rules
from .stats import StatsLedger
from .types import Action, AddResult, InvalidDecision, Observation, Outcome, Phase

Sink = Callable[[Dict[str, Any]], None]


@dataclass
class RoundResult:
    round_number: int
    outcomes: List[Outcome]
    player_hands: List[List[str]]
    player_scores: List[int]
    dealer_hand: List[str]
    dealer_score: int
    dealer_bust: bool
    dealer_natural: bool
    player_naturals: List[bool]
    early: bool
    trace: Dict = field(default_factory=lambda: {"decisions": []})

    def to_dict(self) -> Dict:
        out = asdict(self)
        out["outcomes"] = [o.value for o in self.outcomes]
        return out


class RoundEngine:
    """One round of Blackjack as a resumable state machine.

    ``start()`` deals and checks for naturals, then runs until a player has to
    choose. Each pending choice is returned as an ``Observation``; feed the
    answer back through ``resume()``. Both return ``None`` once the round is
    settled, at which point ``result`` is set. The engine never talks to a
    player directly, and ``sink`` (if given) receives an event dict after
    every phase change, decision and reshuffle.
    """

    def __init__(
        self,
        shoe: Shoe,
        ledger: StatsLedger,
        num_players: int,
        *,
        round_number: int = 1,
        sink: Optional[Sink] = None,
    ):
        if num_players != ledger.num_players:
            raise ValueError("num_players does not match the ledger")
        self.shoe = shoe
        self.ledger = ledger
        self.round_number = round_number
        self.sink = sink
        self.players = [Hand(f"Player {i + 1}") for i in range(num_players)]
        self.dealer = Hand(DEALER)
        self.phase = Phase.DEALING
        self.player_naturals = [False] * num_players
        self.dealer_natural = False
        self.outcomes: List[Optional[Outcome]] = [None] * num_players
        self.active_index: Optional[int] = None
        self.result: Optional[RoundResult] = None
        self.trace: Dict = {"decisions": []}

    # -- public API -------------------------------------------------------

    @property
    def pending(self) -> Optional[Observation]:
        if self.phase == Phase.PLAYER_TURNS and self.active_index is not None:
            return self._observation()
        return None

    def start(self) -> Optional[Observation]:
        if self.phase != Phase.DEALING or self.dealer.num_cards:
            raise RuntimeError("Round already started")
        self._deal()
        self._enter(Phase.BLACKJACK_CHECK)
        self._check_blackjack()
        if self.dealer_natural:
            self._enter(Phase.EARLY_SETTLEMENT)
            self._settle_early()
            self._finish(early=True)
            return None
        self._enter(Phase.PLAYER_TURNS)
        return self._next_player(0)

    def resume(self, action: Action, meta: Optional[Dict] = None) -> Optional[Observation]:
        if self.phase != Phase.PLAYER_TURNS or self.active_index is None:
            raise RuntimeError("No decision is pending")
        if not isinstance(action, Action):
            raise InvalidDecision(f"Expected HIT or STAND, got {action!r}")
        i = self.active_index
        hand = self.players[i]
        obs = self._observation()
        decision = {
            "player_index": i,
            "cards": obs.player.cards,
            "total": obs.player.score,
            "dealer_upcard": obs.dealer_upcard,
            "action": action.name,
            "meta": dict(meta or {}),
        }
        self.trace["decisions"].append(decision)
        self._emit("decision", **decision)

        if action == Action.STAND:
            return self._next_player(i + 1)
        result = self._draw_into(hand)
        if result == AddResult.REJECTED or hand.is_bust() or hand.is_full():
            if hand.is_bust():
                self._emit("bust", player_index=i, hand=asdict(hand.view()))
            return self._next_player(i + 1)
        return self._observation()

    # -- phases -----------------------------------------------------------

    def _deal(self) -> None:
        for _ in range(STARTING_CARDS):
            for hand in self.players:
                self._draw_into(hand)
            self._draw_into(self.dealer)
        self._emit("deal", **self._table_view(reveal=False))

    def _check_blackjack(self) -> None:
        self.dealer_natural = self.dealer.is_natural()
        self.player_naturals = [h.is_natural() for h in self.players]
        self._emit(
            "blackjack_check",
            dealer_natural=self.dealer_natural,
            player_naturals=list(self.player_naturals),
        )

    def _next_player(self, start: int) -> Optional[Observation]:
        i = start
        while i < len(self.players) and self.player_naturals[i]:
            i += 1
        if i < len(self.players):
            self.active_index = i
            obs = self._observation()
            self._emit("player_turn", player_index=i, hand=asdict(obs.player), dealer=asdict(obs.dealer))
            return obs
        self.active_index = None
        self._enter(Phase.DEALER_TURN)
        self._dealer_play()
        self._enter(Phase.SETTLEMENT)
        self._settle()
        self._finish(early=False)
        return None

    def _dealer_play(self) -> None:
        # stands on any 17, soft or hard
        while self.dealer.score() < DEALER_STAND:
            if self._draw_into(self.dealer) == AddResult.REJECTED:
                break
        self._emit("dealer_done", dealer=asdict(self.dealer.view()), bust=self.dealer.is_bust())

    def _settle_early(self) -> None:
        for i in range(len(self.players)):
            outcome = Outcome.TIE if self.player_naturals[i] else Outcome.LOSS
            self._record(i, outcome)
        if not any(self.player_naturals):
            self.ledger.record_dealer_win(blackjack=True)

    def _settle(self) -> None:
        dealer_score = self.dealer.score()
        dealer_bust = self.dealer.is_bust()
        dealer_natural = self.dealer.is_natural()
        for i, hand in enumerate(self.players):
            score = hand.score()
            if hand.is_bust():
                outcome = Outcome.BUST
                if not dealer_bust:
                    self.ledger.record_dealer_win()
            elif self.player_naturals[i] and not dealer_natural:
                outcome = Outcome.BLACKJACK
            elif dealer_bust:
                outcome = Outcome.WIN
            elif dealer_score > score:
                outcome = Outcome.LOSS
                self.ledger.record_dealer_win()
            elif score > dealer_score:
                outcome = Outcome.WIN
            else:
                outcome = Outcome.TIE
            self._record(i, outcome)
        if dealer_bust:
            # one credit for the round, however many players there are
            self.ledger.record_dealer_win()

    def _finish(self, early: bool) -> None:
        self.ledger.finish_round()
        outcomes = [o for o in self.outcomes if o is not None]
        self.result = RoundResult(
            round_number=self.round_number,
            outcomes=outcomes,
            player_hands=[h.labels() for h in self.players],
            player_scores=[h.score() for h in self.players],
            dealer_hand=self.dealer.labels(),
            dealer_score=self.dealer.score(),
            dealer_bust=self.dealer.is_bust(),
            dealer_natural=self.dealer_natural,
            player_naturals=list(self.player_naturals),
            early=early,
            trace=self.trace,
        )
        self._emit(
            "settlement",
            outcomes=[o.value for o in outcomes],
            early=early,
            **self._table_view(reveal=True),
        )
        for hand in self.players:
            hand.clear()
        self.dealer.clear()
        self._enter(Phase.DONE)
        self._emit("round_done", stats=self.ledger.snapshot(), shoe_remaining=self.shoe.remaining())

    # -- helpers ----------------------------------------------------------

    def _record(self, index: int, outcome: Outcome) -> None:
        if self.outcomes[index] is not None:
            raise RuntimeError(f"Player {index + 1} already settled this round")
        self.outcomes[index] = outcome
        self.ledger.record_player(index, outcome)

    def _draw_into(self, hand: Hand) -> AddResult:
        if hand.is_full():
            return AddResult.REJECTED
        before = self.shoe.shuffle_count
        card: Card = self.shoe.draw()
        if self.shoe.shuffle_count != before:
            self._emit("shuffle", shuffle_count=self.shoe.shuffle_count)
        return hand.add_card(card)

    def _enter(self, phase: Phase) -> None:
        self.phase = phase
        self._emit("phase")

    def _table_view(self, reveal: bool) -> Dict:
        return {
            "players": [asdict(h.view()) for h in self.players],
            "dealer": asdict(self.dealer.view(masked=not reveal)),
        }

    def _observation(self) -> Observation:
        i = self.active_index if self.active_index is not None else 0
        return Observation(
            player=self.players[i].view(),
            dealer=self.dealer.view(masked=True),
            dealer_upcard=self.dealer.cards[1].label(),
            player_index=i,
            allowed_actions=[Action.HIT, Action.STAND],
        )

    def _emit(self, event: str, **payload: Any) -> None:
        if self.sink is None:
            return
        self.sink({"event": event, "round": self.round_number, "phase": self.phase.name, **payload})


class Table:
    """A session at the table: one shoe and one ledger shared by every round."""

    def __init__(
        self,
        num_players: int = 1,
        rules: Optional[Rules] = None,
        seed: Optional[int] = None,
        *,
        rng: Optional[random.Random] = None,
    ):
        if not MIN_PLAYER_COUNT <= num_players <= MAX_PLAYER_COUNT:
            raise ValueError(f"num_players must be between {MIN_PLAYER_COUNT} and {MAX_PLAYER_COUNT}")
        self.num_players = num_players
        self.rules = rules or Rules()
        self.shoe = Shoe(
            self.rules.num_decks,
            seed=seed,
            reshuffle_threshold=self.rules.reshuffle_threshold,
            rng=rng,
        )
        self.ledger = StatsLedger(num_players)
        self.rounds_started = 0

    def new_round(self, sink: Optional[Sink] = None) -> RoundEngine:
        self.rounds_started += 1
        return RoundEngine(
            self.shoe,
            self.ledger,
            self.num_players,
            round_number=self.rounds_started,
            sink=sink,
        )

    def play_round(
        self,
        agents: Any,
        sink: Optional[Sink] = None,
        *,
        max_attempts: int = MAX_DECISION_ATTEMPTS,
    ) -> RoundResult:
        """Play a full round, asking ``agents[i]`` for player i's decisions.

        A single agent is used for every seat. Each agent is wrapped in a
        ``GuardedAgent`` so bad answers are asked again, then treated as STAND.
        """
        seats = self.seat_agents(agents)
        guarded = [a if isinstance(a, GuardedAgent) else GuardedAgent(a, max_attempts=max_attempts) for a in seats]
        engine = self.new_round(sink)
        obs = engine.start()
        while obs is not None:
            meta: Dict = {}
            action = guarded[obs.player_index].act(obs, meta)
            obs = engine.resume(action, meta=meta)
        if engine.result is None:
            raise RuntimeError("Round ended without a result")
        return engine.result

    def seat_agents(self, agents: Any) -> List[Any]:
        if hasattr(agents, "act"):
            return [agents] * self.num_players
        seats: Sequence[Any] = list(agents)
        if len(seats) != self.num_players:
            raise ValueError(f"Expected {self.num_players} agent(s), got {len(seats)}")
        return list(seats)
