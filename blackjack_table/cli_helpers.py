"""Helper functions for CLI operations."""

from __future__ import annotations

import json
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .cards import SUIT_SYMBOLS
from .constants import DEFAULT_HEARTBEAT_SECONDS, JSONL_EXTENSION, MAX_CONSECUTIVE_ERRORS
from .types import HandView

OUTCOME_MESSAGES = {
    "blackjack": "{owner} wins with a Blackjack!",
    "win": "{owner} wins against the dealer!",
    "loss": "{owner} loses against the dealer.",
    "bust": "{owner} busted!",
    "tie": "{owner} ties with the dealer.",
}


def format_card(label: str) -> str:
    """'AS' -> 'A♠'; the hidden-card marker passes through unchanged."""
    if len(label) == 2 and label[1] in SUIT_SYMBOLS:
        return label[0] + SUIT_SYMBOLS[label[1]]
    return label


def format_hand(view: Union[HandView, Dict[str, Any]]) -> str:
    if isinstance(view, HandView):
        owner, cards, score = view.owner, view.cards, view.score
    else:
        owner, cards, score = view["owner"], view["cards"], view["score"]
    shown = " ".join(format_card(c) for c in cards)
    score_txt = "XX" if score is None else str(score)
    return f"{owner}'s hand: {shown} (Score: {score_txt})"


def format_stats(snapshot: Dict[str, Any]) -> List[str]:
    lines = []
    for i, p in enumerate(snapshot["players"]):
        lines.append(
            f"Player {i + 1} - Wins: {p['wins']} ({p['win_pct']:.2f}%), "
            f"Losses: {p['losses']} ({p['loss_pct']:.2f}%), "
            f"Ties: {p['ties']} ({p['tie_pct']:.2f}%), "
            f"Blackjacks: {p['blackjacks']}"
        )
    dealer = snapshot["dealer"]
    lines.append(f"Dealer - Wins: {dealer['wins']} Blackjacks: {dealer['blackjacks']}")
    return lines


def render_event(event: Dict[str, Any], print_fn: Callable[..., None] = print) -> None:
    """Print the human-readable side of an engine event."""
    kind = event.get("event")
    if kind == "shuffle":
        print_fn("\nShuffling the deck...\n")
    elif kind == "deal":
        print_fn("Initial deal completed.")
    elif kind == "blackjack_check":
        if event.get("dealer_natural"):
            print_fn("Dealer has Blackjack!")
        for i, natural in enumerate(event.get("player_naturals", [])):
            if natural:
                print_fn(f"Player {i + 1} has Blackjack!")
    elif kind == "bust":
        print_fn(format_hand(event["hand"]))
        print_fn("You busted! Better luck next time!")
    elif kind == "settlement":
        print_fn("\n**** HAND REVEAL ****")
        for view in event.get("players", []):
            print_fn(format_hand(view))
        print_fn(format_hand(event["dealer"]))
        for view, outcome in zip(event.get("players", []), event.get("outcomes", [])):
            print_fn(OUTCOME_MESSAGES[outcome].format(owner=view["owner"]))
    elif kind == "round_done":
        print_fn("\nRound complete.")
        for line in format_stats(event["stats"]):
            print_fn(line)


class ErrorTracker:
    """Track decision-provider errors and handle error thresholds."""

    def __init__(self, max_consecutive: int = MAX_CONSECUTIVE_ERRORS):
        self.error_count = 0
        self.consecutive_errors = 0
        self.last_error: Optional[str] = None
        self.max_consecutive = max_consecutive

    def record_error(self, error_msg: str) -> bool:
        """Record an error and return True if should abort."""
        self.error_count += 1
        self.consecutive_errors += 1
        self.last_error = error_msg

        print(f"PROVIDER ERROR (#{self.error_count}): {error_msg}")

        if self.consecutive_errors >= self.max_consecutive:
            print(f"ABORTING: {self.consecutive_errors} consecutive provider errors. Last error: {error_msg}")
            print("Check your API key, model name, or network connection.")
            return True
        return False

    def record_success(self) -> None:
        """Record successful operation, resetting consecutive error count."""
        self.consecutive_errors = 0

    def print_summary(self, log_file: str) -> None:
        """Print error summary if any errors occurred."""
        if self.error_count > 0:
            print(f"\nWARNING: {self.error_count} provider errors occurred during this run.")
            print(f"   Last error: {self.last_error}")
            print(f"   Check the log file for details: {log_file}")


class HeartbeatTracker:
    """Print a progress line every few seconds during long simulations."""

    def __init__(self, total_rounds: int, heartbeat_seconds: int = DEFAULT_HEARTBEAT_SECONDS):
        self.total_rounds = total_rounds
        self.heartbeat_seconds = heartbeat_seconds
        self.last_heartbeat = time.monotonic()
        self.start_time = self.last_heartbeat
        self.max_round_seen = 0

    def record_round(self, round_number: Any) -> None:
        if isinstance(round_number, int):
            self.max_round_seen = max(self.max_round_seen, round_number)

    def should_print_heartbeat(self) -> bool:
        if self.heartbeat_seconds <= 0:
            return False
        return time.monotonic() - self.last_heartbeat >= self.heartbeat_seconds

    def print_heartbeat(self) -> None:
        now = time.monotonic()
        elapsed = now - self.start_time
        done = self.max_round_seen
        pct = (done / self.total_rounds) * 100 if self.total_rounds else 0
        print(f"[heartbeat] {elapsed:.0f}s simulate: round={done}/{self.total_rounds} ({pct:.1f}%)")
        self.last_heartbeat = now


def setup_logging(args) -> Tuple[str, Any]:
    """Open the JSONL event log, creating logs/<timestamp>_<command>.jsonl by default."""
    log_file = getattr(args, "log_jsonl", None)
    if not log_file:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        Path("logs").mkdir(parents=True, exist_ok=True)
        suffix = args.command
        agent = getattr(args, "agent", None)
        if agent:
            suffix = f"{suffix}_{agent}"
        log_file = str(Path("logs") / f"{ts}_{suffix}{JSONL_EXTENSION}")
    log_fh = open(log_file, "a", encoding="utf-8")
    return log_file, log_fh


def create_event_emitter(
    log_fh: Optional[Any],
    *,
    render: bool = False,
    debug: bool = False,
    heartbeat_tracker: Optional[HeartbeatTracker] = None,
    error_tracker: Optional[ErrorTracker] = None,
    print_fn: Callable[..., None] = print,
    delay: float = 0.0,
) -> Callable[[Dict[str, Any]], None]:
    """Create the sink that receives every engine event."""

    def emit(event: dict) -> None:
        kind = event.get("event")

        # Provider errors show up in decision meta
        if kind == "decision" and error_tracker is not None:
            meta = event.get("meta", {})
            if meta.get("llm_status") == "error" and meta.get("llm_error"):
                if error_tracker.record_error(meta["llm_error"]):
                    if log_fh:
                        log_fh.close()
                    sys.exit(1)
            else:
                error_tracker.record_success()

        if debug and kind == "decision":
            fallback = event.get("meta", {}).get("fallback_action") is not None
            print_fn(f"[round {event.get('round')} p{event.get('player_index')}] "
                     f"up={event.get('dealer_upcard')} cards={event.get('cards')} "
                     f"total={event.get('total')} act={event.get('action')} fallback={fallback}")

        if render:
            render_event(event, print_fn)
            if delay > 0 and kind in ("deal", "settlement", "shuffle"):
                time.sleep(delay)

        if heartbeat_tracker is not None and kind == "round_done":
            heartbeat_tracker.record_round(event.get("round"))
            if heartbeat_tracker.should_print_heartbeat():
                heartbeat_tracker.print_heartbeat()

        if log_fh:
            record = dict(event)
            record["timestamp"] = datetime.now().isoformat()
            log_fh.write(json.dumps(record) + "\n")
            log_fh.flush()

    return emit
