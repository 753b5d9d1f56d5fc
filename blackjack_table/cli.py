from __future__ import annotations

import argparse
import json
from typing import Any

from .agents.basic import BasicStrategyAgent
from .agents.console import ConsoleAgent, request_player_count, request_replay
from .agents.dealer_agent import DealerMimicAgent
from .agents.guarded import GuardedAgent
from .agents.llm_agent import LLMAgent
from .agents.random_agent import RandomAgent
from .cli_helpers import (
    ErrorTracker,
    HeartbeatTracker,
    create_event_emitter,
    format_stats,
    setup_logging,
)
from .constants import (
    AVAILABLE_AGENTS,
    DEFAULT_HEARTBEAT_SECONDS,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_PLAYERS,
    DEFAULT_ROUNDS,
    DEFAULT_SEED,
    DEFAULT_TEMPERATURE,
    MAX_DECISION_ATTEMPTS,
    MAX_PLAYER_COUNT,
    MIN_PLAYER_COUNT,
    NUMBER_OF_DECKS,
    RESHUFFLE_THRESHOLD,
    VALID_LLM_PROVIDERS,
)
from .engine import Table
from .eval import run_simulation
from .rules import Rules


def build_agent(name: str, args: argparse.Namespace | None = None) -> Any:
    if name == "basic":
        return BasicStrategyAgent()
    if name == "random":
        seed = getattr(args, "seed", 0) if args else 0
        return RandomAgent(seed=seed if seed is not None else 0)
    if name == "dealer":
        return DealerMimicAgent()
    if name == "llm":
        provider = getattr(args, "llm_provider", None) if args else None
        model = getattr(args, "llm_model", None) if args else None
        temperature = getattr(args, "llm_temperature", DEFAULT_TEMPERATURE) if args else DEFAULT_TEMPERATURE
        llm_debug = getattr(args, "llm_debug", False) if args else False
        return LLMAgent(
            provider=provider or "openai",
            model=model,
            temperature=temperature,
            debug_log=llm_debug,
        )
    raise ValueError(f"Unknown agent: {name}")


def _rules_from_args(args: argparse.Namespace) -> Rules:
    try:
        return Rules(num_decks=args.decks, reshuffle_threshold=args.reshuffle_threshold)
    except ValueError as e:
        raise SystemExit(f"error: {e}") from e


def cmd_play(args: argparse.Namespace) -> None:
    rules = _rules_from_args(args)
    num_players = args.players if args.players is not None else request_player_count()
    table = Table(num_players, rules=rules, seed=args.seed)
    agent = GuardedAgent(ConsoleAgent(), max_attempts=args.max_attempts)

    log_fh = None
    log_file = None
    if args.log_jsonl:
        log_file, log_fh = setup_logging(args)
    emit = create_event_emitter(log_fh, render=True, debug=args.debug, delay=args.delay)
    try:
        while True:
            table.play_round(agent, sink=emit)
            if not request_replay():
                break
            print("\nStarting a new round...\n")
    finally:
        if log_fh:
            log_fh.close()
            print(f"event log written to {log_file}")
    print("Thanks for playing Blackjack! Goodbye!")


def cmd_simulate(args: argparse.Namespace) -> None:
    rules = _rules_from_args(args)
    agent = build_agent(args.agent, args)

    log_file, log_fh = setup_logging(args)
    error_tracker = ErrorTracker()
    heartbeat = HeartbeatTracker(args.rounds, max(0, int(args.heartbeat_secs)))
    emit = create_event_emitter(
        log_fh,
        debug=args.debug,
        heartbeat_tracker=heartbeat,
        error_tracker=error_tracker,
    )
    try:
        report = run_simulation(
            agent,
            rounds=args.rounds,
            num_players=args.players,
            seed=args.seed,
            rules=rules,
            log_fn=emit,
        )
    finally:
        log_fh.close()

    report["agent"] = args.agent
    report["rules"] = {"num_decks": rules.num_decks, "reshuffle_threshold": rules.reshuffle_threshold}
    for line in format_stats(report["stats"]):
        print(line)
    print(json.dumps(report["metrics"], indent=2))
    error_tracker.print_summary(log_file)
    print(f"event log written to {log_file}")
    if args.report:
        with open(args.report, "w", encoding="utf-8") as fh:
            json.dump(report, fh, indent=2)
        print(f"report written to {args.report}")


def _add_table_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--decks", type=int, default=NUMBER_OF_DECKS, help="Number of 52-card decks in the shoe")
    p.add_argument(
        "--reshuffle-threshold",
        type=int,
        default=RESHUFFLE_THRESHOLD,
        help="Reshuffle once fewer than this many cards remain",
    )
    p.add_argument("--seed", type=int, default=None, help="Seed the shoe for a reproducible session")
    p.add_argument("--debug", action="store_true", help="Print per-decision debug lines to stdout")
    p.add_argument("--log-jsonl", type=str, default=None, help="Write engine events to this JSONL file")


def _player_count(value: str) -> int:
    n = int(value)
    if not MIN_PLAYER_COUNT <= n <= MAX_PLAYER_COUNT:
        raise argparse.ArgumentTypeError(f"players must be between {MIN_PLAYER_COUNT} and {MAX_PLAYER_COUNT}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blackjack-table", description="Multi-deck Blackjack table")
    sub = parser.add_subparsers(dest="command", required=True)

    p_play = sub.add_parser("play", help="Play at the console against the dealer")
    _add_table_args(p_play)
    p_play.add_argument("--players", type=_player_count, default=None, help="Number of players (asked if omitted)")
    p_play.add_argument("--delay", type=float, default=0.0, help="Pause in seconds after deals and reveals")
    p_play.add_argument("--max-attempts", type=int, default=MAX_DECISION_ATTEMPTS, help="Re-prompts before an answer defaults to stand")
    p_play.set_defaults(func=cmd_play)

    p_sim = sub.add_parser("simulate", help="Play many rounds with a scripted decision provider")
    _add_table_args(p_sim)
    p_sim.set_defaults(seed=DEFAULT_SEED)
    p_sim.add_argument("--agent", choices=sorted(AVAILABLE_AGENTS), default="basic")
    p_sim.add_argument("--players", type=_player_count, default=DEFAULT_PLAYERS)
    p_sim.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS)
    p_sim.add_argument("--report", type=str, default=None, help="Write the JSON report to this file")
    p_sim.add_argument(
        "--heartbeat-secs",
        type=int,
        default=DEFAULT_HEARTBEAT_SECONDS,
        help="Print a heartbeat line every N seconds (0 to disable)",
    )
    # LLM settings
    p_sim.add_argument("--llm-provider", choices=sorted(VALID_LLM_PROVIDERS), default="openai")
    p_sim.add_argument("--llm-model", type=str, default=None, help=f"LLM model name (default {DEFAULT_OPENAI_MODEL})")
    p_sim.add_argument("--llm-temperature", type=float, default=DEFAULT_TEMPERATURE)
    p_sim.add_argument("--llm-debug", action="store_true", help="Include the LLM prompt in decision meta")
    p_sim.set_defaults(func=cmd_simulate)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
