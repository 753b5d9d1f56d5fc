import random

import pytest

from blackjack_table.agent_utils import parse_action, parse_dealer_upcard
from blackjack_table.agents import (
    BasicStrategyAgent,
    ConsoleAgent,
    DealerMimicAgent,
    LLMAgent,
    RandomAgent,
)
from blackjack_table.agents.console import request_player_count, request_replay
from blackjack_table.types import Action, InvalidDecision

from conftest import observation


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hit", Action.HIT),
        (" Stand ", Action.STAND),
        ("h", Action.HIT),
        ("S", Action.STAND),
        ("Action: HIT", Action.HIT),
        (Action.STAND, Action.STAND),
    ],
)
def test_parse_action(text, expected):
    assert parse_action(text) == expected


@pytest.mark.parametrize("text", ["", "double", "HIT or STAND", None, 3])
def test_parse_action_rejects(text):
    with pytest.raises(InvalidDecision):
        parse_action(text)


def test_dealer_upcard_value():
    assert parse_dealer_upcard(observation(["TH", "6C"], upcard="AS")) == 11
    assert parse_dealer_upcard(observation(["TH", "6C"], upcard="QD")) == 10
    assert parse_dealer_upcard(observation(["TH", "6C"], upcard="5D")) == 5


def test_basic_strategy_hard_totals():
    agent = BasicStrategyAgent()
    assert agent.act(observation(["TH", "6C"], upcard="TS"), {}) == Action.HIT
    assert agent.act(observation(["TH", "6C"], upcard="6S"), {}) == Action.STAND
    assert agent.act(observation(["TH", "2C"], upcard="4S"), {}) == Action.STAND
    assert agent.act(observation(["TH", "2C"], upcard="3S"), {}) == Action.HIT
    assert agent.act(observation(["5H", "6C"], upcard="6S"), {}) == Action.HIT
    assert agent.act(observation(["TH", "7C"], upcard="AS"), {}) == Action.STAND


def test_basic_strategy_soft_totals():
    agent = BasicStrategyAgent()
    assert agent.act(observation(["AH", "7C"], upcard="9S"), {}) == Action.HIT
    assert agent.act(observation(["AH", "7C"], upcard="8S"), {}) == Action.STAND
    assert agent.act(observation(["AH", "6C"], upcard="2S"), {}) == Action.HIT
    assert agent.act(observation(["AH", "8C"], upcard="TS"), {}) == Action.STAND


def test_dealer_mimic():
    agent = DealerMimicAgent()
    assert agent.act(observation(["TH", "6C"]), {}) == Action.HIT
    assert agent.act(observation(["AH", "6C"]), {}) == Action.STAND


def test_random_agent_is_legal_and_seeded():
    obs = observation(["TH", "6C"])
    a = [RandomAgent(seed=3).act(obs, {}) for _ in range(1)]
    b = [RandomAgent(seed=3).act(obs, {}) for _ in range(1)]
    assert a == b
    agent = RandomAgent(seed=1)
    assert all(agent.act(obs, {}) in obs.allowed_actions for _ in range(20))
    info = {}
    RandomAgent(rng=random.Random(0)).act(obs, info)
    assert info["random_choices"] == ["HIT", "STAND"]


def test_llm_agent_with_injected_ask_fn():
    prompts = []

    def ask(prompt):
        prompts.append(prompt)
        return "STAND"

    agent = LLMAgent(ask, model="test-model")
    info = {}
    assert agent.act(observation(["TH", "8C"], upcard="7S"), info) == Action.STAND
    assert "Dealer upcard: 7." in prompts[0]
    assert "Your hand: T,8 (total 18)" in prompts[0]
    assert info["llm_status"] == "ok"
    assert info["llm_model"] == "test-model"


def test_llm_agent_unusable_reply_raises():
    agent = LLMAgent(lambda prompt: "I would double down", retries=0)
    with pytest.raises(InvalidDecision):
        agent.act(observation(["TH", "8C"]), {})


def test_llm_agent_errors_are_recorded():
    def boom(prompt):
        raise ConnectionError("offline")

    agent = LLMAgent(boom, retries=0)
    info = {}
    with pytest.raises(InvalidDecision):
        agent.act(observation(["TH", "8C"]), info)
    assert info["llm_status"] == "error"
    assert "offline" in info["llm_error"]


def test_llm_agent_configuration():
    with pytest.raises(ValueError):
        LLMAgent()
    with pytest.raises(ValueError):
        LLMAgent(lambda p: "HIT", provider="gemini")


def test_console_agent():
    printed = []
    answers = iter(["nope", "HIT"])
    agent = ConsoleAgent(input_fn=lambda prompt: next(answers), print_fn=printed.append)
    obs = observation(["TH", "6C"], upcard="9S")
    with pytest.raises(InvalidDecision):
        agent.act(obs, {})
    assert "Invalid input. Please enter 'hit' or 'stand'." in printed
    assert agent.act(obs, {}) == Action.HIT
    assert "Player 1's hand: T♥ 6♣ (Score: 16)" in printed
    assert "Dealer's up card: 9♠" in printed


def test_request_player_count_reprompts():
    answers = iter(["zero", "5", "2"])
    printed = []
    assert request_player_count(lambda prompt: next(answers), printed.append) == 2
    assert len(printed) == 2


def test_request_replay():
    assert request_replay(lambda prompt: "yes")
    assert request_replay(lambda prompt: "Y")
    assert not request_replay(lambda prompt: "no")
