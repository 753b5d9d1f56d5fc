"""Constants and configuration values for blackjack_table."""

from __future__ import annotations

# Table
MAX_PLAYER_COUNT = 3
MIN_PLAYER_COUNT = 1
DEALER = "Dealer"

# Shoe
DECK_SIZE = 52
NUMBER_OF_DECKS = 6
RESHUFFLE_THRESHOLD = 75
STARTING_CARDS = 2

# Scoring
BLACKJACK = 21
FACE_CARD_VALUE = 10
ACE_HIGH = 11
ACE_LOW = 1
DEALER_STAND = 17

# Decision handling
MAX_DECISION_ATTEMPTS = 10
MAX_CONSECUTIVE_ERRORS = 10

# LLM Configuration
DEFAULT_TEMPERATURE = 0.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_BACKOFF = 1.5
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OLLAMA_MODEL = "llama3.1"
DEFAULT_OLLAMA_HOST = "http://127.0.0.1:11434"
VALID_LLM_PROVIDERS = {"openai", "ollama"}

# Agents
AVAILABLE_AGENTS = {"basic", "random", "dealer", "llm"}

# Heartbeat
DEFAULT_HEARTBEAT_SECONDS = 60

# File extensions
JSONL_EXTENSION = ".jsonl"

# Default run parameters
DEFAULT_ROUNDS = 1000
DEFAULT_SEED = 42
DEFAULT_PLAYERS = 1
