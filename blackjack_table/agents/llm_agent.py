from __future__ import annotations

import os
import time
from typing import Any, Callable

from ..agent_utils import extract_ranks_from_cards, parse_action
from ..constants import (
    DEFAULT_OLLAMA_HOST,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_TEMPERATURE,
    VALID_LLM_PROVIDERS,
)
from ..types import Action, InvalidDecision, Observation


class LLMAgent:
    """Agent that asks an LLM whether to hit or stand.

    By default, uses an injected `ask_fn(prompt: str) -> str` callable. With
    `provider="openai"` the OpenAI client is used (needs `OPENAI_API_KEY`);
    with `provider="ollama"` a local Ollama server is queried over HTTP.
    An unusable reply raises `InvalidDecision` so the table asks again.
    """

    def __init__(
        self,
        ask_fn: Callable[[str], str] | None = None,
        *,
        provider: str | None = None,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        retries: int = DEFAULT_RETRIES,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        debug_log: bool = False,
    ):
        if provider is not None and provider not in VALID_LLM_PROVIDERS:
            raise ValueError(f"provider must be one of: {', '.join(sorted(VALID_LLM_PROVIDERS))}")
        if ask_fn is None and provider == "openai":
            ask_fn = self.openai_ask(model=model or DEFAULT_OPENAI_MODEL, temperature=temperature)
        if ask_fn is None and provider == "ollama":
            ask_fn = self.ollama_ask(
                model=model or DEFAULT_OLLAMA_MODEL,
                temperature=temperature,
                host=os.environ.get("OLLAMA_HOST", DEFAULT_OLLAMA_HOST),
            )
        if ask_fn is None:
            raise ValueError("LLMAgent requires ask_fn or provider='openai'/'ollama'.")
        self.ask_fn = ask_fn
        # Persist settings for downstream logging/meta
        self.provider = provider or "custom"
        self.model = model or "unknown"
        self.retries = max(0, int(retries))
        self.retry_backoff = max(1.0, float(retry_backoff))
        self.debug_log = debug_log

    def act(self, observation: Observation, info: Any) -> Action:
        prompt = self._build_prompt(observation)
        text = ""
        err_msg = None
        attempts = 0
        for attempt in range(self.retries + 1):
            attempts = attempt + 1
            try:
                raw = self.ask_fn(prompt)
                text = "" if raw is None else str(raw)
                err_msg = None
                if text.strip():
                    break
            except Exception as e:  # noqa: BLE001
                err_msg = f"{type(e).__name__}: {e}"
            # backoff if we have more attempts
            if attempt < self.retries:
                time.sleep(self.retry_backoff ** attempt * 0.5)
        if isinstance(info, dict):
            info["llm_raw"] = text
            info["llm_attempts"] = attempts
            info["llm_provider"] = self.provider
            info["llm_model"] = self.model
            if err_msg is not None:
                info["llm_status"] = "error"
                info["llm_error"] = err_msg
            elif not text.strip():
                info["llm_status"] = "empty"
            else:
                info["llm_status"] = "ok"
            if self.debug_log:
                info["llm_prompt"] = prompt
        if err_msg is not None:
            raise InvalidDecision(f"LLM request failed: {err_msg}")
        return parse_action(text)

    def _build_prompt(self, obs: Observation) -> str:
        p = obs.player
        soft = " soft" if p.is_soft else ""
        return (
            "Blackjack. Rules: 6 decks, dealer stands on all 17s, no doubling, no splitting, no insurance.\n"
            f"Dealer upcard: {obs.dealer_upcard[:-1]}.\n"
            f"Your hand: {extract_ranks_from_cards(p.cards)} (total {p.score}{soft}).\n"
            "Reply with exactly one word: HIT or STAND. No explanations."
        )

    @staticmethod
    def openai_ask(*, model: str, temperature: float = 0.0) -> Callable[[str], str]:
        """Create an ask_fn that queries OpenAI's Chat Completions API. Requires OPENAI_API_KEY."""
        try:
            from openai import OpenAI
        except ImportError as e:
            raise RuntimeError("OpenAI client not available. Install 'openai' and set OPENAI_API_KEY.") from e

        client = OpenAI()

        def _ask(prompt: str) -> str:
            resp = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": "You are a concise assistant."},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=4,
            )
            return resp.choices[0].message.content or ""

        return _ask

    @staticmethod
    def ollama_ask(*, model: str, temperature: float = 0.0, host: str = DEFAULT_OLLAMA_HOST) -> Callable[[str], str]:
        """Create an ask_fn that queries a local Ollama server via /api/generate."""
        import requests

        def _ask(prompt: str) -> str:
            r = requests.post(
                f"{host}/api/generate",
                json={
                    "model": model,
                    "prompt": prompt,
                    "stream": False,
                    "options": {"temperature": temperature},
                },
                timeout=120,
            )
            r.raise_for_status()
            data = r.json()
            return data.get("response", "")

        return _ask
