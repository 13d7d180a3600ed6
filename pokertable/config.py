"""
Table configuration.

Defaults describe the standard eight-seat table. ``TableConfig.from_env``
reads overrides from the environment, after loading a ``.env`` file:

    POKER_STARTING_STACK   chips per seat (2000)
    POKER_SMALL_BLIND      small blind (25)
    POKER_BIG_BLIND        big blind (50)
    POKER_SEAT_NAMES       comma separated names, first seat is the human
    POKER_AI_MIN_DELAY     seconds an automated decision takes at least (0.6)
    POKER_AI_DELAY_JITTER  extra random delay up to this many seconds (0.8)
    POKER_DECISION_TIMEOUT seconds before falling back to the local policy (8)
    API_KEY                key for the remote decision model (unset: local only)
    LLM_BASE_URL           OpenAI-compatible endpoint
    LLM_MODEL              model name
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from pokertable.core.rules import (
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND, DEFAULT_STARTING_STACK,
)


DEFAULT_SEAT_NAMES = [
    "You", "DeepSeek", "AlphaGo", "DeepBlue",
    "Watson", "Siri", "Alexa", "Cortana",
]

DEFAULT_LLM_BASE_URL = "https://api.siliconflow.cn/v1"
DEFAULT_LLM_MODEL = "deepseek-ai/DeepSeek-V3"


@dataclass
class TableConfig:
    """Settings for one table and its automated seats."""
    seat_names: List[str] = field(default_factory=lambda: list(DEFAULT_SEAT_NAMES))
    starting_stack: int = DEFAULT_STARTING_STACK
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    ai_min_delay: float = 0.6
    ai_delay_jitter: float = 0.8
    decision_timeout: float = 8.0
    llm_api_key: Optional[str] = None
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_model: str = DEFAULT_LLM_MODEL
    llm_temperature: float = 0.7
    llm_max_tokens: int = 200

    @property
    def has_remote_policy(self) -> bool:
        return bool(self.llm_api_key)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> TableConfig:
        """Build a config from the environment (and ``.env`` if present)."""
        load_dotenv(env_file)
        defaults = cls()

        names = os.getenv("POKER_SEAT_NAMES")
        seat_names = (
            [n.strip() for n in names.split(",") if n.strip()]
            if names else defaults.seat_names
        )

        return cls(
            seat_names=seat_names,
            starting_stack=int(os.getenv("POKER_STARTING_STACK", defaults.starting_stack)),
            small_blind=int(os.getenv("POKER_SMALL_BLIND", defaults.small_blind)),
            big_blind=int(os.getenv("POKER_BIG_BLIND", defaults.big_blind)),
            ai_min_delay=float(os.getenv("POKER_AI_MIN_DELAY", defaults.ai_min_delay)),
            ai_delay_jitter=float(os.getenv("POKER_AI_DELAY_JITTER", defaults.ai_delay_jitter)),
            decision_timeout=float(os.getenv("POKER_DECISION_TIMEOUT", defaults.decision_timeout)),
            llm_api_key=os.getenv("API_KEY") or None,
            llm_base_url=os.getenv("LLM_BASE_URL", defaults.llm_base_url),
            llm_model=os.getenv("LLM_MODEL", defaults.llm_model),
        )
