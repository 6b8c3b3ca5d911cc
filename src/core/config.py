"""
Configuration and environment loading.

- Loads a `.env` file (if present) into the environment, then reads the CHESS_* variables.
- Exposes SETTINGS with the knobs used by the opponent coordinator and the LLM agent.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Self

from dotenv import load_dotenv

load_dotenv()

FALLBACK_POLICIES = ("random", "forfeit")


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    env = os.environ.get(name)
    if env is None:
        return default
    return cast(env) if cast else env


@dataclass(frozen=True)
class Settings:
    # Pacing (seconds). Purely cosmetic, has no effect on legality.
    think_delay_s: float = 0.6
    move_delay_s: float = 0.4

    # Opponent retry policy
    max_illegal_attempts: int = 5
    max_transport_attempts: int = 3
    backoff_base_s: float = 0.5
    fallback: str = "random"

    # LLM agent (OpenAI-compatible endpoint; base_url configurable)
    llm_api_key: str = ""
    llm_base_url: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_timeout_s: float = 30.0

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.fallback not in FALLBACK_POLICIES:
            raise ValueError(
                f"Unknown fallback policy {self.fallback!r}. Pick one from {', '.join(FALLBACK_POLICIES)}"
            )

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            think_delay_s=_get("CHESS_AGENT_THINK_DELAY_S", 0.6, cast=float),
            move_delay_s=_get("CHESS_AGENT_MOVE_DELAY_S", 0.4, cast=float),
            max_illegal_attempts=_get("CHESS_AGENT_MAX_ILLEGAL_ATTEMPTS", 5, cast=int),
            max_transport_attempts=_get(
                "CHESS_AGENT_MAX_TRANSPORT_ATTEMPTS", 3, cast=int
            ),
            backoff_base_s=_get("CHESS_AGENT_BACKOFF_S", 0.5, cast=float),
            fallback=_get("CHESS_AGENT_FALLBACK", "random").lower(),
            llm_api_key=_get("CHESS_LLM_API_KEY", ""),
            llm_base_url=_get("CHESS_LLM_BASE_URL", ""),
            llm_model=_get("CHESS_LLM_MODEL", "gpt-4o-mini"),
            llm_timeout_s=_get("CHESS_LLM_TIMEOUT_S", 30.0, cast=float),
            log_level=_get("CHESS_LOG_LEVEL", "INFO").upper(),
        )


SETTINGS = Settings.from_env()


def configure_logging(settings: Settings = SETTINGS) -> None:
    """For entry points only: library modules just create their loggers and never install handlers."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
