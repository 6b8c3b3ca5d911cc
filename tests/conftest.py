"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.game import Game
from src.core.config import Settings
from src.core.shared_types import Color

EMPTY_FEN = "/".join(["8"] * 8)
KINGS_ONLY_FEN = "4k3/8/8/8/8/8/8/4K3"


@pytest.fixture
def kings_only_board() -> Board:
    """
    Create a board with only kings on their canonical starting squares.
    Because checking king safety involves locating the king, moves cannot be validated on a board without one of the kings.
    """
    return Board.from_fen(KINGS_ONLY_FEN)


@pytest.fixture
def game_from_fen() -> Callable[..., Game]:
    """Call the inner function with a piece placement (and optionally the color to move / the opponent's color)"""

    def _create_game(
        placement: str,
        turn_color: Color = Color.WHITE,
        agent_color: Color | None = None,
    ) -> Game:
        return Game(
            board=Board.from_fen(placement),
            turn_color=turn_color,
            agent_color=agent_color,
        )

    return _create_game


@pytest.fixture
def fast_settings() -> Settings:
    """No pacing delays or backoff, so the coordinator tests run instantly."""
    return Settings(
        think_delay_s=0.0,
        move_delay_s=0.0,
        max_illegal_attempts=3,
        max_transport_attempts=2,
        backoff_base_s=0.0,
        fallback="random",
    )
