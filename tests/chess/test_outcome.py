"""Unit tests for /src/chess/outcome.py"""

from unittest.mock import patch

import pytest

from src.chess import outcome
from src.chess.board import Board
from src.chess.outcome import (
    evaluate_position,
    has_any_legal_move,
    is_checkmate,
    is_stalemate,
)
from src.core.shared_types import Color, Status

SCHOLARS_MATE = "r1bqkb1r/pppp1Qpp/2n2n2/4p3/2B1P3/8/PPPP1PPP/RNB1K1NR"
BACK_RANK_MATE = "R5k1/5ppp/8/8/8/8/8/6K1"
STALEMATE = "k7/8/1Q6/8/8/8/8/7K"


def test_starting_position_is_in_play() -> None:
    board = Board.starting_position()
    assert has_any_legal_move(board, Color.WHITE)
    assert has_any_legal_move(board, Color.BLACK)
    assert evaluate_position(board, Color.WHITE) == Status.PLAY


@pytest.mark.parametrize("fen", [SCHOLARS_MATE, BACK_RANK_MATE])
def test_checkmate(fen: str) -> None:
    board = Board.from_fen(fen)
    assert not has_any_legal_move(board, Color.BLACK)
    assert is_checkmate(board, Color.BLACK)
    assert not is_stalemate(board, Color.BLACK)
    assert evaluate_position(board, Color.BLACK) == Status.CHECKMATE


def test_stalemate() -> None:
    """No check, but the king has nowhere to go and there is nothing else to move"""
    board = Board.from_fen(STALEMATE)
    assert not has_any_legal_move(board, Color.BLACK)
    assert is_stalemate(board, Color.BLACK)
    assert not is_checkmate(board, Color.BLACK)
    assert evaluate_position(board, Color.BLACK) == Status.STALEMATE


def test_check_that_can_be_escaped_is_not_mate() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/4K2r")
    assert has_any_legal_move(board, Color.WHITE)
    assert evaluate_position(board, Color.WHITE) == Status.PLAY


def test_only_a_block_saves_the_king() -> None:
    """Back rank check where a rook can interpose: not mate"""
    board = Board.from_fen("R5k1/5ppp/8/8/8/8/8/3r2K1")
    assert evaluate_position(board, Color.BLACK) == Status.PLAY


def test_has_any_legal_move_short_circuits() -> None:
    board = Board.starting_position()
    with patch.object(outcome, "is_legal_move", return_value=True) as mock_is_legal:
        assert has_any_legal_move(board, Color.WHITE)
    mock_is_legal.assert_called_once()
