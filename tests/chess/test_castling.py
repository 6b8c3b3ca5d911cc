"""unit tests for src/chess/castling.py"""

from src.chess.castling import (
    CASTLING_RULES,
    CastlingSide,
    CastlingSquares,
    Square,
    castling_squares_for,
)
from src.core.shared_types import Color


def test_castling_squares_creation() -> None:
    """Test one case, just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


def test_king_side_paths() -> None:
    rule = CASTLING_RULES[(Color.WHITE, CastlingSide.KING_SIDE)]
    assert [sq.to_algebraic() for sq in rule.king_path()] == ["e1", "f1", "g1"]
    assert [sq.to_algebraic() for sq in rule.squares_between()] == ["f1", "g1"]


def test_queen_side_paths() -> None:
    """b-file must be empty, but the king never crosses it"""
    rule = CASTLING_RULES[(Color.BLACK, CastlingSide.QUEEN_SIDE)]
    assert [sq.to_algebraic() for sq in rule.king_path()] == ["e8", "d8", "c8"]
    assert [sq.to_algebraic() for sq in rule.squares_between()] == ["b8", "c8", "d8"]


def test_find_rule_for_king_move() -> None:
    e1 = Square.from_algebraic("e1")
    c1 = Square.from_algebraic("c1")
    assert castling_squares_for(Color.WHITE, e1, c1) == CASTLING_RULES[
        (Color.WHITE, CastlingSide.QUEEN_SIDE)
    ]
    # right shape, wrong color
    assert castling_squares_for(Color.BLACK, e1, c1) is None
    # not a castling move at all
    assert castling_squares_for(Color.WHITE, e1, Square.from_algebraic("e2")) is None
