"""Unit tests for /src/chess/square.py"""

from string import ascii_lowercase

import pytest

from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import InvalidSquareError


@pytest.mark.parametrize(
    "row, col, notation",
    [
        (row, col, f"{ascii_lowercase[col]}{8 - row}")
        for row in range(8)
        for col in range(8)
    ],
)
def test_creating_from_algebraic(row: int, col: int, notation: str) -> None:
    """'a8' maps to row 0, col 0 and 'h1' maps to row 7, col 7"""
    square = Square.from_algebraic(notation)
    assert square.row == row
    assert square.col == col


@pytest.mark.parametrize(
    "row, col, notation",
    [
        (row, col, f"{ascii_lowercase[col]}{8 - row}")
        for row in range(8)
        for col in range(8)
    ],
)
def test_to_algebraic_notation(row: int, col: int, notation: str) -> None:
    """Test the reverse: file = 'a' + col, rank = 8 - row"""
    assert Square(row, col).to_algebraic() == notation


def test_well_known_squares() -> None:
    """Back ranks: white's king starts on row 7, black's on row 0"""
    assert Square.from_algebraic("e1") == Square(7, 4)
    assert Square.from_algebraic("e8") == Square(0, 4)
    assert Square.from_algebraic("e2") == Square(6, 4)
    assert Square.from_algebraic("E4") == Square(4, 4)


@pytest.mark.parametrize("notation", ["i1", "a0", "a9", "", "e", "e10", "11"])
def test_invalid_algebraic(notation: str) -> None:
    with pytest.raises(InvalidSquareError):
        _ = Square.from_algebraic(notation)


def test_square_within_bounds() -> None:
    """happy case: squares within the dimensions of the board"""
    for row in range(BOARD_DIMENSIONS[0]):
        for col in range(BOARD_DIMENSIONS[1]):
            assert Square(row, col).is_within_bounds()


def test_square_out_of_bounds() -> None:
    assert not Square(BOARD_DIMENSIONS[0], 0).is_within_bounds()
    assert not Square(0, BOARD_DIMENSIONS[1]).is_within_bounds()
    assert not Square(-1, -1).is_within_bounds()


def test_offset() -> None:
    assert Square(6, 4).offset(-2, 0) == Square(4, 4)
    assert not Square(0, 0).offset(-1, 0).is_within_bounds()


def test_all_squares_in_reading_order() -> None:
    squares = all_squares()
    assert len(squares) == 64
    assert len(set(squares)) == 64
    assert squares[0].to_algebraic() == "a8"
    assert squares[7].to_algebraic() == "h8"
    assert squares[-1].to_algebraic() == "h1"
