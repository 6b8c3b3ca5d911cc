"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Squares are addressed by (row, col), both in [0, 7]:
row 0 is black's back rank (rank 8), row 7 is white's back rank (rank 1).
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. rows x cols
BOARD_DIMENSIONS = (8, 8)

FILES = "abcdefgh"


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' -> (0, 0), 'h1' -> (7, 7). file = 'a' + col, rank = 8 - row"""
        sq = sq.strip().lower()
        if len(sq) != 2 or sq[0] not in FILES or sq[1] not in "12345678":
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square (expected a1 - h8).")
        col = ord(sq[0]) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_DIMENSIONS[0] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def offset(self, d_row: int, d_col: int) -> Square:
        """May return a square off the board. Check with `is_within_bounds()`"""
        return Square(self.row + d_row, self.col + d_col)


def all_squares() -> list[Square]:
    """All 64 squares, in reading order: a8, b8, ..., h8, a7, ..., h1"""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]
