"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    PLAY = "play"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    OPPONENT_FAILURE = "opponent_failure"

    @property
    def is_terminal(self) -> bool:
        return self != Status.PLAY


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
