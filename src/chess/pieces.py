"""Defines the types of chess pieces"""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Wire codes look like "wP", "bK": color letter + upper case FEN letter.
COLOR_TO_CODE: dict[Color, str] = {Color.WHITE: "w", Color.BLACK: "b"}
CODE_TO_COLOR: dict[str, Color] = {value: key for key, value in COLOR_TO_CODE.items()}


@dataclass
class Piece:
    type: PieceType
    color: Color
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @classmethod
    def from_code(cls, code: str) -> Self:
        """Parse a wire code such as 'wP' or 'bK'"""
        if (
            len(code) != 2
            or code[0] not in CODE_TO_COLOR
            or code[1].lower() not in FEN_TO_PIECE
        ):
            raise InvalidRequestError(f"Cannot interpret {code!r} as a piece code.")
        return cls(FEN_TO_PIECE[code[1].lower()], CODE_TO_COLOR[code[0]])

    def to_code(self) -> str:
        return f"{COLOR_TO_CODE[self.color]}{PIECE_TO_FEN[self.type].upper()}"

    def mark_moved(self) -> None:
        """Once set, never reset: castling rights and the pawn double step depend on it."""
        self.has_moved = True

    def promote_to(self, new_type: PieceType) -> None:
        self.type = new_type
