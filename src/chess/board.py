"""The Board holds the `position` (in chess: the configuration of pieces on the board). Pure data: the rules live in moves.py"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.exceptions import BoardInvariantError
from src.core.shared_types import Color, PieceType

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_SQUARE_CODE = "empty"

# Where pieces stand before they ever moved. Used to infer `has_moved` when loading a FEN placement.
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
BACK_ROW: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}
KING_START_COL = 4
ROOK_START_COLS = (0, 7)


@dataclass
class Board:
    # only occupied squares are stored: a missing key is an empty square
    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.

        FEN does not know about `has_moved`. A pawn off its starting rank, or a king/rook off its
        starting square, is assumed to have moved. Everything else starts out unmoved.
        """
        position: dict[Square, Piece] = {}
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    piece = Piece.from_fen(character)
                    square = Square(row, col)
                    piece.has_moved = not _on_starting_square(piece, square)
                    position[square] = piece
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _rank_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Square(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def to_wire(self) -> dict[str, str]:
        """algebraic square -> piece code ('wP', 'bK', ...) or 'empty'. Always all 64 squares."""
        wire: dict[str, str] = {}
        for square in all_squares():
            piece = self.piece(square)
            wire[square.to_algebraic()] = (
                piece.to_code() if piece is not None else EMPTY_SQUARE_CODE
            )
        return wire

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        return self.position.pop(square, None)

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def find_king(self, color: Color) -> Square:
        """There is exactly one king per color during play. Anything else is a bug, not a game situation."""
        kings = [
            square
            for square, piece in self.position.items()
            if piece.type == PieceType.KING and piece.color == color
        ]
        if len(kings) != 1:
            raise BoardInvariantError(
                f"Expected exactly one {color} king on the board, found {len(kings)}."
            )
        return kings[0]

    def move_piece(self, move: Move) -> Optional[Piece]:
        """Relocate a piece without checking any rules. Returns whatever stood on the target square."""
        piece_that_moved = self.position.pop(move.from_square)
        captured = self.position.get(move.to_square)
        self.position[move.to_square] = piece_that_moved
        return captured

    def clone(self) -> Self:
        """Deep copy: simulations must never touch the pieces of the original board"""
        return deepcopy(self)


def _on_starting_square(piece: Piece, square: Square) -> bool:
    if piece.type == PieceType.PAWN:
        return square.row == PAWN_START_ROW[piece.color]
    if piece.type == PieceType.KING:
        return square == Square(BACK_ROW[piece.color], KING_START_COL)
    if piece.type == PieceType.ROOK:
        return square.row == BACK_ROW[piece.color] and square.col in ROOK_START_COLS
    # has_moved is irrelevant for the other pieces
    return True
