"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the shape of a legal move for each piece type.

`is_legal_move()` layers the rules on top of each other:
1. basic checks (on the board, not a null move, not onto your own piece)
2. the shape of the move for the piece type (MOVEMENT_RULES), or castling for a two-square king move
3. king safety: simulate the move on a copy of the board and make sure your own king is not attacked.

Attack sets (`is_square_attacked()`) never consider castling nor king safety, so they cannot recurse.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.castling import CastlingSquares, castling_squares_for
from src.chess.pieces import Piece
from src.chess.square import Square, all_squares
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def is_any_occupied(self, squares: list[Square]) -> bool: ...
    def place_piece(self, piece: Piece, square: Square) -> None: ...
    def remove_piece(self, square: Square) -> Optional[Piece]: ...
    def locate_color(self, color: Color) -> list[Square]: ...
    def find_king(self, color: Color) -> Square: ...
    def clone(self) -> "Board": ...


Vector = tuple[int, int]

# White moves UP the board (towards row 0), black moves DOWN (towards row 7)
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_algebraic(cls, move: str) -> Self:
        """
        The notation used on the wire: "<from>-<to>"

        examples:
        * "e2-e4": move the piece that was on e2 to e4
        * "e1-g1": the king castles king side (the rook move is implied)
        """
        parts = move.strip().split("-")
        if len(parts) != 2:
            raise IllegalMoveError(f"Cannot interpret {move!r} as a move (expected e.g. 'e2-e4').")
        return cls(Square.from_algebraic(parts[0]), Square.from_algebraic(parts[1]))

    def to_algebraic(self) -> str:
        return f"{self.from_square.to_algebraic()}-{self.to_square.to_algebraic()}"


def deltas(from_square: Square, to_square: Square) -> tuple[int, int]:
    """Signed (row, col) difference"""
    return to_square.row - from_square.row, to_square.col - from_square.col


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Squares strictly between two squares on the same rank, file or diagonal.

    Raises a ValueError for any other pair: a knight jump has no 'path'.
    """
    d_row, d_col = deltas(from_square, to_square)
    is_straight = (d_row == 0) != (d_col == 0)
    is_diagonal = abs(d_row) == abs(d_col) and d_row != 0
    if not (is_straight or is_diagonal):
        raise ValueError(
            f"squares_between requires both squares to lie on the same line. \n from: {from_square}\n to:{to_square}"
        )

    step_row = (d_row > 0) - (d_row < 0)
    step_col = (d_col > 0) - (d_col < 0)
    squares_found: list[Square] = []
    square = from_square.offset(step_row, step_col)
    while square != to_square:
        squares_found.append(square)
        square = square.offset(step_row, step_col)
    return squares_found


def is_path_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    return not board.is_any_occupied(squares_between(from_square, to_square))


# --- MOVEMENT RULES ---
# Every rule answers: "does this move have the right shape for this piece?"
# Destination occupancy by your own color is handled before the rule is called.
def pawn_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move, if both squares are empty
    - takes diagonally (one square forward), but only if an opponent's piece stands there

    NOTE: En passant is not part of this rule set.
    """
    d_row, d_col = deltas(from_square, to_square)
    forward = PAWN_DIRECTION[piece.color]
    target = board.piece(to_square)

    if d_col == 0 and d_row == forward:
        return target is None

    if d_col == 0 and d_row == 2 * forward:
        intermediate = from_square.offset(forward, 0)
        return (
            not piece.has_moved
            and board.is_empty(intermediate)
            and target is None
        )

    if abs(d_col) == 1 and d_row == forward:
        return target is not None and target.color != piece.color

    return False


def knight_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Knights always move such that (|delta_row|, |delta_col|) is (1, 2) or (2, 1)"""
    d_row, d_col = deltas(from_square, to_square)
    return sorted((abs(d_row), abs(d_col))) == [1, 2]


def bishop_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|, and cannot jump over pieces"""
    d_row, d_col = deltas(from_square, to_square)
    if abs(d_row) != abs(d_col):
        return False
    return is_path_clear(from_square, to_square, board)


def rook_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """Rooks move either horizontally or vertically, and cannot jump over pieces"""
    d_row, d_col = deltas(from_square, to_square)
    if (d_row == 0) == (d_col == 0):
        return False
    return is_path_clear(from_square, to_square, board)


def queen_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return bishop_move(piece, from_square, to_square, board) or rook_move(
        piece, from_square, to_square, board
    )


def king_move(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately in `is_legal_move()`).
    """
    d_row, d_col = deltas(from_square, to_square)
    return abs(d_row) <= 1 and abs(d_col) <= 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Piece, Square, Square, Board], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: pawn_move,
    PieceType.KNIGHT: knight_move,
    PieceType.BISHOP: bishop_move,
    PieceType.ROOK: rook_move,
    PieceType.QUEEN: queen_move,
    PieceType.KING: king_move,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def attacks(piece: Piece, from_square: Square, target: Square, board: Board) -> bool:
    """
    Could the piece on `from_square` capture on `target`, ignoring whose turn it is and king safety?

    NOTE: Pawn moves are not symmetric: a pawn push is not an attack, and a pawn attacks the diagonal squares
    in front of it even if they are empty (that matters for the squares a castling king passes through).
    Castling is never an attack.
    """
    if from_square == target:
        return False

    if piece.type == PieceType.PAWN:
        # Deliberately not `is_legal_move(..., enforce_king_safety=False)`: that only counts a pawn diagonal
        # when an enemy piece stands on it, and would let a king castle across a square a pawn covers.
        d_row, d_col = deltas(from_square, target)
        return d_row == PAWN_DIRECTION[piece.color] and abs(d_col) == 1

    return MOVEMENT_RULES[piece.type](piece, from_square, target, board)


def is_square_attacked(square: Square, board: Board, by_color: Color) -> bool:
    """Scan every piece of `by_color` (a bounded scan: at most 16 pieces, no recursion)"""
    for attacker_square in board.locate_color(by_color):
        attacker = board.piece(attacker_square)
        if attacker is not None and attacks(attacker, attacker_square, square, board):
            return True
    return False


def is_king_in_check(board: Board, color: Color) -> bool:
    """Raises BoardInvariantError when there is no king of that color to check"""
    king_square = board.find_king(color)
    return is_square_attacked(king_square, board, color.opponent)


# -- CASTLING MOVES ---
def is_castling_shape(piece: Piece, from_square: Square, to_square: Square) -> bool:
    d_row, d_col = deltas(from_square, to_square)
    return piece.type == PieceType.KING and d_row == 0 and abs(d_col) == 2


def can_castle(piece: Piece, rule: CastlingSquares, board: Board) -> bool:
    """
    **you are allowed to castle if**

    * Neither the king nor the rook have moved before.
    * All squares between king and rook are empty.
    * You are not currently in check (you cannot castle out of check).
    * The king does not pass through, or land on, a square under attack.
    """
    if piece.has_moved:
        return False

    rook = board.piece(rule.rook_from)
    if (
        rook is None
        or rook.type != PieceType.ROOK
        or rook.color != piece.color
        or rook.has_moved
    ):
        return False

    if board.is_any_occupied(rule.squares_between()):
        return False

    opponent_color = piece.color.opponent
    return not any(
        is_square_attacked(square, board, opponent_color)
        for square in rule.king_path()
    )


# -- KING SAFETY ---
def simulate_move(piece: Piece, move: Move, board: Board) -> Board:
    """Play the move on a copy of the board. The original board is never touched."""
    simulated = board.clone()
    simulated.remove_piece(move.from_square)
    simulated.place_piece(piece, move.to_square)
    rule = castling_squares_for(piece.color, move.from_square, move.to_square)
    if is_castling_shape(piece, move.from_square, move.to_square) and rule:
        rook = simulated.remove_piece(rule.rook_from)
        if rook is not None:
            simulated.place_piece(rook, rule.rook_to)
    return simulated


def leaves_king_in_check(piece: Piece, move: Move, board: Board) -> bool:
    simulated = simulate_move(piece, move, board)
    return is_king_in_check(simulated, piece.color)


# -- LEGALITY ---
def _passes_basic_checks(piece: Piece, from_square: Square, to_square: Square, board: Board) -> bool:
    """On the board, not a null move, not onto one of your own pieces"""
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return False
    if from_square == to_square:
        return False
    target = board.piece(to_square)
    return target is None or target.color != piece.color


def is_legal_move(
    piece: Piece,
    from_square: Square,
    to_square: Square,
    board: Board,
    enforce_king_safety: bool = True,
    allow_castling: bool = True,
) -> bool:
    """
    Is moving `piece` from `from_square` to `to_square` legal on this board?

    enforce_king_safety: reject moves that leave your own king in check.
    allow_castling: consider two-square king moves as castling. Attack-set computations switch it off.
    """
    if not _passes_basic_checks(piece, from_square, to_square, board):
        return False

    if is_castling_shape(piece, from_square, to_square):
        rule = castling_squares_for(piece.color, from_square, to_square)
        if not allow_castling or rule is None or not can_castle(piece, rule, board):
            return False
    elif not MOVEMENT_RULES[piece.type](piece, from_square, to_square, board):
        return False

    if enforce_king_safety:
        return not leaves_king_in_check(piece, Move(from_square, to_square), board)
    return True


def legal_destinations(square: Square, board: Board) -> list[Square]:
    """Every square the piece on `square` can legally move to. Empty list for an empty square."""
    piece = board.piece(square)
    if piece is None:
        return []
    return [
        target
        for target in all_squares()
        if is_legal_move(piece, square, target, board)
    ]


def legal_moves(board: Board, color: Color) -> list[Move]:
    """Every legal move for the player with the `color` pieces"""
    moves: list[Move] = []
    for from_square in board.locate_color(color):
        moves.extend(
            Move(from_square, to_square)
            for to_square in legal_destinations(from_square, board)
        )
    return moves


def is_promotion(piece: Piece, to_square: Square) -> bool:
    """Check if the move is a pawn move that reaches the far rank for its color"""
    return piece.type == PieceType.PAWN and to_square.row == PROMOTION_ROW[piece.color]


def explain_illegal_move(
    from_square: Square, to_square: Square, board: Board, color: Color
) -> str:
    """Human readable reason why `color` cannot play this move. Meant for feedback only, not for deciding legality."""
    piece = board.piece(from_square)
    if piece is None:
        return f"There is no piece on {from_square.to_algebraic()}."
    if piece.color != color:
        return f"The piece on {from_square.to_algebraic()} belongs to {piece.color}, not {color}."
    if from_square == to_square:
        return "A move must change squares."
    target = board.piece(to_square)
    if target is not None and target.color == color:
        return f"{to_square.to_algebraic()} is occupied by your own {target.type}."
    if is_castling_shape(piece, from_square, to_square):
        return f"Castling from {from_square.to_algebraic()} to {to_square.to_algebraic()} is not allowed."
    if not MOVEMENT_RULES[piece.type](piece, from_square, to_square, board):
        return f"A {piece.type} cannot move from {from_square.to_algebraic()} to {to_square.to_algebraic()}."
    if leaves_king_in_check(piece, Move(from_square, to_square), board):
        return "That move would leave your king in check."
    return "The move is legal."
