"""
Checks for ending the game.

Always evaluated for the color that is about to move, right after the previous move was made.
Exhaustive by nature: every piece is probed against every square until one legal move turns up.
"""

from src.chess.moves import Board, is_king_in_check, is_legal_move
from src.chess.square import all_squares
from src.core.shared_types import Color, Status


def has_any_legal_move(board: Board, color: Color) -> bool:
    """Short-circuits on the first legal move found"""
    for from_square in board.locate_color(color):
        piece = board.piece(from_square)
        if piece is None:
            continue
        for to_square in all_squares():
            if is_legal_move(piece, from_square, to_square, board):
                return True
    return False


def is_checkmate(board: Board, color: Color) -> bool:
    return is_king_in_check(board, color) and not has_any_legal_move(board, color)


def is_stalemate(board: Board, color: Color) -> bool:
    return not is_king_in_check(board, color) and not has_any_legal_move(board, color)


def evaluate_position(board: Board, color_to_move: Color) -> Status:
    """
    No legal move left?
    * in check: checkmate. The player who just moved wins.
    * not in check: stalemate. A draw.
    """
    if has_any_legal_move(board, color_to_move):
        return Status.PLAY
    if is_king_in_check(board, color_to_move):
        return Status.CHECKMATE
    return Status.STALEMATE
