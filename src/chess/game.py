"""
The Game class is the single writer of the board.
It is responsible for orchestrating all the business logic required to play a turn:
selection, validation, executing the move, bookkeeping (history, captures), and deciding if the game is over.

Validation always happens on the untouched board. The board is only written to once a move is known to be legal.

The match clock needs a running event loop, so the Game never starts it: it only stops it on game over and resets it.
OpponentCoordinator starts it on the first move it sees. A front end without an opponent calls `game.clock.start()` itself.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import castling_squares_for
from src.chess.clock import MatchClock
from src.chess.moves import (
    Move,
    explain_illegal_move,
    is_castling_shape,
    is_king_in_check,
    is_legal_move,
    is_promotion,
    legal_destinations,
)
from src.chess.outcome import evaluate_position
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import GameStateError
from src.core.shared_types import Color, PieceType, Status

log = logging.getLogger(__name__)


class RejectionReason(StrEnum):
    NOT_SELECTED = "not_selected"
    NOT_YOUR_TURN = "not_your_turn"
    NO_PIECE = "no_piece"
    ILLEGAL = "illegal"


@dataclass
class MoveResult:
    """
    Outcome of a move attempt.
    ----

    A rejected result is the transient 'flash' signal: the caller may render it and forget about it.
    Nothing on the board changed.
    """

    accepted: bool
    move: Move
    status: Status
    reason: Optional[RejectionReason] = None
    message: str = ""
    captured: Optional[Piece] = None
    promoted: bool = False
    castled: bool = False
    reselected: Optional[Square] = None


@dataclass
class Game:
    # --- DOMAIN LAYER API ---

    board: Board
    turn_color: Color = Color.WHITE
    status: Status = Status.PLAY
    move_history: list[Move] = field(default_factory=list)
    captured_by_white: list[Piece] = field(default_factory=list)
    captured_by_black: list[Piece] = field(default_factory=list)
    selected: Optional[Square] = None
    # The color played by the external opponent. None: both colors are played locally.
    agent_color: Optional[Color] = None
    # Bumped on every reset, so late answers meant for an older game can be recognized
    generation: int = 0
    clock: MatchClock = field(default_factory=MatchClock, repr=False, compare=False)

    @classmethod
    def new_game(cls, agent_color: Optional[Color] = None) -> Self:
        """Standard starting position, white to move, nothing has moved yet."""
        return cls(board=Board.starting_position(), agent_color=agent_color)

    @property
    def winner(self) -> Optional[Color]:
        """
        Only defined for checkmate.
        The turn does not pass after the mating move, so the color 'to move' is the one that delivered mate.
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.turn_color

    @property
    def in_check(self) -> bool:
        return is_king_in_check(self.board, self.turn_color)

    @property
    def is_agent_turn(self) -> bool:
        return (
            self.status == Status.PLAY
            and self.agent_color is not None
            and self.turn_color == self.agent_color
        )

    def legal_destinations(self, square: Square) -> list[Square]:
        """Move hints for the piece on `square`"""
        return legal_destinations(square, self.board)

    def captured_by(self, color: Color) -> list[Piece]:
        return self.captured_by_white if color == Color.WHITE else self.captured_by_black

    def select(self, square: Square) -> bool:
        """
        Select one of your own pieces. Replaces any previous selection.

        Returns False (and keeps the current selection) when there is nothing of yours to select on that square.
        While the external opponent is to move, clicks are ignored altogether.
        """
        self._assert_in_play()
        if self.is_agent_turn:
            return False
        piece = self.board.piece(square)
        if piece is None or piece.color != self.turn_color:
            return False
        self.selected = square
        return True

    def attempt_move(self, from_square: Square, to_square: Square) -> MoveResult:
        """
        Attempt to move the selected piece
        -----

        On success: the selection is cleared.
        On failure: nothing changes on the board. If you clicked on another one of your own pieces,
        that piece becomes the selection ("change your mind" clicking). Otherwise the selection is cleared.
        Clicks never move the external opponent's pieces: those only go through `apply_move()`.
        """
        self._assert_in_play()
        move = Move(from_square, to_square)
        if self.is_agent_turn:
            self.selected = None
            return self._reject(
                move, RejectionReason.NOT_YOUR_TURN, f"Waiting for {self.turn_color} to move."
            )
        if self.selected != from_square:
            result = self._reject(
                move, RejectionReason.NOT_SELECTED, f"{from_square.to_algebraic()} is not selected."
            )
        else:
            result = self.apply_move(move, self.turn_color)

        if not result.accepted:
            target = self.board.piece(to_square)
            if target is not None and target.color == self.turn_color:
                self.selected = to_square
                result.reselected = to_square
            else:
                self.selected = None
        return result

    def apply_move(self, move: Move, color: Color) -> MoveResult:
        """
        The shared path to play a move, both for clicks and for the external opponent.

        1. make sure it is your turn and your piece
        2. check legality (incl. king safety) on the current board
        3. execute: update the board, history and captures
        4. update game status, or pass the turn
        """
        self._assert_in_play()

        if color != self.turn_color:
            return self._reject(
                move, RejectionReason.NOT_YOUR_TURN, f"It is {self.turn_color}'s turn."
            )

        piece = self.board.piece(move.from_square)
        if piece is None or piece.color != color:
            return self._reject(
                move,
                RejectionReason.NO_PIECE,
                explain_illegal_move(move.from_square, move.to_square, self.board, color),
            )

        if not is_legal_move(piece, move.from_square, move.to_square, self.board):
            return self._reject(
                move,
                RejectionReason.ILLEGAL,
                explain_illegal_move(move.from_square, move.to_square, self.board, color),
            )

        return self._execute(piece, move)

    def declare_opponent_failure(self) -> None:
        """The external opponent could not produce a move. Ends the game without a winner on the board."""
        if self.status.is_terminal:
            return
        log.warning("Opponent failed to produce a move; ending game")
        self._change_status(Status.OPPONENT_FAILURE)

    def reset(self) -> None:
        """Back to the starting position (the player left the game, or wants a rematch)."""
        self.board = Board.starting_position()
        self.turn_color = Color.WHITE
        self.status = Status.PLAY
        self.move_history = []
        self.captured_by_white = []
        self.captured_by_black = []
        self.selected = None
        self.generation += 1
        self.clock.reset()
        log.info("Game reset (generation %d)", self.generation)

    # -- PRIVATE HELPERS ---
    def _assert_in_play(self) -> None:
        if self.status != Status.PLAY:
            raise GameStateError(f"Game is over. status: {self.status}")

    def _reject(self, move: Move, reason: RejectionReason, message: str) -> MoveResult:
        log.debug("Rejected %s: %s", move.to_algebraic(), message)
        return MoveResult(
            accepted=False, move=move, status=self.status, reason=reason, message=message
        )

    def _execute(self, piece: Piece, move: Move) -> MoveResult:
        """
        Call for the proper updates of the Board's position
        ---

        NOTE the captured piece is recorded before the target square is overwritten.
        NOTE if castling, move the king and the rook.
        NOTE a pawn reaching the far rank always becomes a queen.
        """
        color = piece.color
        castling_rule = (
            castling_squares_for(color, move.from_square, move.to_square)
            if is_castling_shape(piece, move.from_square, move.to_square)
            else None
        )

        captured = self.board.move_piece(move)
        if captured is not None:
            self.captured_by(color).append(captured)
        piece.mark_moved()

        if castling_rule is not None:
            self.board.move_piece(Move(castling_rule.rook_from, castling_rule.rook_to))
            rook = self.board.piece(castling_rule.rook_to)
            if rook is not None:
                rook.mark_moved()

        promoted = is_promotion(piece, move.to_square)
        if promoted:
            piece.promote_to(PieceType.QUEEN)

        self.move_history.append(move)
        self.selected = None
        self._update_game_status(color)

        log.debug("%s played %s", color, move.to_algebraic())
        return MoveResult(
            accepted=True,
            move=move,
            status=self.status,
            captured=captured,
            promoted=promoted,
            castled=castling_rule is not None,
        )

    def _update_game_status(self, mover: Color) -> None:
        """Evaluate the position for the opponent, then either end the game or pass the turn."""
        new_status = evaluate_position(self.board, mover.opponent)
        if new_status.is_terminal:
            self._change_status(new_status)
        else:
            self.turn_color = mover.opponent

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status
        self.clock.stop()
        log.info("Game over: %s after %d moves", new_status, len(self.move_history))
