"""Orchestration of the turns played by the external opponent: request a move, validate it, ask again if it is illegal."""

import asyncio
import logging
import random
from typing import Optional

from pydantic import ValidationError

from src.agents.base import OpponentAgent
from src.api.models import IllegalMoveAttempt, MoveProposal, MoveProposalRequest
from src.chess.game import Game, MoveResult
from src.chess.moves import Move, explain_illegal_move, is_legal_move, legal_moves
from src.chess.square import Square
from src.core.config import SETTINGS, Settings
from src.core.exceptions import (
    GameStateError,
    InvalidRequestError,
    OpponentUnavailableError,
)
from src.core.shared_types import Color, Status

log = logging.getLogger(__name__)

# Only the most recent notes are kept and sent back to the agent
MAX_THOUGHTS = 5


class OpponentCoordinator:
    """Drives the request / validate / retry protocol whenever it is the opponent's turn."""

    def __init__(
        self, game: Game, agent: OpponentAgent, settings: Settings = SETTINGS
    ) -> None:
        self.game = game
        self.agent = agent
        self.settings = settings
        self.thought_history: list[str] = []
        self._thoughts_generation = game.generation

    # -- Turn logic ---
    async def after_move(self, result: MoveResult) -> Optional[MoveResult]:
        """Hook to call after every move on the board: plays the opponent's reply if it is their turn."""
        if result.accepted:
            self._ensure_clock_running()
        if result.accepted and self.game.is_agent_turn:
            return await self.play_turn()
        return None

    async def play_turn(self) -> Optional[MoveResult]:
        """
        Play one move for the opponent
        -----

        1. wait a moment (pacing)
        2. send the position and history to the agent
        3. validate the proposal as a move for the opponent's color
        4. legal? wait a moment, then play it through the same path as any other move
        5. illegal? ask again, attaching the rejected move and the legal destinations of that piece
        6. still illegal after `max_illegal_attempts`? apply the fallback policy

        Returns None when no move was played: the game was reset while waiting, or the opponent forfeited.
        """
        if not self.game.is_agent_turn:
            raise GameStateError("It is not the opponent's turn.")

        self._ensure_clock_running()
        generation = self.game.generation
        color = self.game.turn_color
        self._sync_thoughts(generation)

        await asyncio.sleep(self.settings.think_delay_s)
        if self._is_stale(generation):
            return None

        attempt: Optional[IllegalMoveAttempt] = None
        for attempt_num in range(1, self.settings.max_illegal_attempts + 1):
            request = self.build_request(attempt)
            proposal = await self._request_with_backoff(request, generation)
            if proposal is None:
                return None

            if proposal.thought:
                self.thought_history.append(proposal.thought)
                del self.thought_history[:-MAX_THOUGHTS]

            move = Move(
                Square.from_algebraic(proposal.from_square),
                Square.from_algebraic(proposal.to_square),
            )
            if self._is_legal_for(move, color):
                await asyncio.sleep(self.settings.move_delay_s)
                if self._is_stale(generation):
                    return None
                return self.game.apply_move(move, color)

            attempt = self.describe_illegal_move(move, color)
            log.warning(
                "Opponent proposed illegal move %s (attempt %d/%d): %s",
                move.to_algebraic(),
                attempt_num,
                self.settings.max_illegal_attempts,
                attempt.error,
            )

        return await self._fallback(color, generation)

    # -- Wire format ---
    def build_request(
        self, attempt: Optional[IllegalMoveAttempt] = None
    ) -> MoveProposalRequest:
        """Snapshot of the game, in the format the agent understands."""
        board = self.game.board
        return MoveProposalRequest(
            board_json=board.to_wire(),
            history=[move.to_algebraic() for move in self.game.move_history],
            illegal_move_attempt=attempt,
            all_legal_moves=[
                move.to_algebraic() for move in legal_moves(board, self.game.turn_color)
            ],
            captured_white=[piece.to_code() for piece in self.game.captured_by_white],
            captured_black=[piece.to_code() for piece in self.game.captured_by_black],
            thought_history=list(self.thought_history),
        )

    def describe_illegal_move(self, move: Move, color: Color) -> IllegalMoveAttempt:
        """
        The diagnostics attached to a retry.
        NOTE the valid moves are those of the piece actually standing on the `from` square (none if that is not one of yours).
        """
        board = self.game.board
        piece = board.piece(move.from_square)
        valid_moves = (
            [square.to_algebraic() for square in self.game.legal_destinations(move.from_square)]
            if piece is not None and piece.color == color
            else []
        )
        return IllegalMoveAttempt(
            from_square=move.from_square.to_algebraic(),
            to_square=move.to_square.to_algebraic(),
            error=explain_illegal_move(move.from_square, move.to_square, board, color),
            valid_moves=valid_moves,
        )

    # -- Internal helpers --
    def _is_legal_for(self, move: Move, color: Color) -> bool:
        piece = self.game.board.piece(move.from_square)
        if piece is None or piece.color != color:
            return False
        return is_legal_move(piece, move.from_square, move.to_square, self.game.board)

    def _is_stale(self, generation: int) -> bool:
        """The game was reset (or ended) while we were waiting: whatever comes back is meant for a game that no longer exists."""
        if self.game.generation != generation or not self.game.is_agent_turn:
            log.info("Discarding opponent response for a game that is no longer waiting for it")
            return True
        return False

    def _ensure_clock_running(self) -> None:
        """The clock runs from the first move until the game is over (or reset)"""
        if self.game.status == Status.PLAY and not self.game.clock.is_running:
            self.game.clock.start()

    def _sync_thoughts(self, generation: int) -> None:
        if generation != self._thoughts_generation:
            self.thought_history = []
            self._thoughts_generation = generation

    async def _request_with_backoff(
        self, request: MoveProposalRequest, generation: int
    ) -> Optional[MoveProposal]:
        """
        Ask the agent, retrying transport failures and unreadable replies with exponential backoff.

        Gives up after `max_transport_attempts`: the game ends with status OPPONENT_FAILURE and the error propagates.
        """
        delay = self.settings.backoff_base_s
        for attempt in range(self.settings.max_transport_attempts):
            try:
                proposal = await self.agent.propose_move(request)
            except (OpponentUnavailableError, InvalidRequestError, ValidationError) as exc:
                if self._is_stale(generation):
                    return None
                if attempt + 1 >= self.settings.max_transport_attempts:
                    log.exception("Opponent unavailable after %d attempts", attempt + 1)
                    self.game.declare_opponent_failure()
                    if isinstance(exc, OpponentUnavailableError):
                        raise
                    raise OpponentUnavailableError(str(exc)) from exc
                log.warning("Opponent request failed (attempt %d): %s", attempt + 1, exc)
                sleep_s = delay * (2**attempt) * (0.8 + 0.4 * random.random())
                await asyncio.sleep(min(sleep_s, 10.0))
                continue

            if self._is_stale(generation):
                return None
            return proposal
        return None

    async def _fallback(self, color: Color, generation: int) -> Optional[MoveResult]:
        """The agent kept proposing illegal moves."""
        if self.settings.fallback == "forfeit":
            self.game.declare_opponent_failure()
            return None

        candidates = legal_moves(self.game.board, color)
        if not candidates:
            # cannot happen while the status is PLAY, but never loop forever
            self.game.declare_opponent_failure()
            return None
        move = random.choice(candidates)
        log.warning("Falling back to random move %s", move.to_algebraic())
        await asyncio.sleep(self.settings.move_delay_s)
        if self._is_stale(generation):
            return None
        return self.game.apply_move(move, color)
