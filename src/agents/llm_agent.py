"""
LLM-backed opponent over an OpenAI-compatible chat endpoint (base URL configurable).

The model is asked for a JSON object {"from": "e7", "to": "e5", "thought": "..."}.
Transport errors and unreadable replies both surface as OpponentUnavailableError; retrying is the coordinator's job.
"""

import json
import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from src.api.models import MoveProposal, MoveProposalRequest
from src.chess.board import EMPTY_SQUARE_CODE
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.config import SETTINGS, Settings
from src.core.exceptions import InvalidRequestError, OpponentUnavailableError
from src.core.shared_types import Color

log = logging.getLogger(__name__)

SYSTEM = (
    "You are a strong chess player. You will be shown a position and must choose the next move. "
    'Reply with ONLY a JSON object: {"from": "<square>", "to": "<square>", "thought": "<one sentence>"}. '
    "Squares use algebraic notation (a1-h8). Castle by moving the king two squares."
)


def render_board(board_json: dict[str, str]) -> str:
    """Eight lines, rank 8 first. '..' marks an empty square."""
    lines: list[str] = []
    for row in range(8):
        codes = [
            board_json.get(Square(row, col).to_algebraic(), EMPTY_SQUARE_CODE)
            for col in range(8)
        ]
        cells = [".." if code == EMPTY_SQUARE_CODE else code for code in codes]
        lines.append(f"{8 - row} " + " ".join(cells))
    lines.append("  " + " ".join(f"{f} " for f in "abcdefgh"))
    return "\n".join(lines)


def side_to_move(request: MoveProposalRequest, default: Color) -> Color:
    """
    The request does not name the side to move, but every legal move starts on one of its pieces.
    Falls back to `default` when there is no legal move to look at.
    """
    if not request.all_legal_moves:
        return default
    from_square = request.all_legal_moves[0].split("-")[0]
    code = request.board_json.get(from_square, EMPTY_SQUARE_CODE)
    if code == EMPTY_SQUARE_CODE:
        return default
    return Piece.from_code(code).color


def build_messages(request: MoveProposalRequest, color: Color) -> list[dict[str, str]]:
    parts = [
        f"You play {color}.",
        f"Board:\n{render_board(request.board_json)}",
        f"Moves so far: {', '.join(request.history) or '(none)'}",
    ]
    if request.captured_white or request.captured_black:
        parts.append(
            f"Captured by white: {', '.join(request.captured_white) or '-'}; "
            f"captured by black: {', '.join(request.captured_black) or '-'}"
        )
    if request.thought_history:
        parts.append(f"Your earlier notes: {' | '.join(request.thought_history[-5:])}")
    if request.all_legal_moves:
        parts.append(f"Legal moves: {', '.join(request.all_legal_moves)}")
    attempt = request.illegal_move_attempt
    if attempt is not None:
        parts.append(
            f"Your previous move {attempt.from_square}-{attempt.to_square} was illegal: {attempt.error} "
            f"Legal destinations for the piece on {attempt.from_square}: {', '.join(attempt.valid_moves) or 'none'}."
        )
    parts.append("Respond with the JSON object only.")
    return [
        {"role": "system", "content": SYSTEM},
        {"role": "user", "content": "\n".join(parts)},
    ]


def _strip_code_fence(text: str) -> str:
    """Remove simple ``` fences if present."""
    text = text.strip()
    if text.startswith("```") and text.endswith("```"):
        inner = text.split("\n", 1)
        if len(inner) == 2:
            return inner[1].rsplit("\n", 1)[0].strip()
    return text


def parse_reply(text: str) -> MoveProposal:
    try:
        data = json.loads(_strip_code_fence(text))
        return MoveProposal.model_validate(data)
    except (json.JSONDecodeError, ValidationError, InvalidRequestError) as exc:
        raise OpponentUnavailableError(f"Unreadable reply from opponent: {text!r}") from exc


class LLMOpponentAgent:
    def __init__(
        self,
        color: Color = Color.BLACK,
        settings: Settings = SETTINGS,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.color = color
        self.model = settings.llm_model
        self.timeout = settings.llm_timeout_s
        self._client = client or AsyncOpenAI(
            api_key=settings.llm_api_key or None,
            base_url=settings.llm_base_url or None,
        )

    async def propose_move(self, request: MoveProposalRequest) -> MoveProposal:
        color = side_to_move(request, self.color)
        if color != self.color:
            log.warning("Configured to play %s, but %s is to move; prompting for %s", self.color, color, color)
        messages = build_messages(request, color)
        try:
            rsp = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                timeout=self.timeout,
            )
        except OpenAIError as exc:
            raise OpponentUnavailableError(f"Chat request failed: {exc}") from exc

        text = rsp.choices[0].message.content if rsp.choices else None
        if not text:
            raise OpponentUnavailableError("Empty reply from opponent.")
        log.debug("LLM reply: %s", text)
        return parse_reply(text)
