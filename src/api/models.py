"""Request and Response models exchanged with the external opponent"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.chess.board import EMPTY_SQUARE_CODE
from src.core.exceptions import InvalidRequestError

ALGEBRAIC_RE = re.compile(r"^[a-h][1-8]$")
MOVE_RE = re.compile(r"^[a-h][1-8]-[a-h][1-8]$")
PIECE_CODE_RE = re.compile(r"^[wb][PNBRQK]$")

AlgebraicSquare = str
PieceCode = str


def _validate_square(value: str) -> str:
    value = value.strip().lower()
    if not ALGEBRAIC_RE.match(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# --- REQUEST MODELS ---
class IllegalMoveAttempt(WireModel):
    """Attached to a retry: what went wrong with the previous proposal"""

    from_square: AlgebraicSquare = Field(alias="from")
    to_square: AlgebraicSquare = Field(alias="to")
    error: str
    valid_moves: list[AlgebraicSquare] = Field(alias="validMoves", default_factory=list)


class MoveProposalRequest(WireModel):
    board_json: dict[AlgebraicSquare, str] = Field(alias="boardJson")
    history: list[str]
    illegal_move_attempt: Optional[IllegalMoveAttempt] = Field(
        alias="illegalMoveAttempt", default=None
    )
    all_legal_moves: list[str] = Field(alias="allLegalMoves", default_factory=list)
    captured_white: list[PieceCode] = Field(alias="capturedWhite", default_factory=list)
    captured_black: list[PieceCode] = Field(alias="capturedBlack", default_factory=list)
    thought_history: list[str] = Field(alias="thoughtHistory", default_factory=list)

    @field_validator("board_json")
    @classmethod
    def validate_board(cls, value: dict[str, str]) -> dict[str, str]:
        if len(value) != 64:
            raise InvalidRequestError(
                f"boardJson must list all 64 squares, got {len(value)}."
            )
        for square, code in value.items():
            _validate_square(square)
            if code != EMPTY_SQUARE_CODE and not PIECE_CODE_RE.match(code):
                raise InvalidRequestError(f"Invalid piece code {code!r} on {square}.")
        return value

    @field_validator("history", "all_legal_moves")
    @classmethod
    def validate_moves(cls, value: list[str]) -> list[str]:
        for move in value:
            if not MOVE_RE.match(move):
                raise InvalidRequestError(f"Cannot interpret {move!r} as a move (expected e.g. 'e2-e4').")
        return value


# --- RESPONSE MODELS ---
class MoveProposal(WireModel):
    from_square: AlgebraicSquare = Field(alias="from")
    to_square: AlgebraicSquare = Field(alias="to")
    # free-form reasoning the agent may want to see again next turn
    thought: Optional[str] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)

    def to_algebraic(self) -> str:
        return f"{self.from_square}-{self.to_square}"
