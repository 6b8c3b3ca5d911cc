import pytest

from src.api.models import IllegalMoveAttempt, MoveProposal, MoveProposalRequest
from src.chess.board import Board
from src.core.exceptions import InvalidRequestError


@pytest.fixture
def starting_board_json() -> dict[str, str]:
    return Board.starting_position().to_wire()


# -- Validation - MoveProposalRequest --
def test_request_from_wire_names(starting_board_json: dict[str, str]) -> None:
    """The agent speaks camelCase: the request must parse from (and dump to) those names."""
    payload = {
        "boardJson": starting_board_json,
        "history": ["e2-e4"],
        "illegalMoveAttempt": {
            "from": "e7",
            "to": "e4",
            "error": "A pawn cannot move from e7 to e4.",
            "validMoves": ["e6", "e5"],
        },
        "allLegalMoves": ["e7-e5", "g8-f6"],
        "capturedWhite": [],
        "capturedBlack": [],
        "thoughtHistory": ["open the center"],
    }
    request = MoveProposalRequest.model_validate(payload)
    assert request.board_json["e1"] == "wK"
    assert request.illegal_move_attempt is not None
    assert request.illegal_move_attempt.valid_moves == ["e6", "e5"]
    assert request.all_legal_moves == ["e7-e5", "g8-f6"]

    assert request.to_wire() == payload


def test_request_without_retry_info_omits_it(starting_board_json: dict[str, str]) -> None:
    request = MoveProposalRequest(board_json=starting_board_json, history=[])
    wire = request.to_wire()
    assert "illegalMoveAttempt" not in wire
    assert wire["allLegalMoves"] == []
    assert len(wire["boardJson"]) == 64


def test_board_must_list_all_squares(starting_board_json: dict[str, str]) -> None:
    del starting_board_json["e4"]
    with pytest.raises(InvalidRequestError):
        _ = MoveProposalRequest(board_json=starting_board_json, history=[])


@pytest.mark.parametrize(
    "square, code",
    [
        ("e4", "wX"),  # unknown piece letter
        ("e4", "gP"),  # unknown color
        ("e4", ""),  # empty squares are spelled out
    ],
)
def test_invalid_piece_code(starting_board_json: dict[str, str], square: str, code: str) -> None:
    starting_board_json[square] = code
    with pytest.raises(InvalidRequestError):
        _ = MoveProposalRequest(board_json=starting_board_json, history=[])


def test_invalid_square_name_in_board(starting_board_json: dict[str, str]) -> None:
    del starting_board_json["h8"]
    starting_board_json["i8"] = "bR"
    with pytest.raises(InvalidRequestError):
        _ = MoveProposalRequest(board_json=starting_board_json, history=[])


@pytest.mark.parametrize("move", ["e2e4", "e2-e9", "Nf3", "e2 - e4"])
def test_invalid_history(starting_board_json: dict[str, str], move: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveProposalRequest(board_json=starting_board_json, history=[move])


# -- Validation - MoveProposal --
def test_valid_proposal() -> None:
    proposal = MoveProposal.model_validate({"from": "e7", "to": "e5", "thought": "mirror"})
    assert proposal.from_square == "e7"
    assert proposal.to_square == "e5"
    assert proposal.thought == "mirror"
    assert proposal.to_algebraic() == "e7-e5"


def test_proposal_normalizes_squares() -> None:
    proposal = MoveProposal(from_square=" G8", to_square="F6 ")
    assert proposal.to_algebraic() == "g8-f6"
    assert proposal.thought is None
    assert proposal.to_wire() == {"from": "g8", "to": "f6"}


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "i1",  # off the board
    ],
)
def test_invalid_proposal_square(square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveProposal(from_square=square, to_square="e5")
    with pytest.raises(InvalidRequestError):
        _ = MoveProposal(from_square="e7", to_square=square)


def test_illegal_move_attempt_wire_names() -> None:
    attempt = IllegalMoveAttempt(
        from_square="c1", to_square="a3", error="A bishop cannot move from c1 to a3."
    )
    assert attempt.to_wire() == {
        "from": "c1",
        "to": "a3",
        "error": "A bishop cannot move from c1 to a3.",
        "validMoves": [],
    }
