"""Unit tests for /src/agents/random_agent.py"""

import asyncio

import pytest

from src.agents.random_agent import RandomOpponentAgent
from src.api.models import MoveProposalRequest
from src.chess.board import Board
from src.core.exceptions import OpponentUnavailableError


def make_request(all_legal_moves: list[str]) -> MoveProposalRequest:
    return MoveProposalRequest(
        board_json=Board.starting_position().to_wire(),
        history=[],
        all_legal_moves=all_legal_moves,
    )


def test_picks_one_of_the_legal_moves() -> None:
    legal = ["e2-e4", "d2-d4", "g1-f3"]
    agent = RandomOpponentAgent(seed=7)
    for _ in range(20):
        proposal = asyncio.run(agent.propose_move(make_request(legal)))
        assert proposal.to_algebraic() in legal


def test_seed_makes_choice_reproducible() -> None:
    legal = [f"{file}2-{file}3" for file in "abcdefgh"]
    first = [
        asyncio.run(RandomOpponentAgent(seed=42).propose_move(make_request(legal)))
        for _ in range(3)
    ]
    second = [
        asyncio.run(RandomOpponentAgent(seed=42).propose_move(make_request(legal)))
        for _ in range(3)
    ]
    assert first == second


def test_no_legal_moves() -> None:
    with pytest.raises(OpponentUnavailableError):
        asyncio.run(RandomOpponentAgent().propose_move(make_request([])))
