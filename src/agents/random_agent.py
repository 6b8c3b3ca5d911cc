"""
RandomOpponentAgent: picks a uniformly random legal move.

Useful as a low-difficulty baseline and for exercising the coordinator without a network.
"""

import random
from typing import Optional

from src.api.models import MoveProposal, MoveProposalRequest
from src.core.exceptions import OpponentUnavailableError


class RandomOpponentAgent:
    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    async def propose_move(self, request: MoveProposalRequest) -> MoveProposal:
        if not request.all_legal_moves:
            raise OpponentUnavailableError("No legal moves to choose from.")
        from_sq, to_sq = self._rng.choice(request.all_legal_moves).split("-")
        return MoveProposal(from_square=from_sq, to_square=to_sq)
