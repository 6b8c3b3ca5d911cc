"""
Interface of the external opponent.

The opponent is a black box that proposes moves. It may propose illegal moves: the coordinator validates every
proposal and asks again, with the reason and the legal alternatives attached.
"""

from typing import Protocol

from src.api.models import MoveProposal, MoveProposalRequest


class OpponentAgent(Protocol):
    async def propose_move(self, request: MoveProposalRequest) -> MoveProposal:
        """
        Return a (hopefully legal) move for the position in `request`.

        Raise OpponentUnavailableError when no answer can be produced (network failure, unreadable reply).
        """
        ...
