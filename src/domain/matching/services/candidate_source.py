"""
CandidateSource Protocol

Supplies the next users to show to a swiping user. Ranking and feed
composition are out of scope; the only rule enforced here is exclusion of
users already decided on.
"""

from typing import Protocol


class CandidateSourceProtocol(Protocol):
    """Protocol for candidate feeds."""

    def list_candidates(self, user_id: str, limit: int) -> list[str]:
        """
        Return up to `limit` candidate user ids for user_id.

        Business Rules:
            - Never includes user_id itself
            - Never includes a user with an edge to or from user_id
              (pending, rejected or connected)
        """
        ...
