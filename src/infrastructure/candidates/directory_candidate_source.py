"""
Directory Candidate Source

CandidateSourceProtocol implementation that walks the user directory in
its stable order and skips every user already decided on. No ranking.
"""

import logging
from itertools import islice

from src.domain.matching.repositories.edge_store import EdgeStoreProtocol
from src.domain.matching.repositories.user_directory import UserDirectoryProtocol
from src.domain.matching.value_objects.user_id import validate_user_id

logger = logging.getLogger(__name__)


class DirectoryCandidateSource:
    """
    Candidates = known users - {user} - users with an edge in either direction.

    Examples:
        >>> source = DirectoryCandidateSource(directory, store)
        >>> source.list_candidates("alice", limit=10)
        ['carol', 'dave']
    """

    def __init__(
        self,
        user_directory: UserDirectoryProtocol,
        edge_store: EdgeStoreProtocol,
    ) -> None:
        self.user_directory = user_directory
        self.edge_store = edge_store

    def list_candidates(self, user_id: str, limit: int) -> list[str]:
        validate_user_id(user_id)
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        excluded = self.edge_store.related_user_ids(user_id)
        excluded.add(user_id)

        candidates = list(
            islice(
                (u for u in self.user_directory.all_user_ids() if u not in excluded),
                limit,
            )
        )
        logger.debug(
            f"Candidates for {user_id}: {len(candidates)} (excluded {len(excluded) - 1} decided)"
        )
        return candidates
