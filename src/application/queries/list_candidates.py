"""
ListCandidatesQuery - CQRS Read Query

Next users to show to a swiping user (undecided only, unranked).
"""

import asyncio
from typing import Final, Optional

from pydantic import BaseModel, Field

from src.domain.matching.repositories.user_directory import UserDirectoryProtocol
from src.domain.matching.services.candidate_source import CandidateSourceProtocol
from src.domain.matching.value_objects.user_id import validate_user_id
from src.domain.shared.exceptions import UnknownUserError

DEFAULT_CANDIDATE_LIMIT: Final[int] = 20
MAX_CANDIDATE_LIMIT: Final[int] = 100


class ListCandidatesQuery(BaseModel):
    """
    Attributes:
        user_id: Swiping user
        limit: Max candidates returned (1-100, default 20)
    """

    user_id: str
    limit: int = Field(default=DEFAULT_CANDIDATE_LIMIT, ge=1, le=MAX_CANDIDATE_LIMIT)


class CandidatesResult(BaseModel):
    user_id: str
    candidates: list[str] = Field(default_factory=list)


class ListCandidatesQueryHandler:
    """Handler delegating to CandidateSourceProtocol."""

    def __init__(
        self,
        candidate_source: CandidateSourceProtocol,
        user_directory: Optional[UserDirectoryProtocol] = None,
    ) -> None:
        self.candidate_source = candidate_source
        self.user_directory = user_directory

    async def handle(self, query: ListCandidatesQuery) -> CandidatesResult:
        validate_user_id(query.user_id)
        if self.user_directory is not None and not self.user_directory.exists(query.user_id):
            raise UnknownUserError(f"User {query.user_id!r} is not known", user_id=query.user_id)

        candidates = await asyncio.to_thread(
            self.candidate_source.list_candidates, query.user_id, query.limit
        )
        return CandidatesResult(user_id=query.user_id, candidates=candidates)
