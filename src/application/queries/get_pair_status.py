"""
GetPairStatusQuery - CQRS Read Query

Reports both directional edges of a pair and whether the pair is matched.
"""

import asyncio
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.matching.repositories.edge_store import EdgeStoreProtocol
from src.domain.matching.value_objects.pair_key import PairKey


class GetPairStatusQuery(BaseModel):
    """Query object with the two users (order defines a_to_b / b_to_a)."""

    user_a: str
    user_b: str


class PairStatusResult(BaseModel):
    """
    Result DTO returned by GetPairStatusQueryHandler.

    Attributes:
        pair_key: Canonical pair key
        user_a / user_b: Users as given in the query
        a_to_b: Status of user_a -> user_b, None if no edge
        b_to_a: Status of user_b -> user_a, None if no edge
        is_match: Both directions connected
    """

    pair_key: str
    user_a: str
    user_b: str
    a_to_b: Optional[str] = Field(default=None)
    b_to_a: Optional[str] = Field(default=None)
    is_match: bool = False


class GetPairStatusQueryHandler:
    """Handler reading both edges of a pair."""

    def __init__(self, edge_store: EdgeStoreProtocol) -> None:
        self.edge_store = edge_store

    async def handle(self, query: GetPairStatusQuery) -> PairStatusResult:
        pair = PairKey.of(query.user_a, query.user_b)

        # One snapshot: a match committed between two reads would show as half-connected
        edge_ab, edge_ba = await asyncio.to_thread(
            self.edge_store.get_pair, query.user_a, query.user_b
        )

        return PairStatusResult(
            pair_key=str(pair),
            user_a=query.user_a,
            user_b=query.user_b,
            a_to_b=edge_ab.status.value if edge_ab else None,
            b_to_a=edge_ba.status.value if edge_ba else None,
            is_match=bool(
                edge_ab and edge_ba and edge_ab.is_connected() and edge_ba.is_connected()
            ),
        )
