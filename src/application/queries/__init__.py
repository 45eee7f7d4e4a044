"""
CQRS Queries (read operations)

Contains:
    - ListConnectionsQuery: connected counterparts of a user
    - GetPairStatusQuery: both directional statuses of a pair
    - ListCandidatesQuery: undecided candidates for a user
"""

from src.application.queries.get_pair_status import (
    GetPairStatusQuery,
    GetPairStatusQueryHandler,
    PairStatusResult,
)
from src.application.queries.list_candidates import (
    CandidatesResult,
    ListCandidatesQuery,
    ListCandidatesQueryHandler,
)
from src.application.queries.list_connections import (
    ConnectionsResult,
    ConnectionView,
    ListConnectionsQuery,
    ListConnectionsQueryHandler,
)

__all__ = [
    "GetPairStatusQuery",
    "GetPairStatusQueryHandler",
    "PairStatusResult",
    "ListCandidatesQuery",
    "ListCandidatesQueryHandler",
    "CandidatesResult",
    "ListConnectionsQuery",
    "ListConnectionsQueryHandler",
    "ConnectionsResult",
    "ConnectionView",
]
