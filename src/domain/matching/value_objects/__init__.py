"""
Matching Value Objects.

Immutable objects that describe swipes and pairs by their value.

Available Value Objects:
    - EdgeStatus: Lifecycle state of a directional edge
    - PairKey: Canonical unordered pair of users
    - SwipeOutcome / SwipeResult: Engine result reporting
    - CommitResult: Result of the atomic pair transition
    - MatchEvent: Notification payload for a formed match
"""

from src.domain.matching.value_objects.user_id import validate_user_id
from src.domain.matching.value_objects.edge_status import EdgeStatus
from src.domain.matching.value_objects.pair_key import PairKey
from src.domain.matching.value_objects.swipe_result import (
    CommitResult,
    SwipeOutcome,
    SwipeResult,
)
from src.domain.matching.value_objects.match_event import MatchEvent

__all__ = [
    "validate_user_id",
    "EdgeStatus",
    "PairKey",
    "CommitResult",
    "SwipeOutcome",
    "SwipeResult",
    "MatchEvent",
]
