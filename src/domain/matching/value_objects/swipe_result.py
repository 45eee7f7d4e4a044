"""
Swipe outcome Value Objects

Results reported by the MatchEngine and by the EdgeStore pair transition.

Contains:
    - SwipeOutcome: what happened to a single interest/disinterest action
    - CommitResult: result of the atomic two-edge transition in the store
    - SwipeResult: immutable report returned to callers of the engine
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.domain.matching.value_objects.edge_status import EdgeStatus
from src.domain.matching.value_objects.pair_key import PairKey


class SwipeOutcome(str, Enum):
    """
    Outcome of a swipe as seen by the caller.

    Attributes:
        NEW: Interest recorded, no reciprocal interest yet
        MATCHED: This call formed the match (both edges now connected)
        ALREADY_MATCHED: Pair was already connected before/while this call ran
        REJECTED: Disinterest recorded (or already recorded)
    """

    NEW = "new"
    MATCHED = "matched"
    ALREADY_MATCHED = "already_matched"
    REJECTED = "rejected"


class CommitResult(str, Enum):
    """
    Result of EdgeStore.transition_pair_to_connected().

    Attributes:
        APPLIED: Both edges moved pending -> connected in one atomic step
        ALREADY_APPLIED: Both edges were already connected, nothing written
        CONFLICT: Edges were not both pending (or changed concurrently), nothing written
    """

    APPLIED = "applied"
    ALREADY_APPLIED = "already_applied"
    CONFLICT = "conflict"


class SwipeResult(BaseModel):
    """
    Immutable report of a single engine operation.

    Attributes:
        outcome: SwipeOutcome of this call
        from_user: Acting user
        to_user: Target user
        pair_key: Canonical key of the pair (string form "low|high")
        edge_status: Status of edge from_user -> to_user after the call
        repeated: True when the call repeated an already recorded action
        attempts: Number of attempts used (>1 means conflicts were retried)
        notification_dispatched: Whether publish_match was called successfully
            (only meaningful for MATCHED; False for every other outcome)
        decided_at: Timestamp of the decision (UTC)

    Examples:
        >>> result = engine.record_interest("alice", "bob")
        >>> result.outcome
        <SwipeOutcome.NEW: 'new'>
        >>> result.is_match
        False
    """

    outcome: SwipeOutcome
    from_user: str
    to_user: str
    pair_key: str
    edge_status: EdgeStatus
    repeated: bool = False
    attempts: int = Field(default=1, ge=1)
    notification_dispatched: bool = False
    decided_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def create(
        cls,
        outcome: SwipeOutcome,
        from_user: str,
        to_user: str,
        edge_status: EdgeStatus,
        decided_at: datetime,
        repeated: bool = False,
    ) -> "SwipeResult":
        """Factory deriving the pair key from the two users."""
        return cls(
            outcome=outcome,
            from_user=from_user,
            to_user=to_user,
            pair_key=str(PairKey.of(from_user, to_user)),
            edge_status=edge_status,
            repeated=repeated,
            decided_at=decided_at,
        )

    @property
    def is_match(self) -> bool:
        """True when the pair is connected after this call."""
        return self.outcome in (SwipeOutcome.MATCHED, SwipeOutcome.ALREADY_MATCHED)
