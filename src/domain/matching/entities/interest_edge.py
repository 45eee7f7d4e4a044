"""
InterestEdge Entity.

Core domain entity representing one user's verdict about another user.
The entity has identity (the ordered pair from_user -> to_user) and a
lifecycle (status transitions guarded by a version token).

Edges are handed out by stores as detached copies. Changing an edge never
mutates the instance in place: `transition_to()` returns the next version,
and stores persist it with a compare-and-set on `version`.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from src.domain.shared.exceptions import (
    InvalidEdgeTransitionError,
    InvalidUserPairError,
)
from src.domain.matching.value_objects.edge_status import (
    ALLOWED_TRANSITIONS,
    EdgeStatus,
)
from src.domain.matching.value_objects.user_id import validate_user_id


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


@dataclass
class InterestEdge:
    """
    Directional interest record from one user to another.

    Attributes:
        from_user: Acting user id
        to_user: Target user id (never equal to from_user)
        status: Current EdgeStatus
        version: Conflict token, 1 on creation, +1 on every persisted change
        created_at: Creation timestamp (UTC); reset when a rejected edge is reopened
        updated_at: Last modification timestamp (UTC)

    Examples:
        >>> edge = InterestEdge(from_user="alice", to_user="bob")
        >>> edge.status
        <EdgeStatus.PENDING: 'pending'>
        >>> edge.version
        1
        >>> nxt = edge.transition_to(EdgeStatus.REJECTED)
        >>> nxt.version, nxt.status.value
        (2, 'rejected')
    """

    from_user: str
    to_user: str
    status: EdgeStatus = EdgeStatus.PENDING
    version: int = 1
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """
        Validate identifiers and normalize status.

        Raises:
            InvalidUserIdError: If either identifier is malformed
            InvalidUserPairError: If from_user == to_user
        """
        validate_user_id(self.from_user)
        validate_user_id(self.to_user)

        if self.from_user == self.to_user:
            raise InvalidUserPairError(
                f"Self-edge {self.from_user}->{self.to_user} is not allowed",
                user_id=self.from_user,
            )

        if not isinstance(self.status, EdgeStatus):
            self.status = EdgeStatus(self.status)

        if self.version < 1:
            raise ValueError(f"Edge version must be >= 1, got {self.version}")

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def key(self) -> tuple[str, str]:
        """Ordered pair identifying this edge."""
        return (self.from_user, self.to_user)

    def is_pending(self) -> bool:
        return self.status is EdgeStatus.PENDING

    def is_rejected(self) -> bool:
        return self.status is EdgeStatus.REJECTED

    def is_connected(self) -> bool:
        return self.status is EdgeStatus.CONNECTED

    def can_transition_to(self, new_status: EdgeStatus) -> bool:
        """Check whether the lifecycle allows moving to new_status."""
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def is_reciprocal_of(self, other: "InterestEdge") -> bool:
        """True when other is the opposite direction of the same pair."""
        return self.from_user == other.to_user and self.to_user == other.from_user

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def transition_to(
        self, new_status: EdgeStatus, now: datetime | None = None
    ) -> "InterestEdge":
        """
        Produce the next version of this edge in new_status.

        Reopening a rejected edge (REJECTED -> PENDING) yields a fresh edge:
        created_at is reset so cooldowns and feeds treat it as new interest.

        Args:
            new_status: Target status
            now: Timestamp to stamp (defaults to current UTC time)

        Returns:
            New InterestEdge with version + 1

        Raises:
            InvalidEdgeTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(new_status):
            raise InvalidEdgeTransitionError(
                f"Cannot move edge {self.from_user}->{self.to_user} "
                f"from {self.status.value} to {new_status.value}",
                current_status=self.status.value,
                requested_status=new_status.value,
            )

        stamp = now or utc_now()
        reopened = self.status is EdgeStatus.REJECTED and new_status is EdgeStatus.PENDING

        return replace(
            self,
            status=new_status,
            version=self.version + 1,
            created_at=stamp if reopened else self.created_at,
            updated_at=stamp,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize entity to a flat string-friendly dictionary.

        Used by RedisEdgeStore (hash fields) and by API/query DTOs.

        Examples:
            >>> InterestEdge(from_user="alice", to_user="bob").to_dict()["status"]
            'pending'
        """
        return {
            "from_user": self.from_user,
            "to_user": self.to_user,
            "status": self.status.value,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InterestEdge":
        """
        Deserialize entity from dictionary produced by to_dict().

        Accepts string values for every field (Redis hashes store strings).
        """
        return cls(
            from_user=data["from_user"],
            to_user=data["to_user"],
            status=EdgeStatus(data["status"]),
            version=int(data["version"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    def __str__(self) -> str:
        return f"{self.from_user}->{self.to_user} [{self.status.value} v{self.version}]"


# ----------------------------------------------------------------------
# Pair-level helpers shared by EdgeStore implementations
# ----------------------------------------------------------------------


def same_revision(stored: InterestEdge | None, snapshot: InterestEdge | None) -> bool:
    """True when the stored edge is still the one the caller read (or both are absent)."""
    if stored is None or snapshot is None:
        return stored is None and snapshot is None
    return stored.version == snapshot.version


def plan_interest_commit(
    from_user: str,
    to_user: str,
    own: InterestEdge | None,
    reciprocal: InterestEdge | None,
    now: datetime,
) -> tuple[InterestEdge, InterestEdge | None]:
    """
    Compute the writes of one interest action on a pair.

    `own` must be absent (created) or REJECTED (reopened). When the reciprocal
    edge is PENDING, both edges come out CONNECTED, otherwise only the own
    edge is written, as PENDING. Each written edge advances by one version.

    Returns:
        Tuple (own edge to store, reciprocal edge to store or None)

    Raises:
        InvalidEdgeTransitionError: If own is already PENDING or CONNECTED

    Examples:
        >>> own, rec = plan_interest_commit("alice", "bob", None, None, utc_now())
        >>> own.status.value, rec
        ('pending', None)
    """
    if own is None:
        affirmed = InterestEdge(
            from_user=from_user,
            to_user=to_user,
            status=EdgeStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
    else:
        affirmed = own.transition_to(EdgeStatus.PENDING, now)

    if reciprocal is None or not reciprocal.is_pending():
        return affirmed, None

    return (
        replace(affirmed, status=EdgeStatus.CONNECTED),
        reciprocal.transition_to(EdgeStatus.CONNECTED, now),
    )
