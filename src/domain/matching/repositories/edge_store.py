"""
EdgeStore Interface

Repository pattern interface for InterestEdge persistence.

Responsibility:
    - Define data access contract for directional interest edges
    - Provide the atomic primitives MatchEngine builds on:
        * consistent snapshot of both edges of a pair
        * interest commit: create or reopen one edge and, when the reciprocal
          is pending, connect both, checked against the snapshot
        * create-if-absent for a single edge
        * version-checked overwrite of a single edge
        * all-or-nothing pending->connected transition of both edges of a pair
    - Provide read views used by queries (connections, related users)

Architecture Notes:
    - Repository Pattern
    - Protocol-based interface (structural typing)
    - Synchronous methods: MatchEngine runs the read-modify-write sequence
      inside a pair lock, and the Application Layer moves it off the event
      loop with asyncio.to_thread
    - Implementations: InMemoryEdgeStore (tests, single process),
      RedisEdgeStore (WATCH/MULTI/EXEC, shared by many engine instances)

Consistency Contract:
    - At most one edge per ordered pair (from_user, to_user)
    - Returned edges are detached copies; mutating them changes nothing
    - Every successful write increments `version` by exactly 1
    - A failed call leaves no partial state
"""

from typing import Protocol

from src.domain.matching.entities.interest_edge import InterestEdge
from src.domain.matching.value_objects.edge_status import EdgeStatus
from src.domain.matching.value_objects.swipe_result import CommitResult


class EdgeStoreProtocol(Protocol):
    """
    Protocol defining the contract for InterestEdge persistence.

    Domain Layer defines what it needs, Infrastructure Layer implements it.

    Error Contract:
        Every method may raise TransientStoreError when the backend is
        unavailable or times out. Nothing was written in that case.

    Usage:
        >>> store = InMemoryEdgeStore()
        >>> edge, created = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
        >>> created
        True
        >>> store.upsert_edge_if_absent("alice", "bob", EdgeStatus.REJECTED)[1]
        False
    """

    def get_edge(self, from_user: str, to_user: str) -> InterestEdge | None:
        """
        Read the edge from_user -> to_user.

        Returns:
            Detached copy of the edge, or None if no edge exists
        """
        ...

    def get_pair(
        self, user_a: str, user_b: str
    ) -> tuple[InterestEdge | None, InterestEdge | None]:
        """
        Read both directional edges of a pair as one consistent snapshot.

        A pair transition is never observed half-applied: either both edges
        show CONNECTED or neither does.

        Returns:
            Tuple (edge user_a -> user_b, edge user_b -> user_a), None where absent
        """
        ...

    def commit_interest(
        self,
        from_user: str,
        to_user: str,
        own: InterestEdge | None,
        reciprocal: InterestEdge | None,
    ) -> InterestEdge | None:
        """
        Atomically record interest decided on a get_pair() snapshot.

        Business Rules:
            - Applies only if both edges still match the snapshot (same
              version, or still absent); otherwise nothing is written
            - `own` must be absent (created) or REJECTED (reopened)
            - Reciprocal PENDING: both edges become CONNECTED in the same write
            - Otherwise only from_user -> to_user is written, as PENDING

        Returns:
            The stored from_user -> to_user edge after the write, or None when
            either edge changed since the snapshot

        Raises:
            InvalidEdgeTransitionError: If own is PENDING or CONNECTED
        """
        ...

    def upsert_edge_if_absent(
        self, from_user: str, to_user: str, status: EdgeStatus
    ) -> tuple[InterestEdge, bool]:
        """
        Atomically create the edge with `status` unless it already exists.

        Business Rules:
            - Existing edge is returned unchanged (never overwritten)
            - New edge starts at version 1 with created_at == updated_at

        Returns:
            Tuple (edge as stored after the call, True if this call created it)
        """
        ...

    def compare_and_set_status(
        self, edge: InterestEdge, new_status: EdgeStatus
    ) -> InterestEdge | None:
        """
        Overwrite the status of `edge` if its stored version still equals edge.version.

        Business Rules:
            - Transition must be allowed by the edge lifecycle
            - REJECTED -> PENDING reopens the edge (created_at reset)
            - Version is incremented on success

        Returns:
            The stored edge after the write, or None when the stored version
            differs (concurrent writer) or the edge disappeared

        Raises:
            InvalidEdgeTransitionError: If the lifecycle forbids new_status
        """
        ...

    def transition_pair_to_connected(self, user_a: str, user_b: str) -> CommitResult:
        """
        Atomically move both edges of the pair from PENDING to CONNECTED.

        Business Rules:
            - Writes happen only if BOTH edges exist and are PENDING at commit time
            - Both edges are written or neither is (no observable half-match)

        Returns:
            APPLIED: this call connected the pair
            ALREADY_APPLIED: both edges were already CONNECTED
            CONFLICT: any other combination of states, or a concurrent writer
        """
        ...

    def list_edges_from(self, user_id: str) -> list[InterestEdge]:
        """All edges where user_id is from_user."""
        ...

    def list_edges_to(self, user_id: str) -> list[InterestEdge]:
        """All edges where user_id is to_user."""
        ...

    def list_connections(self, user_id: str) -> list[InterestEdge]:
        """Outgoing CONNECTED edges of user_id (one per matched counterpart)."""
        ...

    def related_user_ids(self, user_id: str) -> set[str]:
        """Counterparts of every edge touching user_id, in either direction."""
        ...
