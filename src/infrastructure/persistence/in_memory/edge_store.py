"""
In-Memory Edge Store

Thread-safe EdgeStoreProtocol implementation for single-process deployments,
the simulation script and tests.

Architecture Notes:
    - One re-entrant lock guards the whole edge map, so every method is a
      single critical section (the pair transition writes both edges or none)
    - Stored edges are replaced, never mutated; callers receive copies
    - `before_operation` hook runs before each method body, outside the
      store lock. Tests use it to line threads up on a Barrier or to inject
      a TransientStoreError ahead of a specific operation
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, Optional

from src.domain.matching.entities.interest_edge import (
    InterestEdge,
    plan_interest_commit,
    same_revision,
    utc_now,
)
from src.domain.matching.value_objects.edge_status import EdgeStatus
from src.domain.matching.value_objects.swipe_result import CommitResult

logger = logging.getLogger(__name__)


class InMemoryEdgeStore:
    """
    Dictionary-backed EdgeStore keyed by (from_user, to_user).

    Examples:
        >>> store = InMemoryEdgeStore()
        >>> store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)[1]
        True
        >>> store.get_edge("bob", "alice") is None
        True
    """

    def __init__(
        self,
        clock: Callable = utc_now,
        before_operation: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.clock = clock
        self.before_operation = before_operation
        self._edges: dict[tuple[str, str], InterestEdge] = {}
        self._lock = threading.RLock()

    def _enter(self, operation: str) -> None:
        if self.before_operation is not None:
            self.before_operation(operation)

    # ========================================================================
    # READS
    # ========================================================================

    def get_edge(self, from_user: str, to_user: str) -> Optional[InterestEdge]:
        self._enter("get_edge")
        with self._lock:
            edge = self._edges.get((from_user, to_user))
            return replace(edge) if edge is not None else None

    def get_pair(
        self, user_a: str, user_b: str
    ) -> tuple[Optional[InterestEdge], Optional[InterestEdge]]:
        self._enter("get_pair")
        with self._lock:
            edge_ab = self._edges.get((user_a, user_b))
            edge_ba = self._edges.get((user_b, user_a))
            return (
                replace(edge_ab) if edge_ab is not None else None,
                replace(edge_ba) if edge_ba is not None else None,
            )

    def list_edges_from(self, user_id: str) -> list[InterestEdge]:
        self._enter("list_edges_from")
        with self._lock:
            edges = [replace(e) for (src, _), e in self._edges.items() if src == user_id]
        return sorted(edges, key=lambda e: e.to_user)

    def list_edges_to(self, user_id: str) -> list[InterestEdge]:
        self._enter("list_edges_to")
        with self._lock:
            edges = [replace(e) for (_, dst), e in self._edges.items() if dst == user_id]
        return sorted(edges, key=lambda e: e.from_user)

    def list_connections(self, user_id: str) -> list[InterestEdge]:
        return [edge for edge in self.list_edges_from(user_id) if edge.is_connected()]

    def related_user_ids(self, user_id: str) -> set[str]:
        self._enter("related_user_ids")
        with self._lock:
            related = set()
            for src, dst in self._edges:
                if src == user_id:
                    related.add(dst)
                elif dst == user_id:
                    related.add(src)
            return related

    def all_edges(self) -> list[InterestEdge]:
        """Snapshot of every edge (invariant checks in tests and simulations)."""
        with self._lock:
            return [replace(e) for e in self._edges.values()]

    # ========================================================================
    # WRITES
    # ========================================================================

    def commit_interest(
        self,
        from_user: str,
        to_user: str,
        own: Optional[InterestEdge],
        reciprocal: Optional[InterestEdge],
    ) -> Optional[InterestEdge]:
        self._enter("commit_interest")
        with self._lock:
            stored_own = self._edges.get((from_user, to_user))
            stored_reciprocal = self._edges.get((to_user, from_user))

            if not (
                same_revision(stored_own, own) and same_revision(stored_reciprocal, reciprocal)
            ):
                logger.debug(f"Interest commit miss on {from_user}<->{to_user}")
                return None

            written, connected = plan_interest_commit(
                from_user, to_user, stored_own, stored_reciprocal, self.clock()
            )
            self._edges[written.key] = written
            if connected is not None:
                self._edges[connected.key] = connected
            return replace(written)

    def upsert_edge_if_absent(
        self, from_user: str, to_user: str, status: EdgeStatus
    ) -> tuple[InterestEdge, bool]:
        self._enter("upsert_edge_if_absent")
        with self._lock:
            existing = self._edges.get((from_user, to_user))
            if existing is not None:
                return replace(existing), False

            now = self.clock()
            edge = InterestEdge(
                from_user=from_user,
                to_user=to_user,
                status=status,
                created_at=now,
                updated_at=now,
            )
            self._edges[edge.key] = edge
            logger.debug(f"Edge created: {edge}")
            return replace(edge), True

    def compare_and_set_status(
        self, edge: InterestEdge, new_status: EdgeStatus
    ) -> Optional[InterestEdge]:
        self._enter("compare_and_set_status")
        updated = edge.transition_to(new_status, now=self.clock())

        with self._lock:
            stored = self._edges.get(edge.key)
            if stored is None or stored.version != edge.version:
                logger.debug(f"CAS miss on {edge.from_user}->{edge.to_user}")
                return None
            self._edges[edge.key] = updated
            return replace(updated)

    def transition_pair_to_connected(self, user_a: str, user_b: str) -> CommitResult:
        self._enter("transition_pair_to_connected")
        with self._lock:
            edge_ab = self._edges.get((user_a, user_b))
            edge_ba = self._edges.get((user_b, user_a))

            if edge_ab is None or edge_ba is None:
                return CommitResult.CONFLICT
            if edge_ab.is_connected() and edge_ba.is_connected():
                return CommitResult.ALREADY_APPLIED
            if not (edge_ab.is_pending() and edge_ba.is_pending()):
                return CommitResult.CONFLICT

            now = self.clock()
            self._edges[edge_ab.key] = edge_ab.transition_to(EdgeStatus.CONNECTED, now)
            self._edges[edge_ba.key] = edge_ba.transition_to(EdgeStatus.CONNECTED, now)
            return CommitResult.APPLIED

    def put_edge(self, edge: InterestEdge) -> None:
        """Store an edge as-is, bypassing every check (seeding and race simulation)."""
        with self._lock:
            self._edges[edge.key] = replace(edge)
