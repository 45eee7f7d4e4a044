"""
Redis Edge Store

EdgeStoreProtocol implementation shared by every engine instance.

Responsibility:
    - Persist InterestEdge records as Redis hashes
    - Maintain per-user index sets for reads
    - Provide the consistent pair read, the atomic interest commit,
      create-if-absent, version-checked overwrite and the all-or-nothing
      pair transition

Storage Format:
    Redis keys:
    - "edge:{from}:{to}"      -> HASH from_user, to_user, status, version,
                                 created_at, updated_at (ISO timestamps)
    - "edges:out:{user}"      -> SET of to_user ids (edges leaving user)
    - "edges:in:{user}"       -> SET of from_user ids (edges reaching user)
    - "connections:{user}"    -> SET of counterparts the user is connected to

    User ids never contain ":" (see validate_user_id), so keys are unambiguous.

Atomicity:
    - Every multi-key write runs in MULTI/EXEC under WATCH of the edge hashes
      it depends on
    - WatchError means another writer changed a watched edge: the write is
      discarded by Redis, compare-and-set and interest commit return None,
      the pair transition returns CONFLICT; MatchEngine retries from the top
    - The pair read is one MULTI/EXEC of both hashes, so it never sees
      one edge connected and the other not

Error Handling:
    - RedisError (connection, timeout) -> TransientStoreError, nothing written
"""

import logging
from typing import Callable, Final, Optional

from redis import Redis
from redis.client import Pipeline
from redis.exceptions import RedisError, WatchError

from src.domain.matching.entities.interest_edge import (
    InterestEdge,
    plan_interest_commit,
    same_revision,
    utc_now,
)
from src.domain.matching.value_objects.edge_status import EdgeStatus
from src.domain.matching.value_objects.swipe_result import CommitResult
from src.domain.shared.exceptions import TransientStoreError
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)

# Create-if-absent loses a WATCH race only when another writer created the
# same edge; the next attempt then reads it back
UPSERT_WATCH_ATTEMPTS: Final[int] = 3


class RedisEdgeStore:
    """
    Redis-backed EdgeStore.

    Examples:
        >>> store = RedisEdgeStore()
        >>> edge, created = store.upsert_edge_if_absent("alice", "bob", EdgeStatus.PENDING)
        >>> store.get_edge("alice", "bob").status
        <EdgeStatus.PENDING: 'pending'>
    """

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        key_prefix: str = "",
        clock: Callable = utc_now,
    ) -> None:
        """
        Args:
            redis_client: Client with decode_responses=True (default: pooled client)
            key_prefix: Optional namespace prepended to every key
            clock: Source of write timestamps
        """
        self.redis: Redis = redis_client if redis_client is not None else get_redis_client()
        self.key_prefix = key_prefix
        self.clock = clock

    # ========================================================================
    # KEYS
    # ========================================================================

    def _key(self, *parts: str) -> str:
        key = ":".join(parts)
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def _get_edge_key(self, from_user: str, to_user: str) -> str:
        """
        Examples:
            >>> store._get_edge_key("alice", "bob")
            'edge:alice:bob'
        """
        return self._key("edge", from_user, to_user)

    def _get_out_key(self, user_id: str) -> str:
        return self._key("edges", "out", user_id)

    def _get_in_key(self, user_id: str) -> str:
        return self._key("edges", "in", user_id)

    def _get_connections_key(self, user_id: str) -> str:
        return self._key("connections", user_id)

    @staticmethod
    def _decode(data: dict) -> Optional[InterestEdge]:
        return InterestEdge.from_dict(data) if data else None

    # ========================================================================
    # READS
    # ========================================================================

    def get_edge(self, from_user: str, to_user: str) -> Optional[InterestEdge]:
        try:
            data = self.redis.hgetall(self._get_edge_key(from_user, to_user))
        except RedisError as e:
            raise TransientStoreError(
                "Failed to read edge", operation="get_edge", original_error=e
            ) from e
        return self._decode(data)

    def get_pair(
        self, user_a: str, user_b: str
    ) -> tuple[Optional[InterestEdge], Optional[InterestEdge]]:
        try:
            with self.redis.pipeline() as pipe:
                pipe.hgetall(self._get_edge_key(user_a, user_b))
                pipe.hgetall(self._get_edge_key(user_b, user_a))
                row_ab, row_ba = pipe.execute()
        except RedisError as e:
            raise TransientStoreError(
                "Failed to read pair", operation="get_pair", original_error=e
            ) from e
        return self._decode(row_ab), self._decode(row_ba)

    def list_edges_from(self, user_id: str) -> list[InterestEdge]:
        return self._load_edges(
            self._get_out_key(user_id),
            lambda other: self._get_edge_key(user_id, other),
            operation="list_edges_from",
        )

    def list_edges_to(self, user_id: str) -> list[InterestEdge]:
        return self._load_edges(
            self._get_in_key(user_id),
            lambda other: self._get_edge_key(other, user_id),
            operation="list_edges_to",
        )

    def list_connections(self, user_id: str) -> list[InterestEdge]:
        edges = self._load_edges(
            self._get_connections_key(user_id),
            lambda other: self._get_edge_key(user_id, other),
            operation="list_connections",
        )
        return [edge for edge in edges if edge.is_connected()]

    def related_user_ids(self, user_id: str) -> set[str]:
        try:
            return set(
                self.redis.sunion(self._get_out_key(user_id), self._get_in_key(user_id))
            )
        except RedisError as e:
            raise TransientStoreError(
                "Failed to read related users", operation="related_user_ids", original_error=e
            ) from e

    def _load_edges(
        self,
        index_key: str,
        edge_key_for: Callable[[str], str],
        operation: str,
    ) -> list[InterestEdge]:
        """Read an index set, then fetch all referenced edge hashes in one round trip."""
        try:
            others = sorted(self.redis.smembers(index_key))
            if not others:
                return []
            pipe = self.redis.pipeline(transaction=False)
            for other in others:
                pipe.hgetall(edge_key_for(other))
            rows = pipe.execute()
        except RedisError as e:
            raise TransientStoreError(
                "Failed to list edges", operation=operation, original_error=e
            ) from e

        return [edge for edge in map(self._decode, rows) if edge is not None]

    # ========================================================================
    # CONDITIONAL WRITES
    # ========================================================================

    def commit_interest(
        self,
        from_user: str,
        to_user: str,
        own: Optional[InterestEdge],
        reciprocal: Optional[InterestEdge],
    ) -> Optional[InterestEdge]:
        key_own = self._get_edge_key(from_user, to_user)
        key_reciprocal = self._get_edge_key(to_user, from_user)

        try:
            with self.redis.pipeline() as pipe:
                pipe.watch(key_own, key_reciprocal)
                stored_own = self._decode(pipe.hgetall(key_own))
                stored_reciprocal = self._decode(pipe.hgetall(key_reciprocal))

                if not (
                    same_revision(stored_own, own)
                    and same_revision(stored_reciprocal, reciprocal)
                ):
                    logger.debug(f"Interest commit miss on {from_user}<->{to_user}")
                    return None

                written, connected = plan_interest_commit(
                    from_user, to_user, stored_own, stored_reciprocal, self.clock()
                )
                pipe.multi()
                self._queue_edge_write(pipe, written)
                if stored_own is None:
                    pipe.sadd(self._get_out_key(from_user), to_user)
                    pipe.sadd(self._get_in_key(to_user), from_user)
                if connected is not None:
                    self._queue_edge_write(pipe, connected)
                    pipe.sadd(self._get_connections_key(from_user), to_user)
                    pipe.sadd(self._get_connections_key(to_user), from_user)
                pipe.execute()

        except WatchError:
            logger.debug(f"Interest commit {from_user}->{to_user} lost race")
            return None
        except RedisError as e:
            raise TransientStoreError(
                "Failed to record interest", operation="commit_interest", original_error=e
            ) from e

        return written

    def upsert_edge_if_absent(
        self, from_user: str, to_user: str, status: EdgeStatus
    ) -> tuple[InterestEdge, bool]:
        key = self._get_edge_key(from_user, to_user)

        for attempt in range(1, UPSERT_WATCH_ATTEMPTS + 1):
            try:
                with self.redis.pipeline() as pipe:
                    pipe.watch(key)
                    existing = self._decode(pipe.hgetall(key))
                    if existing is not None:
                        return existing, False

                    now = self.clock()
                    edge = InterestEdge(
                        from_user=from_user,
                        to_user=to_user,
                        status=status,
                        created_at=now,
                        updated_at=now,
                    )
                    pipe.multi()
                    self._queue_edge_write(pipe, edge)
                    pipe.sadd(self._get_out_key(from_user), to_user)
                    pipe.sadd(self._get_in_key(to_user), from_user)
                    pipe.execute()

                logger.debug(f"Edge created: {edge}")
                return edge, True

            except WatchError:
                logger.debug(
                    f"Edge {from_user}->{to_user} created concurrently "
                    f"(attempt {attempt}/{UPSERT_WATCH_ATTEMPTS})"
                )
            except RedisError as e:
                raise TransientStoreError(
                    "Failed to upsert edge", operation="upsert_edge_if_absent", original_error=e
                ) from e

        raise TransientStoreError(
            f"Edge {from_user}->{to_user} kept changing during create",
            operation="upsert_edge_if_absent",
        )

    def compare_and_set_status(
        self, edge: InterestEdge, new_status: EdgeStatus
    ) -> Optional[InterestEdge]:
        updated = edge.transition_to(new_status, now=self.clock())
        key = self._get_edge_key(edge.from_user, edge.to_user)

        try:
            with self.redis.pipeline() as pipe:
                pipe.watch(key)
                stored = self._decode(pipe.hgetall(key))
                if stored is None or stored.version != edge.version:
                    logger.debug(
                        f"CAS miss on {edge.from_user}->{edge.to_user}: "
                        f"expected v{edge.version}, found {stored}"
                    )
                    return None

                pipe.multi()
                self._queue_edge_write(pipe, updated)
                pipe.execute()

        except WatchError:
            logger.debug(f"CAS lost race on {edge.from_user}->{edge.to_user}")
            return None
        except RedisError as e:
            raise TransientStoreError(
                "Failed to update edge", operation="compare_and_set_status", original_error=e
            ) from e

        return updated

    def transition_pair_to_connected(self, user_a: str, user_b: str) -> CommitResult:
        key_ab = self._get_edge_key(user_a, user_b)
        key_ba = self._get_edge_key(user_b, user_a)

        try:
            with self.redis.pipeline() as pipe:
                pipe.watch(key_ab, key_ba)
                edge_ab = self._decode(pipe.hgetall(key_ab))
                edge_ba = self._decode(pipe.hgetall(key_ba))

                if edge_ab is None or edge_ba is None:
                    return CommitResult.CONFLICT
                if edge_ab.is_connected() and edge_ba.is_connected():
                    return CommitResult.ALREADY_APPLIED
                if not (edge_ab.is_pending() and edge_ba.is_pending()):
                    return CommitResult.CONFLICT

                now = self.clock()
                pipe.multi()
                self._queue_edge_write(pipe, edge_ab.transition_to(EdgeStatus.CONNECTED, now))
                self._queue_edge_write(pipe, edge_ba.transition_to(EdgeStatus.CONNECTED, now))
                pipe.sadd(self._get_connections_key(user_a), user_b)
                pipe.sadd(self._get_connections_key(user_b), user_a)
                pipe.execute()

        except WatchError:
            logger.debug(f"Pair transition {user_a}<->{user_b} lost race")
            return CommitResult.CONFLICT
        except RedisError as e:
            raise TransientStoreError(
                "Failed to connect pair",
                operation="transition_pair_to_connected",
                original_error=e,
            ) from e

        return CommitResult.APPLIED

    def _queue_edge_write(self, pipe: Pipeline, edge: InterestEdge) -> None:
        pipe.hset(self._get_edge_key(edge.from_user, edge.to_user), mapping=edge.to_dict())
