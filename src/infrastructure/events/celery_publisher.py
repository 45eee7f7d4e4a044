"""
Celery Match Event Publisher

Hands match events to a Celery task for asynchronous notification delivery.

Responsibility:
    - Deduplicate events across processes with a Redis key per pair
    - Enqueue the delivery task with a flat JSON payload

Business Rules:
    - Dedup key "match_event:{low}|{high}" set with SET NX EX
      (TTL: MATCH_EVENT_DEDUP_TTL, default 7 days)
    - If enqueueing fails, the dedup key is removed again so that a later
      publish for the pair is not suppressed, and the enqueue error propagates
      (MatchEngine logs it and reports notification_dispatched=False)
    - A key that cannot be removed is logged and left to expire with its TTL

Architecture Notes:
    - The Celery task is injected (anything with `.delay(payload)`), keeping
      Infrastructure free of Application imports; api/dependencies.py wires
      src.application.tasks.notification_tasks.deliver_match_event
"""

import logging
import os
from typing import Any, Callable, Optional, Protocol

from redis import Redis
from redis.exceptions import RedisError

from src.domain.matching.entities.interest_edge import utc_now
from src.domain.matching.value_objects.match_event import MatchEvent
from src.domain.shared.exceptions import TransientStoreError
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)


class DelayableTask(Protocol):
    """Subset of celery.Task used by the publisher."""

    def delay(self, *args: Any, **kwargs: Any) -> Any: ...


class CeleryMatchEventPublisher:
    """
    EventPublisherProtocol implementation backed by Redis dedup + Celery.

    Examples:
        >>> publisher = CeleryMatchEventPublisher(task=deliver_match_event)
        >>> publisher.publish_match("alice", "bob")  # enqueues once
        >>> publisher.publish_match("bob", "alice")  # suppressed
    """

    def __init__(
        self,
        task: DelayableTask,
        redis_client: Optional[Redis] = None,
        dedup_ttl_seconds: Optional[int] = None,
        key_prefix: str = "",
        clock: Callable = utc_now,
    ) -> None:
        self.task = task
        self.redis: Redis = redis_client if redis_client is not None else get_redis_client()
        self.dedup_ttl_seconds: int = dedup_ttl_seconds or int(
            os.getenv("MATCH_EVENT_DEDUP_TTL", str(7 * 24 * 3600))
        )
        self.key_prefix = key_prefix
        self.clock = clock

    def _get_dedup_key(self, event: MatchEvent) -> str:
        """
        Examples:
            >>> publisher._get_dedup_key(MatchEvent.for_pair("bob", "alice", now))
            'match_event:alice|bob'
        """
        key = f"match_event:{event.pair_key}"
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def publish_match(self, user_a: str, user_b: str) -> None:
        event = MatchEvent.for_pair(user_a, user_b, matched_at=self.clock())
        dedup_key = self._get_dedup_key(event)

        try:
            first = self.redis.set(dedup_key, event.event_id, nx=True, ex=self.dedup_ttl_seconds)
        except RedisError as e:
            raise TransientStoreError(
                "Failed to reserve match event", operation="publish_match", original_error=e
            ) from e

        if not first:
            logger.warning(f"Duplicate match event suppressed: {event.event_id}")
            return

        try:
            async_result = self.task.delay(event.to_payload())
        except Exception:
            try:
                self.redis.delete(dedup_key)
            except RedisError as e:
                logger.warning(f"Failed to release dedup key {dedup_key}: {e}")
            raise

        logger.info(
            f"Match event enqueued: {event.event_id} "
            f"(task_id={getattr(async_result, 'id', None)})"
        )
