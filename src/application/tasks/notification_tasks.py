"""
Celery Task for Match Notification Delivery

Appends each match event to a Redis stream consumed by the notification
service (push, email and in-app delivery are handled there).

Responsibility:
    - Receive the flat payload produced by CeleryMatchEventPublisher
    - XADD it to the match events stream (capped length)
    - Retry with exponential backoff when Redis is unavailable

Business Rules:
    - Stream: MATCH_EVENTS_STREAM (default "events:matches")
    - Stream length capped at ~MATCH_EVENTS_STREAM_MAXLEN entries (default 100000)
    - Deduplication already happened in the publisher (one event per pair)
"""

import logging
import os

from celery import Task
from redis.exceptions import RedisError

from .celery_app import celery_app
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)

REQUIRED_PAYLOAD_FIELDS = ("event_id", "user_a", "user_b", "matched_at")


@celery_app.task(
    bind=True,
    name="deliver_match_event",
    autoretry_for=(RedisError,),
    max_retries=5,
    retry_backoff=True,
    retry_backoff_max=300,
)
def deliver_match_event(self: Task, payload: dict) -> dict:
    """
    Deliver one match event to the notification stream.

    Args:
        self: Celery task instance (bind=True)
        payload: MatchEvent.to_payload() dict
            - event_id (str): "match:{low}|{high}"
            - user_a, user_b (str): users of the pair
            - matched_at (str): ISO timestamp

    Returns:
        dict: {"status": "delivered", "event_id": ..., "stream": ..., "stream_id": ...}

    Raises:
        ValueError: If the payload misses a field (not retried)
        RedisError: Retried by Celery with exponential backoff
    """
    missing = [name for name in REQUIRED_PAYLOAD_FIELDS if name not in payload]
    if missing:
        raise ValueError(f"Match event payload missing fields: {missing}")

    stream = os.getenv("MATCH_EVENTS_STREAM", "events:matches")
    maxlen = int(os.getenv("MATCH_EVENTS_STREAM_MAXLEN", "100000"))

    client = get_redis_client()
    stream_id = client.xadd(
        stream,
        {name: str(payload[name]) for name in REQUIRED_PAYLOAD_FIELDS},
        maxlen=maxlen,
        approximate=True,
    )

    logger.info(
        f"Match event {payload['event_id']} delivered to {stream} as {stream_id} "
        f"(task {self.request.id}, retries={self.request.retries})"
    )
    return {
        "status": "delivered",
        "event_id": payload["event_id"],
        "stream": stream,
        "stream_id": stream_id,
    }
