"""
In-Memory Match Event Publisher

Collects MatchEvents in a list. Used by the single-process deployment, the
simulation script and tests asserting exactly-once notification.
"""

import logging
import threading
from typing import Callable

from src.domain.matching.entities.interest_edge import utc_now
from src.domain.matching.value_objects.match_event import MatchEvent

logger = logging.getLogger(__name__)


class InMemoryMatchEventPublisher:
    """
    EventPublisherProtocol implementation that records events in memory.

    Deduplicates on the pair key: a second publish for the same pair is
    counted in `duplicates_suppressed` and otherwise ignored.

    Examples:
        >>> publisher = InMemoryMatchEventPublisher()
        >>> publisher.publish_match("bob", "alice")
        >>> [e.event_id for e in publisher.events]
        ['match:alice|bob']
    """

    def __init__(self, clock: Callable = utc_now) -> None:
        self.clock = clock
        self._events: list[MatchEvent] = []
        self._seen: set[str] = set()
        self._lock = threading.Lock()
        self.duplicates_suppressed = 0

    def publish_match(self, user_a: str, user_b: str) -> None:
        event = MatchEvent.for_pair(user_a, user_b, matched_at=self.clock())

        with self._lock:
            if event.event_id in self._seen:
                self.duplicates_suppressed += 1
                logger.warning(f"Duplicate match event suppressed: {event.event_id}")
                return
            self._seen.add(event.event_id)
            self._events.append(event)

        logger.info(f"Match event published: {event.event_id}")

    @property
    def events(self) -> list[MatchEvent]:
        with self._lock:
            return list(self._events)

    def events_for(self, user_id: str) -> list[MatchEvent]:
        return [e for e in self.events if e.pair_key.contains(user_id)]
