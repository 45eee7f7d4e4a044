"""
EventPublisher Protocol

Receives the "matched" notification for every formed connection.

Business Rules:
    - MatchEngine calls publish_match exactly once per logical match,
      after the pair transition committed and the pair lock was released
    - Implementations deduplicate on the pair key as a second line of
      defence, so a replayed call never produces a second notification
    - A failing publisher never undoes the match; MatchEngine logs the
      failure and reports notification_dispatched=False
"""

from typing import Protocol


class EventPublisherProtocol(Protocol):
    """
    Protocol for match notification sinks.

    Implementations: InMemoryMatchEventPublisher, CeleryMatchEventPublisher.
    """

    def publish_match(self, user_a: str, user_b: str) -> None:
        """
        Announce that user_a and user_b are now connected.

        Args:
            user_a: One user of the pair (order is not significant)
            user_b: The other user
        """
        ...
