"""
MatchEvent Value Object

Payload handed to notification delivery once a pair becomes connected.
Exactly one event exists per connection; `event_id` is derived from the pair
key so every publisher can deduplicate on it.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.domain.matching.value_objects.pair_key import PairKey


class MatchEvent(BaseModel):
    """
    Immutable "matched" notification for a pair of users.

    Attributes:
        user_a: Lower user id of the pair
        user_b: Greater user id of the pair
        matched_at: When the pair transition was committed (UTC)

    Examples:
        >>> event = MatchEvent.for_pair("bob", "alice", matched_at=now)
        >>> event.event_id
        'match:alice|bob'
    """

    user_a: str = Field(description="Lower user id of the pair")
    user_b: str = Field(description="Greater user id of the pair")
    matched_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def for_pair(cls, user_a: str, user_b: str, matched_at: datetime) -> "MatchEvent":
        key = PairKey.of(user_a, user_b)
        return cls(user_a=key.low, user_b=key.high, matched_at=matched_at)

    @property
    def pair_key(self) -> PairKey:
        return PairKey(low=self.user_a, high=self.user_b)

    @property
    def event_id(self) -> str:
        return f"match:{self.pair_key}"

    def to_payload(self) -> dict[str, Any]:
        """Flat JSON-friendly payload (Celery task args, Redis stream fields)."""
        return {
            "event_id": self.event_id,
            "user_a": self.user_a,
            "user_b": self.user_b,
            "matched_at": self.matched_at.isoformat(),
        }
