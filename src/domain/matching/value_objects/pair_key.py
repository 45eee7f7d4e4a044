"""
PairKey Value Object

Canonical, direction-free identity of a pair of users. Two directional edges
(A->B and B->A) always map to the same PairKey, which is why it is used as:
    - the pair-level lock key (mutual exclusion per unordered pair)
    - the publisher dedup key (one match event per pair)

Architecture Notes:
    - Value Object (immutable, defined by values)
    - Uses Pydantic for validation (frozen model)
    - Part of Matching subdomain
"""

from typing import Final

from pydantic import BaseModel, Field

from src.domain.shared.exceptions import InvalidUserPairError
from src.domain.matching.value_objects.user_id import validate_user_id

PAIR_KEY_SEPARATOR: Final[str] = "|"


class PairKey(BaseModel):
    """
    Immutable canonical key for an unordered pair of users.

    Attributes:
        low: Lexicographically smaller user id
        high: Lexicographically greater user id

    Examples:
        >>> key = PairKey.of("bob", "alice")
        >>> key.low, key.high
        ('alice', 'bob')
        >>> str(key)
        'alice|bob'
        >>> PairKey.of("alice", "bob") == PairKey.of("bob", "alice")
        True
    """

    low: str = Field(description="Smaller user id of the pair")
    high: str = Field(description="Greater user id of the pair")

    model_config = {"frozen": True}

    @classmethod
    def of(cls, user_a: str, user_b: str) -> "PairKey":
        """
        Build the canonical key for two users, validating both identifiers.

        Args:
            user_a: One user id
            user_b: The other user id

        Returns:
            PairKey with identifiers sorted

        Raises:
            InvalidUserIdError: If either identifier is malformed
            InvalidUserPairError: If both identifiers are equal (self-pair)
        """
        validate_user_id(user_a)
        validate_user_id(user_b)

        if user_a == user_b:
            raise InvalidUserPairError(
                f"User {user_a!r} cannot act on themselves", user_id=user_a
            )

        low, high = sorted((user_a, user_b))
        return cls(low=low, high=high)

    def other(self, user_id: str) -> str:
        """
        Return the counterpart of `user_id` within this pair.

        Raises:
            ValueError: If user_id is not a member of the pair
        """
        if user_id == self.low:
            return self.high
        if user_id == self.high:
            return self.low
        raise ValueError(f"{user_id!r} is not part of pair {self}")

    def contains(self, user_id: str) -> bool:
        """Check whether user_id is one of the two members."""
        return user_id in (self.low, self.high)

    def __str__(self) -> str:
        return f"{self.low}{PAIR_KEY_SEPARATOR}{self.high}"
