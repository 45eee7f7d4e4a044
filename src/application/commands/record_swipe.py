"""
RecordSwipeCommand - CQRS Write Command

Encapsulates one swipe: who acted, on whom, and in which direction.

Responsibility:
    - Data holder for a swipe
    - Business rules validation (identifier format, no self-swipe)

Architecture Notes:
    - Part of Application Layer (orchestration)
    - Immutable (frozen Pydantic model)
    - Executed by RecordSwipeUseCase
"""

from pydantic import BaseModel, Field

from src.application.models import SwipeDirection
from src.domain.matching.value_objects.pair_key import PairKey


class RecordSwipeCommand(BaseModel):
    """
    Command to record interest or disinterest.

    Attributes:
        from_user: Acting user id
        to_user: Target user id
        direction: INTEREST or DISINTEREST

    Examples:
        >>> command = RecordSwipeCommand(
        ...     from_user="alice", to_user="bob", direction=SwipeDirection.INTEREST
        ... )
        >>> str(command.validate_business_rules())
        'alice|bob'
    """

    from_user: str = Field(description="Acting user id")
    to_user: str = Field(description="Target user id")
    direction: SwipeDirection = Field(description="interest or disinterest")

    model_config = {"frozen": True}

    def validate_business_rules(self) -> PairKey:
        """
        Validate identifiers and the pair.

        Returns:
            Canonical PairKey of the swipe

        Raises:
            InvalidUserIdError: If an identifier is malformed
            InvalidUserPairError: If from_user == to_user
        """
        return PairKey.of(self.from_user, self.to_user)
