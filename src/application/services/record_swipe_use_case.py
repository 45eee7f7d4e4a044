"""
Record Swipe Use Case - Application Orchestration

Responsibility:
    Runs a RecordSwipeCommand through MatchEngine and converts the domain
    SwipeResult into the Application Layer DTO.

Architecture Notes:
    - MatchEngine is synchronous (pair lock + blocking store calls); the use
      case moves it onto a worker thread with asyncio.to_thread so concurrent
      HTTP requests become concurrent engine calls without blocking the loop
    - Domain exceptions propagate unchanged; API Layer maps them to HTTP
"""

import asyncio
import logging
from datetime import datetime

from pydantic import BaseModel, Field

from src.application.commands.record_swipe import RecordSwipeCommand
from src.application.models import SwipeDirection
from src.domain.matching.services.match_engine import MatchEngine
from src.domain.matching.value_objects.swipe_result import SwipeResult

logger = logging.getLogger(__name__)


# ============================================================================
# RESULT (Response DTO)
# ============================================================================


class RecordSwipeResult(BaseModel):
    """
    Result DTO for the record swipe use case.

    Attributes:
        outcome: new | matched | already_matched | rejected
        from_user: Acting user id
        to_user: Target user id
        pair_key: Canonical pair key ("low|high")
        edge_status: Status of from_user -> to_user after the call
        is_match: True when the pair is connected
        repeated: True when the swipe repeated an earlier one
        attempts: Engine attempts used
        notification_dispatched: True if this call triggered the match notification
        decided_at: Decision timestamp (UTC)
    """

    outcome: str
    from_user: str
    to_user: str
    pair_key: str
    edge_status: str
    is_match: bool
    repeated: bool = False
    attempts: int = Field(ge=1)
    notification_dispatched: bool = False
    decided_at: datetime

    @classmethod
    def from_domain(cls, result: SwipeResult) -> "RecordSwipeResult":
        return cls(
            outcome=result.outcome.value,
            from_user=result.from_user,
            to_user=result.to_user,
            pair_key=result.pair_key,
            edge_status=result.edge_status.value,
            is_match=result.is_match,
            repeated=result.repeated,
            attempts=result.attempts,
            notification_dispatched=result.notification_dispatched,
            decided_at=result.decided_at,
        )


# ============================================================================
# USE CASE
# ============================================================================


class RecordSwipeUseCase:
    """
    Use Case for recording a swipe.

    Usage:
        >>> use_case = RecordSwipeUseCase(engine)
        >>> result = await use_case.execute(
        ...     RecordSwipeCommand(from_user="a", to_user="b", direction="interest")
        ... )
        >>> result.outcome
        'new'
    """

    def __init__(self, engine: MatchEngine) -> None:
        self.engine = engine

    async def execute(self, command: RecordSwipeCommand) -> RecordSwipeResult:
        """
        Execute the swipe.

        Raises:
            DomainException subclasses from validation and MatchEngine
        """
        command.validate_business_rules()

        if command.direction is SwipeDirection.INTEREST:
            operation = self.engine.record_interest
        else:
            operation = self.engine.record_disinterest

        logger.debug(
            f"Executing {command.direction.value} swipe {command.from_user}->{command.to_user}"
        )
        result = await asyncio.to_thread(operation, command.from_user, command.to_user)
        return RecordSwipeResult.from_domain(result)
