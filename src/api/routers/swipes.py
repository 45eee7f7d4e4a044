"""
API Router for Swipes

Responsibility:
    HTTP interface for recording interest and disinterest.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on Application Layer (RecordSwipeUseCase)
    - Write operations (CQRS Command side)
    - Domain exceptions are mapped to HTTP by handlers in main.py

Contains:
    - POST /swipes/interest - record interest, may form a match
    - POST /swipes/disinterest - record disinterest
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from src.api.dependencies import get_record_swipe_use_case
from src.api.schemas.common import ErrorResponse
from src.application.commands.record_swipe import RecordSwipeCommand
from src.application.models import SwipeDirection
from src.application.services.record_swipe_use_case import (
    RecordSwipeResult,
    RecordSwipeUseCase,
)

logger = logging.getLogger(__name__)


# ============================================================================
# REQUEST / RESPONSE MODELS
# ============================================================================


class SwipeRequest(BaseModel):
    """
    Request body for both swipe endpoints.

    Attributes:
        from_user: Acting user id
        to_user: Target user id
    """

    from_user: str = Field(description="Acting user id", examples=["alice"])
    to_user: str = Field(description="Target user id", examples=["bob"])


class SwipeResponse(BaseModel):
    """
    HTTP representation of RecordSwipeResult.

    Attributes:
        outcome: new | matched | already_matched | rejected
        is_match: True when the pair is connected after the call
        edge_status: Status of from_user -> to_user
        repeated: The swipe repeated an earlier identical one
        notification_dispatched: This call triggered the match notification
    """

    outcome: str = Field(description="new | matched | already_matched | rejected")
    from_user: str
    to_user: str
    pair_key: str
    edge_status: str
    is_match: bool
    repeated: bool
    attempts: int
    notification_dispatched: bool
    decided_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "outcome": "matched",
                "from_user": "bob",
                "to_user": "alice",
                "pair_key": "alice|bob",
                "edge_status": "connected",
                "is_match": True,
                "repeated": False,
                "attempts": 1,
                "notification_dispatched": True,
                "decided_at": "2026-10-18T10:30:45Z",
            }
        }
    )

    @classmethod
    def from_result(cls, result: RecordSwipeResult) -> "SwipeResponse":
        return cls(**result.model_dump())


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================

router = APIRouter(
    prefix="/swipes",
    tags=["swipes"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed user id or self-swipe"},
        404: {"model": ErrorResponse, "description": "Unknown user"},
        409: {"model": ErrorResponse, "description": "Re-swipe of a rejected user refused"},
        503: {"model": ErrorResponse, "description": "Temporarily unavailable, retry"},
    },
)


async def _record(
    request: SwipeRequest, direction: SwipeDirection, use_case: RecordSwipeUseCase
) -> SwipeResponse:
    command = RecordSwipeCommand(
        from_user=request.from_user, to_user=request.to_user, direction=direction
    )
    result = await use_case.execute(command)
    return SwipeResponse.from_result(result)


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post(
    "/interest",
    status_code=status.HTTP_200_OK,
    response_model=SwipeResponse,
    summary="Record interest",
    description=(
        "Records that from_user is interested in to_user. If to_user already "
        "showed interest, the pair becomes connected and outcome is 'matched'."
    ),
)
async def record_interest(
    request: SwipeRequest,
    use_case: RecordSwipeUseCase = Depends(get_record_swipe_use_case),
) -> SwipeResponse:
    return await _record(request, SwipeDirection.INTEREST, use_case)


@router.post(
    "/disinterest",
    status_code=status.HTTP_200_OK,
    response_model=SwipeResponse,
    summary="Record disinterest",
    description="Records that from_user passes on to_user. Never forms a match.",
)
async def record_disinterest(
    request: SwipeRequest,
    use_case: RecordSwipeUseCase = Depends(get_record_swipe_use_case),
) -> SwipeResponse:
    return await _record(request, SwipeDirection.DISINTEREST, use_case)
