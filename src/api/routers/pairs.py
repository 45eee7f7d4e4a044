"""
API Router for Pair Status

Contains:
    - GET /pairs/{user_a}/{user_b} - both directional statuses and is_match
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_pair_status_handler
from src.api.schemas.common import ErrorResponse
from src.application.queries.get_pair_status import (
    GetPairStatusQuery,
    GetPairStatusQueryHandler,
    PairStatusResult,
)

router = APIRouter(
    prefix="/pairs",
    tags=["pairs"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed user id or self-pair"},
        503: {"model": ErrorResponse, "description": "Temporarily unavailable, retry"},
    },
)


@router.get(
    "/{user_a}/{user_b}",
    status_code=status.HTTP_200_OK,
    response_model=PairStatusResult,
    summary="Get pair status",
)
async def get_pair_status(
    user_a: str,
    user_b: str,
    handler: GetPairStatusQueryHandler = Depends(get_pair_status_handler),
) -> PairStatusResult:
    return await handler.handle(GetPairStatusQuery(user_a=user_a, user_b=user_b))
