"""
API Router for User-Scoped Reads

Contains:
    - GET /users/{user_id}/connections - users matched with user_id
    - GET /users/{user_id}/candidates - undecided users to show next
"""

from fastapi import APIRouter, Depends, Path, Query, status

from src.api.dependencies import (
    get_list_candidates_handler,
    get_list_connections_handler,
)
from src.api.schemas.common import ErrorResponse
from src.application.queries.list_candidates import (
    DEFAULT_CANDIDATE_LIMIT,
    MAX_CANDIDATE_LIMIT,
    CandidatesResult,
    ListCandidatesQuery,
    ListCandidatesQueryHandler,
)
from src.application.queries.list_connections import (
    ConnectionsResult,
    ListConnectionsQuery,
    ListConnectionsQueryHandler,
)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed user id"},
        404: {"model": ErrorResponse, "description": "Unknown user"},
        503: {"model": ErrorResponse, "description": "Temporarily unavailable, retry"},
    },
)


@router.get(
    "/{user_id}/connections",
    status_code=status.HTTP_200_OK,
    response_model=ConnectionsResult,
    summary="List connections",
)
async def list_connections(
    user_id: str = Path(description="User whose connections are listed"),
    handler: ListConnectionsQueryHandler = Depends(get_list_connections_handler),
) -> ConnectionsResult:
    return await handler.handle(ListConnectionsQuery(user_id=user_id))


@router.get(
    "/{user_id}/candidates",
    status_code=status.HTTP_200_OK,
    response_model=CandidatesResult,
    summary="List swipe candidates",
    description="Users user_id has not swiped on and who have not swiped on user_id.",
)
async def list_candidates(
    user_id: str = Path(description="Swiping user"),
    limit: int = Query(default=DEFAULT_CANDIDATE_LIMIT, ge=1, le=MAX_CANDIDATE_LIMIT),
    handler: ListCandidatesQueryHandler = Depends(get_list_candidates_handler),
) -> CandidatesResult:
    return await handler.handle(ListCandidatesQuery(user_id=user_id, limit=limit))
