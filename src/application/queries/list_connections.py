"""
ListConnectionsQuery - CQRS Read Query

Lists the users a given user is connected (matched) with.

Architecture Notes:
    - Query is a simple DTO, Handler reads through EdgeStoreProtocol
    - Only outgoing CONNECTED edges are read: a connected pair always has
      both directions connected, so one side is enough
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.matching.repositories.edge_store import EdgeStoreProtocol
from src.domain.matching.repositories.user_directory import UserDirectoryProtocol
from src.domain.matching.value_objects.user_id import validate_user_id
from src.domain.shared.exceptions import UnknownUserError

logger = logging.getLogger(__name__)


class ListConnectionsQuery(BaseModel):
    """Query object with the user whose connections are listed."""

    user_id: str = Field(description="User whose connections are listed")


class ConnectionView(BaseModel):
    """One connection as seen by the querying user."""

    user_id: str = Field(description="Connected counterpart")
    connected_at: datetime = Field(description="When the pair became connected")


class ConnectionsResult(BaseModel):
    """
    Result DTO returned by ListConnectionsQueryHandler.

    Attributes:
        user_id: Querying user
        connections: Counterparts, most recent first
        total: Number of connections
    """

    user_id: str
    connections: list[ConnectionView] = Field(default_factory=list)
    total: int = 0


class ListConnectionsQueryHandler:
    """
    Handler for listing connections.

    Usage:
        handler = ListConnectionsQueryHandler(edge_store)
        result = await handler.handle(ListConnectionsQuery(user_id="alice"))
    """

    def __init__(
        self,
        edge_store: EdgeStoreProtocol,
        user_directory: Optional[UserDirectoryProtocol] = None,
    ) -> None:
        self.edge_store = edge_store
        self.user_directory = user_directory

    async def handle(self, query: ListConnectionsQuery) -> ConnectionsResult:
        """
        Raises:
            InvalidUserIdError: Malformed user id
            UnknownUserError: User not in the directory (when configured)
            TransientStoreError: Store unavailable
        """
        validate_user_id(query.user_id)
        if self.user_directory is not None and not self.user_directory.exists(query.user_id):
            raise UnknownUserError(f"User {query.user_id!r} is not known", user_id=query.user_id)

        edges = await asyncio.to_thread(self.edge_store.list_connections, query.user_id)
        connections = sorted(
            (ConnectionView(user_id=e.to_user, connected_at=e.updated_at) for e in edges),
            key=lambda c: c.connected_at,
            reverse=True,
        )

        logger.debug(f"User {query.user_id} has {len(connections)} connection(s)")
        return ConnectionsResult(
            user_id=query.user_id, connections=connections, total=len(connections)
        )
