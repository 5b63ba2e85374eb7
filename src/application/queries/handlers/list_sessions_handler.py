"""List sessions query handler.

Returns the caller's active sessions, most recently active first, with the
current session flagged. Token digests never leave the handler.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.application.queries.session_queries import ListUserSessions
from src.application.services import SessionRegistry
from src.core.errors import DomainError
from src.core.result import Result, Success


@dataclass
class SessionListItem:
    """Individual session in list result."""

    id: UUID
    device_info: str | None
    ip_address: str | None
    location: str | None
    created_at: datetime
    last_activity_at: datetime
    expires_at: datetime
    is_current: bool


@dataclass
class SessionListResult:
    """Session list query result."""

    sessions: list[SessionListItem]
    total_count: int


class ListSessionsHandler:
    """Handler for listing user sessions.

    Fetches from database (no cache for list operations).
    """

    def __init__(self, session_registry: SessionRegistry) -> None:
        self._session_registry = session_registry

    async def handle(self, query: ListUserSessions) -> Result[SessionListResult, DomainError]:
        """Handle list sessions query.

        Returns:
            Success(SessionListResult) with the active sessions.
        """
        sessions = await self._session_registry.list_active(query.user_id)

        items = [
            SessionListItem(
                id=session.id,
                device_info=session.device_info,
                ip_address=session.ip_address,
                location=session.location,
                created_at=session.created_at,
                last_activity_at=session.last_activity_at,
                expires_at=session.expires_at,
                is_current=session.id == query.current_session_id,
            )
            for session in sessions
        ]
        return Success(value=SessionListResult(sessions=items, total_count=len(items)))
