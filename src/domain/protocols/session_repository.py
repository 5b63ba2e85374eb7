"""Session repository protocol.

Port for session persistence. Lookups by token use SHA-256 digests, never
raw tokens. Every "active" query filters on ``is_revoked`` and
``expires_at`` so expiry holds even before storage-side purging runs.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Session


class SessionRepository(Protocol):
    """Session persistence port.

    Example:
        >>> class SQLAlchemySessionRepository:
        ...     async def save(self, session: Session) -> None:
        ...         ...
        >>> # Implements SessionRepository via structural typing
    """

    async def save(self, session: Session) -> None:
        """Insert a new session."""
        ...

    async def update(self, session: Session) -> None:
        """Persist every field of an existing session."""
        ...

    async def find_by_id(self, session_id: UUID) -> Session | None:
        """Find session by ID (any state)."""
        ...

    async def find_active_by_access_token(
        self,
        user_id: UUID,
        access_token_hash: str,
    ) -> Session | None:
        """Find the non-revoked, unexpired session for an access token."""
        ...

    async def find_active_by_refresh_token(self, refresh_token_hash: str) -> Session | None:
        """Find the non-revoked session currently holding a refresh token."""
        ...

    async def find_active_by_user(self, user_id: UUID) -> list[Session]:
        """Active sessions of a user, most recent activity first."""
        ...

    async def touch(self, session_id: UUID, at: datetime) -> None:
        """Set ``last_activity_at`` (best effort)."""
        ...

    async def revoke(self, session_id: UUID, reason: str) -> bool:
        """Revoke one session.

        Returns:
            True if the session transitioned to revoked, False if it was
            missing or already revoked.
        """
        ...

    async def revoke_all_for_user(
        self,
        user_id: UUID,
        reason: str,
        *,
        except_session_id: UUID | None = None,
    ) -> int:
        """Revoke every non-revoked session of a user.

        Returns:
            Number of sessions revoked.
        """
        ...

    async def delete_expired(self, before: datetime) -> int:
        """Purge sessions that expired before ``before``."""
        ...
