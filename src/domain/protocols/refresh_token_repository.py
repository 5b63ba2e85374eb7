"""Refresh token repository protocol.

``revoke`` is conditional (only un-revoked records transition), which makes
rotation single-use even when two refreshes race on the same token.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import RefreshToken


class RefreshTokenRepository(Protocol):
    """Refresh token persistence port."""

    async def save(self, token: RefreshToken) -> None:
        """Insert a new record."""
        ...

    async def find_by_token_hash(self, token_hash: str) -> RefreshToken | None:
        """Find a record by digest (any state)."""
        ...

    async def mark_used(self, token_id: UUID, at: datetime) -> None:
        """Set ``last_used_at`` and increment ``usage_count``."""
        ...

    async def revoke(
        self,
        token_id: UUID,
        reason: str,
        *,
        replaced_by_token_hash: str | None = None,
    ) -> bool:
        """Revoke a record if it is not revoked yet.

        Returns:
            True if this call revoked it, False if already revoked or missing.
        """
        ...

    async def revoke_by_session(self, session_id: UUID, reason: str) -> int:
        """Revoke every live record of a session."""
        ...

    async def revoke_all_for_user(
        self,
        user_id: UUID,
        reason: str,
        *,
        except_session_id: UUID | None = None,
    ) -> int:
        """Revoke every live record of a user, optionally sparing one session."""
        ...

    async def delete_expired(self, before: datetime) -> int:
        """Purge records that expired before ``before``."""
        ...
