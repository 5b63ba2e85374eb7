"""Email verification token repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import EmailVerificationToken


class EmailVerificationTokenRepository(Protocol):
    """Email verification token persistence port."""

    async def save(self, token: EmailVerificationToken) -> None:
        """Insert a new token."""
        ...

    async def find_by_token(self, token: str) -> EmailVerificationToken | None:
        """Find a token by value (any state)."""
        ...

    async def mark_used(self, token_id: UUID, at: datetime) -> bool:
        """Consume a token if still unused.

        Returns:
            True if this call consumed it.
        """
        ...

    async def invalidate_for_user(self, user_id: UUID, at: datetime) -> int:
        """Mark every unused token of a user as used (superseded)."""
        ...

    async def delete_expired(self, before: datetime) -> int:
        """Purge tokens that expired before ``before``."""
        ...
