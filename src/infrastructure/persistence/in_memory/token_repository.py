"""In-memory single-use token repositories."""

from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.domain.entities import EmailVerificationToken, OneTimeToken, PasswordResetToken


class _InMemoryOneTimeTokenRepository[TokenT: OneTimeToken]:
    def __init__(self) -> None:
        self._tokens: dict[UUID, TokenT] = {}

    async def save(self, token: TokenT) -> None:
        if any(t.token == token.token for t in self._tokens.values()):
            raise ValueError("duplicate token value")
        self._tokens[token.id] = replace(token)

    async def find_by_token(self, token: str) -> TokenT | None:
        for stored in self._tokens.values():
            if stored.token == token:
                return replace(stored)
        return None

    async def mark_used(self, token_id: UUID, at: datetime) -> bool:
        stored = self._tokens.get(token_id)
        if stored is None or stored.is_used:
            return False
        stored.is_used = True
        stored.used_at = at
        return True

    async def invalidate_for_user(self, user_id: UUID, at: datetime) -> int:
        invalidated = 0
        for stored in self._tokens.values():
            if stored.user_id == user_id and not stored.is_used:
                stored.is_used = True
                stored.used_at = at
                invalidated += 1
        return invalidated

    async def delete_expired(self, before: datetime) -> int:
        expired = [tid for tid, t in self._tokens.items() if t.expires_at < before]
        for token_id in expired:
            del self._tokens[token_id]
        return len(expired)

    def for_user(self, user_id: UUID) -> list[TokenT]:
        """Every token issued to a user, oldest first (test inspection)."""
        tokens = [replace(t) for t in self._tokens.values() if t.user_id == user_id]
        return sorted(tokens, key=lambda t: t.created_at)


class InMemoryEmailVerificationTokenRepository(
    _InMemoryOneTimeTokenRepository[EmailVerificationToken]
):
    """Dict-backed EmailVerificationTokenRepository."""


class InMemoryPasswordResetTokenRepository(_InMemoryOneTimeTokenRepository[PasswordResetToken]):
    """Dict-backed PasswordResetTokenRepository."""
