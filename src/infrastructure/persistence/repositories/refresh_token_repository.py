"""SQLAlchemy implementation of the RefreshTokenRepository protocol.

Revocation is conditional (only rows not yet revoked), so of two concurrent
rotations presenting the same refresh token only one sees ``True``.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import CursorResult, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import RefreshToken
from src.infrastructure.persistence.models.refresh_token import (
    RefreshToken as RefreshTokenModel,
)


class SQLAlchemyRefreshTokenRepository:
    """SQLAlchemy implementation of RefreshTokenRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, token: RefreshToken) -> None:
        self.session.add(self._to_model(token))
        await self.session.flush()

    async def find_by_token_hash(self, token_hash: str) -> RefreshToken | None:
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token_hash == token_hash)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def mark_used(self, token_id: UUID, at: datetime) -> None:
        stmt = (
            update(RefreshTokenModel)
            .where(RefreshTokenModel.id == token_id)
            .values(last_used_at=at, usage_count=RefreshTokenModel.usage_count + 1)
        )
        await self.session.execute(stmt)

    async def revoke(
        self,
        token_id: UUID,
        reason: str,
        *,
        replaced_by_token_hash: str | None = None,
    ) -> bool:
        """Revoke a token that is not revoked yet.

        Returns:
            True if this call revoked it.
        """
        values: dict[str, object] = {
            "is_revoked": True,
            "revoked_at": datetime.now(UTC),
            "revoked_reason": reason,
        }
        if replaced_by_token_hash is not None:
            values["replaced_by_token_hash"] = replaced_by_token_hash
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.id == token_id,
                RefreshTokenModel.is_revoked.is_(False),
            )
            .values(**values)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount > 0

    async def revoke_by_session(self, session_id: UUID, reason: str) -> int:
        stmt = (
            update(RefreshTokenModel)
            .where(
                RefreshTokenModel.session_id == session_id,
                RefreshTokenModel.is_revoked.is_(False),
            )
            .values(is_revoked=True, revoked_at=datetime.now(UTC), revoked_reason=reason)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    async def revoke_all_for_user(
        self,
        user_id: UUID,
        reason: str,
        *,
        except_session_id: UUID | None = None,
    ) -> int:
        stmt = update(RefreshTokenModel).where(
            RefreshTokenModel.user_id == user_id,
            RefreshTokenModel.is_revoked.is_(False),
        )
        if except_session_id is not None:
            stmt = stmt.where(RefreshTokenModel.session_id != except_session_id)
        stmt = stmt.values(is_revoked=True, revoked_at=datetime.now(UTC), revoked_reason=reason)
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    async def delete_expired(self, before: datetime) -> int:
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.expires_at < before)
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    def _to_domain(self, model: RefreshTokenModel) -> RefreshToken:
        return RefreshToken(
            id=model.id,
            user_id=model.user_id,
            session_id=model.session_id,
            token_hash=model.token_hash,
            expires_at=model.expires_at,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            is_revoked=model.is_revoked,
            revoked_at=model.revoked_at,
            revoked_reason=model.revoked_reason,
            replaced_by_token_hash=model.replaced_by_token_hash,
            last_used_at=model.last_used_at,
            usage_count=model.usage_count,
            created_at=model.created_at,
        )

    def _to_model(self, token: RefreshToken) -> RefreshTokenModel:
        return RefreshTokenModel(
            id=token.id,
            user_id=token.user_id,
            session_id=token.session_id,
            token_hash=token.token_hash,
            expires_at=token.expires_at,
            ip_address=token.ip_address,
            user_agent=token.user_agent,
            is_revoked=token.is_revoked,
            revoked_at=token.revoked_at,
            revoked_reason=token.revoked_reason,
            replaced_by_token_hash=token.replaced_by_token_hash,
            last_used_at=token.last_used_at,
            usage_count=token.usage_count,
            created_at=token.created_at,
        )
