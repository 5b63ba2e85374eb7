"""Shared SQLAlchemy logic for single-use token repositories.

Verification and reset tokens share one table shape; the concrete
repositories only bind the model and entity classes.
"""

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import CursorResult, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import OneTimeToken


class OneTimeTokenRepositoryBase[EntityT: OneTimeToken]:
    """Save, look up and consume single-use tokens.

    Subclasses set ``model`` and ``entity``.
    """

    model: ClassVar[type[Any]]
    entity: ClassVar[type[OneTimeToken]]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, token: EntityT) -> None:
        self.session.add(self._to_model(token))
        await self.session.flush()

    async def find_by_token(self, token: str) -> EntityT | None:
        stmt = select(self.model).where(self.model.token == token)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def mark_used(self, token_id: UUID, at: datetime) -> bool:
        """Consume a token if it is still unused.

        Returns:
            True if this call consumed it.
        """
        stmt = (
            update(self.model)
            .where(self.model.id == token_id, self.model.is_used.is_(False))
            .values(is_used=True, used_at=at)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount > 0

    async def invalidate_for_user(self, user_id: UUID, at: datetime) -> int:
        """Supersede every unused token of the user.

        Returns:
            Number of tokens marked used.
        """
        stmt = (
            update(self.model)
            .where(self.model.user_id == user_id, self.model.is_used.is_(False))
            .values(is_used=True, used_at=at)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    async def delete_expired(self, before: datetime) -> int:
        stmt = delete(self.model).where(self.model.expires_at < before)
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    def _to_domain(self, model: Any) -> EntityT:
        return self.entity(  # type: ignore[return-value]
            id=model.id,
            user_id=model.user_id,
            email=model.email,
            token=model.token,
            expires_at=model.expires_at,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            is_used=model.is_used,
            used_at=model.used_at,
            created_at=model.created_at,
        )

    def _to_model(self, token: EntityT) -> Any:
        return self.model(
            id=token.id,
            user_id=token.user_id,
            email=token.email,
            token=token.token,
            expires_at=token.expires_at,
            ip_address=token.ip_address,
            user_agent=token.user_agent,
            is_used=token.is_used,
            used_at=token.used_at,
            created_at=token.created_at,
        )
