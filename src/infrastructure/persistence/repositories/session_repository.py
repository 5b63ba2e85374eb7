"""SQLAlchemy implementation of the SessionRepository protocol.

Handles session persistence:
- Lookup of active sessions by token digest
- In-place rotation and activity touches
- Single and bulk revocation (logout, password change/reset)
- Purge of expired rows
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import CursorResult, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Session
from src.infrastructure.persistence.models.session import Session as SessionModel


class SQLAlchemySessionRepository:
    """SQLAlchemy implementation of SessionRepository.

    Example:
        >>> async with database.get_session() as db_session:
        ...     repo = SQLAlchemySessionRepository(db_session)
        ...     sessions = await repo.find_active_by_user(user_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, session: Session) -> None:
        self._session.add(self._to_model(session))
        await self._session.flush()

    async def update(self, session: Session) -> None:
        """Write the mutable fields of an existing session."""
        model = await self._session.get(SessionModel, session.id)
        if model is None:
            return
        model.access_token_hash = session.access_token_hash
        model.refresh_token_hash = session.refresh_token_hash
        model.expires_at = session.expires_at
        model.last_activity_at = session.last_activity_at
        model.ip_address = session.ip_address
        model.is_revoked = session.is_revoked
        model.revoked_at = session.revoked_at
        model.revoked_reason = session.revoked_reason
        await self._session.flush()

    async def find_by_id(self, session_id: UUID) -> Session | None:
        model = await self._session.get(SessionModel, session_id)
        return self._to_domain(model) if model is not None else None

    async def find_active_by_access_token(
        self,
        user_id: UUID,
        access_token_hash: str,
    ) -> Session | None:
        """Non-revoked, unexpired session holding this access token."""
        stmt = select(SessionModel).where(
            SessionModel.user_id == user_id,
            SessionModel.access_token_hash == access_token_hash,
            SessionModel.is_revoked.is_(False),
            SessionModel.expires_at > datetime.now(UTC),
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model is not None else None

    async def find_active_by_refresh_token(self, refresh_token_hash: str) -> Session | None:
        stmt = select(SessionModel).where(
            SessionModel.refresh_token_hash == refresh_token_hash,
            SessionModel.is_revoked.is_(False),
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model is not None else None

    async def find_active_by_user(self, user_id: UUID) -> list[Session]:
        """Active sessions, most recently used first."""
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.user_id == user_id,
                SessionModel.is_revoked.is_(False),
                SessionModel.expires_at > datetime.now(UTC),
            )
            .order_by(SessionModel.last_activity_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def touch(self, session_id: UUID, at: datetime) -> None:
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == session_id)
            .values(last_activity_at=at)
        )
        await self._session.execute(stmt)

    async def revoke(self, session_id: UUID, reason: str) -> bool:
        """Revoke one session.

        Returns:
            True if it transitioned to revoked, False if missing or already revoked.
        """
        stmt = (
            update(SessionModel)
            .where(SessionModel.id == session_id, SessionModel.is_revoked.is_(False))
            .values(is_revoked=True, revoked_at=datetime.now(UTC), revoked_reason=reason)
        )
        result: CursorResult = await self._session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount > 0

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
        stmt = update(SessionModel).where(
            SessionModel.user_id == user_id,
            SessionModel.is_revoked.is_(False),
        )
        if except_session_id is not None:
            stmt = stmt.where(SessionModel.id != except_session_id)
        stmt = stmt.values(is_revoked=True, revoked_at=datetime.now(UTC), revoked_reason=reason)
        result: CursorResult = await self._session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    async def delete_expired(self, before: datetime) -> int:
        """Purge sessions that expired before ``before``."""
        stmt = delete(SessionModel).where(SessionModel.expires_at < before)
        result: CursorResult = await self._session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    def _to_domain(self, model: SessionModel) -> Session:
        return Session(
            id=model.id,
            user_id=model.user_id,
            access_token_hash=model.access_token_hash,
            refresh_token_hash=model.refresh_token_hash,
            expires_at=model.expires_at,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            device_fingerprint=model.device_fingerprint,
            device_info=model.device_info,
            location=model.location,
            created_at=model.created_at,
            last_activity_at=model.last_activity_at,
            is_revoked=model.is_revoked,
            revoked_at=model.revoked_at,
            revoked_reason=model.revoked_reason,
        )

    def _to_model(self, session: Session) -> SessionModel:
        return SessionModel(
            id=session.id,
            user_id=session.user_id,
            access_token_hash=session.access_token_hash,
            refresh_token_hash=session.refresh_token_hash,
            expires_at=session.expires_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            device_fingerprint=session.device_fingerprint,
            device_info=session.device_info,
            location=session.location,
            created_at=session.created_at,
            last_activity_at=session.last_activity_at,
            is_revoked=session.is_revoked,
            revoked_at=session.revoked_at,
            revoked_reason=session.revoked_reason,
        )
