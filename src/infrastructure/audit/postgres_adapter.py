"""PostgreSQL implementation of AuditProtocol.

Immutable audit logging:
- Each entry is written in its own session and committed immediately, so
  the trail survives a rollback of the request's unit of work (a failed
  login is still recorded)
- Database RULES block UPDATE/DELETE on ``audit_logs`` (see migration)
- Failures are returned as ``Failure(AuditError)`` and logged, never raised

Usage:
    adapter = PostgresAuditAdapter(database.async_session, logger)

    result = await adapter.record(
        action=AuditAction.USER_LOGIN_SUCCESS,
        user_id=user.id,
        resource_type="session",
        resource_id=session.id,
        ip_address="203.0.113.7",
        context={"remember_me": True},
    )
"""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.errors import AuditError
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.models.audit_log import AuditLog


class PostgresAuditAdapter:
    """PostgreSQL implementation of AuditProtocol.

    Attributes:
        session_factory: Factory for the audit's own sessions.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        logger: LoggerProtocol,
    ) -> None:
        """Initialize adapter.

        Args:
            session_factory: Session factory (``Database.async_session``).
            logger: Logger for recording failures.
        """
        self.session_factory = session_factory
        self._logger = logger

    async def record(
        self,
        *,
        action: AuditAction,
        resource_type: str,
        user_id: UUID | None = None,
        resource_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        """Record an immutable audit entry.

        Returns:
            Success(None) if stored, Failure(AuditError) if the database
            write failed.
        """
        audit_log = AuditLog(
            action=action.value,
            user_id=user_id,
            resource_type=resource_type,
            resource_id=resource_id,
            ip_address=ip_address,
            user_agent=user_agent[:500] if user_agent else None,
            context=context,
        )

        try:
            async with self.session_factory() as session:
                session.add(audit_log)
                await session.commit()
        except SQLAlchemyError as e:
            self._logger.error(
                "Failed to record audit entry",
                error=e,
                action=action.value,
                resource_type=resource_type,
            )
            return Failure(
                error=AuditError(
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    message="Failed to record audit entry",
                    details={
                        "action": action.value,
                        "resource_type": resource_type,
                        "error_type": type(e).__name__,
                    },
                )
            )

        return Success(value=None)
