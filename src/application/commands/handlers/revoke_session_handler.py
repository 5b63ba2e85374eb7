"""Revoke session handler.

Revokes one of the caller's sessions (reason ``User revoked``) together with
its refresh tokens. A session that does not exist, is already revoked, or
belongs to someone else is reported as not found.
"""

from src.application.commands.session_commands import RevokeSession
from src.application.services import SessionRegistry, SessionRevokeReason
from src.core.enums import ErrorCode
from src.core.errors import DomainError, NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol


class RevokeSessionHandler:
    """Handler for RevokeSession command."""

    def __init__(
        self,
        session_registry: SessionRegistry,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._session_registry = session_registry
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RevokeSession) -> Result[None, DomainError]:
        """Handle session revocation.

        Returns:
            Success(None), or Failure(NotFoundError) with SESSION_NOT_FOUND.
        """
        revoked = await self._session_registry.revoke(
            session_id=cmd.session_id,
            user_id=cmd.user_id,
            reason=SessionRevokeReason.USER_REVOKED,
        )
        if not revoked:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.SESSION_NOT_FOUND,
                    message="Session not found",
                    resource_type="Session",
                    resource_id=str(cmd.session_id),
                )
            )

        await self._audit.record(
            action=AuditAction.SESSION_REVOKED,
            resource_type="session",
            user_id=cmd.user_id,
            resource_id=cmd.session_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        return Success(value=None)
