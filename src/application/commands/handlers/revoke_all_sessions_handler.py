"""Revoke all sessions handler.

Signs the user out everywhere, optionally keeping the current session.
"""

from src.application.commands.session_commands import RevokeAllSessions
from src.application.services import SessionRegistry, SessionRevokeReason
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol


class RevokeAllSessionsHandler:
    """Handler for RevokeAllSessions command."""

    def __init__(
        self,
        session_registry: SessionRegistry,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._session_registry = session_registry
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RevokeAllSessions) -> Result[int, DomainError]:
        """Handle bulk revocation.

        Returns:
            Success(number of sessions revoked).
        """
        revoked = await self._session_registry.revoke_all(
            cmd.user_id,
            SessionRevokeReason.REVOKE_ALL,
            except_session_id=cmd.except_session_id,
        )
        await self._audit.record(
            action=AuditAction.ALL_SESSIONS_REVOKED,
            resource_type="session",
            user_id=cmd.user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={
                "revoked_count": revoked,
                "kept_session_id": str(cmd.except_session_id) if cmd.except_session_id else None,
            },
        )
        return Success(value=revoked)
