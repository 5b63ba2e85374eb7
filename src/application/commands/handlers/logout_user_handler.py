"""Logout handler.

Flow:
1. Revoke the session holding the access token (reason ``User logout``)
   together with its refresh tokens
2. Audit USER_LOGOUT when a session was actually ended

Logout is idempotent: a second call, or a call with a token whose session
is already gone, still succeeds.
"""

from src.application.commands.auth_commands import LogoutUser
from src.application.services import SessionRegistry, SessionRevokeReason
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol


class LogoutUserHandler:
    """Handler for LogoutUser command."""

    def __init__(
        self,
        session_registry: SessionRegistry,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._session_registry = session_registry
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: LogoutUser) -> Result[None, DomainError]:
        """Handle logout. Always succeeds."""
        session = await self._session_registry.find(cmd.user_id, cmd.access_token)
        revoked = await self._session_registry.revoke(
            access_token=cmd.access_token,
            user_id=cmd.user_id,
            reason=SessionRevokeReason.LOGOUT,
        )

        if revoked:
            await self._audit.record(
                action=AuditAction.USER_LOGOUT,
                resource_type="session",
                user_id=cmd.user_id,
                resource_id=session.id if session else None,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
            )
        else:
            self._logger.debug("Logout without active session", user_id=str(cmd.user_id))

        return Success(value=None)
