"""Request password reset handler.

Flow:
1. Look up the user by email
2. For an existing, active user: supersede older reset tokens, issue a
   1 hour token, queue the ``password_reset`` email, audit
3. Return the same generic message in every case

Unknown emails are swallowed so the endpoint cannot be used to check for
accounts.
"""

from src.application.commands.auth_commands import RequestPasswordReset
from src.application.dtos import GENERIC_RESET_MESSAGE, GenericResponse
from src.application.services import EmailTokenService
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, LoggerProtocol, UserRepository


class RequestPasswordResetHandler:
    """Handler for RequestPasswordReset command."""

    def __init__(
        self,
        user_repo: UserRepository,
        email_tokens: EmailTokenService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._email_tokens = email_tokens
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RequestPasswordReset) -> Result[GenericResponse, DomainError]:
        """Handle a reset request. Always returns the generic message."""
        user = await self._user_repo.find_by_email(cmd.email.strip().lower())
        if user is None or not user.is_active:
            self._logger.info("Password reset requested for unknown or inactive account")
            return Success(value=GenericResponse(message=GENERIC_RESET_MESSAGE))

        token = await self._email_tokens.issue_password_reset(
            user, ip_address=cmd.ip_address, user_agent=cmd.user_agent
        )
        await self._audit.record(
            action=AuditAction.PASSWORD_RESET_REQUESTED,
            resource_type="user",
            user_id=user.id,
            resource_id=token.id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        return Success(value=GenericResponse(message=GENERIC_RESET_MESSAGE))
