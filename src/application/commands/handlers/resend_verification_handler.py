"""Resend verification email handler.

Issues a fresh 24 hour verification token for an unverified account and
supersedes older ones. Unknown and already verified emails get the same
generic response.
"""

from src.application.commands.auth_commands import ResendVerification
from src.application.dtos import GENERIC_VERIFICATION_MESSAGE, GenericResponse
from src.application.services import EmailTokenService
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.protocols import LoggerProtocol, UserRepository


class ResendVerificationHandler:
    """Handler for ResendVerification command."""

    def __init__(
        self,
        user_repo: UserRepository,
        email_tokens: EmailTokenService,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._email_tokens = email_tokens
        self._logger = logger

    async def handle(self, cmd: ResendVerification) -> Result[GenericResponse, DomainError]:
        """Handle a resend request. Always returns the generic message."""
        user = await self._user_repo.find_by_email(cmd.email.strip().lower())
        if user is None or user.is_email_verified or not user.is_active:
            self._logger.info("Verification resend skipped")
        else:
            await self._email_tokens.issue_verification(
                user, ip_address=cmd.ip_address, user_agent=cmd.user_agent
            )
        return Success(value=GenericResponse(message=GENERIC_VERIFICATION_MESSAGE))
