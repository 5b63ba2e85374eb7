"""Confirm password reset handler.

Flow:
1. Check the token: missing, used and expired are reported identically
2. Validate password complexity
3. Consume the token (conditional, so a link works once even under races)
4. Replace the password: rehash, clear the lock state, revoke every
   session and refresh token, record ``password_changed``, queue the email
5. Audit PASSWORD_RESET_COMPLETED
"""

from datetime import UTC, datetime
from uuid import UUID

from src.application.commands.auth_commands import ConfirmPasswordReset
from src.application.dtos import GenericResponse
from src.application.errors import invalid_link_error, weak_password_error
from src.application.services import PasswordChangeService, SessionRevokeReason
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AuditProtocol,
    LoggerProtocol,
    PasswordResetTokenRepository,
    UserRepository,
)
from src.domain.value_objects import Password

PASSWORD_RESET_SUCCESS_MESSAGE = "Password has been reset. Please log in again."


class ConfirmPasswordResetHandler:
    """Handler for ConfirmPasswordReset command."""

    def __init__(
        self,
        user_repo: UserRepository,
        reset_repo: PasswordResetTokenRepository,
        password_change: PasswordChangeService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._reset_repo = reset_repo
        self._password_change = password_change
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: ConfirmPasswordReset) -> Result[GenericResponse, DomainError]:
        """Handle password reset confirmation.

        Returns:
            Success(GenericResponse), Failure(ValidationError) for a weak
            password, or Failure(AuthenticationError) for a bad link.
        """
        now = datetime.now(UTC)

        # Step 1: Check token
        token = await self._reset_repo.find_by_token(cmd.token)
        if token is None or not token.is_valid(now):
            await self._record_failure(cmd, token.user_id if token else None)
            return Failure(error=invalid_link_error())
        user = await self._user_repo.find_by_id(token.user_id)
        if user is None:
            await self._record_failure(cmd, None)
            return Failure(error=invalid_link_error())

        # Step 2: Validate password
        try:
            password = Password(cmd.new_password)
        except ValueError as e:
            return Failure(error=weak_password_error(str(e), field="new_password"))

        # Step 3: Consume token
        if not await self._reset_repo.mark_used(token.id, now):
            await self._record_failure(cmd, user.id)
            return Failure(error=invalid_link_error())

        # Step 4: Replace password and revoke everything
        revoked = await self._password_change.replace_password(
            user,
            password.value,
            revoke_reason=SessionRevokeReason.PASSWORD_RESET,
            via="reset",
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )

        # Step 5: Audit
        await self._audit.record(
            action=AuditAction.PASSWORD_RESET_COMPLETED,
            resource_type="user",
            user_id=user.id,
            resource_id=user.id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={"sessions_revoked": revoked},
        )
        return Success(value=GenericResponse(message=PASSWORD_RESET_SUCCESS_MESSAGE))

    async def _record_failure(
        self, cmd: ConfirmPasswordReset, user_id: UUID | None
    ) -> None:
        await self._audit.record(
            action=AuditAction.PASSWORD_RESET_FAILED,
            resource_type="user",
            user_id=user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        self._logger.info(
            "Password reset rejected",
            user_id=str(user_id) if user_id else None,
        )
