"""Verify email handler.

Flow:
1. Check the token: missing, used and expired are reported identically
2. Consume the token (conditional)
3. Flip ``is_email_verified`` and set ``email_verified_at``
4. Queue the ``welcome`` email (best effort)
5. Audit EMAIL_VERIFIED

Sessions are left untouched.
"""

from datetime import UTC, datetime
from uuid import UUID

from src.application.commands.auth_commands import VerifyEmail
from src.application.dtos import GenericResponse
from src.application.errors import invalid_link_error
from src.application.services import notify
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction, NotificationKind
from src.domain.protocols import (
    AuditProtocol,
    EmailVerificationTokenRepository,
    LoggerProtocol,
    NotificationDispatcher,
    UserRepository,
)

EMAIL_VERIFIED_MESSAGE = "Email verified. You can now log in."


class VerifyEmailHandler:
    """Handler for VerifyEmail command."""

    def __init__(
        self,
        user_repo: UserRepository,
        verification_repo: EmailVerificationTokenRepository,
        notifications: NotificationDispatcher,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._verification_repo = verification_repo
        self._notifications = notifications
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: VerifyEmail) -> Result[GenericResponse, DomainError]:
        """Handle email verification.

        Returns:
            Success(GenericResponse), or Failure(AuthenticationError) with
            TOKEN_INVALID for any unusable link.
        """
        now = datetime.now(UTC)

        # Step 1: Check token
        token = await self._verification_repo.find_by_token(cmd.token)
        if token is None or not token.is_valid(now):
            await self._record_failure(cmd, token.user_id if token else None)
            return Failure(error=invalid_link_error())
        user = await self._user_repo.find_by_id(token.user_id)
        if user is None:
            await self._record_failure(cmd, None)
            return Failure(error=invalid_link_error())

        # Step 2: Consume token
        if not await self._verification_repo.mark_used(token.id, now):
            await self._record_failure(cmd, user.id)
            return Failure(error=invalid_link_error())

        # Step 3: Mark verified
        await self._user_repo.update_fields(
            user.id,
            is_email_verified=True,
            email_verified_at=now,
            updated_at=now,
        )

        # Step 4: Welcome email
        await notify(
            self._notifications,
            self._logger,
            NotificationKind.WELCOME,
            user.email,
            {"first_name": user.first_name},
            user_id=user.id,
        )

        # Step 5: Audit
        await self._audit.record(
            action=AuditAction.EMAIL_VERIFIED,
            resource_type="user",
            user_id=user.id,
            resource_id=user.id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        self._logger.info("Email verified", user_id=str(user.id))
        return Success(value=GenericResponse(message=EMAIL_VERIFIED_MESSAGE))

    async def _record_failure(self, cmd: VerifyEmail, user_id: UUID | None) -> None:
        await self._audit.record(
            action=AuditAction.EMAIL_VERIFICATION_FAILED,
            resource_type="user",
            user_id=user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
