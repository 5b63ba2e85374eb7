"""Change password handler (authenticated user).

Flow:
1. Load the user and verify the current password
2. Validate the new password (complexity, must differ from the current one)
3. Replace the password and revoke every other session, record
   ``password_changed``, queue the email
4. Audit PASSWORD_CHANGED
"""

from src.application.commands.auth_commands import ChangePassword
from src.application.dtos import GenericResponse
from src.application.errors import invalid_credentials_error, weak_password_error
from src.application.services import PasswordChangeService, SessionRevokeReason
from src.core.enums import ErrorCode
from src.core.errors import DomainError, NotFoundError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AuditProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)
from src.domain.value_objects import Password

PASSWORD_CHANGED_MESSAGE = "Password changed. Other sessions have been signed out."


class ChangePasswordHandler:
    """Handler for ChangePassword command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        password_change: PasswordChangeService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._password_change = password_change
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: ChangePassword) -> Result[GenericResponse, DomainError]:
        """Handle password change.

        Returns:
            Success(GenericResponse), Failure(AuthenticationError) for a
            wrong current password, Failure(ValidationError) for a weak or
            unchanged new password.
        """
        # Step 1: Verify current password
        user = await self._user_repo.find_by_id(cmd.user_id)
        if user is None:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.USER_NOT_FOUND,
                    message="User not found",
                    resource_type="User",
                    resource_id=str(cmd.user_id),
                )
            )
        if not await self._password_service.verify_password(
            cmd.current_password, user.password_hash
        ):
            self._logger.info("Password change rejected", user_id=str(user.id))
            return Failure(error=invalid_credentials_error())

        # Step 2: Validate new password
        try:
            password = Password(cmd.new_password)
        except ValueError as e:
            return Failure(error=weak_password_error(str(e), field="new_password"))
        if cmd.new_password == cmd.current_password:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.PASSWORD_MISMATCH,
                    message="New password must differ from the current password",
                    field="new_password",
                )
            )

        # Step 3: Replace password, keep the current session
        revoked = await self._password_change.replace_password(
            user,
            password.value,
            revoke_reason=SessionRevokeReason.PASSWORD_CHANGED,
            via="change",
            except_session_id=cmd.current_session_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )

        # Step 4: Audit
        await self._audit.record(
            action=AuditAction.PASSWORD_CHANGED,
            resource_type="user",
            user_id=user.id,
            resource_id=user.id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={"sessions_revoked": revoked},
        )
        return Success(value=GenericResponse(message=PASSWORD_CHANGED_MESSAGE))
