"""Authenticate user handler.

Single responsibility: Verify user credentials.
Does NOT create sessions or generate tokens.

Flow:
1. Find user by email
2. Check account not locked (an expired lock resets the counter)
3. Verify password
4. On mismatch, atomically count the failure (locks at the threshold)
5. Check account active
6. Reset failed login counter and record the login time
7. Return Success(AuthenticatedUser)

Unknown email, inactive account and wrong password all produce the same
INVALID_CREDENTIALS error so callers cannot discover accounts.
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

from src.application.commands.auth_commands import AuthenticateUser
from src.application.dtos import AuthenticatedUser
from src.application.errors import account_locked_error, invalid_credentials_error
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AuditProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)


class LoginError:
    """Login failure reasons (log and audit fields)."""

    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_INACTIVE = "account_inactive"
    USER_NOT_FOUND = "user_not_found"
    DENIED_BY_RISK = "denied_by_risk"


class AuthenticateUserHandler:
    """Handler for user authentication command.

    Lockout policy: ``max_login_attempts`` consecutive failures lock the
    account for ``lock_minutes``.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        *,
        max_login_attempts: int = 5,
        lock_minutes: int = 120,
    ) -> None:
        """Initialize authentication handler with dependencies.

        Args:
            user_repo: User repository for persistence.
            password_service: Password hashing/verification service.
            audit: Audit trail.
            logger: Structured logger.
            max_login_attempts: Failures before locking.
            lock_minutes: Lock duration.
        """
        self._user_repo = user_repo
        self._password_service = password_service
        self._audit = audit
        self._logger = logger
        self._max_login_attempts = max_login_attempts
        self._lock_duration = timedelta(minutes=lock_minutes)

    async def handle(self, cmd: AuthenticateUser) -> Result[AuthenticatedUser, DomainError]:
        """Handle user authentication command.

        Returns:
            Success(AuthenticatedUser) on successful authentication.
            Failure(AuthenticationError) on failure.

        Side Effects:
            - Counts failed password checks (and locks at the threshold).
            - Resets the counter and sets ``last_login_at`` on success.
            - Audits every failure.
        """
        now = datetime.now(UTC)

        # Step 1: Find user by email
        user = await self._user_repo.find_by_email(cmd.email.strip().lower())
        if user is None:
            await self._record_failure(cmd, LoginError.USER_NOT_FOUND, user_id=None)
            return Failure(error=invalid_credentials_error())

        # Step 2: Check lock
        if user.is_locked(now):
            await self._record_failure(cmd, LoginError.ACCOUNT_LOCKED, user_id=user.id)
            return Failure(error=account_locked_error(user.lock_remaining_minutes(now)))
        if user.locked_until is not None:
            # Lock expired: start counting from zero again
            await self._user_repo.update_fields(
                user.id, failed_login_attempts=0, locked_until=None
            )

        # Step 3: Verify password
        if not await self._password_service.verify_password(cmd.password, user.password_hash):
            # Step 4: Count the failure atomically
            attempts = await self._user_repo.increment_failed_login(
                user.id,
                max_attempts=self._max_login_attempts,
                lock_until=now + self._lock_duration,
            )
            if attempts >= self._max_login_attempts:
                self._logger.warning(
                    "Account locked after failed logins",
                    user_id=str(user.id),
                    failed_attempts=attempts,
                )
            await self._record_failure(
                cmd,
                LoginError.INVALID_CREDENTIALS,
                user_id=user.id,
                failed_attempts=attempts,
            )
            return Failure(error=invalid_credentials_error())

        # Step 5: Check account active
        if not user.is_active:
            await self._record_failure(cmd, LoginError.ACCOUNT_INACTIVE, user_id=user.id)
            return Failure(error=invalid_credentials_error())

        # Step 6: Reset counter
        await self._user_repo.reset_failed_login(user.id, last_login_at=now)
        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_login_at = now

        return Success(value=AuthenticatedUser(user=user))

    async def _record_failure(
        self,
        cmd: AuthenticateUser,
        reason: str,
        *,
        user_id: UUID | None,
        failed_attempts: int | None = None,
    ) -> None:
        context: dict[str, object] = {"reason": reason}
        if failed_attempts is not None:
            context["failed_attempts"] = failed_attempts
        await self._audit.record(
            action=AuditAction.USER_LOGIN_FAILED,
            resource_type="session",
            user_id=user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context=context,
        )
        self._logger.info(
            "Login failed",
            user_id=str(user_id) if user_id else None,
            reason=reason,
        )
