"""Registration handler.

Flow:
1. Validate email, password complexity and terms acceptance
2. Check email uniqueness (a duplicate is revealed as a conflict)
3. Hash password (bcrypt, off the event loop)
4. Create the user, unverified
5. Issue a 24 hour verification token and queue the verification email
6. Audit USER_REGISTERED
7. Return Success(RegisteredUser)

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols)
- NO infrastructure imports (repositories are injected via protocols)
"""

from datetime import UTC, datetime

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RegisterUser
from src.application.dtos import RegisteredUser
from src.application.services import EmailTokenService
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AuditProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)
from src.domain.value_objects import Email, Password


class RegistrationError:
    """Registration-specific error messages."""

    EMAIL_ALREADY_EXISTS = "An account with this email already exists"
    TERMS_NOT_ACCEPTED = "You must accept the terms and conditions"


class RegisterUserHandler:
    """Handler for RegisterUser command."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        email_tokens: EmailTokenService,
        audit: AuditProtocol,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize registration handler with dependencies.

        Args:
            user_repo: User repository for persistence.
            password_service: Password hashing service.
            email_tokens: Verification token issuer.
            audit: Audit trail.
            logger: Structured logger.
        """
        self._user_repo = user_repo
        self._password_service = password_service
        self._email_tokens = email_tokens
        self._audit = audit
        self._logger = logger

    async def handle(self, cmd: RegisterUser) -> Result[RegisteredUser, DomainError]:
        """Handle user registration.

        Returns:
            Success(RegisteredUser), or Failure(ValidationError) for bad
            input, or Failure(ConflictError) for a taken email.
        """
        # Step 1: Validate input
        try:
            email = Email(cmd.email)
        except ValueError as e:
            return Failure(
                error=ValidationError(code=ErrorCode.INVALID_EMAIL, message=str(e), field="email")
            )
        try:
            password = Password(cmd.password)
        except ValueError as e:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.PASSWORD_TOO_WEAK, message=str(e), field="password"
                )
            )
        if not cmd.accepted_terms:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.TERMS_NOT_ACCEPTED,
                    message=RegistrationError.TERMS_NOT_ACCEPTED,
                    field="accepted_terms",
                )
            )

        # Step 2: Check email uniqueness
        if await self._user_repo.exists_by_email(email.value):
            self._logger.info("Registration rejected: duplicate email")
            return Failure(error=self._duplicate_email())

        # Step 3: Hash password
        password_hash = await self._password_service.hash_password(password.value)

        # Step 4: Create user
        now = datetime.now(UTC)
        user = User(
            id=uuid7(),
            email=email.value,
            password_hash=password_hash,
            first_name=cmd.first_name.strip(),
            last_name=cmd.last_name.strip(),
            accepted_terms_at=now,
            created_at=now,
            updated_at=now,
        )
        saved = await self._user_repo.save(user)
        if isinstance(saved, Failure):
            # Lost a race with a concurrent registration of the same email
            self._logger.info("Registration rejected: duplicate email on insert")
            return Failure(error=self._duplicate_email())

        # Step 5: Verification token and email
        await self._email_tokens.issue_verification(
            user, ip_address=cmd.ip_address, user_agent=cmd.user_agent
        )

        # Step 6: Audit
        await self._audit.record(
            action=AuditAction.USER_REGISTERED,
            resource_type="user",
            user_id=user.id,
            resource_id=user.id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        self._logger.info("User registered", user_id=str(user.id))

        return Success(value=RegisteredUser(user_id=user.id, email=user.email))

    @staticmethod
    def _duplicate_email() -> ConflictError:
        return ConflictError(
            code=ErrorCode.EMAIL_ALREADY_EXISTS,
            message=RegistrationError.EMAIL_ALREADY_EXISTS,
            resource_type="User",
            conflicting_field="email",
        )
