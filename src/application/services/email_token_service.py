"""Email verification and password reset tokens.

Both kinds are single-use and time-boxed. Issuing a token supersedes (marks
used) every older unused token of the same kind for that user, then queues
the email carrying the link.
"""

from datetime import UTC, datetime, timedelta

from uuid_extensions import uuid7

from src.application.services.notifications import notify
from src.domain.entities import EmailVerificationToken, PasswordResetToken, User
from src.domain.enums import NotificationKind
from src.domain.protocols import (
    EmailVerificationTokenRepository,
    LoggerProtocol,
    NotificationDispatcher,
    PasswordResetTokenRepository,
    SecureTokenGenerator,
)


class EmailTokenService:
    """Issue verification and reset tokens and queue their emails."""

    def __init__(
        self,
        verification_repo: EmailVerificationTokenRepository,
        reset_repo: PasswordResetTokenRepository,
        token_generator: SecureTokenGenerator,
        notifications: NotificationDispatcher,
        logger: LoggerProtocol,
        *,
        url_base: str,
        verification_expire_hours: int = 24,
        reset_expire_hours: int = 1,
    ) -> None:
        self._verification_repo = verification_repo
        self._reset_repo = reset_repo
        self._token_generator = token_generator
        self._notifications = notifications
        self._logger = logger
        self._url_base = url_base.rstrip("/")
        self._verification_ttl = timedelta(hours=verification_expire_hours)
        self._reset_ttl = timedelta(hours=reset_expire_hours)

    async def issue_verification(
        self,
        user: User,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> EmailVerificationToken:
        """Supersede older verification tokens, store a new one and email it."""
        now = datetime.now(UTC)
        superseded = await self._verification_repo.invalidate_for_user(user.id, now)
        token = EmailVerificationToken(
            id=uuid7(),
            user_id=user.id,
            email=user.email,
            token=self._token_generator.generate_token(),
            expires_at=now + self._verification_ttl,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
        )
        await self._verification_repo.save(token)
        self._logger.info(
            "Verification token issued",
            user_id=str(user.id),
            superseded_count=superseded,
        )

        await notify(
            self._notifications,
            self._logger,
            NotificationKind.VERIFICATION,
            user.email,
            {
                "first_name": user.first_name,
                "verification_url": f"{self._url_base}/verify-email?token={token.token}",
                "expires_hours": int(self._verification_ttl.total_seconds() // 3600),
            },
            user_id=user.id,
        )
        return token

    async def issue_password_reset(
        self,
        user: User,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> PasswordResetToken:
        """Supersede older reset tokens, store a new one and email it."""
        now = datetime.now(UTC)
        superseded = await self._reset_repo.invalidate_for_user(user.id, now)
        token = PasswordResetToken(
            id=uuid7(),
            user_id=user.id,
            email=user.email,
            token=self._token_generator.generate_token(),
            expires_at=now + self._reset_ttl,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
        )
        await self._reset_repo.save(token)
        self._logger.info(
            "Password reset token issued",
            user_id=str(user.id),
            superseded_count=superseded,
        )

        await notify(
            self._notifications,
            self._logger,
            NotificationKind.PASSWORD_RESET,
            user.email,
            {
                "first_name": user.first_name,
                "reset_url": f"{self._url_base}/reset-password?token={token.token}",
                "ip_address": ip_address,
                "expires_minutes": int(self._reset_ttl.total_seconds() // 60),
            },
            user_id=user.id,
        )
        return token


    async def purge_expired(self) -> tuple[int, int]:
        """Delete expired verification and reset tokens.

        Returns:
            (verification tokens purged, reset tokens purged).
        """
        now = datetime.now(UTC)
        verification = await self._verification_repo.delete_expired(now)
        reset = await self._reset_repo.delete_expired(now)
        if verification or reset:
            self._logger.info(
                "Expired email tokens purged",
                verification_count=verification,
                reset_count=reset,
            )
        return verification, reset
