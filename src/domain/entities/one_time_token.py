"""Single-use, time-boxed tokens (email verification, password reset).

Both kinds share the same lifecycle: issued on demand, consumed once, and
superseded when a newer token of the same kind is issued for the user.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class OneTimeToken:
    """Base single-use token.

    Business Rules:
        - Once used, permanently invalid regardless of expiry
        - Valid only before ``expires_at``

    Attributes:
        id: Record identifier.
        user_id: Owner.
        email: Email the token was sent to.
        token: 64 hex characters (32 random bytes).
        expires_at: Expiry.
        ip_address: Requesting IP.
        user_agent: Requesting user agent.
        is_used: Consumption flag.
        used_at: Consumption time.
        created_at: Issue time.
    """

    id: UUID
    user_id: UUID
    email: str
    token: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    is_used: bool = False
    used_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if past expiry."""
        return self.expires_at <= (now or datetime.now(UTC))

    def is_valid(self, now: datetime | None = None) -> bool:
        """True if unused and unexpired."""
        return not self.is_used and not self.is_expired(now)

    def mark_used(self) -> None:
        """Consume the token."""
        self.is_used = True
        self.used_at = datetime.now(UTC)


@dataclass(slots=True, kw_only=True)
class EmailVerificationToken(OneTimeToken):
    """Email verification token (24 hours by default)."""


@dataclass(slots=True, kw_only=True)
class PasswordResetToken(OneTimeToken):
    """Password reset token (1 hour by default)."""
