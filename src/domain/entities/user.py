"""User domain entity.

Pure business logic, no framework dependencies.

The user record is the identity anchor of the auth core: it carries the
password hash, lockout state and two-factor enrollment. It is created at
registration and never hard-deleted here.
"""

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import UserRole


@dataclass(slots=True, kw_only=True)
class User:
    """User credential record.

    Business Rules:
        - Email is unique and stored lower-case
        - Account is locked while ``locked_until`` is in the future
        - Password hash and two-factor secret never leave the core
          (use ``to_profile`` for outbound data)
        - Two-factor secret may exist while disabled (enrollment pending)

    Attributes:
        id: Unique user identifier.
        email: Lower-cased email address.
        password_hash: bcrypt hash.
        first_name: Given name.
        last_name: Family name.
        role: Authorization role.
        is_active: Inactive users cannot authenticate.
        is_email_verified: Whether the email link was followed.
        email_verified_at: When the email was verified.
        failed_login_attempts: Consecutive failed password checks.
        locked_until: Lock expiry (None if never locked).
        last_login_at: Last successful login.
        two_factor_enabled: Whether 2FA is required for this user.
        two_factor_secret: Base32 TOTP secret (pending or active).
        backup_code_hashes: Salted hashes of unused backup codes.
        accepted_terms_at: When the terms were accepted at registration.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.

    Example:
        >>> user = User(id=uuid7(), email="ana@example.com", password_hash="$2b$12$...")
        >>> user.is_locked()
        False
    """

    id: UUID
    email: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.USER
    is_active: bool = True
    is_email_verified: bool = False
    email_verified_at: datetime | None = None
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    last_login_at: datetime | None = None
    two_factor_enabled: bool = False
    two_factor_secret: str | None = None
    backup_code_hashes: list[str] = field(default_factory=list)
    accepted_terms_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_locked(self, now: datetime | None = None) -> bool:
        """Check whether the account is currently locked.

        Args:
            now: Reference time (defaults to current UTC time).

        Returns:
            True if ``locked_until`` is in the future.
        """
        if self.locked_until is None:
            return False
        return self.locked_until > (now or datetime.now(UTC))

    def lock_remaining_minutes(self, now: datetime | None = None) -> int:
        """Whole minutes left on the lock, rounded up.

        Returns:
            0 if the account is not locked.
        """
        if not self.is_locked(now):
            return 0
        assert self.locked_until is not None
        remaining = (self.locked_until - (now or datetime.now(UTC))).total_seconds()
        return math.ceil(remaining / 60)

    def can_login(self, now: datetime | None = None) -> bool:
        """True if the account is active and not locked."""
        return self.is_active and not self.is_locked(now)

    def has_pending_two_factor_secret(self) -> bool:
        """True if a secret was generated but 2FA is not enabled yet."""
        return self.two_factor_secret is not None and not self.two_factor_enabled

    @property
    def full_name(self) -> str:
        """First and last name joined by a space."""
        return f"{self.first_name} {self.last_name}".strip()

    def to_profile(self) -> "UserProfile":
        """Sanitized outbound projection of this user."""
        return UserProfile(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            role=self.role,
            is_email_verified=self.is_email_verified,
            two_factor_enabled=self.two_factor_enabled,
            last_login_at=self.last_login_at,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class UserProfile:
    """Client-safe view of a user.

    Holds no password hash, two-factor secret, backup codes or lockout
    counters.
    """

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_email_verified: bool
    two_factor_enabled: bool
    last_login_at: datetime | None = None
