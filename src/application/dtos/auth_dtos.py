"""Authentication DTOs (Data Transfer Objects).

Response dataclasses returned by the auth command handlers to the
presentation layer. None of them carries a password hash, TOTP secret or
backup code hash.

DTOs:
    - AuthenticatedUser: Result of AuthenticateUser
    - RegisteredUser: Result of RegisterUser
    - LoginTokens: Login finished, session established
    - LoginChallenge: Password accepted, second factor required
    - TokenPair: Result of RefreshAccessToken
    - TwoFactorStatus: Result of GetTwoFactorStatus
    - GenericResponse: Enumeration-safe acknowledgement
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.entities import User, UserProfile

GENERIC_RESET_MESSAGE = "If an account exists for this email, a reset link has been sent"
GENERIC_VERIFICATION_MESSAGE = (
    "If an unverified account exists for this email, a verification link has been sent"
)


@dataclass(frozen=True, kw_only=True)
class AuthenticatedUser:
    """Credentials accepted.

    Internal to the application layer: carries the full entity so the login
    flow does not reload it.

    Attributes:
        user: Authenticated user.
    """

    user: User

    @property
    def user_id(self) -> UUID:
        return self.user.id


@dataclass(frozen=True, kw_only=True)
class RegisteredUser:
    """Response from successful registration.

    Attributes:
        user_id: New user id.
        email: Normalized email.
    """

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class LoginTokens:
    """Login completed.

    Attributes:
        access_token: JWT access token.
        refresh_token: JWT refresh token.
        token_type: Always "bearer".
        expires_in: Access token lifetime in seconds.
        refresh_expires_at: Refresh token expiry.
        session_id: Established session.
        user: Sanitized profile.
        remember_token: Trusted-device token when the device was trusted
            during this login.
        remember_expires_at: Expiry of ``remember_token``.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    refresh_expires_at: datetime
    session_id: UUID
    user: UserProfile
    token_type: str = "bearer"
    remember_token: str | None = None
    remember_expires_at: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class LoginChallenge:
    """Password accepted; a second factor is required.

    Attributes:
        pending_token: Short-lived ``2fa_pending`` token to exchange with a code.
        expires_in: Pending token lifetime in seconds.
        methods: Accepted second factors.
        reasons: Why the challenge was raised (risk alerts, new device).
    """

    pending_token: str
    expires_in: int
    methods: tuple[str, ...] = ("totp", "backup_code")
    reasons: tuple[str, ...] = ()


type LoginOutcome = LoginTokens | LoginChallenge


@dataclass(frozen=True, kw_only=True)
class TokenPair:
    """Response from a refresh rotation.

    Attributes:
        access_token: New access token.
        refresh_token: New refresh token (the presented one is now invalid).
        expires_in: Access token lifetime in seconds.
        refresh_expires_at: New refresh token expiry.
        token_type: Always "bearer".
    """

    access_token: str
    refresh_token: str
    expires_in: int
    refresh_expires_at: datetime
    token_type: str = "bearer"


@dataclass(frozen=True, kw_only=True)
class GenericResponse:
    """Acknowledgement that reveals nothing about account existence."""

    message: str


@dataclass(frozen=True, kw_only=True)
class TwoFactorStatus:
    """Two-factor state of a user.

    Attributes:
        enabled: Whether 2FA is on.
        backup_codes_remaining: Unused backup codes (0 when disabled).
    """

    enabled: bool
    backup_codes_remaining: int
