"""Authentication commands (CQRS write operations).

Commands represent user intent to change system state.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers execute business logic and validate input
- Handlers return Result types
- Request metadata (IP, user agent) travels with the command for audit
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class RegisterUser:
    """Register a new user account.

    The user is created unverified and a verification link is queued.

    Attributes:
        email: Email address (validated and lower-cased by the handler).
        password: Plaintext password (complexity checked, then hashed).
        first_name: Given name.
        last_name: Family name.
        accepted_terms: Must be True.
        ip_address: Client IP.
        user_agent: Client user agent.

    Example:
        >>> command = RegisterUser(
        ...     email="ana@example.com",
        ...     password="SecureP@ss123",
        ...     first_name="Ana",
        ...     last_name="Pérez",
        ...     accepted_terms=True,
        ... )
        >>> result = await handler.handle(command)
    """

    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    accepted_terms: bool = False
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class AuthenticateUser:
    """Verify credentials only (no tokens, no session).

    Attributes:
        email: Email address.
        password: Plaintext password.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    email: str
    password: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class LoginUser:
    """Full login: credentials, risk analysis, optional second factor.

    Attributes:
        email: Email address.
        password: Plaintext password.
        remember_me: Issue a 30-day refresh token instead of 7 days.
        ip_address: Client IP.
        user_agent: Client user agent.
        device_fingerprint: Client-computed device fingerprint.
        remember_token: Trusted-device cookie value, if present.
    """

    email: str
    password: str
    remember_me: bool = False
    ip_address: str | None = None
    user_agent: str | None = None
    device_fingerprint: str | None = None
    remember_token: str | None = None


@dataclass(frozen=True, kw_only=True)
class CompleteTwoFactorLogin:
    """Exchange a pending token and a code for a session.

    Attributes:
        pending_token: ``2fa_pending`` token from the login challenge.
        code: Six-digit TOTP code or eight-character backup code.
        trust_device: Trust this device for 30 days.
        ip_address: Client IP.
        user_agent: Client user agent.
        device_fingerprint: Client-computed device fingerprint.
    """

    pending_token: str
    code: str
    trust_device: bool = False
    ip_address: str | None = None
    user_agent: str | None = None
    device_fingerprint: str | None = None


@dataclass(frozen=True, kw_only=True)
class RefreshAccessToken:
    """Rotate a refresh token.

    Attributes:
        refresh_token: Current refresh token (invalid after this call).
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    refresh_token: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class LogoutUser:
    """End the session behind an access token.

    Attributes:
        user_id: Authenticated user.
        access_token: Access token of the session to end.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    user_id: UUID
    access_token: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class RequestPasswordReset:
    """Ask for a password reset link (always answered generically).

    Attributes:
        email: Email address.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    email: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class ConfirmPasswordReset:
    """Set a new password with a reset token.

    Attributes:
        token: Reset token from the email link.
        new_password: Plaintext password (complexity checked).
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    token: str
    new_password: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class VerifyEmail:
    """Follow an email verification link.

    Attributes:
        token: Verification token from the email link.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    token: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResendVerification:
    """Queue a fresh verification link (always answered generically).

    Attributes:
        email: Email address.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    email: str
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class ChangePassword:
    """Change the password of an authenticated user.

    Every other session is signed out; the current one survives.

    Attributes:
        user_id: Authenticated user.
        current_password: Existing password.
        new_password: Plaintext password (complexity checked).
        current_session_id: Session to keep.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    user_id: UUID
    current_password: str
    new_password: str
    current_session_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None
