"""Token service protocol and claim types.

Access and refresh tokens are JWTs. A token whose signature verifies is
only half of authentication: the caller must still check the backing
session or refresh-token record for revocation.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from src.core.result import Result


class TokenType(str, Enum):
    """Purpose of a token, carried in the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"
    TWO_FACTOR_PENDING = "2fa_pending"


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenSubject:
    """Identity claims embedded in every token.

    Attributes:
        user_id: Subject (``sub`` claim), as a string.
        email: User email.
        role: User role value.
    """

    user_id: str
    email: str
    role: str


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenClaims:
    """Verified token payload.

    Attributes:
        subject: Identity claims.
        token_type: Purpose of the token.
        jti: Unique token id.
        issued_at: ``iat``.
        expires_at: ``exp``.
        remember_me: Whether the login asked for long-lived refresh tokens.
    """

    subject: TokenSubject
    token_type: TokenType
    jti: str
    issued_at: datetime
    expires_at: datetime
    remember_me: bool = False


class TokenServiceProtocol(Protocol):
    """JWT issuance and verification."""

    @property
    def algorithm(self) -> str:
        """Signing algorithm in use (RS256 or HS256)."""
        ...

    def issue_access_token(self, subject: TokenSubject) -> str:
        """Issue a short-lived access token."""
        ...

    def issue_refresh_token(self, subject: TokenSubject, *, remember_me: bool = False) -> str:
        """Issue a refresh token (7 days, or 30 with remember-me)."""
        ...

    def issue_two_factor_pending_token(
        self,
        subject: TokenSubject,
        *,
        remember_me: bool = False,
    ) -> str:
        """Issue a short-lived token proving the password step passed."""
        ...

    def refresh_expires_at(self, *, remember_me: bool = False) -> datetime:
        """Expiry a refresh token issued now would carry."""
        ...

    def verify(self, token: str, token_type: TokenType) -> Result[TokenClaims, str]:
        """Verify signature, expiry and purpose.

        Returns:
            Success(TokenClaims), or Failure with a ``TokenError`` constant.
        """
        ...
