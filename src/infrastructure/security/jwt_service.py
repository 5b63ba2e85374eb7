"""JWT token service (adapter).

Implements TokenServiceProtocol with PyJWT. Signing is asymmetric (RS256)
when a key pair is configured and falls back to symmetric HS256 otherwise;
the fallback is logged so it never goes unnoticed in production.

Architecture:
    - Implements TokenServiceProtocol (no inheritance required)
    - Key material resolved once by ``load_signing_keys`` at startup
    - Injected via dependency container

Security:
    - Every token carries a ``type`` claim; a refresh token presented as an
      access token (or vice versa) is rejected
    - HS256 mode signs refresh tokens with a separate secret
    - Unique JWT ID (jti) per token, so two tokens minted in the same
      second for the same user still differ
    - Signature validity is never sufficient on its own: callers check the
      backing session / refresh-token record for revocation
"""

import base64
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from uuid_extensions import uuid7

from src.core.config import Settings
from src.core.result import Failure, Result, Success
from src.domain.errors import TokenError
from src.domain.protocols import (
    LoggerProtocol,
    TokenClaims,
    TokenSubject,
    TokenType,
)

RS256 = "RS256"
HS256 = "HS256"


@dataclass(frozen=True, slots=True, kw_only=True)
class SigningKeys:
    """Resolved key material.

    Attributes:
        algorithm: RS256 or HS256.
        access_signing_key: Private key (RS256) or access secret (HS256).
        access_verify_key: Public key (RS256) or access secret (HS256).
        refresh_signing_key: Private key (RS256) or refresh secret (HS256).
        refresh_verify_key: Public key (RS256) or refresh secret (HS256).
    """

    algorithm: str
    access_signing_key: str
    access_verify_key: str
    refresh_signing_key: str
    refresh_verify_key: str

    @classmethod
    def symmetric(cls, secret_key: str, refresh_secret_key: str) -> "SigningKeys":
        """HS256 keys (separate secrets for access and refresh tokens).

        Raises:
            ValueError: If either secret is shorter than 32 characters.
        """
        if len(secret_key) < 32 or len(refresh_secret_key) < 32:
            msg = "JWT secret keys must be at least 32 bytes (256 bits)"
            raise ValueError(msg)
        return cls(
            algorithm=HS256,
            access_signing_key=secret_key,
            access_verify_key=secret_key,
            refresh_signing_key=refresh_secret_key,
            refresh_verify_key=refresh_secret_key,
        )

    @classmethod
    def asymmetric(cls, private_key_pem: str, public_key_pem: str) -> "SigningKeys":
        """RS256 keys (one pair signs every token type)."""
        return cls(
            algorithm=RS256,
            access_signing_key=private_key_pem,
            access_verify_key=public_key_pem,
            refresh_signing_key=private_key_pem,
            refresh_verify_key=public_key_pem,
        )


def load_signing_keys(settings: Settings, logger: LoggerProtocol) -> SigningKeys:
    """Pick RS256 when a key pair is configured, HS256 otherwise.

    Key pairs are read from base64-encoded settings first, then from PEM
    file paths.

    Args:
        settings: Application settings.
        logger: Logger for the fallback warning.

    Returns:
        SigningKeys for JWTService.

    Raises:
        ValueError: If configured keys cannot be decoded or read.
    """
    if settings.jwt_private_key_b64 and settings.jwt_public_key_b64:
        try:
            private_pem = base64.b64decode(settings.jwt_private_key_b64).decode("utf-8")
            public_pem = base64.b64decode(settings.jwt_public_key_b64).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise ValueError("JWT keys are not valid base64-encoded PEM") from e
        logger.info("JWT signing configured", algorithm=RS256, key_source="base64")
        return SigningKeys.asymmetric(private_pem, public_pem)

    if settings.jwt_private_key_path and settings.jwt_public_key_path:
        try:
            private_pem = Path(settings.jwt_private_key_path).read_text(encoding="utf-8")
            public_pem = Path(settings.jwt_public_key_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError("JWT key files could not be read") from e
        logger.info("JWT signing configured", algorithm=RS256, key_source="file")
        return SigningKeys.asymmetric(private_pem, public_pem)

    logger.warning(
        "RSA keys not configured, falling back to symmetric JWT signing",
        algorithm=HS256,
    )
    return SigningKeys.symmetric(settings.secret_key, settings.refresh_secret_key)


class JWTService:
    """JWT issuance and verification.

    Usage:
        from src.core.container import get_token_service

        token_service = get_token_service()
        subject = TokenSubject(user_id=str(user.id), email=user.email, role=user.role.value)
        access = token_service.issue_access_token(subject)

        match token_service.verify(access, TokenType.ACCESS):
            case Success(value=claims):
                user_id = claims.subject.user_id
            case Failure(error=reason):
                ...
    """

    def __init__(
        self,
        keys: SigningKeys,
        *,
        access_expire_minutes: int = 15,
        refresh_expire_days: int = 7,
        refresh_remember_days: int = 30,
        pending_expire_minutes: int = 5,
        issuer: str = "membership-auth",
    ) -> None:
        """Initialize JWT service.

        Args:
            keys: Resolved key material.
            access_expire_minutes: Access token lifetime.
            refresh_expire_days: Refresh token lifetime.
            refresh_remember_days: Refresh token lifetime with remember-me.
            pending_expire_minutes: Lifetime of pending two-factor tokens.
            issuer: ``iss`` claim.
        """
        self._keys = keys
        self._access_ttl = timedelta(minutes=access_expire_minutes)
        self._refresh_ttl = timedelta(days=refresh_expire_days)
        self._remember_ttl = timedelta(days=refresh_remember_days)
        self._pending_ttl = timedelta(minutes=pending_expire_minutes)
        self._issuer = issuer

    @property
    def algorithm(self) -> str:
        """Signing algorithm in use."""
        return self._keys.algorithm

    def issue_access_token(self, subject: TokenSubject) -> str:
        """Issue an access token.

        Example:
            >>> service = JWTService(SigningKeys.symmetric("x" * 32, "y" * 32))
            >>> token = service.issue_access_token(
            ...     TokenSubject(user_id="0190...", email="ana@example.com", role="user")
            ... )
            >>> len(token.split("."))
            3
        """
        return self._encode(
            subject,
            TokenType.ACCESS,
            self._access_ttl,
            self._keys.access_signing_key,
        )

    def issue_refresh_token(self, subject: TokenSubject, *, remember_me: bool = False) -> str:
        """Issue a refresh token (remember-me extends its lifetime)."""
        ttl = self._remember_ttl if remember_me else self._refresh_ttl
        return self._encode(
            subject,
            TokenType.REFRESH,
            ttl,
            self._keys.refresh_signing_key,
            remember_me=remember_me,
        )

    def issue_two_factor_pending_token(
        self,
        subject: TokenSubject,
        *,
        remember_me: bool = False,
    ) -> str:
        """Issue the short-lived token exchanged for a second factor."""
        return self._encode(
            subject,
            TokenType.TWO_FACTOR_PENDING,
            self._pending_ttl,
            self._keys.access_signing_key,
            remember_me=remember_me,
        )

    def refresh_expires_at(self, *, remember_me: bool = False) -> datetime:
        """Expiry a refresh token issued now would carry."""
        ttl = self._remember_ttl if remember_me else self._refresh_ttl
        return datetime.now(UTC) + ttl

    def verify(self, token: str, token_type: TokenType) -> Result[TokenClaims, str]:
        """Verify a token's signature, expiry, issuer and purpose.

        Args:
            token: Encoded JWT.
            token_type: Expected purpose.

        Returns:
            Success(TokenClaims), or Failure(TokenError.EXPIRED_TOKEN /
            TokenError.INVALID_TOKEN).
        """
        verify_key = (
            self._keys.refresh_verify_key
            if token_type == TokenType.REFRESH
            else self._keys.access_verify_key
        )
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                verify_key,
                algorithms=[self._keys.algorithm],
                issuer=self._issuer,
                options={"require": ["sub", "exp", "iat", "jti", "type"]},
            )
        except ExpiredSignatureError:
            return Failure(error=TokenError.EXPIRED_TOKEN)
        except InvalidTokenError:
            return Failure(error=TokenError.INVALID_TOKEN)

        if payload.get("type") != token_type.value:
            return Failure(error=TokenError.INVALID_TOKEN)

        return Success(
            value=TokenClaims(
                subject=TokenSubject(
                    user_id=str(payload["sub"]),
                    email=str(payload.get("email", "")),
                    role=str(payload.get("role", "")),
                ),
                token_type=token_type,
                jti=str(payload["jti"]),
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
                remember_me=bool(payload.get("remember_me", False)),
            )
        )

    def _encode(
        self,
        subject: TokenSubject,
        token_type: TokenType,
        ttl: timedelta,
        signing_key: str,
        *,
        remember_me: bool = False,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": subject.user_id,
            "email": subject.email,
            "role": subject.role,
            "type": token_type.value,
            "iss": self._issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": str(uuid7()),
        }
        if remember_me:
            payload["remember_me"] = True

        token: str = jwt.encode(payload, signing_key, algorithm=self._keys.algorithm)
        return token
