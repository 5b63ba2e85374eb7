"""Login finalization shared by password login and 2FA completion.

Mints the token pair, persists the session and its refresh-token record,
records the login on the user and writes the success audit entry.
"""

from datetime import UTC, datetime
from typing import Any

from uuid_extensions import uuid7

from src.application.dtos import LoginTokens
from src.application.services.device_trust_service import TrustedDeviceGrant
from src.application.services.session_registry import SessionRegistry, digest_token
from src.domain.entities import RefreshToken, User
from src.domain.enums import AuditAction
from src.domain.protocols import (
    AuditProtocol,
    DeviceEnricher,
    LoggerProtocol,
    RefreshTokenRepository,
    TokenServiceProtocol,
    TokenSubject,
    UserRepository,
)
from src.domain.value_objects import GeoLocation


def token_subject(user: User) -> TokenSubject:
    """Identity claims for a user."""
    return TokenSubject(user_id=str(user.id), email=user.email, role=user.role.value)


class LoginFinalizer:
    """Establish a session for a user whose login was accepted."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenServiceProtocol,
        session_registry: SessionRegistry,
        refresh_token_repo: RefreshTokenRepository,
        enricher: DeviceEnricher,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        *,
        access_expire_minutes: int = 15,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._session_registry = session_registry
        self._refresh_token_repo = refresh_token_repo
        self._enricher = enricher
        self._audit = audit
        self._logger = logger
        self._access_expires_in = access_expire_minutes * 60

    async def finalize(
        self,
        user: User,
        *,
        remember_me: bool = False,
        ip_address: str | None = None,
        user_agent: str | None = None,
        device_fingerprint: str | None = None,
        location: GeoLocation | None = None,
        method: str = "password",
        trusted_device: TrustedDeviceGrant | None = None,
    ) -> LoginTokens:
        """Issue tokens and persist the session.

        Args:
            user: Authenticated user.
            remember_me: Long-lived refresh token.
            ip_address: Client IP.
            user_agent: Client user agent.
            device_fingerprint: Client fingerprint.
            location: Resolved location of the client.
            method: How the login was completed ("password", "totp", ...).
            trusted_device: Device trust granted during this login.

        Returns:
            LoginTokens with a sanitized profile.
        """
        subject = token_subject(user)
        access_token = self._token_service.issue_access_token(subject)
        refresh_token = self._token_service.issue_refresh_token(subject, remember_me=remember_me)
        refresh_expires_at = self._token_service.refresh_expires_at(remember_me=remember_me)

        session = await self._session_registry.create(
            user_id=user.id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=refresh_expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
            device_fingerprint=device_fingerprint,
            device_info=self._enricher.enrich(user_agent).device_name,
            location=location.display if location else None,
        )
        await self._refresh_token_repo.save(
            RefreshToken(
                id=uuid7(),
                user_id=user.id,
                session_id=session.id,
                token_hash=digest_token(refresh_token),
                expires_at=refresh_expires_at,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

        now = datetime.now(UTC)
        await self._user_repo.update_fields(user.id, last_login_at=now)
        user.last_login_at = now

        context: dict[str, Any] = {
            "method": method,
            "two_factor": method != "password",
            "remember_me": remember_me,
        }
        if trusted_device is not None:
            context["device_trusted"] = True
        await self._audit.record(
            action=AuditAction.USER_LOGIN_SUCCESS,
            resource_type="session",
            user_id=user.id,
            resource_id=session.id,
            ip_address=ip_address,
            user_agent=user_agent,
            context=context,
        )
        self._logger.info(
            "Login succeeded",
            user_id=str(user.id),
            session_id=str(session.id),
            method=method,
        )

        return LoginTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._access_expires_in,
            refresh_expires_at=refresh_expires_at,
            session_id=session.id,
            user=user.to_profile(),
            remember_token=trusted_device.remember_token if trusted_device else None,
            remember_expires_at=trusted_device.expires_at if trusted_device else None,
        )
