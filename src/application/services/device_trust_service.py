"""Device trust store.

A trusted device skips the second factor at login for 30 days. Trust is
keyed by the client fingerprint and proven with a server-issued remember
token (kept in the ``trusted_device`` cookie).
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from uuid_extensions import uuid7

from src.application.services.notifications import notify
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.entities import TrustedDevice
from src.domain.enums import NotificationKind
from src.domain.protocols import (
    DeviceEnricher,
    LoggerProtocol,
    NotificationDispatcher,
    SecureTokenGenerator,
    TrustedDeviceRepository,
)

TRUSTED_DEVICE_DAYS = 30


class DeviceRevokeReason:
    """Revocation reasons stored on trusted devices."""

    USER_REVOKED = "User revoked"
    REVOKE_ALL = "User revoked all devices"


@dataclass(frozen=True, slots=True, kw_only=True)
class TrustDeviceInput:
    """Request context captured when the user ticks "trust this device".

    Attributes:
        email: Recipient of the security alert.
        device_fingerprint: Client fingerprint.
        user_agent: Raw user agent.
        ip_address: Client IP.
        location: Location summary ("Madrid, Spain").
        city: Resolved city.
        country: Resolved country.
    """

    email: str
    device_fingerprint: str
    user_agent: str | None = None
    ip_address: str | None = None
    location: str | None = None
    city: str | None = None
    country: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TrustedDeviceGrant:
    """Result of trusting a device.

    Attributes:
        device_id: New record id.
        remember_token: Bearer secret for the remember cookie.
        expires_at: Trust expiry.
    """

    device_id: UUID
    remember_token: str
    expires_at: datetime


class DeviceTrustService:
    """Grant, check and revoke device trust."""

    def __init__(
        self,
        device_repo: TrustedDeviceRepository,
        token_generator: SecureTokenGenerator,
        enricher: DeviceEnricher,
        notifications: NotificationDispatcher,
        logger: LoggerProtocol,
        *,
        trust_days: int = TRUSTED_DEVICE_DAYS,
    ) -> None:
        self._device_repo = device_repo
        self._token_generator = token_generator
        self._enricher = enricher
        self._notifications = notifications
        self._logger = logger
        self._trust_ttl = timedelta(days=trust_days)

    async def is_trusted(
        self,
        user_id: UUID,
        fingerprint: str | None,
        remember_token: str | None = None,
    ) -> bool:
        """Check for an active trust record.

        When ``remember_token`` is given it must match the record. A hit
        refreshes ``last_used_at``.
        """
        if not fingerprint:
            return False
        device = await self._device_repo.find_active(
            user_id, fingerprint, remember_token=remember_token
        )
        if device is None:
            return False
        await self._device_repo.touch(device.id, datetime.now(UTC))
        return True

    async def trust(self, user_id: UUID, data: TrustDeviceInput) -> TrustedDeviceGrant:
        """Trust a device for 30 days and alert the user by email."""
        details = self._enricher.enrich(data.user_agent)
        now = datetime.now(UTC)
        device = TrustedDevice(
            id=uuid7(),
            user_id=user_id,
            device_fingerprint=data.device_fingerprint,
            remember_token=self._token_generator.generate_token(),
            expires_at=now + self._trust_ttl,
            device_name=details.device_name,
            device_type=details.device_type,
            browser=details.browser,
            os=details.os,
            ip_address=data.ip_address,
            location=data.location,
            city=data.city,
            country=data.country,
            last_used_at=now,
            created_at=now,
        )
        await self._device_repo.save(device)

        self._logger.info(
            "Device trusted",
            user_id=str(user_id),
            device_id=str(device.id),
            device_name=device.device_name,
        )
        await notify(
            self._notifications,
            self._logger,
            NotificationKind.SECURITY_ALERT,
            data.email,
            {
                "alert_type": "device_trusted",
                "device_name": device.device_name,
                "location": data.location or "Unknown",
                "ip_address": data.ip_address,
                "timestamp": now.isoformat(),
            },
            user_id=user_id,
        )

        return TrustedDeviceGrant(
            device_id=device.id,
            remember_token=device.remember_token,
            expires_at=device.expires_at,
        )

    async def is_new_device(self, user_id: UUID, fingerprint: str | None) -> bool:
        """True unless the (user, fingerprint) pair has an unrevoked trust record.

        Expired grants still mark the device as known; revoked ones do not.
        """
        if not fingerprint:
            return True
        return await self._device_repo.count_by_fingerprint(user_id, fingerprint) == 0

    async def list_devices(self, user_id: UUID) -> list[TrustedDevice]:
        return await self._device_repo.list_active_by_user(user_id)

    async def revoke(self, user_id: UUID, device_id: UUID) -> Result[None, NotFoundError]:
        """Revoke one device owned by ``user_id``.

        A device of another user is reported as missing.
        """
        device = await self._device_repo.find_by_id(device_id)
        if device is None or device.user_id != user_id or device.is_revoked:
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.DEVICE_NOT_FOUND,
                    message="Device not found",
                    resource_type="TrustedDevice",
                    resource_id=str(device_id),
                )
            )
        await self._device_repo.revoke(device.id, DeviceRevokeReason.USER_REVOKED)
        self._logger.info("Device revoked", user_id=str(user_id), device_id=str(device_id))
        return Success(value=None)

    async def revoke_all(self, user_id: UUID) -> int:
        revoked = await self._device_repo.revoke_all_for_user(
            user_id, DeviceRevokeReason.REVOKE_ALL
        )
        self._logger.info("Devices revoked", user_id=str(user_id), revoked_count=revoked)
        return revoked

    async def find_by_remember_token(self, remember_token: str) -> TrustedDevice | None:
        return await self._device_repo.find_by_remember_token(remember_token)

    async def clean_expired(self) -> int:
        """Purge expired trust records. Meant for a scheduled job."""
        purged = await self._device_repo.delete_expired(datetime.now(UTC))
        if purged:
            self._logger.info("Expired devices purged", purged_count=purged)
        return purged
