"""Trusted device handlers (authenticated user).

Trusting a device lets later logins from it (fingerprint plus remember
token) skip the second-factor gate. Revoking a device makes its remember
token useless, so the next login from it goes through the gate again.
"""

from src.application.commands.session_commands import (
    RevokeAllTrustedDevices,
    RevokeTrustedDevice,
    TrustCurrentDevice,
)
from src.application.services import (
    DeviceTrustService,
    TrustDeviceInput,
    TrustedDeviceGrant,
)
from src.core.enums import ErrorCode
from src.core.errors import DomainError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.protocols import AuditProtocol, GeolocationResolver


class TrustCurrentDeviceHandler:
    """Handler for TrustCurrentDevice command."""

    def __init__(
        self,
        device_trust: DeviceTrustService,
        geolocation: GeolocationResolver,
        audit: AuditProtocol,
    ) -> None:
        self._device_trust = device_trust
        self._geolocation = geolocation
        self._audit = audit

    async def handle(self, cmd: TrustCurrentDevice) -> Result[TrustedDeviceGrant, DomainError]:
        """Trust the caller's device for 30 days.

        Returns:
            Success(TrustedDeviceGrant) carrying the remember token, or
            Failure(ValidationError) when no fingerprint was sent.
        """
        if not cmd.device_fingerprint:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="Device fingerprint is required",
                    field="device_fingerprint",
                )
            )

        location = (
            await self._geolocation.resolve(cmd.ip_address) if cmd.ip_address else None
        )
        grant = await self._device_trust.trust(
            cmd.user_id,
            TrustDeviceInput(
                email=cmd.email,
                device_fingerprint=cmd.device_fingerprint,
                user_agent=cmd.user_agent,
                ip_address=cmd.ip_address,
                location=location.display if location else None,
                city=location.city if location and not location.is_local else None,
                country=location.country if location and not location.is_local else None,
            ),
        )
        await self._audit.record(
            action=AuditAction.DEVICE_TRUSTED,
            resource_type="device",
            user_id=cmd.user_id,
            resource_id=grant.device_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        return Success(value=grant)


class RevokeTrustedDeviceHandler:
    """Handler for RevokeTrustedDevice command."""

    def __init__(self, device_trust: DeviceTrustService, audit: AuditProtocol) -> None:
        self._device_trust = device_trust
        self._audit = audit

    async def handle(self, cmd: RevokeTrustedDevice) -> Result[None, DomainError]:
        """Revoke one device.

        Returns:
            Success(None), or Failure(NotFoundError) with DEVICE_NOT_FOUND
            when the device is missing, revoked or owned by someone else.
        """
        result = await self._device_trust.revoke(cmd.user_id, cmd.device_id)
        if isinstance(result, Failure):
            return result

        await self._audit.record(
            action=AuditAction.DEVICE_REVOKED,
            resource_type="device",
            user_id=cmd.user_id,
            resource_id=cmd.device_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        return Success(value=None)


class RevokeAllTrustedDevicesHandler:
    """Handler for RevokeAllTrustedDevices command."""

    def __init__(self, device_trust: DeviceTrustService, audit: AuditProtocol) -> None:
        self._device_trust = device_trust
        self._audit = audit

    async def handle(self, cmd: RevokeAllTrustedDevices) -> Result[int, DomainError]:
        revoked = await self._device_trust.revoke_all(cmd.user_id)
        await self._audit.record(
            action=AuditAction.DEVICE_REVOKED,
            resource_type="device",
            user_id=cmd.user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={"revoked_count": revoked, "all": True},
        )
        return Success(value=revoked)
