"""List trusted devices query handler.

Remember tokens are secrets and are left out of the result.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.application.queries.session_queries import ListTrustedDevices
from src.application.services import DeviceTrustService
from src.core.errors import DomainError
from src.core.result import Result, Success
from src.domain.enums import DeviceType


@dataclass
class TrustedDeviceItem:
    """Individual device in list result."""

    id: UUID
    device_name: str
    device_type: DeviceType
    browser: str | None
    os: str | None
    location: str | None
    created_at: datetime
    last_used_at: datetime
    expires_at: datetime


class ListDevicesHandler:
    """Handler for listing trusted devices."""

    def __init__(self, device_trust: DeviceTrustService) -> None:
        self._device_trust = device_trust

    async def handle(
        self, query: ListTrustedDevices
    ) -> Result[list[TrustedDeviceItem], DomainError]:
        devices = await self._device_trust.list_devices(query.user_id)
        return Success(
            value=[
                TrustedDeviceItem(
                    id=device.id,
                    device_name=device.device_name,
                    device_type=device.device_type,
                    browser=device.browser,
                    os=device.os,
                    location=device.location,
                    created_at=device.created_at,
                    last_used_at=device.last_used_at,
                    expires_at=device.expires_at,
                )
                for device in devices
            ]
        )
