"""In-memory TrustedDeviceRepository."""

from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.domain.entities import TrustedDevice


class InMemoryTrustedDeviceRepository:
    """Dict-backed TrustedDeviceRepository."""

    def __init__(self) -> None:
        self._devices: dict[UUID, TrustedDevice] = {}

    async def save(self, device: TrustedDevice) -> None:
        self._devices[device.id] = replace(device)

    async def find_by_id(self, device_id: UUID) -> TrustedDevice | None:
        device = self._devices.get(device_id)
        return replace(device) if device else None

    async def find_active(
        self,
        user_id: UUID,
        fingerprint: str,
        *,
        remember_token: str | None = None,
    ) -> TrustedDevice | None:
        for device in self._devices.values():
            if (
                device.user_id == user_id
                and device.device_fingerprint == fingerprint
                and device.is_active()
                and (remember_token is None or device.remember_token == remember_token)
            ):
                return replace(device)
        return None

    async def find_by_remember_token(self, remember_token: str) -> TrustedDevice | None:
        for device in self._devices.values():
            if device.remember_token == remember_token and device.is_active():
                return replace(device)
        return None

    async def list_active_by_user(self, user_id: UUID) -> list[TrustedDevice]:
        active = [
            replace(d)
            for d in self._devices.values()
            if d.user_id == user_id and d.is_active()
        ]
        return sorted(active, key=lambda d: d.last_used_at, reverse=True)

    async def count_by_fingerprint(self, user_id: UUID, fingerprint: str) -> int:
        return sum(
            1
            for d in self._devices.values()
            if d.user_id == user_id
            and d.device_fingerprint == fingerprint
            and not d.is_revoked
        )

    async def touch(self, device_id: UUID, at: datetime) -> None:
        device = self._devices.get(device_id)
        if device is not None:
            device.last_used_at = at

    async def revoke(self, device_id: UUID, reason: str) -> bool:
        device = self._devices.get(device_id)
        if device is None or device.is_revoked:
            return False
        device.revoke(reason)
        return True

    async def revoke_all_for_user(self, user_id: UUID, reason: str) -> int:
        revoked = 0
        for device in self._devices.values():
            if device.user_id == user_id and not device.is_revoked:
                device.revoke(reason)
                revoked += 1
        return revoked

    async def delete_expired(self, before: datetime) -> int:
        expired = [did for did, d in self._devices.items() if d.expires_at < before]
        for device_id in expired:
            del self._devices[device_id]
        return len(expired)
