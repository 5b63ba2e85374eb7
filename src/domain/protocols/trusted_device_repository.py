"""Trusted device repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import TrustedDevice


class TrustedDeviceRepository(Protocol):
    """Trusted device persistence port."""

    async def save(self, device: TrustedDevice) -> None:
        """Insert a new trusted device."""
        ...

    async def find_by_id(self, device_id: UUID) -> TrustedDevice | None:
        """Find a device by ID (any state)."""
        ...

    async def find_active(
        self,
        user_id: UUID,
        fingerprint: str,
        *,
        remember_token: str | None = None,
    ) -> TrustedDevice | None:
        """Find a non-revoked, unexpired device for (user, fingerprint).

        When ``remember_token`` is given it must match as well.
        """
        ...

    async def find_by_remember_token(self, remember_token: str) -> TrustedDevice | None:
        """Find a non-revoked, unexpired device by remember token."""
        ...

    async def list_active_by_user(self, user_id: UUID) -> list[TrustedDevice]:
        """Active devices of a user, most recently used first."""
        ...

    async def count_by_fingerprint(self, user_id: UUID, fingerprint: str) -> int:
        """Count unrevoked records for (user, fingerprint), expired ones included."""
        ...

    async def touch(self, device_id: UUID, at: datetime) -> None:
        """Set ``last_used_at``."""
        ...

    async def revoke(self, device_id: UUID, reason: str) -> bool:
        """Revoke one device. True if it transitioned to revoked."""
        ...

    async def revoke_all_for_user(self, user_id: UUID, reason: str) -> int:
        """Revoke every active device of a user."""
        ...

    async def delete_expired(self, before: datetime) -> int:
        """Purge devices that expired before ``before``."""
        ...
