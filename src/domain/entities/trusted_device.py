"""Trusted device entity.

A device the user explicitly marked as trusted. The fingerprint identifies
the device; the remember token (server-issued, high entropy) is the bearer
secret that lets it skip the second factor.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from src.domain.enums import DeviceType


@dataclass(slots=True, kw_only=True)
class TrustedDevice:
    """Trusted device record.

    Attributes:
        id: Record identifier.
        user_id: Owner.
        device_fingerprint: Client-supplied fingerprint.
        device_name: Human-readable name ("Chrome 120 on Windows 10").
        device_type: Form factor.
        browser: "name version".
        os: "name version".
        ip_address: IP when trust was granted.
        location: Resolved location summary.
        city: Resolved city.
        country: Resolved country.
        remember_token: 64 hex characters, unique.
        expires_at: Trust expiry (30 days after grant).
        is_revoked: Revocation flag.
        revoked_at: Revocation time.
        revoked_reason: Revocation reason.
        last_used_at: Last successful trust check.
        created_at: Grant time.
    """

    id: UUID
    user_id: UUID
    device_fingerprint: str
    remember_token: str
    expires_at: datetime
    device_name: str = "Unknown device"
    device_type: DeviceType = DeviceType.DESKTOP
    browser: str | None = None
    os: str | None = None
    ip_address: str | None = None
    location: str | None = None
    city: str | None = None
    country: str | None = None
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_reason: str | None = None
    last_used_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_active(self, now: datetime | None = None) -> bool:
        """True if not revoked and not expired."""
        return not self.is_revoked and self.expires_at > (now or datetime.now(UTC))

    def revoke(self, reason: str) -> None:
        """Revoke trust."""
        self.is_revoked = True
        self.revoked_at = datetime.now(UTC)
        self.revoked_reason = reason
