"""Refresh token record.

Kept separately from Session so every rotation leaves an auditable chain:
each rotated record points at the digest of its successor.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class RefreshToken:
    """Persisted refresh token.

    Business Rules:
        - A revoked record never validates
        - Rotation revokes the record and sets ``replaced_by_token_hash``
        - Every successful validation bumps ``usage_count``

    Attributes:
        id: Record identifier.
        user_id: Owner.
        session_id: Session the token belongs to.
        token_hash: SHA-256 digest of the token (unique).
        expires_at: Expiry (7 or 30 days after issue).
        ip_address: Client IP at issue.
        user_agent: Client user agent at issue.
        is_revoked: Revocation flag.
        revoked_at: Revocation time.
        revoked_reason: Revocation reason.
        replaced_by_token_hash: Successor digest after rotation.
        last_used_at: Last successful validation.
        usage_count: Number of successful validations.
        created_at: Issue time.
    """

    id: UUID
    user_id: UUID
    session_id: UUID
    token_hash: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_reason: str | None = None
    replaced_by_token_hash: str | None = None
    last_used_at: datetime | None = None
    usage_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if past expiry."""
        return self.expires_at <= (now or datetime.now(UTC))

    def is_valid(self, now: datetime | None = None) -> bool:
        """True if neither revoked nor expired."""
        return not self.is_revoked and not self.is_expired(now)

    def revoke(self, reason: str, replaced_by: str | None = None) -> None:
        """Revoke, optionally recording the successor digest."""
        self.is_revoked = True
        self.revoked_at = datetime.now(UTC)
        self.revoked_reason = reason
        if replaced_by is not None:
            self.replaced_by_token_hash = replaced_by

    def mark_used(self) -> None:
        """Record a successful validation."""
        self.last_used_at = datetime.now(UTC)
        self.usage_count += 1
