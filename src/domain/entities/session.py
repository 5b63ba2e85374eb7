"""Session domain entity.

Pure business logic, no framework dependencies.

A session is created for every successful login and is the stateful half
of authentication: an access token whose signature verifies is still
rejected once its session is revoked.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(slots=True, kw_only=True)
class Session:
    """Authenticated login session.

    Business Rules:
        - Active means not revoked and not expired
        - Tokens are stored as SHA-256 digests, never raw
        - Rotation (refresh) replaces both digests in place
        - Revocation is immediate and permanent

    Attributes:
        id: Unique session identifier.
        user_id: Owner.
        access_token_hash: Digest of the current access token.
        refresh_token_hash: Digest of the current refresh token.
        ip_address: Client IP at creation.
        user_agent: Raw user agent string.
        device_fingerprint: Client-supplied fingerprint, if any.
        device_info: Parsed device summary ("Chrome 120 on macOS 14").
        location: Resolved location ("Bogotá, Colombia").
        created_at: Creation time.
        last_activity_at: Last validated request.
        expires_at: Absolute expiry (matches the refresh token).
        is_revoked: Revocation flag.
        revoked_at: Revocation time.
        revoked_reason: Revocation reason ("User logout", "Password reset", ...).

    Example:
        >>> session = Session(
        ...     id=uuid7(),
        ...     user_id=user_id,
        ...     access_token_hash=digest(access),
        ...     refresh_token_hash=digest(refresh),
        ...     expires_at=datetime.now(UTC) + timedelta(days=7),
        ... )
        >>> session.is_active()
        True
        >>> session.revoke("User logout")
        >>> session.is_active()
        False
    """

    id: UUID
    user_id: UUID
    access_token_hash: str
    refresh_token_hash: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    device_fingerprint: str | None = None
    device_info: str | None = None
    location: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_activity_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_reason: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """True if the absolute expiry has passed."""
        return self.expires_at <= (now or datetime.now(UTC))

    def is_active(self, now: datetime | None = None) -> bool:
        """True if not revoked and not expired."""
        return not self.is_revoked and not self.is_expired(now)

    def revoke(self, reason: str) -> None:
        """Revoke the session. Revoking twice keeps the first reason."""
        if self.is_revoked:
            return
        self.is_revoked = True
        self.revoked_at = datetime.now(UTC)
        self.revoked_reason = reason

    def rotate(
        self,
        access_token_hash: str,
        refresh_token_hash: str,
        expires_at: datetime,
    ) -> None:
        """Swap in a freshly issued token pair."""
        self.access_token_hash = access_token_hash
        self.refresh_token_hash = refresh_token_hash
        self.expires_at = expires_at
        self.last_activity_at = datetime.now(UTC)

    def touch(self) -> None:
        """Record activity."""
        self.last_activity_at = datetime.now(UTC)
