"""Session database model.

One row per logical login. The raw JWTs are never stored: the row keeps
SHA-256 digests of the current access and refresh tokens, replaced in place
on every refresh.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class Session(BaseMutableModel):
    """Authenticated session.

    Lifecycle:
        1. Created on login
        2. Rotated in place on refresh (new token digests, new expiry)
        3. Touched on authenticated requests (last_activity_at)
        4. Revoked on logout, password change/reset or explicit revoke

    Indexes:
        - ix_sessions_access_token_hash: request validation
        - ix_sessions_refresh_token_hash: rotation lookup
        - idx_sessions_user_active: (user_id, is_revoked, expires_at)
    """

    __tablename__ = "sessions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    access_token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="SHA-256 hex digest of the current access token",
    )

    refresh_token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="SHA-256 hex digest of the current refresh token",
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    device_fingerprint: Mapped[str | None] = mapped_column(String(255), nullable=True)

    device_info: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Parsed device description (\"Chrome 120 on Windows 10\")",
    )

    location: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Resolved location (\"Madrid, Spain\")",
    )

    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        Index("idx_sessions_user_active", "user_id", "is_revoked", "expires_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Session("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"is_revoked={self.is_revoked}, "
            f"expires_at={self.expires_at}"
            f")>"
        )
