"""Trusted device database model.

A device the user chose to trust after completing two-factor login. The
server-issued ``remember_token`` travels in the ``trusted_device`` cookie and
must match together with the client fingerprint.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class TrustedDevice(BaseMutableModel):
    """Trusted device.

    Indexes:
        - idx_trusted_devices_lookup: (user_id, device_fingerprint, is_revoked)
        - ix_trusted_devices_remember_token: unique cookie lookup
    """

    __tablename__ = "trusted_devices"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    device_fingerprint: Mapped[str] = mapped_column(String(255), nullable=False)

    remember_token: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    device_name: Mapped[str] = mapped_column(String(255), nullable=False)
    device_type: Mapped[str] = mapped_column(String(20), nullable=False, default="desktop")
    browser: Mapped[str | None] = mapped_column(String(100), nullable=True)
    os: Mapped[str | None] = mapped_column(String(100), nullable=True)

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)

    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    last_used_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index(
            "idx_trusted_devices_lookup",
            "user_id",
            "device_fingerprint",
            "is_revoked",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<TrustedDevice("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"device_name={self.device_name!r}, "
            f"is_revoked={self.is_revoked}"
            f")>"
        )
