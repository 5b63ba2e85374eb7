"""Security event database model.

Append-only. The only permitted UPDATE sets the review columns. Rows older
than the retention window (90 days) are purged by ``delete_older_than``.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, JSONType


class SecurityEvent(BaseModel):
    """Security event.

    Indexes:
        - idx_security_events_user_time: (user_id, created_at) for velocity
          counts and last-known-location lookups
        - idx_security_events_user_ip: (user_id, ip_address) for new-IP checks
    """

    __tablename__ = "security_events"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    event_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    device_fingerprint: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    # "metadata" is reserved on declarative classes
    event_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSONType,
        nullable=False,
        default=dict,
    )

    action_taken: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    action_type: Mapped[str] = mapped_column(String(20), nullable=False, default="none")

    is_reviewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("idx_security_events_user_time", "user_id", "created_at"),
        Index("idx_security_events_user_ip", "user_id", "ip_address"),
    )

    def __repr__(self) -> str:
        return (
            f"<SecurityEvent("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"event_type={self.event_type!r}, "
            f"risk_score={self.risk_score}"
            f")>"
        )
