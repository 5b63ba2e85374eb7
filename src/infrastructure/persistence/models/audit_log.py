"""Audit log database model.

Immutable: rows are inserted by the audit adapter and never updated or
deleted by the application (the migration adds PostgreSQL RULES blocking
UPDATE and DELETE).
"""

from typing import Any
from uuid import UUID

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, JSONType


class AuditLog(BaseModel):
    """Audit trail entry (append-only).

    Indexes:
        - idx_audit_user_action: (user_id, action) for per-user history
        - idx_audit_resource: (resource_type, resource_id)
    """

    __tablename__ = "audit_logs"

    action: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="AuditAction value (user_login_success, password_changed, ...)",
    )

    user_id: Mapped[UUID | None] = mapped_column(
        nullable=True,
        comment="User concerned (None when unknown, e.g. failed login)",
    )

    resource_type: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_id: Mapped[UUID | None] = mapped_column(nullable=True)

    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)

    context: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType,
        nullable=True,
        default=None,
    )

    __table_args__ = (
        Index("idx_audit_user_action", "user_id", "action"),
        Index("idx_audit_resource", "resource_type", "resource_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog("
            f"id={self.id}, "
            f"action={self.action!r}, "
            f"user_id={self.user_id}, "
            f"created_at={self.created_at}"
            f")>"
        )
