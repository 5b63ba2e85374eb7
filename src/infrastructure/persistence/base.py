"""Base model and mixins for all database tables.

This module provides:
- BaseModel: Base class for ALL models (id, created_at)
- TimestampMixin: Adds updated_at
- BaseMutableModel: Base for mutable tables (combines the above)

Domain entities do NOT inherit from these; repositories map between the
two.

Architecture:
    BaseModel (id, created_at)
        ├── BaseMutableModel (+ updated_at)
        │   ├── User
        │   ├── Session
        │   ├── RefreshToken
        │   └── TrustedDevice
        │
        ├── SecurityEvent (append-only, review fields only)
        └── AuditLog (immutable)
"""

from datetime import datetime
from typing import Any
from uuid import UUID as PythonUUID

from sqlalchemy import JSON, DateTime, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extensions import uuid7

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class BaseModel(DeclarativeBase):
    """Base class for all database models.

    Provides:
        - id: UUIDv7 primary key (time-ordered, index friendly)
        - created_at: Row creation time (UTC)
    """

    __abstract__ = True

    id: Mapped[PythonUUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid7,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self) -> dict[str, Any]:
        """Identifier and creation time (for debugging/logging)."""
        return {
            "id": str(self.id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TimestampMixin:
    """Adds an ``updated_at`` column maintained on UPDATE."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = super().to_dict()  # type: ignore[misc]
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data


class BaseMutableModel(TimestampMixin, BaseModel):
    """Base class for tables whose rows change after insert."""

    __abstract__ = True
