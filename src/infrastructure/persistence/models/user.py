"""User database model.

Security:
    - password_hash: bcrypt hash, never plaintext
    - two_factor_secret: never leaves the auth core
    - backup_code_hashes: HMAC digests only; consumed atomically with
      ``array_remove`` so a code cannot be used twice concurrently
    - failed_login_attempts / locked_until: lockout counters, incremented
      with a single ``UPDATE ... RETURNING``
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseMutableModel


class User(BaseMutableModel):
    """User credential record.

    Indexes:
        - ix_users_email: unique, login lookups (stored lower-case)
        - ix_users_role: admin statistics
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Email address (unique, lower-case)",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt password hash",
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="user",
        index=True,
        comment="user, admin or super_admin",
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_email_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )

    email_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    failed_login_attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Consecutive failed password checks (reset on success)",
    )

    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Account locked while in the future",
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    two_factor_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    two_factor_secret: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Base32 TOTP secret (pending or active)",
    )

    backup_code_hashes: Mapped[list[str]] = mapped_column(
        ARRAY(String(64)),
        nullable=False,
        default=list,
        comment="HMAC-SHA256 digests of unused backup codes",
    )

    accepted_terms_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<User("
            f"id={self.id}, "
            f"email={self.email!r}, "
            f"is_email_verified={self.is_email_verified}, "
            f"is_active={self.is_active}"
            f")>"
        )
