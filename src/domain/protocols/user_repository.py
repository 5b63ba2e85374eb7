"""User repository protocol.

Port for the credential store. Besides plain CRUD it exposes the two
lockout operations that must be atomic at the storage layer
(``increment_failed_login`` and ``consume_backup_code``) so that parallel
login attempts cannot lose updates.
"""

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.core.errors import ConflictError
from src.core.result import Result
from src.domain.entities import User
from src.domain.enums import UserRole


class UserRepository(Protocol):
    """User persistence port.

    Implementations:
        - SQLAlchemyUserRepository: PostgreSQL (production)
        - InMemoryUserRepository: unit tests and local development
    """

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID.

        Returns:
            User if found, None otherwise.
        """
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive).

        Returns:
            User if found, None otherwise.
        """
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether an email is already registered (case-insensitive)."""
        ...

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Insert a new user.

        Returns:
            Success(None), or Failure(ConflictError) with EMAIL_ALREADY_EXISTS
            when the email is taken, including by a concurrent insert.
        """
        ...

    async def update(self, user: User) -> None:
        """Persist every field of an existing user."""
        ...

    async def update_fields(self, user_id: UUID, **fields: Any) -> None:
        """Patch selected columns of a user.

        Args:
            user_id: User to update.
            **fields: Attribute names and new values.
        """
        ...

    async def increment_failed_login(
        self,
        user_id: UUID,
        *,
        max_attempts: int,
        lock_until: datetime,
    ) -> int:
        """Atomically count a failed password check.

        When the incremented counter reaches ``max_attempts`` the account is
        locked until ``lock_until`` in the same statement.

        Returns:
            The counter value after the increment.
        """
        ...

    async def reset_failed_login(self, user_id: UUID, *, last_login_at: datetime) -> None:
        """Clear the failure counter and lock, and record the login time."""
        ...

    async def consume_backup_code(self, user_id: UUID, code_hash: str) -> int | None:
        """Atomically remove one backup code hash.

        Returns:
            Remaining code count if the hash was present and removed,
            None if it was not present.
        """
        ...

    async def count(
        self,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
        is_email_verified: bool | None = None,
    ) -> int:
        """Count users matching every given filter."""
        ...
