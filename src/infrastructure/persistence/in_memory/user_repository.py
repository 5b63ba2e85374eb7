"""In-memory UserRepository."""

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.errors import ConflictError
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import UserRole


class InMemoryUserRepository:
    """Dict-backed UserRepository.

    Stored entities are copied in and out, so callers cannot mutate state
    without going through the repository.
    """

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self._users.get(user_id)
        return replace(user, backup_code_hashes=list(user.backup_code_hashes)) if user else None

    async def find_by_email(self, email: str) -> User | None:
        normalized = email.strip().lower()
        for user in self._users.values():
            if user.email == normalized:
                return await self.find_by_id(user.id)
        return None

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Insert a user; a taken email is a Failure, as with the unique index."""
        normalized = user.email.strip().lower()
        if await self.exists_by_email(normalized):
            return Failure(
                error=ConflictError(
                    code=ErrorCode.EMAIL_ALREADY_EXISTS,
                    message="Email already registered",
                    resource_type="User",
                    conflicting_field="email",
                )
            )
        self._users[user.id] = replace(
            user,
            email=normalized,
            backup_code_hashes=list(user.backup_code_hashes),
        )
        return Success(value=None)

    async def update(self, user: User) -> None:
        if user.id not in self._users:
            raise KeyError(user.id)
        self._users[user.id] = replace(
            user,
            backup_code_hashes=list(user.backup_code_hashes),
            updated_at=datetime.now(UTC),
        )

    async def update_fields(self, user_id: UUID, **fields: Any) -> None:
        user = self._users.get(user_id)
        if user is None:
            return
        unknown = [name for name in fields if not hasattr(user, name)]
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")
        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()
        self._users[user_id] = replace(user, updated_at=datetime.now(UTC), **fields)

    async def increment_failed_login(
        self,
        user_id: UUID,
        *,
        max_attempts: int,
        lock_until: datetime,
    ) -> int:
        user = self._users.get(user_id)
        if user is None:
            return 0
        user.failed_login_attempts += 1
        if user.failed_login_attempts >= max_attempts:
            user.locked_until = lock_until
        return user.failed_login_attempts

    async def reset_failed_login(self, user_id: UUID, *, last_login_at: datetime) -> None:
        user = self._users.get(user_id)
        if user is None:
            return
        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_login_at = last_login_at

    async def consume_backup_code(self, user_id: UUID, code_hash: str) -> int | None:
        user = self._users.get(user_id)
        if user is None or code_hash not in user.backup_code_hashes:
            return None
        user.backup_code_hashes.remove(code_hash)
        return len(user.backup_code_hashes)

    async def count(
        self,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
        is_email_verified: bool | None = None,
    ) -> int:
        return sum(
            1
            for user in self._users.values()
            if (role is None or user.role == role)
            and (is_active is None or user.is_active == is_active)
            and (is_email_verified is None or user.is_email_verified == is_email_verified)
        )
