"""SQLAlchemy implementation of the UserRepository protocol.

Maps between domain User entities and the ``users`` table. Writes are
flushed, not committed: the request's unit of work commits.

Atomic operations:
    - increment_failed_login: single ``UPDATE ... RETURNING`` so concurrent
      failed logins cannot lose increments
    - consume_backup_code: conditional ``array_remove`` so the same backup
      code cannot be consumed twice
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.enums import ErrorCode
from src.core.errors import ConflictError
from src.core.result import Failure, Result, Success
from src.domain.entities import User
from src.domain.enums import UserRole
from src.infrastructure.persistence.models.user import User as UserModel

_UPDATABLE_FIELDS = frozenset(
    {
        "email",
        "password_hash",
        "first_name",
        "last_name",
        "role",
        "is_active",
        "is_email_verified",
        "email_verified_at",
        "failed_login_attempts",
        "locked_until",
        "last_login_at",
        "two_factor_enabled",
        "two_factor_secret",
        "backup_code_hashes",
        "accepted_terms_at",
    }
)

_EMAIL_UNIQUE_INDEX = "ix_users_email"


def _duplicate_email_error() -> ConflictError:
    return ConflictError(
        code=ErrorCode.EMAIL_ALREADY_EXISTS,
        message="Email already registered",
        resource_type="User",
        conflicting_field="email",
    )


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of UserRepository.

    Does NOT inherit from the protocol (structural typing).

    Example:
        >>> async with database.get_session() as session:
        ...     repo = SQLAlchemyUserRepository(session)
        ...     user = await repo.find_by_email("ana@example.com")
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        user_model = await self.session.get(UserModel, user_id)
        if user_model is None:
            return None
        return self._to_domain(user_model)

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive; emails are stored lower-case)."""
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        result = await self.session.execute(stmt)
        user_model = result.scalar_one_or_none()
        if user_model is None:
            return None
        return self._to_domain(user_model)

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Insert a new user.

        The insert runs in a SAVEPOINT so a unique-email violation (two
        registrations racing past the existence check) leaves the request's
        transaction usable.

        Returns:
            Success(None), or Failure(ConflictError) with EMAIL_ALREADY_EXISTS.

        Raises:
            IntegrityError: For any other constraint violation.
        """
        try:
            async with self.session.begin_nested():
                self.session.add(self._to_model(user))
                await self.session.flush()
        except IntegrityError as e:
            if _EMAIL_UNIQUE_INDEX not in str(e.orig):
                raise
            return Failure(error=_duplicate_email_error())
        return Success(value=None)

    async def update(self, user: User) -> None:
        """Write every mutable field of ``user``.

        Raises:
            NoResultFound: If the user does not exist.
        """
        stmt = select(UserModel).where(UserModel.id == user.id)
        result = await self.session.execute(stmt)
        user_model = result.scalar_one()

        for name in _UPDATABLE_FIELDS:
            value = getattr(user, name)
            setattr(user_model, name, value.value if name == "role" else value)
        await self.session.flush()

    async def update_fields(self, user_id: UUID, **fields: Any) -> None:
        """Patch selected columns without loading the row.

        Raises:
            ValueError: If a field is not an updatable column.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")
        if "role" in fields and isinstance(fields["role"], UserRole):
            fields["role"] = fields["role"].value
        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()

        stmt = update(UserModel).where(UserModel.id == user_id).values(**fields)
        await self.session.execute(stmt)

    async def increment_failed_login(
        self,
        user_id: UUID,
        *,
        max_attempts: int,
        lock_until: datetime,
    ) -> int:
        """Atomically increment the counter, locking at ``max_attempts``.

        Returns:
            The counter value after the increment (0 if the user is missing).
        """
        incremented = UserModel.failed_login_attempts + 1
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                failed_login_attempts=incremented,
                locked_until=case(
                    (incremented >= max_attempts, lock_until),
                    else_=UserModel.locked_until,
                ),
            )
            .returning(UserModel.failed_login_attempts)
        )
        result = await self.session.execute(stmt)
        attempts = result.scalar_one_or_none()
        return int(attempts) if attempts is not None else 0

    async def reset_failed_login(self, user_id: UUID, *, last_login_at: datetime) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(failed_login_attempts=0, locked_until=None, last_login_at=last_login_at)
        )
        await self.session.execute(stmt)

    async def consume_backup_code(self, user_id: UUID, code_hash: str) -> int | None:
        """Remove one backup code hash if present.

        Returns:
            Remaining code count, or None if the hash was not present.
        """
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.backup_code_hashes.any(code_hash),
            )
            .values(
                backup_code_hashes=func.array_remove(UserModel.backup_code_hashes, code_hash)
            )
            .returning(func.cardinality(UserModel.backup_code_hashes))
        )
        result = await self.session.execute(stmt)
        remaining = result.scalar_one_or_none()
        return int(remaining) if remaining is not None else None

    async def count(
        self,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
        is_email_verified: bool | None = None,
    ) -> int:
        stmt = select(func.count()).select_from(UserModel)
        if role is not None:
            stmt = stmt.where(UserModel.role == role.value)
        if is_active is not None:
            stmt = stmt.where(UserModel.is_active == is_active)
        if is_email_verified is not None:
            stmt = stmt.where(UserModel.is_email_verified == is_email_verified)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    def _to_domain(self, user_model: UserModel) -> User:
        return User(
            id=user_model.id,
            email=user_model.email,
            password_hash=user_model.password_hash,
            first_name=user_model.first_name,
            last_name=user_model.last_name,
            role=UserRole(user_model.role),
            is_active=user_model.is_active,
            is_email_verified=user_model.is_email_verified,
            email_verified_at=user_model.email_verified_at,
            failed_login_attempts=user_model.failed_login_attempts,
            locked_until=user_model.locked_until,
            last_login_at=user_model.last_login_at,
            two_factor_enabled=user_model.two_factor_enabled,
            two_factor_secret=user_model.two_factor_secret,
            backup_code_hashes=list(user_model.backup_code_hashes or []),
            accepted_terms_at=user_model.accepted_terms_at,
            created_at=user_model.created_at,
            updated_at=user_model.updated_at,
        )

    def _to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            email=user.email.strip().lower(),
            password_hash=user.password_hash,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            is_active=user.is_active,
            is_email_verified=user.is_email_verified,
            email_verified_at=user.email_verified_at,
            failed_login_attempts=user.failed_login_attempts,
            locked_until=user.locked_until,
            last_login_at=user.last_login_at,
            two_factor_enabled=user.two_factor_enabled,
            two_factor_secret=user.two_factor_secret,
            backup_code_hashes=list(user.backup_code_hashes),
            accepted_terms_at=user.accepted_terms_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
