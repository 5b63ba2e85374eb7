"""SQLAlchemy implementation of PasswordResetTokenRepository."""

from src.domain.entities import PasswordResetToken
from src.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken as PasswordResetTokenModel,
)
from src.infrastructure.persistence.repositories.one_time_token_repository import (
    OneTimeTokenRepositoryBase,
)


class SQLAlchemyPasswordResetTokenRepository(OneTimeTokenRepositoryBase[PasswordResetToken]):
    """Password reset tokens (1 hour, single use)."""

    model = PasswordResetTokenModel
    entity = PasswordResetToken
