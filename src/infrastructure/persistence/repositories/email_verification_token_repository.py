"""SQLAlchemy implementation of EmailVerificationTokenRepository."""

from src.domain.entities import EmailVerificationToken
from src.infrastructure.persistence.models.email_verification_token import (
    EmailVerificationToken as EmailVerificationTokenModel,
)
from src.infrastructure.persistence.repositories.one_time_token_repository import (
    OneTimeTokenRepositoryBase,
)


class SQLAlchemyEmailVerificationTokenRepository(
    OneTimeTokenRepositoryBase[EmailVerificationToken]
):
    """Email verification tokens (24 hour, single use)."""

    model = EmailVerificationTokenModel
    entity = EmailVerificationToken
