"""SQLAlchemy repository implementations (adapters for the domain protocols)."""

from src.infrastructure.persistence.repositories.email_verification_token_repository import (
    SQLAlchemyEmailVerificationTokenRepository,
)
from src.infrastructure.persistence.repositories.password_reset_token_repository import (
    SQLAlchemyPasswordResetTokenRepository,
)
from src.infrastructure.persistence.repositories.refresh_token_repository import (
    SQLAlchemyRefreshTokenRepository,
)
from src.infrastructure.persistence.repositories.security_event_repository import (
    SQLAlchemySecurityEventRepository,
)
from src.infrastructure.persistence.repositories.session_repository import (
    SQLAlchemySessionRepository,
)
from src.infrastructure.persistence.repositories.trusted_device_repository import (
    SQLAlchemyTrustedDeviceRepository,
)
from src.infrastructure.persistence.repositories.user_repository import (
    SQLAlchemyUserRepository,
)

__all__ = [
    "SQLAlchemyEmailVerificationTokenRepository",
    "SQLAlchemyPasswordResetTokenRepository",
    "SQLAlchemyRefreshTokenRepository",
    "SQLAlchemySecurityEventRepository",
    "SQLAlchemySessionRepository",
    "SQLAlchemyTrustedDeviceRepository",
    "SQLAlchemyUserRepository",
]
