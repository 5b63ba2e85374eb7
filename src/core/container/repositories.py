"""Repository dependency factories.

Request-scoped repository instances. Every repository of a request shares
the request's ``AsyncSession``, so all writes of one command land in the
same unit of work (committed by ``get_db_session``).
"""

from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.container.infrastructure import get_db_session
from src.domain.protocols import (
    EmailVerificationTokenRepository,
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    SecurityEventRepository,
    SessionRepository,
    TrustedDeviceRepository,
    UserRepository,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestRepositories:
    """Repositories bound to one database session."""

    users: UserRepository
    sessions: SessionRepository
    refresh_tokens: RefreshTokenRepository
    devices: TrustedDeviceRepository
    security_events: SecurityEventRepository
    verification_tokens: EmailVerificationTokenRepository
    reset_tokens: PasswordResetTokenRepository


def build_repositories(session: AsyncSession) -> RequestRepositories:
    """Create the SQLAlchemy repositories for ``session``."""
    from src.infrastructure.persistence.repositories import (
        SQLAlchemyEmailVerificationTokenRepository,
        SQLAlchemyPasswordResetTokenRepository,
        SQLAlchemyRefreshTokenRepository,
        SQLAlchemySecurityEventRepository,
        SQLAlchemySessionRepository,
        SQLAlchemyTrustedDeviceRepository,
        SQLAlchemyUserRepository,
    )

    return RequestRepositories(
        users=SQLAlchemyUserRepository(session=session),
        sessions=SQLAlchemySessionRepository(session=session),
        refresh_tokens=SQLAlchemyRefreshTokenRepository(session=session),
        devices=SQLAlchemyTrustedDeviceRepository(session=session),
        security_events=SQLAlchemySecurityEventRepository(session=session),
        verification_tokens=SQLAlchemyEmailVerificationTokenRepository(session=session),
        reset_tokens=SQLAlchemyPasswordResetTokenRepository(session=session),
    )


async def get_repositories(
    session: AsyncSession = Depends(get_db_session),
) -> RequestRepositories:
    """Get the request's repositories (request-scoped).

    Usage:
        @router.get("/auth/sessions")
        async def list_sessions(repos: RequestRepositories = Depends(get_repositories)):
            ...
    """
    return build_repositories(session)
