"""Route guards.

Composable capability checks turned into one FastAPI dependency:

- ``is_authenticated``: access token from the ``Authorization: Bearer``
  header or the ``access_token`` cookie, JWT verified, then backed by an
  active session (a revoked session rejects a still-valid JWT)
- ``has_role(*roles)``: role claim in ``roles``
- ``email_verified``: the account's email has been verified
- ``require_admin``: shorthand for ``require(has_role("admin", "super_admin"))``

``require`` always runs ``is_authenticated`` first, then the given checks
in order. Denials are 401 (not authenticated) or 403 (not allowed) with
deliberately vague messages.

Usage:
    @router.get("/me/sessions")
    async def list_sessions(
        current_user: CurrentUser = Depends(require(email_verified)),
    ):
        ...

    @router.get("/admin/security-stats")
    async def stats(
        current_user: CurrentUser = Depends(require_admin),
    ):
        ...
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.services import SessionRegistry
from src.core.container import get_auth_services, get_logger, get_token_service
from src.core.container.services import AuthServices
from src.core.result import Failure, Success
from src.domain.entities import User
from src.domain.protocols import (
    LoggerProtocol,
    TokenServiceProtocol,
    TokenType,
    UserRepository,
)
from src.presentation.cookies import ACCESS_TOKEN_COOKIE

NOT_AUTHENTICATED_MESSAGE = "Not authenticated"
FORBIDDEN_MESSAGE = "Forbidden"

# auto_error=False so the cookie can be used when the header is absent
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class CurrentUser:
    """Authenticated caller.

    Attributes:
        user_id: User's unique identifier (``sub`` claim).
        email: Email claim.
        role: Role claim.
        session_id: Session backing the access token.
        access_token: The raw access token (needed for logout).
    """

    user_id: UUID
    email: str
    role: str
    session_id: UUID
    access_token: str


class GuardContext:
    """State shared by the checks of one request."""

    def __init__(
        self,
        token: str | None,
        token_service: TokenServiceProtocol,
        session_registry: SessionRegistry,
        user_repo: UserRepository,
        logger: LoggerProtocol,
    ) -> None:
        self.token = token
        self.token_service = token_service
        self.session_registry = session_registry
        self.user_repo = user_repo
        self.logger = logger
        self.current_user: CurrentUser | None = None
        self._user: User | None = None

    async def load_user(self) -> User | None:
        """The caller's user record (loaded once)."""
        if self._user is None and self.current_user is not None:
            self._user = await self.user_repo.find_by_id(self.current_user.user_id)
        return self._user


Guard = Callable[[GuardContext], Awaitable[None]]


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=NOT_AUTHENTICATED_MESSAGE,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_MESSAGE)


async def is_authenticated(ctx: GuardContext) -> None:
    """Require a verified access token backed by an active session.

    Raises:
        HTTPException 401: Missing, invalid or expired token, or a session
            that is gone or revoked.
    """
    if ctx.current_user is not None:
        return
    if not ctx.token:
        raise unauthorized()

    match ctx.token_service.verify(ctx.token, TokenType.ACCESS):
        case Failure(error=reason):
            ctx.logger.debug("Access token rejected", reason=reason)
            raise unauthorized()
        case Success(value=claims):
            pass

    try:
        user_id = UUID(claims.subject.user_id)
    except ValueError as e:
        raise unauthorized() from e

    session = await ctx.session_registry.resolve(user_id, ctx.token)
    if session is None:
        ctx.logger.info("Access token without active session", user_id=str(user_id))
        raise unauthorized()

    ctx.current_user = CurrentUser(
        user_id=user_id,
        email=claims.subject.email,
        role=claims.subject.role,
        session_id=session.id,
        access_token=ctx.token,
    )


def has_role(*roles: str) -> Guard:
    """Require one of ``roles``.

    Raises:
        HTTPException 403: Role not allowed.
    """
    allowed = frozenset(roles)

    async def check(ctx: GuardContext) -> None:
        await is_authenticated(ctx)
        assert ctx.current_user is not None
        if ctx.current_user.role not in allowed:
            ctx.logger.info(
                "Role check denied",
                user_id=str(ctx.current_user.user_id),
                role=ctx.current_user.role,
            )
            raise forbidden()

    return check


async def email_verified(ctx: GuardContext) -> None:
    """Require a verified email address.

    Raises:
        HTTPException 401: The account no longer exists or is inactive.
        HTTPException 403: Email not verified.
    """
    await is_authenticated(ctx)
    user = await ctx.load_user()
    if user is None or not user.is_active:
        raise unauthorized()
    if not user.is_email_verified:
        raise forbidden()


def require(*checks: Guard) -> Callable[..., Awaitable[CurrentUser]]:
    """Combine checks into a FastAPI dependency returning the caller."""

    async def dependency(
        request: Request,
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
        token_service: Annotated[TokenServiceProtocol, Depends(get_token_service)],
        services: Annotated[AuthServices, Depends(get_auth_services)],
        logger: Annotated[LoggerProtocol, Depends(get_logger)],
    ) -> CurrentUser:
        token = credentials.credentials if credentials else request.cookies.get(ACCESS_TOKEN_COOKIE)
        ctx = GuardContext(
            token=token,
            token_service=token_service,
            session_registry=services.sessions,
            user_repo=services.repos.users,
            logger=logger,
        )
        await is_authenticated(ctx)
        for check in checks:
            await check(ctx)
        assert ctx.current_user is not None
        return ctx.current_user

    return dependency


get_current_user = require()
require_admin = require(has_role("admin", "super_admin"))
