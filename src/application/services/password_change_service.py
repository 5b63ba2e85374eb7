"""Password replacement shared by reset and change flows.

Flow:
1. Hash the new password (bcrypt, off the event loop)
2. Store it and clear the lockout state
3. Revoke sessions and refresh tokens (optionally sparing one session)
4. Record a ``password_changed`` security event
5. Queue the ``password_changed`` email
"""

from datetime import UTC, datetime
from uuid import UUID

from src.application.services.notifications import notify
from src.application.services.risk_engine import LoginContext, RiskEngine
from src.application.services.session_registry import SessionRegistry
from src.domain.entities import User
from src.domain.enums import NotificationKind, SecurityEventType, SecuritySeverity
from src.domain.protocols import (
    LoggerProtocol,
    NotificationDispatcher,
    PasswordHashingProtocol,
    UserRepository,
)


class PasswordChangeService:
    """Replace a user's password and cascade the consequences."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_service: PasswordHashingProtocol,
        session_registry: SessionRegistry,
        risk_engine: RiskEngine,
        notifications: NotificationDispatcher,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._password_service = password_service
        self._session_registry = session_registry
        self._risk_engine = risk_engine
        self._notifications = notifications
        self._logger = logger

    async def replace_password(
        self,
        user: User,
        new_password: str,
        *,
        revoke_reason: str,
        via: str,
        except_session_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> int:
        """Store ``new_password`` and revoke the user's sessions.

        Args:
            user: Account to update.
            new_password: Validated plaintext password.
            revoke_reason: Reason stored on revoked sessions and tokens.
            via: ``reset`` or ``change`` (event metadata).
            except_session_id: Session that stays signed in.
            ip_address: Client IP.
            user_agent: Client user agent.

        Returns:
            Number of sessions revoked.
        """
        now = datetime.now(UTC)
        password_hash = await self._password_service.hash_password(new_password)
        await self._user_repo.update_fields(
            user.id,
            password_hash=password_hash,
            failed_login_attempts=0,
            locked_until=None,
            updated_at=now,
        )

        revoked = await self._session_registry.revoke_all(
            user.id, revoke_reason, except_session_id=except_session_id
        )

        await self._risk_engine.record_event(
            LoginContext(
                user_id=user.id,
                email=user.email,
                ip_address=ip_address,
                user_agent=user_agent,
            ),
            SecurityEventType.PASSWORD_CHANGED,
            SecuritySeverity.MEDIUM,
            metadata={"via": via, "sessions_revoked": revoked},
        )

        await notify(
            self._notifications,
            self._logger,
            NotificationKind.PASSWORD_CHANGED,
            user.email,
            {
                "first_name": user.first_name,
                "changed_at": now.isoformat(),
                "ip_address": ip_address,
            },
            user_id=user.id,
        )
        self._logger.info(
            "Password replaced",
            user_id=str(user.id),
            via=via,
            sessions_revoked=revoked,
        )
        return revoked
