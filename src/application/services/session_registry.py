"""Session registry.

One session per logical login. A signed access token is only honoured
while its session exists, is not revoked and has not expired, so revoking
a session invalidates its tokens immediately regardless of JWT expiry.

Raw tokens never reach storage: sessions and refresh-token records hold
SHA-256 digests (``digest_token``).

Usage:
    registry = SessionRegistry(session_repo, refresh_token_repo, logger)

    session = await registry.create(
        user_id=user.id,
        access_token=access,
        refresh_token=refresh,
        expires_at=expires_at,
        ip_address="203.0.113.7",
        user_agent="Mozilla/5.0 ...",
    )
    assert await registry.validate(user.id, access)
"""

import hashlib
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7

from src.domain.entities import Session
from src.domain.protocols import (
    LoggerProtocol,
    RefreshTokenRepository,
    SessionRepository,
)


def digest_token(token: str) -> str:
    """SHA-256 hex digest used to store and look up tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionRevokeReason:
    """Revocation reasons stored on sessions and refresh tokens."""

    LOGOUT = "User logout"
    USER_REVOKED = "User revoked"
    REVOKE_ALL = "User revoked all sessions"
    PASSWORD_CHANGED = "Password changed"
    PASSWORD_RESET = "Password reset"
    ROTATED = "Rotated"
    EXPIRED = "Expired"


class SessionRegistry:
    """Create, validate, rotate and revoke sessions."""

    def __init__(
        self,
        session_repo: SessionRepository,
        refresh_token_repo: RefreshTokenRepository,
        logger: LoggerProtocol,
    ) -> None:
        self._session_repo = session_repo
        self._refresh_token_repo = refresh_token_repo
        self._logger = logger

    async def create(
        self,
        *,
        user_id: UUID,
        access_token: str,
        refresh_token: str,
        expires_at: datetime,
        ip_address: str | None = None,
        user_agent: str | None = None,
        device_fingerprint: str | None = None,
        device_info: str | None = None,
        location: str | None = None,
    ) -> Session:
        """Persist a new session for a freshly issued token pair."""
        now = datetime.now(UTC)
        session = Session(
            id=uuid7(),
            user_id=user_id,
            access_token_hash=digest_token(access_token),
            refresh_token_hash=digest_token(refresh_token),
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
            device_fingerprint=device_fingerprint,
            device_info=device_info,
            location=location,
            created_at=now,
            last_activity_at=now,
        )
        await self._session_repo.save(session)
        self._logger.info("Session created", user_id=str(user_id), session_id=str(session.id))
        return session

    async def find(self, user_id: UUID, access_token: str) -> Session | None:
        """Active session holding ``access_token``, if any."""
        return await self._session_repo.find_active_by_access_token(
            user_id, digest_token(access_token)
        )

    async def validate(self, user_id: UUID, access_token: str) -> bool:
        """Check that the access token is backed by an active session.

        Returns:
            False for a missing, revoked or expired session. Never raises
            for those cases.
        """
        return await self.resolve(user_id, access_token) is not None

    async def resolve(self, user_id: UUID, access_token: str) -> Session | None:
        """Active session behind ``access_token``, touching its activity time.

        The ``last_activity_at`` update is best effort.
        """
        session = await self.find(user_id, access_token)
        if session is None:
            return None

        try:
            await self._session_repo.touch(session.id, datetime.now(UTC))
        except Exception as e:
            self._logger.warning(
                "Session activity update failed",
                session_id=str(session.id),
                error_message=str(e),
            )
        return session

    async def rotate(
        self,
        *,
        old_refresh_token: str,
        new_access_token: str,
        new_refresh_token: str,
        expires_at: datetime,
    ) -> bool:
        """Swap the token pair of the session holding ``old_refresh_token``.

        Returns:
            True if a session was rotated.
        """
        session = await self._session_repo.find_active_by_refresh_token(
            digest_token(old_refresh_token)
        )
        if session is None:
            return False

        session.rotate(
            access_token_hash=digest_token(new_access_token),
            refresh_token_hash=digest_token(new_refresh_token),
            expires_at=expires_at,
        )
        await self._session_repo.update(session)
        return True

    async def revoke(
        self,
        *,
        reason: str,
        session_id: UUID | None = None,
        access_token: str | None = None,
        user_id: UUID | None = None,
    ) -> bool:
        """Revoke one session and its refresh tokens.

        Identify the session by ``session_id`` or by ``access_token`` (which
        needs ``user_id``). With ``user_id`` the session must belong to that
        user. Idempotent.

        Returns:
            True if this call revoked the session.

        Raises:
            ValueError: If neither identifier is given, or an access token
                is given without ``user_id``.
        """
        if session_id is not None:
            session = await self._session_repo.find_by_id(session_id)
        elif access_token is not None:
            if user_id is None:
                raise ValueError("user_id is required to revoke by access token")
            session = await self.find(user_id, access_token)
        else:
            raise ValueError("session_id or access_token is required")

        if session is None or (user_id is not None and session.user_id != user_id):
            return False

        revoked = await self._session_repo.revoke(session.id, reason)
        await self._refresh_token_repo.revoke_by_session(session.id, reason)
        if revoked:
            self._logger.info(
                "Session revoked",
                user_id=str(session.user_id),
                session_id=str(session.id),
                reason=reason,
            )
        return revoked

    async def revoke_all(
        self,
        user_id: UUID,
        reason: str,
        *,
        except_session_id: UUID | None = None,
    ) -> int:
        """Revoke every session of a user, and all their refresh tokens.

        With ``except_session_id`` that session and its refresh tokens
        survive (password change keeps the caller signed in).

        Returns:
            Number of sessions revoked. 0 if the store failed (logged).
        """
        try:
            revoked = await self._session_repo.revoke_all_for_user(
                user_id, reason, except_session_id=except_session_id
            )
            await self._refresh_token_repo.revoke_all_for_user(
                user_id, reason, except_session_id=except_session_id
            )
        except Exception as e:
            self._logger.error(
                "Failed to revoke sessions",
                error=e,
                user_id=str(user_id),
                reason=reason,
            )
            return 0

        self._logger.info(
            "Sessions revoked",
            user_id=str(user_id),
            revoked_count=revoked,
            reason=reason,
        )
        return revoked

    async def list_active(self, user_id: UUID) -> list[Session]:
        """Active sessions, most recently active first."""
        return await self._session_repo.find_active_by_user(user_id)


    async def purge_expired(self) -> tuple[int, int]:
        """Delete expired sessions and refresh-token records. Meant for a scheduled job.

        Returns:
            (sessions purged, refresh tokens purged).
        """
        now = datetime.now(UTC)
        # Refresh tokens first: deleting a session cascades to its tokens
        refresh_tokens = await self._refresh_token_repo.delete_expired(now)
        sessions = await self._session_repo.delete_expired(now)
        if sessions or refresh_tokens:
            self._logger.info(
                "Expired sessions purged",
                session_count=sessions,
                refresh_token_count=refresh_tokens,
            )
        return sessions, refresh_tokens
