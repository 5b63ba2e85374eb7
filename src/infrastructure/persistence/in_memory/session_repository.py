"""In-memory SessionRepository and RefreshTokenRepository."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.domain.entities import RefreshToken, Session


class InMemorySessionRepository:
    """Dict-backed SessionRepository."""

    def __init__(self) -> None:
        self._sessions: dict[UUID, Session] = {}

    async def save(self, session: Session) -> None:
        self._sessions[session.id] = replace(session)

    async def update(self, session: Session) -> None:
        if session.id in self._sessions:
            self._sessions[session.id] = replace(session)

    async def find_by_id(self, session_id: UUID) -> Session | None:
        session = self._sessions.get(session_id)
        return replace(session) if session else None

    async def find_active_by_access_token(
        self,
        user_id: UUID,
        access_token_hash: str,
    ) -> Session | None:
        for session in self._sessions.values():
            if (
                session.user_id == user_id
                and session.access_token_hash == access_token_hash
                and session.is_active()
            ):
                return replace(session)
        return None

    async def find_active_by_refresh_token(self, refresh_token_hash: str) -> Session | None:
        for session in self._sessions.values():
            if session.refresh_token_hash == refresh_token_hash and not session.is_revoked:
                return replace(session)
        return None

    async def find_active_by_user(self, user_id: UUID) -> list[Session]:
        active = [
            replace(session)
            for session in self._sessions.values()
            if session.user_id == user_id and session.is_active()
        ]
        return sorted(active, key=lambda s: s.last_activity_at, reverse=True)

    async def touch(self, session_id: UUID, at: datetime) -> None:
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_activity_at = at

    async def revoke(self, session_id: UUID, reason: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None or session.is_revoked:
            return False
        session.revoke(reason)
        return True

    async def revoke_all_for_user(
        self,
        user_id: UUID,
        reason: str,
        *,
        except_session_id: UUID | None = None,
    ) -> int:
        revoked = 0
        for session in self._sessions.values():
            if (
                session.user_id == user_id
                and not session.is_revoked
                and session.id != except_session_id
            ):
                session.revoke(reason)
                revoked += 1
        return revoked

    async def delete_expired(self, before: datetime) -> int:
        expired = [sid for sid, s in self._sessions.items() if s.expires_at < before]
        for session_id in expired:
            del self._sessions[session_id]
        return len(expired)


class InMemoryRefreshTokenRepository:
    """Dict-backed RefreshTokenRepository (keyed by digest)."""

    def __init__(self) -> None:
        self._tokens: dict[str, RefreshToken] = {}

    async def save(self, token: RefreshToken) -> None:
        if token.token_hash in self._tokens:
            raise ValueError("duplicate refresh token hash")
        self._tokens[token.token_hash] = replace(token)

    async def find_by_token_hash(self, token_hash: str) -> RefreshToken | None:
        token = self._tokens.get(token_hash)
        return replace(token) if token else None

    def _by_id(self, token_id: UUID) -> RefreshToken | None:
        return next((t for t in self._tokens.values() if t.id == token_id), None)

    async def mark_used(self, token_id: UUID, at: datetime) -> None:
        token = self._by_id(token_id)
        if token is not None:
            token.last_used_at = at
            token.usage_count += 1

    async def revoke(
        self,
        token_id: UUID,
        reason: str,
        *,
        replaced_by_token_hash: str | None = None,
    ) -> bool:
        token = self._by_id(token_id)
        if token is None or token.is_revoked:
            return False
        token.revoke(reason, replaced_by=replaced_by_token_hash)
        return True

    async def revoke_by_session(self, session_id: UUID, reason: str) -> int:
        return self._revoke_where(lambda t: t.session_id == session_id, reason)

    async def revoke_all_for_user(
        self,
        user_id: UUID,
        reason: str,
        *,
        except_session_id: UUID | None = None,
    ) -> int:
        return self._revoke_where(
            lambda t: t.user_id == user_id and t.session_id != except_session_id,
            reason,
        )

    async def delete_expired(self, before: datetime) -> int:
        expired = [h for h, t in self._tokens.items() if t.expires_at < before]
        for token_hash in expired:
            del self._tokens[token_hash]
        return len(expired)

    def _revoke_where(self, predicate: Callable[[RefreshToken], bool], reason: str) -> int:
        revoked = 0
        for token in self._tokens.values():
            if not token.is_revoked and predicate(token):
                token.revoke(reason)
                revoked += 1
        return revoked

    def all(self) -> list[RefreshToken]:
        """Snapshot of every stored token (test inspection)."""
        return [replace(t) for t in self._tokens.values()]
