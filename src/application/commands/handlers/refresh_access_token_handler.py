"""Refresh access token handler.

Flow:
1. Verify the refresh JWT (signature, expiry, ``type=refresh``)
2. Look up the record by digest: must exist, be unrevoked and unexpired
   (an expired record is marked revoked)
3. Load the user (must still be allowed to log in)
4. Rotate within the request's unit of work:
   a. revoke the old record (conditional, records the successor digest)
   b. persist the new record
   c. rotate the session in place
5. Return the new pair

The old record is revoked before the new one is written, so a failure
between the steps leaves no valid token rather than two. The revoke is
conditional, so of two concurrent refreshes with the same token only one
succeeds.
"""

from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7

from src.application.commands.auth_commands import RefreshAccessToken
from src.application.dtos import TokenPair
from src.application.errors import token_failure
from src.application.services import (
    SessionRegistry,
    SessionRevokeReason,
    digest_token,
    token_subject,
)
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import RefreshToken
from src.domain.enums import AuditAction
from src.domain.errors import TokenError
from src.domain.protocols import (
    AuditProtocol,
    LoggerProtocol,
    RefreshTokenRepository,
    TokenServiceProtocol,
    TokenType,
    UserRepository,
)


class RefreshError:
    """Refresh failure reasons (log and audit fields)."""

    INVALID_JWT = "invalid_jwt"
    RECORD_NOT_FOUND = "record_not_found"
    RECORD_REVOKED = "record_revoked"
    RECORD_EXPIRED = "record_expired"
    USER_UNAVAILABLE = "user_unavailable"
    CONCURRENT_ROTATION = "concurrent_rotation"


class RefreshAccessTokenHandler:
    """Handler for RefreshAccessToken command."""

    def __init__(
        self,
        user_repo: UserRepository,
        refresh_token_repo: RefreshTokenRepository,
        session_registry: SessionRegistry,
        token_service: TokenServiceProtocol,
        audit: AuditProtocol,
        logger: LoggerProtocol,
        *,
        access_expire_minutes: int = 15,
    ) -> None:
        self._user_repo = user_repo
        self._refresh_token_repo = refresh_token_repo
        self._session_registry = session_registry
        self._token_service = token_service
        self._audit = audit
        self._logger = logger
        self._access_expires_in = access_expire_minutes * 60

    async def handle(self, cmd: RefreshAccessToken) -> Result[TokenPair, DomainError]:
        """Handle refresh token rotation.

        Returns:
            Success(TokenPair), or Failure(AuthenticationError) with
            TOKEN_INVALID / TOKEN_EXPIRED.
        """
        # Step 1: Verify JWT
        match self._token_service.verify(cmd.refresh_token, TokenType.REFRESH):
            case Failure(error=reason):
                await self._record_failure(cmd, RefreshError.INVALID_JWT, user_id=None)
                return Failure(error=token_failure(reason))
            case Success(value=claims):
                pass

        # Step 2: Look up record
        now = datetime.now(UTC)
        record = await self._refresh_token_repo.find_by_token_hash(digest_token(cmd.refresh_token))
        if record is None:
            await self._record_failure(cmd, RefreshError.RECORD_NOT_FOUND, user_id=None)
            return Failure(error=token_failure(TokenError.INVALID_TOKEN))
        if record.is_revoked:
            if record.replaced_by_token_hash is not None:
                self._logger.warning(
                    "Rotated refresh token reused",
                    user_id=str(record.user_id),
                    session_id=str(record.session_id),
                )
            await self._record_failure(cmd, RefreshError.RECORD_REVOKED, user_id=record.user_id)
            return Failure(error=token_failure(TokenError.INVALID_TOKEN))
        if record.is_expired(now):
            await self._refresh_token_repo.revoke(record.id, SessionRevokeReason.EXPIRED)
            await self._record_failure(cmd, RefreshError.RECORD_EXPIRED, user_id=record.user_id)
            return Failure(error=token_failure(TokenError.EXPIRED_TOKEN))

        # Step 3: Load user
        user = await self._user_repo.find_by_id(record.user_id)
        if user is None or not user.can_login(now):
            await self._record_failure(cmd, RefreshError.USER_UNAVAILABLE, user_id=record.user_id)
            return Failure(error=token_failure(TokenError.INVALID_TOKEN))

        # Step 4: Rotate
        subject = token_subject(user)
        access_token = self._token_service.issue_access_token(subject)
        refresh_token = self._token_service.issue_refresh_token(
            subject, remember_me=claims.remember_me
        )
        refresh_expires_at = self._token_service.refresh_expires_at(
            remember_me=claims.remember_me
        )
        new_hash = digest_token(refresh_token)

        await self._refresh_token_repo.mark_used(record.id, now)
        revoked = await self._refresh_token_repo.revoke(
            record.id,
            SessionRevokeReason.ROTATED,
            replaced_by_token_hash=new_hash,
        )
        if not revoked:
            await self._record_failure(
                cmd, RefreshError.CONCURRENT_ROTATION, user_id=record.user_id
            )
            return Failure(error=token_failure(TokenError.INVALID_TOKEN))

        await self._refresh_token_repo.save(
            RefreshToken(
                id=uuid7(),
                user_id=user.id,
                session_id=record.session_id,
                token_hash=new_hash,
                expires_at=refresh_expires_at,
                ip_address=cmd.ip_address,
                user_agent=cmd.user_agent,
            )
        )
        rotated = await self._session_registry.rotate(
            old_refresh_token=cmd.refresh_token,
            new_access_token=access_token,
            new_refresh_token=refresh_token,
            expires_at=refresh_expires_at,
        )
        if not rotated:
            self._logger.warning(
                "Refresh token without active session",
                user_id=str(user.id),
                session_id=str(record.session_id),
            )

        # Step 5: Audit and return
        await self._audit.record(
            action=AuditAction.TOKEN_REFRESHED,
            resource_type="session",
            user_id=user.id,
            resource_id=record.session_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
        )
        return Success(
            value=TokenPair(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=self._access_expires_in,
                refresh_expires_at=refresh_expires_at,
            )
        )

    async def _record_failure(
        self,
        cmd: RefreshAccessToken,
        reason: str,
        *,
        user_id: UUID | None,
    ) -> None:
        await self._audit.record(
            action=AuditAction.TOKEN_REFRESH_FAILED,
            resource_type="session",
            user_id=user_id,
            ip_address=cmd.ip_address,
            user_agent=cmd.user_agent,
            context={"reason": reason},
        )
        self._logger.info(
            "Token refresh failed",
            user_id=str(user_id) if user_id else None,
            reason=reason,
        )
