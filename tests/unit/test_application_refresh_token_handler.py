"""Unit tests for RefreshAccessTokenHandler.

Tests cover:
- Rotation returns a new pair and invalidates the old access token
- The presented refresh token is single-use; its record names its successor
- Remember-me lifetime survives rotation
- Expired JWTs and expired records report TOKEN_EXPIRED
- Unknown records, wrong token types and unavailable users report TOKEN_INVALID
- Logout revokes the session's refresh tokens
"""

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time
from uuid_extensions import uuid7

from src.application.commands.auth_commands import LoginUser, LogoutUser, RefreshAccessToken
from src.application.commands.handlers.refresh_access_token_handler import RefreshError
from src.application.services import SessionRevokeReason, digest_token, token_subject
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.entities import RefreshToken
from src.domain.enums import AuditAction
from tests.conftest import BOGOTA_IP, CHROME_UA, TEST_PASSWORD


async def login(harness, *, remember_me: bool = False):
    result = await harness.login.handle(
        LoginUser(
            email="ana@example.com",
            password=TEST_PASSWORD,
            remember_me=remember_me,
            ip_address=BOGOTA_IP,
            user_agent=CHROME_UA,
        )
    )
    assert isinstance(result, Success)
    return result.value


@pytest.mark.unit
class TestRotation:
    async def test_refresh_rotates_pair(self, harness):
        # Arrange
        user = await harness.create_user()
        tokens = await login(harness)

        # Act
        result = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )

        # Assert
        assert isinstance(result, Success)
        pair = result.value
        assert pair.token_type == "bearer"
        assert pair.expires_in == 900
        assert pair.refresh_token != tokens.refresh_token
        assert await harness.services.sessions.validate(user.id, pair.access_token)
        assert not await harness.services.sessions.validate(user.id, tokens.access_token)
        session = await harness.repos.sessions.find_by_id(tokens.session_id)
        assert session is not None
        assert session.refresh_token_hash == digest_token(pair.refresh_token)
        assert harness.audit.actions()[-1] == AuditAction.TOKEN_REFRESHED

    async def test_old_record_points_at_successor(self, harness):
        await harness.create_user()
        tokens = await login(harness)

        result = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )

        assert isinstance(result, Success)
        old = await harness.repos.refresh_tokens.find_by_token_hash(
            digest_token(tokens.refresh_token)
        )
        assert old is not None
        assert old.is_revoked is True
        assert old.revoked_reason == SessionRevokeReason.ROTATED
        assert old.replaced_by_token_hash == digest_token(result.value.refresh_token)
        assert old.usage_count == 1
        new = await harness.repos.refresh_tokens.find_by_token_hash(
            digest_token(result.value.refresh_token)
        )
        assert new is not None and new.session_id == old.session_id

    async def test_rotated_token_cannot_be_reused(self, harness):
        await harness.create_user()
        tokens = await login(harness)
        first = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )
        assert isinstance(first, Success)

        replay = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )
        chained = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=first.value.refresh_token)
        )

        assert isinstance(replay, Failure)
        assert replay.error.code == ErrorCode.TOKEN_INVALID
        assert harness.audit.entries[-2].context["reason"] == RefreshError.RECORD_REVOKED
        assert any(
            call.args == ("Rotated refresh token reused",)
            for call in harness.logger.warning.call_args_list
        )
        assert isinstance(chained, Success)

    async def test_remember_me_survives_rotation(self, harness):
        await harness.create_user()
        tokens = await login(harness, remember_me=True)

        result = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )

        assert isinstance(result, Success)
        lifetime = result.value.refresh_expires_at - datetime.now(UTC)
        assert lifetime > timedelta(days=29)


@pytest.mark.unit
class TestRejections:
    async def test_expired_jwt(self, harness):
        user = await harness.create_user()
        with freeze_time(datetime.now(UTC) - timedelta(days=8)):
            stale = harness.token_service.issue_refresh_token(token_subject(user))

        result = await harness.refresh.handle(RefreshAccessToken(refresh_token=stale))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_EXPIRED
        assert harness.audit.entries[-1].context["reason"] == RefreshError.INVALID_JWT

    async def test_expired_record_is_revoked(self, harness):
        user = await harness.create_user()
        refresh = harness.token_service.issue_refresh_token(token_subject(user))
        await harness.repos.refresh_tokens.save(
            RefreshToken(
                id=uuid7(),
                user_id=user.id,
                session_id=uuid7(),
                token_hash=digest_token(refresh),
                expires_at=datetime.now(UTC) - timedelta(seconds=1),
            )
        )

        result = await harness.refresh.handle(RefreshAccessToken(refresh_token=refresh))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_EXPIRED
        record = await harness.repos.refresh_tokens.find_by_token_hash(digest_token(refresh))
        assert record is not None
        assert record.is_revoked is True
        assert record.revoked_reason == SessionRevokeReason.EXPIRED

    async def test_signed_token_without_record(self, harness):
        user = await harness.create_user()
        refresh = harness.token_service.issue_refresh_token(token_subject(user))

        result = await harness.refresh.handle(RefreshAccessToken(refresh_token=refresh))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
        assert harness.audit.entries[-1].context["reason"] == RefreshError.RECORD_NOT_FOUND

    async def test_access_token_is_not_a_refresh_token(self, harness):
        await harness.create_user()
        tokens = await login(harness)

        result = await harness.refresh.handle(RefreshAccessToken(refresh_token=tokens.access_token))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID

    async def test_locked_user_cannot_refresh(self, harness):
        user = await harness.create_user()
        tokens = await login(harness)
        await harness.repos.users.update_fields(
            user.id, locked_until=datetime.now(UTC) + timedelta(minutes=30)
        )

        result = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
        assert harness.audit.entries[-1].context["reason"] == RefreshError.USER_UNAVAILABLE

    async def test_refresh_after_logout(self, harness):
        user = await harness.create_user()
        tokens = await login(harness)
        await harness.logout.handle(LogoutUser(user_id=user.id, access_token=tokens.access_token))

        result = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=tokens.refresh_token)
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
