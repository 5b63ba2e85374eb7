"""Integration tests for the SQLAlchemy repositories and the audit adapter.

Tests cover:
- Users: case-insensitive email lookup, atomic lockout counter, backup code consumption,
  duplicate email on insert reported as a conflict
- Sessions: revoke-all with an exception, revoke only once
- Refresh tokens: rotation revokes exactly once, cascade by session
- Trusted devices: remember token must match, revoked devices stay known
- Security events: IP history, last located event, windowed counts, stats
- One-time tokens: single use, supersede on reissue
- PostgresAuditAdapter: entries survive the request's rollback

Architecture:
- REAL PostgreSQL (TEST_DATABASE_URL), fresh schema per test
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest
from sqlalchemy import func, select
from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.result import Failure
from src.domain.entities import (
    EmailVerificationToken,
    RefreshToken,
    SecurityEvent,
    Session,
    TrustedDevice,
    User,
)
from src.domain.enums import AuditAction, SecurityEventType, SecuritySeverity
from src.infrastructure.audit import PostgresAuditAdapter
from src.infrastructure.persistence.models import AuditLog
from src.infrastructure.persistence.repositories import (
    SQLAlchemyEmailVerificationTokenRepository,
    SQLAlchemyRefreshTokenRepository,
    SQLAlchemySecurityEventRepository,
    SQLAlchemySessionRepository,
    SQLAlchemyTrustedDeviceRepository,
    SQLAlchemyUserRepository,
)


def in_days(days: int) -> datetime:
    return datetime.now(UTC) + timedelta(days=days)


def make_session(user_id, suffix: str) -> Session:
    return Session(
        id=uuid7(),
        user_id=user_id,
        access_token_hash=f"access-{suffix}".ljust(64, "0"),
        refresh_token_hash=f"refresh-{suffix}".ljust(64, "0"),
        expires_at=in_days(7),
        ip_address="190.24.10.1",
    )


@pytest.mark.integration
class TestUserRepository:
    async def test_find_by_email_is_case_insensitive(self, test_database, stored_user):
        async with test_database.get_session() as session:
            found = await SQLAlchemyUserRepository(session).find_by_email("ANA@Example.com")

        assert found is not None
        assert found.id == stored_user.id
        assert found.backup_code_hashes == ["a" * 64, "b" * 64]

    async def test_increment_locks_at_threshold(self, test_database, stored_user):
        lock_until = in_days(1)
        async with test_database.get_session() as session:
            repo = SQLAlchemyUserRepository(session)
            counts = [
                await repo.increment_failed_login(
                    stored_user.id, max_attempts=3, lock_until=lock_until
                )
                for _ in range(3)
            ]

        async with test_database.get_session() as session:
            user = await SQLAlchemyUserRepository(session).find_by_id(stored_user.id)

        assert counts == [1, 2, 3]
        assert user is not None
        assert user.locked_until == lock_until

    async def test_consume_backup_code_once(self, test_database, stored_user):
        async with test_database.get_session() as session:
            repo = SQLAlchemyUserRepository(session)
            first = await repo.consume_backup_code(stored_user.id, "a" * 64)
            second = await repo.consume_backup_code(stored_user.id, "a" * 64)

        assert first == 1
        assert second is None

    async def test_duplicate_email_insert_is_a_conflict(self, test_database, stored_user):
        twin = User(
            id=uuid7(),
            email="ana@example.com",
            password_hash=stored_user.password_hash,
            first_name="Ana",
            last_name="Twin",
        )
        async with test_database.get_session() as session:
            repo = SQLAlchemyUserRepository(session)
            result = await repo.save(twin)
            # The SAVEPOINT rollback keeps the transaction usable
            still_there = await repo.find_by_email("ana@example.com")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.EMAIL_ALREADY_EXISTS
        assert still_there is not None and still_there.id == stored_user.id

    async def test_update_fields_rejects_unknown_columns(self, test_database, stored_user):
        async with test_database.get_session() as session:
            with pytest.raises(ValueError, match="Unknown user fields"):
                await SQLAlchemyUserRepository(session).update_fields(
                    stored_user.id, favourite_colour="blue"
                )


@pytest.mark.integration
class TestSessionAndRefreshTokens:
    async def test_revoke_all_keeps_excepted_session(self, test_database, stored_user):
        keep, drop_a, drop_b = (make_session(stored_user.id, s) for s in "abc")
        async with test_database.get_session() as session:
            repo = SQLAlchemySessionRepository(session)
            for item in (keep, drop_a, drop_b):
                await repo.save(item)
            revoked = await repo.revoke_all_for_user(
                stored_user.id, "User revoked all sessions", except_session_id=keep.id
            )
            active = await repo.find_active_by_user(stored_user.id)

        assert revoked == 2
        assert [s.id for s in active] == [keep.id]

    async def test_refresh_token_revoked_once(self, test_database, stored_user):
        parent = make_session(stored_user.id, "r")
        token = RefreshToken(
            id=uuid7(),
            user_id=stored_user.id,
            session_id=parent.id,
            token_hash="f" * 64,
            expires_at=in_days(7),
        )
        async with test_database.get_session() as session:
            await SQLAlchemySessionRepository(session).save(parent)
            repo = SQLAlchemyRefreshTokenRepository(session)
            await repo.save(token)
            await repo.mark_used(token.id, datetime.now(UTC))
            first = await repo.revoke(token.id, "Rotated", replaced_by_token_hash="e" * 64)
            second = await repo.revoke(token.id, "Rotated", replaced_by_token_hash="d" * 64)

        async with test_database.get_session() as session:
            stored = await SQLAlchemyRefreshTokenRepository(session).find_by_token_hash("f" * 64)

        assert (first, second) == (True, False)
        assert stored is not None
        assert stored.replaced_by_token_hash == "e" * 64
        assert stored.usage_count == 1

    async def test_revoke_by_session(self, test_database, stored_user):
        parent = make_session(stored_user.id, "s")
        async with test_database.get_session() as session:
            await SQLAlchemySessionRepository(session).save(parent)
            repo = SQLAlchemyRefreshTokenRepository(session)
            for digest in ("1" * 64, "2" * 64):
                await repo.save(
                    RefreshToken(
                        id=uuid7(),
                        user_id=stored_user.id,
                        session_id=parent.id,
                        token_hash=digest,
                        expires_at=in_days(7),
                    )
                )
            revoked = await repo.revoke_by_session(parent.id, "User logout")

        assert revoked == 2


@pytest.mark.integration
class TestTrustedDeviceRepository:
    async def test_remember_token_must_match(self, test_database, stored_user):
        device = TrustedDevice(
            id=uuid7(),
            user_id=stored_user.id,
            device_fingerprint="fp-laptop",
            remember_token="c" * 64,
            expires_at=in_days(30),
            device_name="Chrome 120 on Windows 10",
        )
        async with test_database.get_session() as session:
            repo = SQLAlchemyTrustedDeviceRepository(session)
            await repo.save(device)
            hit = await repo.find_active(stored_user.id, "fp-laptop", remember_token="c" * 64)
            miss = await repo.find_active(stored_user.id, "fp-laptop", remember_token="0" * 64)
            await repo.revoke(device.id, "User revoked")
            after_revoke = await repo.find_active(stored_user.id, "fp-laptop")
            known = await repo.count_by_fingerprint(stored_user.id, "fp-laptop")

        assert hit is not None and hit.id == device.id
        assert miss is None
        assert after_revoke is None
        assert known == 0


@pytest.mark.integration
class TestSecurityEventRepository:
    async def test_history_queries(self, test_database, stored_user):
        old = SecurityEvent(
            id=uuid7(),
            user_id=stored_user.id,
            event_type=SecurityEventType.NEW_IP,
            severity=SecuritySeverity.MEDIUM,
            risk_score=20,
            ip_address="190.24.10.1",
            city="Bogotá",
            country="Colombia",
            latitude=4.711,
            longitude=-74.0721,
            created_at=datetime.now(UTC) - timedelta(hours=2),
        )
        recent = SecurityEvent(
            id=uuid7(),
            user_id=stored_user.id,
            event_type=SecurityEventType.ACCOUNT_LOCKED,
            severity=SecuritySeverity.CRITICAL,
            risk_score=90,
            metadata={"triggering_score": 90},
        )
        async with test_database.get_session() as session:
            repo = SQLAlchemySecurityEventRepository(session)
            await repo.save(old)
            await repo.save(recent)

            by_ip = await repo.count_by_ip(stored_user.id, "190.24.10.1")
            located = await repo.find_last_located(stored_user.id)
            windowed = await repo.count_since(
                stored_user.id,
                frozenset({SecurityEventType.NEW_IP}),
                datetime.now(UTC) - timedelta(minutes=5),
            )
            stats = await repo.stats_since(datetime.now(UTC) - timedelta(days=1))
            newest_first = await repo.find_by_user(stored_user.id)

        assert by_ip == 1
        assert located is not None and located.id == old.id
        assert windowed == 0
        assert stats.total_events == 2
        assert stats.high_severity_events == 1
        assert stats.account_locks == 1
        assert stats.average_risk_score == 55.0
        assert [e.id for e in newest_first] == [recent.id, old.id]
        assert newest_first[0].metadata == {"triggering_score": 90}


@pytest.mark.integration
class TestOneTimeTokens:
    async def test_single_use_and_supersede(self, test_database, stored_user):
        first = EmailVerificationToken(
            id=uuid7(),
            user_id=stored_user.id,
            email=stored_user.email,
            token="1" * 64,
            expires_at=datetime.now(UTC) + timedelta(hours=24),
        )
        second = EmailVerificationToken(
            id=uuid7(),
            user_id=stored_user.id,
            email=stored_user.email,
            token="2" * 64,
            expires_at=datetime.now(UTC) + timedelta(hours=24),
        )
        async with test_database.get_session() as session:
            repo = SQLAlchemyEmailVerificationTokenRepository(session)
            await repo.save(first)
            superseded = await repo.invalidate_for_user(stored_user.id, datetime.now(UTC))
            await repo.save(second)
            used = await repo.mark_used(second.id, datetime.now(UTC))
            reused = await repo.mark_used(second.id, datetime.now(UTC))

        async with test_database.get_session() as session:
            stale = await SQLAlchemyEmailVerificationTokenRepository(session).find_by_token(
                "1" * 64
            )

        assert superseded == 1
        assert (used, reused) == (True, False)
        assert stale is not None and stale.is_used is True


@pytest.mark.integration
class TestPostgresAuditAdapter:
    async def test_entry_survives_request_rollback(self, test_database, stored_user):
        adapter = PostgresAuditAdapter(test_database.async_session, Mock())

        with pytest.raises(RuntimeError):
            async with test_database.get_session():
                result = await adapter.record(
                    action=AuditAction.USER_LOGIN_FAILED,
                    resource_type="session",
                    user_id=stored_user.id,
                    context={"reason": "invalid_credentials"},
                )
                raise RuntimeError("request failed")

        async with test_database.get_session() as session:
            count = await session.scalar(select(func.count()).select_from(AuditLog))

        assert result.value is None
        assert count == 1
