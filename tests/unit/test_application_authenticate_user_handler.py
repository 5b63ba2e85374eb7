"""Unit tests for AuthenticateUserHandler.

Tests cover:
- Successful authentication resets the failure counter
- Unknown email, wrong password and inactive account share one error
- Five consecutive failures lock the account for 120 minutes
- Locked accounts report the remaining minutes, even with the right password
- An expired lock starts counting from zero again
- Every failure is audited with its reason
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.application.commands.auth_commands import AuthenticateUser
from src.application.commands.handlers.authenticate_user_handler import LoginError
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError
from src.core.result import Failure, Success
from src.domain.enums import AuditAction
from tests.conftest import TEST_PASSWORD

WRONG_PASSWORD = "WrongP@ssw0rd9"


def attempt(email: str = "ana@example.com", password: str = TEST_PASSWORD) -> AuthenticateUser:
    return AuthenticateUser(
        email=email, password=password, ip_address="190.24.10.1", user_agent="pytest"
    )


@pytest.mark.unit
class TestAuthenticateSuccess:
    async def test_valid_credentials(self, harness):
        # Arrange
        user = await harness.create_user(failed_login_attempts=3)

        # Act
        result = await harness.authenticate.handle(attempt())

        # Assert
        assert isinstance(result, Success)
        assert result.value.user.id == user.id
        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.failed_login_attempts == 0
        assert stored.last_login_at is not None
        assert harness.audit.entries == []

    async def test_email_is_case_insensitive(self, harness):
        await harness.create_user()

        result = await harness.authenticate.handle(attempt(email="  ANA@Example.com "))

        assert isinstance(result, Success)


@pytest.mark.unit
class TestIndistinguishableFailures:
    async def test_unknown_email(self, harness):
        result = await harness.authenticate.handle(attempt(email="nobody@example.com"))

        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthenticationError)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        assert result.error.message == "Invalid email or password"
        assert harness.audit.entries[0].context["reason"] == LoginError.USER_NOT_FOUND
        assert harness.audit.entries[0].user_id is None

    async def test_wrong_password(self, harness):
        user = await harness.create_user()

        result = await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        assert result.error.message == "Invalid email or password"
        entry = harness.audit.entries[0]
        assert entry.action == AuditAction.USER_LOGIN_FAILED
        assert entry.user_id == user.id
        assert entry.context == {
            "reason": LoginError.INVALID_CREDENTIALS,
            "failed_attempts": 1,
        }

    async def test_inactive_account(self, harness):
        await harness.create_user(is_active=False)

        result = await harness.authenticate.handle(attempt())

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        assert result.error.message == "Invalid email or password"
        assert harness.audit.entries[0].context["reason"] == LoginError.ACCOUNT_INACTIVE

    async def test_errors_are_identical(self, harness):
        await harness.create_user()

        unknown = await harness.authenticate.handle(attempt(email="nobody@example.com"))
        wrong = await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        assert isinstance(unknown, Failure) and isinstance(wrong, Failure)
        assert unknown.error == wrong.error


@pytest.mark.unit
class TestLockout:
    async def test_fifth_failure_locks_for_two_hours(self, harness):
        # Arrange
        user = await harness.create_user()

        # Act
        for _ in range(5):
            await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        # Assert
        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.failed_login_attempts == 5
        assert stored.is_locked()
        assert stored.lock_remaining_minutes() == 120

    async def test_four_failures_do_not_lock(self, harness):
        user = await harness.create_user()

        for _ in range(4):
            await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.failed_login_attempts == 4
        assert not stored.is_locked()

    async def test_locked_account_rejects_correct_password(self, harness):
        await harness.create_user()
        for _ in range(5):
            await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        result = await harness.authenticate.handle(attempt())

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ACCOUNT_LOCKED
        assert result.error.message == "Account locked. Try again in 120 minutes."
        assert harness.audit.entries[-1].context["reason"] == LoginError.ACCOUNT_LOCKED

    async def test_remaining_minutes_round_up(self, harness):
        await harness.create_user(
            locked_until=datetime.now(UTC) + timedelta(minutes=14, seconds=30)
        )

        result = await harness.authenticate.handle(attempt())

        assert isinstance(result, Failure)
        assert result.error.message == "Account locked. Try again in 15 minutes."

    async def test_expired_lock_resets_counter(self, harness):
        user = await harness.create_user(
            failed_login_attempts=5,
            locked_until=datetime.now(UTC) - timedelta(minutes=1),
        )

        result = await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.failed_login_attempts == 1
        assert not stored.is_locked()

    async def test_success_after_failures_resets_counter(self, harness):
        user = await harness.create_user()
        for _ in range(3):
            await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        await harness.authenticate.handle(attempt())
        await harness.authenticate.handle(attempt(password=WRONG_PASSWORD))

        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.failed_login_attempts == 1
