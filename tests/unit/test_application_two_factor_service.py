"""Unit tests for TwoFactorService.

Tests cover:
- Enrollment: generate_secret, enable with TOTP, ten backup codes
- Format validation before any store access
- Backup codes are single-use, low-code warning at two remaining
- disable and regenerate_backup_codes
- Format helpers and requires_second_factor
"""

import pyotp
import pytest
from uuid_extensions import uuid7

from src.application.services.two_factor_service import (
    is_backup_code_format,
    is_totp_format,
    requires_second_factor,
)
from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, ConflictError, ValidationError
from src.core.result import Failure, Success
from tests.conftest import wrong_totp_code


@pytest.mark.unit
class TestEnrollment:
    async def test_generate_secret_returns_provisioning_uri(self, harness):
        # Arrange
        user = await harness.create_user()

        # Act
        result = await harness.services.two_factor.generate_secret(user.id)

        # Assert
        assert isinstance(result, Success)
        assert len(result.value.secret) == 32
        assert result.value.provisioning_uri.startswith("otpauth://totp/")
        assert "Membership%20Club" in result.value.provisioning_uri
        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.two_factor_secret == result.value.secret
        assert stored.two_factor_enabled is False
        assert stored.has_pending_two_factor_secret()

    async def test_enable_with_valid_code_issues_ten_backup_codes(self, harness):
        user = await harness.create_user()
        setup = await harness.services.two_factor.generate_secret(user.id)
        secret = setup.value.secret  # type: ignore[union-attr]

        result = await harness.services.two_factor.enable(user.id, pyotp.TOTP(secret).now())

        assert isinstance(result, Success)
        assert len(result.value) == 10
        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.two_factor_enabled is True
        assert len(stored.backup_code_hashes) == 10
        assert not set(result.value) & set(stored.backup_code_hashes)

    async def test_enable_with_wrong_code(self, harness):
        user = await harness.create_user()
        setup = await harness.services.two_factor.generate_secret(user.id)

        result = await harness.services.two_factor.enable(
            user.id, wrong_totp_code(setup.value.secret)  # type: ignore[union-attr]
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, AuthenticationError)
        assert result.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE
        assert await harness.services.two_factor.is_enabled(user.id) is False

    @pytest.mark.parametrize("code", ["12345", "1234567", "abcdef", ""])
    async def test_enable_rejects_malformed_code(self, harness, code: str):
        user = await harness.create_user()

        result = await harness.services.two_factor.enable(user.id, code)

        assert isinstance(result, Failure)
        assert isinstance(result.error, ValidationError)
        assert result.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE_FORMAT

    async def test_enable_without_secret(self, harness):
        user = await harness.create_user()

        result = await harness.services.two_factor.enable(user.id, "123456")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TWO_FACTOR_SECRET_MISSING

    async def test_generate_secret_when_already_enabled(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)

        result = await harness.services.two_factor.generate_secret(user.id)

        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert result.error.code == ErrorCode.TWO_FACTOR_ALREADY_ENABLED

    async def test_unknown_user(self, harness):
        result = await harness.services.two_factor.generate_secret(uuid7())

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.USER_NOT_FOUND


@pytest.mark.unit
class TestBackupCodes:
    async def test_backup_code_works_once(self, harness):
        # Arrange
        user = await harness.create_user()
        _, codes = await harness.enable_two_factor(user)
        service = harness.services.two_factor

        # Act
        first = await service.verify_backup_code(user.id, codes[0])
        second = await service.verify_backup_code(user.id, codes[0])

        # Assert
        assert isinstance(first, Success)
        assert first.value.remaining == 9
        assert first.value.low_backup_codes is False
        assert isinstance(second, Failure)
        assert second.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE
        assert await service.remaining_backup_codes(user.id) == 9

    async def test_backup_code_is_case_insensitive(self, harness):
        user = await harness.create_user()
        _, codes = await harness.enable_two_factor(user)

        result = await harness.services.two_factor.verify_backup_code(user.id, codes[3].lower())

        assert isinstance(result, Success)

    async def test_low_backup_codes_flagged_at_two_remaining(self, harness):
        user = await harness.create_user()
        _, codes = await harness.enable_two_factor(user)
        service = harness.services.two_factor
        for code in codes[:7]:
            await service.verify_backup_code(user.id, code)

        result = await service.verify_backup_code(user.id, codes[7])

        assert isinstance(result, Success)
        assert result.value.remaining == 2
        assert result.value.low_backup_codes is True

    async def test_other_users_code_rejected(self, harness):
        owner = await harness.create_user()
        other = await harness.create_user(email="luis@example.com")
        _, codes = await harness.enable_two_factor(owner)
        await harness.enable_two_factor(other)

        result = await harness.services.two_factor.verify_backup_code(other.id, codes[0])

        assert isinstance(result, Failure)

    async def test_verify_code_accepts_totp_or_backup(self, harness):
        user = await harness.create_user()
        secret, codes = await harness.enable_two_factor(user)
        service = harness.services.two_factor

        assert await service.verify_code(user.id, pyotp.TOTP(secret).now()) is True
        assert await service.verify_code(user.id, codes[0]) is True
        assert await service.verify_code(user.id, codes[0]) is False
        assert await service.verify_code(user.id, "not-a-code") is False

    async def test_regenerate_replaces_whole_set(self, harness):
        user = await harness.create_user()
        secret, old_codes = await harness.enable_two_factor(user)
        service = harness.services.two_factor

        result = await service.regenerate_backup_codes(user.id, pyotp.TOTP(secret).now())

        assert isinstance(result, Success)
        assert len(result.value) == 10
        assert isinstance(await service.verify_backup_code(user.id, old_codes[0]), Failure)
        assert isinstance(await service.verify_backup_code(user.id, result.value[0]), Success)

    async def test_regenerate_requires_totp(self, harness):
        user = await harness.create_user()
        _, codes = await harness.enable_two_factor(user)

        result = await harness.services.two_factor.regenerate_backup_codes(user.id, codes[0])

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE_FORMAT


@pytest.mark.unit
class TestDisable:
    async def test_disable_with_totp_clears_everything(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)

        result = await harness.services.two_factor.disable(user.id, pyotp.TOTP(secret).now())

        assert isinstance(result, Success)
        stored = await harness.repos.users.find_by_id(user.id)
        assert stored is not None
        assert stored.two_factor_enabled is False
        assert stored.two_factor_secret is None
        assert stored.backup_code_hashes == []

    async def test_disable_with_backup_code(self, harness):
        user = await harness.create_user()
        _, codes = await harness.enable_two_factor(user)

        result = await harness.services.two_factor.disable(user.id, codes[0])

        assert isinstance(result, Success)

    async def test_disable_with_wrong_code(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)

        result = await harness.services.two_factor.disable(user.id, wrong_totp_code(secret))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE
        assert await harness.services.two_factor.is_enabled(user.id) is True

    async def test_disable_when_not_enabled(self, harness):
        user = await harness.create_user()

        result = await harness.services.two_factor.disable(user.id, "123456")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TWO_FACTOR_NOT_ENABLED


@pytest.mark.unit
class TestFormatHelpers:
    @pytest.mark.parametrize(
        ("code", "totp", "backup"),
        [
            ("123456", True, False),
            ("12345678", False, True),
            ("ABCDEF12", False, True),
            ("abcdef12", False, True),
            ("ABCDEFG1", False, False),
            ("12345", False, False),
        ],
    )
    def test_code_formats(self, code: str, totp: bool, backup: bool):
        assert is_totp_format(code) is totp
        assert is_backup_code_format(code) is backup

    async def test_requires_second_factor(self, harness):
        user = await harness.create_user()
        assert requires_second_factor(user) is False

        await harness.enable_two_factor(user)
        stored = await harness.repos.users.find_by_id(user.id)

        assert stored is not None and requires_second_factor(stored) is True
