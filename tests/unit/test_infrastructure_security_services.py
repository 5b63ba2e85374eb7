"""Unit tests for password hashing, opaque tokens, backup codes and TOTP.

Tests cover:
- BcryptPasswordService: hash/verify, salt per hash, malformed hash, cost bounds
- SecureTokenService: 64 hex characters, uniqueness
- BackupCodeService: format, distinctness, per-user salted hashing, normalisation
- PyOTPService: secret format, provisioning URI, ±2 step drift window
"""

from datetime import datetime, timedelta
from uuid import UUID

import pyotp
import pytest
from freezegun import freeze_time

from src.infrastructure.security import (
    BackupCodeService,
    BcryptPasswordService,
    PyOTPService,
    SecureTokenService,
)

USER_A = UUID("01927f6c-0000-7000-8000-00000000000a")
USER_B = UUID("01927f6c-0000-7000-8000-00000000000b")


@pytest.mark.unit
class TestBcryptPasswordService:
    """Password hashing off the event loop."""

    async def test_hash_and_verify(self):
        # Arrange
        service = BcryptPasswordService(cost_factor=4)

        # Act
        password_hash = await service.hash_password("SecureP@ssw0rd1")

        # Assert
        assert password_hash.startswith("$2b$04$")
        assert await service.verify_password("SecureP@ssw0rd1", password_hash) is True
        assert await service.verify_password("SecureP@ssw0rd2", password_hash) is False

    async def test_same_password_gets_different_salts(self):
        service = BcryptPasswordService(cost_factor=4)

        first = await service.hash_password("SecureP@ssw0rd1")
        second = await service.hash_password("SecureP@ssw0rd1")

        assert first != second

    async def test_malformed_hash_does_not_verify(self):
        service = BcryptPasswordService(cost_factor=4)

        assert await service.verify_password("anything", "not-a-bcrypt-hash") is False

    @pytest.mark.parametrize("cost", [3, 21])
    def test_cost_outside_bounds_rejected(self, cost: int):
        with pytest.raises(ValueError):
            BcryptPasswordService(cost_factor=cost)


@pytest.mark.unit
class TestSecureTokenService:
    def test_token_is_64_hex_characters(self):
        token = SecureTokenService().generate_token()

        assert len(token) == 64
        int(token, 16)

    def test_tokens_are_unique(self):
        service = SecureTokenService()

        tokens = {service.generate_token() for _ in range(100)}

        assert len(tokens) == 100


@pytest.mark.unit
class TestBackupCodeService:
    """Backup codes are shown once and stored as peppered HMACs."""

    def test_generates_ten_distinct_codes(self):
        codes = BackupCodeService(pepper="pepper").generate_codes()

        assert len(codes) == 10
        assert len(set(codes)) == 10
        for code in codes:
            assert len(code) == 8
            assert code == code.upper()
            int(code, 16)

    def test_hash_is_per_user(self):
        service = BackupCodeService(pepper="pepper")

        assert service.hash_code(USER_A, "ABCD1234") != service.hash_code(USER_B, "ABCD1234")

    def test_hash_depends_on_pepper(self):
        first = BackupCodeService(pepper="pepper-one").hash_code(USER_A, "ABCD1234")
        second = BackupCodeService(pepper="pepper-two").hash_code(USER_A, "ABCD1234")

        assert first != second

    def test_hash_normalises_case_and_whitespace(self):
        service = BackupCodeService(pepper="pepper")

        assert service.hash_code(USER_A, " abcd1234 ") == service.hash_code(USER_A, "ABCD1234")

    def test_empty_pepper_rejected(self):
        with pytest.raises(ValueError, match="pepper"):
            BackupCodeService(pepper="")


@pytest.mark.unit
class TestPyOTPService:
    """RFC 6238 codes with a ±2 step drift window."""

    def test_secret_is_32_base32_characters(self):
        secret = PyOTPService().generate_secret()

        assert len(secret) == 32
        assert set(secret) <= set("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")

    def test_provisioning_uri_names_account_and_issuer(self):
        service = PyOTPService()
        secret = service.generate_secret()

        uri = service.provisioning_uri(
            secret, account_name="ana@example.com", issuer="Membership Club"
        )

        assert uri.startswith("otpauth://totp/")
        assert f"secret={secret}" in uri
        assert "issuer=Membership%20Club" in uri
        assert "ana%40example.com" in uri

    def test_current_code_verifies(self):
        service = PyOTPService()
        secret = service.generate_secret()

        assert service.verify(secret, pyotp.TOTP(secret).now()) is True

    @pytest.mark.parametrize("step_offset", [-2, -1, 1, 2])
    def test_code_within_two_steps_verifies(self, step_offset: int):
        service = PyOTPService()
        secret = service.generate_secret()
        now = datetime(2026, 10, 19, 10, 0, 15)
        code = pyotp.TOTP(secret).at(now + timedelta(seconds=30 * step_offset))

        with freeze_time(now):
            assert service.verify(secret, code) is True

    @pytest.mark.parametrize("step_offset", [-4, 4])
    def test_code_outside_window_rejected(self, step_offset: int):
        service = PyOTPService()
        secret = service.generate_secret()
        now = datetime(2026, 10, 19, 10, 0, 15)
        code = pyotp.TOTP(secret).at(now + timedelta(seconds=30 * step_offset))

        with freeze_time(now):
            assert service.verify(secret, code) is False

    def test_code_from_other_secret_rejected(self):
        service = PyOTPService()
        code = pyotp.TOTP(service.generate_secret()).now()

        assert service.verify(service.generate_secret(), code) is False
