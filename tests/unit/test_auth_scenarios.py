"""End-to-end account lifecycle over the in-memory auth core.

Tests cover:
- Register, verify, log in, enroll 2FA, trust a device, refresh, change
  password, and the effect of each step on sessions and devices
- Brute force lockout followed by password reset
"""

import pyotp
import pytest

from src.application.commands.auth_commands import (
    ChangePassword,
    CompleteTwoFactorLogin,
    ConfirmPasswordReset,
    LoginUser,
    RefreshAccessToken,
    RegisterUser,
    RequestPasswordReset,
    VerifyEmail,
)
from src.application.dtos import LoginChallenge, LoginTokens
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import AuditAction
from tests.conftest import BOGOTA_IP, CHROME_UA, TEST_PASSWORD

EMAIL = "maria@example.com"
NEW_PASSWORD = "Brand-new-P4ssword"


def login_cmd(password: str = TEST_PASSWORD, **overrides) -> LoginUser:
    values = {
        "email": EMAIL,
        "password": password,
        "ip_address": BOGOTA_IP,
        "user_agent": CHROME_UA,
        "device_fingerprint": "fp-maria-laptop",
    }
    values.update(overrides)
    return LoginUser(**values)


@pytest.mark.unit
class TestAccountLifecycle:
    async def test_full_lifecycle(self, harness):
        # Register and verify
        registered = await harness.register.handle(
            RegisterUser(
                email=EMAIL,
                password=TEST_PASSWORD,
                first_name="María",
                last_name="López",
                accepted_terms=True,
            )
        )
        assert isinstance(registered, Success)
        user_id = registered.value.user_id
        [verification] = harness.repos.verification_tokens.for_user(user_id)
        assert isinstance(
            await harness.verify_email.handle(VerifyEmail(token=verification.token)), Success
        )

        # Password login
        first = await harness.login.handle(login_cmd())
        assert isinstance(first, Success) and isinstance(first.value, LoginTokens)

        # Enroll 2FA
        secret, backup_codes = await harness.enable_two_factor(
            await harness.repos.users.find_by_id(user_id)
        )
        totp = pyotp.TOTP(secret)

        # New device is challenged; completing with trust_device remembers it
        challenged = await harness.login.handle(login_cmd())
        assert isinstance(challenged, Success)
        assert isinstance(challenged.value, LoginChallenge)
        completed = await harness.complete_two_factor.handle(
            CompleteTwoFactorLogin(
                pending_token=challenged.value.pending_token,
                code=totp.now(),
                trust_device=True,
                ip_address=BOGOTA_IP,
                user_agent=CHROME_UA,
                device_fingerprint="fp-maria-laptop",
            )
        )
        assert isinstance(completed, Success)
        remember_token = completed.value.remember_token
        assert remember_token is not None

        # Trusted device with its cookie skips the challenge
        trusted = await harness.login.handle(login_cmd(remember_token=remember_token))
        assert isinstance(trusted, Success)
        assert isinstance(trusted.value, LoginTokens)

        # Refresh rotates within the session
        rotated = await harness.refresh.handle(
            RefreshAccessToken(refresh_token=trusted.value.refresh_token)
        )
        assert isinstance(rotated, Success)

        # Changing the password keeps only the current session
        changed = await harness.change_password.handle(
            ChangePassword(
                user_id=user_id,
                current_password=TEST_PASSWORD,
                new_password=NEW_PASSWORD,
                current_session_id=trusted.value.session_id,
            )
        )
        assert isinstance(changed, Success)
        [remaining] = await harness.services.sessions.list_active(user_id)
        assert remaining.id == trusted.value.session_id
        assert await harness.services.sessions.validate(user_id, rotated.value.access_token)
        assert not await harness.services.sessions.validate(user_id, first.value.access_token)

        # Old password is gone; backup codes still work as a second factor
        assert isinstance(await harness.login.handle(login_cmd()), Failure)
        phone = await harness.login.handle(
            login_cmd(NEW_PASSWORD, device_fingerprint="fp-maria-phone")
        )
        assert isinstance(phone.value, LoginChallenge)
        via_backup = await harness.complete_two_factor.handle(
            CompleteTwoFactorLogin(
                pending_token=phone.value.pending_token,
                code=backup_codes[0],
                device_fingerprint="fp-maria-phone",
            )
        )
        assert isinstance(via_backup, Success)

        assert harness.audit.actions()[:3] == [
            AuditAction.USER_REGISTERED,
            AuditAction.EMAIL_VERIFIED,
            AuditAction.USER_LOGIN_SUCCESS,
        ]


@pytest.mark.unit
class TestLockoutRecovery:
    async def test_reset_unlocks_brute_forced_account(self, harness):
        user = await harness.create_user(email=EMAIL)
        for _ in range(5):
            await harness.login.handle(login_cmd("Wr0ng!password"))

        locked = await harness.login.handle(login_cmd())
        assert isinstance(locked, Failure)
        assert locked.error.code == ErrorCode.ACCOUNT_LOCKED

        await harness.request_reset.handle(RequestPasswordReset(email=EMAIL))
        [reset] = harness.repos.reset_tokens.for_user(user.id)
        confirmed = await harness.confirm_reset.handle(
            ConfirmPasswordReset(token=reset.token, new_password=NEW_PASSWORD)
        )
        assert isinstance(confirmed, Success)

        result = await harness.login.handle(login_cmd(NEW_PASSWORD))
        assert isinstance(result, Success)
        assert isinstance(result.value, LoginTokens)
