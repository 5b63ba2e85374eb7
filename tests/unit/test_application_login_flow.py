"""Unit tests for the login flow (LoginUserHandler, CompleteTwoFactorLoginHandler).

Tests cover:
- Password-only login establishes a session with a refresh-token record
- Remember-me extends the refresh lifetime
- Risk denial rejects the login
- 2FA users on a new device, or flagged by risk, get a LoginChallenge
- Trusted devices (fingerprint + remember token) skip the challenge
- Lapsed devices stay known; revoked devices count as new again
- Completing the challenge with TOTP or a backup code
- Bad, malformed and replayed codes; expired and misused pending tokens
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pyotp
import pytest
from freezegun import freeze_time
from uuid_extensions import uuid7

from src.application.commands.auth_commands import CompleteTwoFactorLogin, LoginUser
from src.application.commands.handlers.login_user_handler import (
    NEW_DEVICE_REASON,
    LoginUserHandler,
)
from src.application.dtos import LoginChallenge, LoginTokens
from src.application.services import TrustDeviceInput, token_subject
from src.application.services.risk_engine import RiskAlert, RiskAssessment
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.entities import SecurityEvent, TrustedDevice
from src.domain.enums import AuditAction, SecurityEventType, SecuritySeverity
from src.domain.protocols import TokenType
from tests.conftest import (
    BOGOTA_IP,
    CHROME_UA,
    LOCATIONS,
    MADRID_IP,
    TEST_PASSWORD,
    wrong_totp_code,
)


def login_cmd(**overrides) -> LoginUser:
    values = {
        "email": "ana@example.com",
        "password": TEST_PASSWORD,
        "ip_address": BOGOTA_IP,
        "user_agent": CHROME_UA,
        "device_fingerprint": "fp-laptop",
    }
    values.update(overrides)
    return LoginUser(**values)


def complete_cmd(pending_token: str, code: str, **overrides) -> CompleteTwoFactorLogin:
    values = {
        "pending_token": pending_token,
        "code": code,
        "ip_address": BOGOTA_IP,
        "user_agent": CHROME_UA,
        "device_fingerprint": "fp-laptop",
    }
    values.update(overrides)
    return CompleteTwoFactorLogin(**values)


def laptop_trust_input(email: str) -> TrustDeviceInput:
    return TrustDeviceInput(email=email, device_fingerprint="fp-laptop", user_agent=CHROME_UA)


async def challenge_for(harness, **overrides) -> LoginChallenge:
    result = await harness.login.handle(login_cmd(**overrides))
    assert isinstance(result, Success)
    assert isinstance(result.value, LoginChallenge)
    return result.value


@pytest.mark.unit
class TestPasswordLogin:
    async def test_login_establishes_session(self, harness):
        # Arrange
        user = await harness.create_user()

        # Act
        result = await harness.login.handle(login_cmd())

        # Assert
        assert isinstance(result, Success)
        tokens = result.value
        assert isinstance(tokens, LoginTokens)
        assert tokens.token_type == "bearer"
        assert tokens.expires_in == 900
        assert tokens.user.email == "ana@example.com"
        assert tokens.remember_token is None
        assert await harness.services.sessions.validate(user.id, tokens.access_token)
        session = await harness.repos.sessions.find_by_id(tokens.session_id)
        assert session is not None
        assert session.location == "Bogotá, Colombia"
        assert session.device_info is not None and "Chrome" in session.device_info
        assert len(harness.repos.refresh_tokens.all()) == 1
        assert harness.audit.actions() == [AuditAction.USER_LOGIN_SUCCESS]
        assert harness.audit.entries[0].context["method"] == "password"
        assert harness.audit.entries[0].context["two_factor"] is False

    async def test_remember_me_extends_refresh_lifetime(self, harness):
        await harness.create_user()

        result = await harness.login.handle(login_cmd(remember_me=True))

        assert isinstance(result, Success)
        lifetime = result.value.refresh_expires_at - datetime.now(UTC)
        assert timedelta(days=29) < lifetime <= timedelta(days=30)

    async def test_wrong_password_creates_nothing(self, harness):
        await harness.create_user()

        result = await harness.login.handle(login_cmd(password="WrongP@ssw0rd9"))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_CREDENTIALS
        assert harness.repos.refresh_tokens.all() == []
        assert harness.repos.security_events.all() == []

    async def test_risk_denial_rejects_login(self, harness):
        await harness.create_user()
        risk = AsyncMock()
        risk.analyze_login_attempt.return_value = RiskAssessment(
            allowed=False,
            risk_score=80,
            alerts=[RiskAlert.NEW_IP, RiskAlert.LOCKED_BY_RISK],
        )
        handler = LoginUserHandler(
            authenticate=harness.authenticate,
            risk_engine=risk,
            device_trust=harness.services.devices,
            token_service=harness.token_service,
            finalizer=harness.services.finalizer,
            audit=harness.audit,
            logger=harness.logger,
        )

        result = await handler.handle(login_cmd())

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.LOGIN_DENIED_BY_RISK
        assert harness.repos.refresh_tokens.all() == []
        entry = harness.audit.entries[-1]
        assert entry.action == AuditAction.USER_LOGIN_FAILED
        assert entry.context["reason"] == "denied_by_risk"
        assert entry.context["risk_score"] == 80


@pytest.mark.unit
class TestSecondFactorGate:
    async def test_new_device_gets_challenge(self, harness):
        # Arrange
        user = await harness.create_user()
        await harness.enable_two_factor(user)

        # Act
        result = await harness.login.handle(login_cmd())

        # Assert
        assert isinstance(result, Success)
        challenge = result.value
        assert isinstance(challenge, LoginChallenge)
        assert challenge.expires_in == 300
        assert challenge.methods == ("totp", "backup_code")
        assert NEW_DEVICE_REASON in challenge.reasons
        claims = harness.token_service.verify(challenge.pending_token, TokenType.TWO_FACTOR_PENDING)
        assert isinstance(claims, Success)
        assert claims.value.subject.user_id == str(user.id)
        assert harness.repos.refresh_tokens.all() == []
        assert harness.audit.actions() == [AuditAction.USER_LOGIN_CHALLENGED]

    async def test_missing_fingerprint_counts_as_new_device(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)

        challenge = await challenge_for(harness, device_fingerprint=None)

        assert NEW_DEVICE_REASON in challenge.reasons

    async def test_known_device_with_low_risk_skips_challenge(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)
        # Lapsed grant: no longer trusted, still known
        await harness.repos.devices.save(
            TrustedDevice(
                id=uuid7(),
                user_id=user.id,
                device_fingerprint="fp-laptop",
                remember_token="e" * 64,
                expires_at=datetime.now(UTC) - timedelta(days=1),
            )
        )

        result = await harness.login.handle(login_cmd(remember_token="e" * 64))

        assert isinstance(result, Success)
        assert isinstance(result.value, LoginTokens)

    async def test_revoked_device_is_challenged_as_new(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)
        grant = await harness.services.devices.trust(user.id, laptop_trust_input(user.email))
        await harness.services.devices.revoke(user.id, grant.device_id)

        challenge = await challenge_for(harness, remember_token=grant.remember_token)

        assert NEW_DEVICE_REASON in challenge.reasons

    async def test_risk_flag_challenges_known_device(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)
        await harness.services.devices.trust(user.id, laptop_trust_input(user.email))
        bogota = LOCATIONS[BOGOTA_IP]
        await harness.repos.security_events.save(
            SecurityEvent(
                id=uuid7(),
                user_id=user.id,
                event_type=SecurityEventType.NEW_IP,
                severity=SecuritySeverity.MEDIUM,
                ip_address=BOGOTA_IP,
                city=bogota.city,
                country=bogota.country,
                latitude=bogota.latitude,
                longitude=bogota.longitude,
                created_at=datetime.now(UTC) - timedelta(minutes=1),
            )
        )

        challenge = await challenge_for(harness, ip_address=MADRID_IP)

        assert NEW_DEVICE_REASON not in challenge.reasons
        assert RiskAlert.NEW_LOCATION in challenge.reasons
        assert RiskAlert.VELOCITY in challenge.reasons

    async def test_trusted_device_skips_challenge(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)
        first = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, pyotp.TOTP(secret).now(), trust_device=True)
        )
        assert isinstance(first, Success)
        remember_token = first.value.remember_token
        assert remember_token is not None

        second = await harness.login.handle(login_cmd(remember_token=remember_token))

        assert isinstance(second, Success)
        assert isinstance(second.value, LoginTokens)

    async def test_remember_token_from_other_device_does_not_skip(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)
        grant = await harness.services.devices.trust(user.id, laptop_trust_input(user.email))

        result = await harness.login.handle(
            login_cmd(device_fingerprint="fp-stolen", remember_token=grant.remember_token)
        )

        assert isinstance(result, Success)
        assert isinstance(result.value, LoginChallenge)


@pytest.mark.unit
class TestCompleteTwoFactor:
    async def test_totp_completes_login(self, harness):
        # Arrange
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness, remember_me=True)

        # Act
        result = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, pyotp.TOTP(secret).now())
        )

        # Assert
        assert isinstance(result, Success)
        tokens = result.value
        assert await harness.services.sessions.validate(user.id, tokens.access_token)
        assert tokens.remember_token is None
        lifetime = tokens.refresh_expires_at - datetime.now(UTC)
        assert lifetime > timedelta(days=29)
        entry = harness.audit.entries[-1]
        assert entry.action == AuditAction.USER_LOGIN_SUCCESS
        assert entry.context["method"] == "totp"
        assert entry.context["two_factor"] is True

    async def test_backup_code_completes_login_once(self, harness):
        user = await harness.create_user()
        _, codes = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)

        first = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, codes[0])
        )
        replay = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, codes[0])
        )

        assert isinstance(first, Success)
        assert harness.audit.entries[-2].context["method"] == "backup_code"
        assert isinstance(replay, Failure)
        assert replay.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE
        assert await harness.services.two_factor.remaining_backup_codes(user.id) == 9

    async def test_trust_device_returns_remember_token(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)

        result = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, pyotp.TOTP(secret).now(), trust_device=True)
        )

        assert isinstance(result, Success)
        assert result.value.remember_token is not None
        assert result.value.remember_expires_at is not None
        assert AuditAction.DEVICE_TRUSTED in harness.audit.actions()
        devices = await harness.services.devices.list_devices(user.id)
        assert len(devices) == 1
        assert devices[0].city == "Bogotá"

    async def test_trust_device_without_fingerprint_is_ignored(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)

        result = await harness.complete_two_factor.handle(
            complete_cmd(
                challenge.pending_token,
                pyotp.TOTP(secret).now(),
                trust_device=True,
                device_fingerprint=None,
            )
        )

        assert isinstance(result, Success)
        assert result.value.remember_token is None

    async def test_wrong_code_records_failed_2fa(self, harness):
        # Arrange
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)

        # Act
        result = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, wrong_totp_code(secret))
        )

        # Assert
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE
        failed = [
            e
            for e in harness.repos.security_events.all()
            if e.event_type == SecurityEventType.FAILED_2FA
        ]
        assert len(failed) == 1
        assert failed[0].metadata["method"] == "totp"
        assert harness.audit.actions()[-1] == AuditAction.TWO_FACTOR_FAILED

    async def test_malformed_code(self, harness):
        user = await harness.create_user()
        await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)

        result = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, "12-34")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_TWO_FACTOR_CODE_FORMAT

    async def test_access_token_is_not_a_pending_token(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        access = harness.token_service.issue_access_token(token_subject(user))

        result = await harness.complete_two_factor.handle(
            complete_cmd(access, pyotp.TOTP(secret).now())
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID

    async def test_expired_pending_token(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        with freeze_time(datetime.now(UTC) - timedelta(minutes=6)):
            pending = harness.token_service.issue_two_factor_pending_token(token_subject(user))

        result = await harness.complete_two_factor.handle(
            complete_cmd(pending, pyotp.TOTP(secret).now())
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_EXPIRED

    async def test_pending_token_rejected_once_two_factor_disabled(self, harness):
        user = await harness.create_user()
        secret, _ = await harness.enable_two_factor(user)
        challenge = await challenge_for(harness)
        await harness.services.two_factor.disable(user.id, pyotp.TOTP(secret).now())

        result = await harness.complete_two_factor.handle(
            complete_cmd(challenge.pending_token, "123456")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TOKEN_INVALID
