"""Shared pytest fixtures.

Unit tests run the real application services and handlers on top of the
in-memory repositories, audit adapter and notification dispatcher. Only
the logger is a Mock, and geolocation is a fixed lookup table so distance
checks are deterministic.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from unittest.mock import Mock

import pyotp
import pytest
from uuid_extensions import uuid7

from src.application.commands.handlers.authenticate_user_handler import (
    AuthenticateUserHandler,
)
from src.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
)
from src.application.commands.handlers.complete_two_factor_login_handler import (
    CompleteTwoFactorLoginHandler,
)
from src.application.commands.handlers.confirm_password_reset_handler import (
    ConfirmPasswordResetHandler,
)
from src.application.commands.handlers.login_user_handler import LoginUserHandler
from src.application.commands.handlers.logout_user_handler import LogoutUserHandler
from src.application.commands.handlers.refresh_access_token_handler import (
    RefreshAccessTokenHandler,
)
from src.application.commands.handlers.register_user_handler import (
    RegisterUserHandler,
)
from src.application.commands.handlers.request_password_reset_handler import (
    RequestPasswordResetHandler,
)
from src.application.commands.handlers.resend_verification_handler import (
    ResendVerificationHandler,
)
from src.application.commands.handlers.verify_email_handler import VerifyEmailHandler
from src.application.services import (
    DeviceTrustService,
    EmailTokenService,
    LoginFinalizer,
    PasswordChangeService,
    RiskEngine,
    SessionRegistry,
    TwoFactorService,
)
from src.core.container.repositories import RequestRepositories
from src.core.container.services import AuthServices
from src.domain.entities import User
from src.domain.value_objects import GeoLocation
from src.infrastructure.audit import InMemoryAuditAdapter
from src.infrastructure.enrichers import UserAgentDeviceEnricher
from src.infrastructure.notifications import InMemoryNotificationDispatcher
from src.infrastructure.persistence.in_memory import (
    InMemoryEmailVerificationTokenRepository,
    InMemoryPasswordResetTokenRepository,
    InMemoryRefreshTokenRepository,
    InMemorySecurityEventRepository,
    InMemorySessionRepository,
    InMemoryTrustedDeviceRepository,
    InMemoryUserRepository,
)
from src.infrastructure.security import (
    BackupCodeService,
    BcryptPasswordService,
    JWTService,
    PyOTPService,
    SecureTokenService,
    SigningKeys,
)

TEST_SECRET_KEY = "test-access-secret-key-0123456789abcdef"
TEST_REFRESH_SECRET_KEY = "test-refresh-secret-key-0123456789abcdef"
TEST_PEPPER = "test-backup-code-pepper"
TEST_PASSWORD = "SecureP@ssw0rd1"

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BOGOTA_IP = "190.24.10.1"
MEDELLIN_IP = "181.50.20.2"
MADRID_IP = "83.44.30.3"

LOCATIONS = {
    BOGOTA_IP: GeoLocation(
        city="Bogotá", country="Colombia", country_code="CO", latitude=4.711, longitude=-74.0721
    ),
    MEDELLIN_IP: GeoLocation(
        city="Medellín", country="Colombia", country_code="CO", latitude=6.2442, longitude=-75.5812
    ),
    MADRID_IP: GeoLocation(
        city="Madrid", country="Spain", country_code="ES", latitude=40.4168, longitude=-3.7038
    ),
}


class FixedGeolocation:
    """GeolocationResolver answering from a dict; private IPs are local."""

    def __init__(self, locations: dict[str, GeoLocation]) -> None:
        self.locations = dict(locations)

    async def resolve(self, ip_address: str) -> GeoLocation | None:
        if ip_address.startswith(("10.", "192.168.", "127.")):
            return GeoLocation.local_network()
        return self.locations.get(ip_address)


@dataclass
class AuthHarness:
    """Fully wired auth core over in-memory adapters."""

    repos: RequestRepositories
    services: AuthServices
    token_service: JWTService
    password_service: BcryptPasswordService
    backup_codes: BackupCodeService
    audit: InMemoryAuditAdapter
    notifications: InMemoryNotificationDispatcher
    geolocation: FixedGeolocation
    logger: Mock
    handlers: dict[str, object] = field(default_factory=dict)

    async def create_user(
        self,
        email: str = "ana@example.com",
        password: str = TEST_PASSWORD,
        **overrides: object,
    ) -> User:
        """Store a verified, active user and return the stored copy."""
        values: dict[str, object] = {
            "id": uuid7(),
            "email": email,
            "password_hash": await self.password_service.hash_password(password),
            "first_name": "Ana",
            "last_name": "Pérez",
            "is_email_verified": True,
            "email_verified_at": datetime.now(UTC),
        }
        values.update(overrides)
        user = User(**values)  # type: ignore[arg-type]
        await self.repos.users.save(user)
        stored = await self.repos.users.find_by_id(user.id)
        assert stored is not None
        return stored

    async def enable_two_factor(self, user: User) -> tuple[str, list[str]]:
        """Enroll ``user`` in 2FA; returns (secret, backup codes)."""
        setup = await self.services.two_factor.generate_secret(user.id)
        secret = setup.value.secret  # type: ignore[union-attr]
        codes = await self.services.two_factor.enable(user.id, pyotp.TOTP(secret).now())
        return secret, codes.value  # type: ignore[union-attr]

    @property
    def register(self) -> RegisterUserHandler:
        return self.handlers["register"]  # type: ignore[return-value]

    @property
    def authenticate(self) -> AuthenticateUserHandler:
        return self.handlers["authenticate"]  # type: ignore[return-value]

    @property
    def login(self) -> LoginUserHandler:
        return self.handlers["login"]  # type: ignore[return-value]

    @property
    def complete_two_factor(self) -> CompleteTwoFactorLoginHandler:
        return self.handlers["complete_two_factor"]  # type: ignore[return-value]

    @property
    def refresh(self) -> RefreshAccessTokenHandler:
        return self.handlers["refresh"]  # type: ignore[return-value]

    @property
    def logout(self) -> LogoutUserHandler:
        return self.handlers["logout"]  # type: ignore[return-value]

    @property
    def verify_email(self) -> VerifyEmailHandler:
        return self.handlers["verify_email"]  # type: ignore[return-value]

    @property
    def resend_verification(self) -> ResendVerificationHandler:
        return self.handlers["resend_verification"]  # type: ignore[return-value]

    @property
    def request_reset(self) -> RequestPasswordResetHandler:
        return self.handlers["request_reset"]  # type: ignore[return-value]

    @property
    def confirm_reset(self) -> ConfirmPasswordResetHandler:
        return self.handlers["confirm_reset"]  # type: ignore[return-value]

    @property
    def change_password(self) -> ChangePasswordHandler:
        return self.handlers["change_password"]  # type: ignore[return-value]


def build_harness() -> AuthHarness:
    """Wire services and handlers the way the container does."""
    logger = Mock()
    audit = InMemoryAuditAdapter()
    notifications = InMemoryNotificationDispatcher()
    geolocation = FixedGeolocation(LOCATIONS)
    enricher = UserAgentDeviceEnricher()
    token_service = JWTService(
        SigningKeys.symmetric(TEST_SECRET_KEY, TEST_REFRESH_SECRET_KEY),
        issuer="membership-auth-test",
    )
    password_service = BcryptPasswordService(cost_factor=4)
    backup_codes = BackupCodeService(pepper=TEST_PEPPER)
    token_generator = SecureTokenService()

    repos = RequestRepositories(
        users=InMemoryUserRepository(),
        sessions=InMemorySessionRepository(),
        refresh_tokens=InMemoryRefreshTokenRepository(),
        devices=InMemoryTrustedDeviceRepository(),
        security_events=InMemorySecurityEventRepository(),
        verification_tokens=InMemoryEmailVerificationTokenRepository(),
        reset_tokens=InMemoryPasswordResetTokenRepository(),
    )

    sessions = SessionRegistry(repos.sessions, repos.refresh_tokens, logger)
    risk = RiskEngine(repos.users, repos.security_events, geolocation, notifications, logger)
    devices = DeviceTrustService(
        repos.devices, token_generator, enricher, notifications, logger
    )
    two_factor = TwoFactorService(
        repos.users, PyOTPService(), backup_codes, logger, issuer="Membership Club"
    )
    email_tokens = EmailTokenService(
        repos.verification_tokens,
        repos.reset_tokens,
        token_generator,
        notifications,
        logger,
        url_base="https://club.example.com",
    )
    finalizer = LoginFinalizer(
        repos.users,
        token_service,
        sessions,
        repos.refresh_tokens,
        enricher,
        audit,
        logger,
    )
    password_change = PasswordChangeService(
        repos.users, password_service, sessions, risk, notifications, logger
    )
    services = AuthServices(
        repos=repos,
        sessions=sessions,
        risk=risk,
        devices=devices,
        two_factor=two_factor,
        email_tokens=email_tokens,
        finalizer=finalizer,
        password_change=password_change,
    )

    authenticate = AuthenticateUserHandler(
        user_repo=repos.users,
        password_service=password_service,
        audit=audit,
        logger=logger,
        max_login_attempts=5,
        lock_minutes=120,
    )
    handlers: dict[str, object] = {
        "register": RegisterUserHandler(
            user_repo=repos.users,
            password_service=password_service,
            email_tokens=email_tokens,
            audit=audit,
            logger=logger,
        ),
        "authenticate": authenticate,
        "login": LoginUserHandler(
            authenticate=authenticate,
            risk_engine=risk,
            device_trust=devices,
            token_service=token_service,
            finalizer=finalizer,
            audit=audit,
            logger=logger,
        ),
        "complete_two_factor": CompleteTwoFactorLoginHandler(
            user_repo=repos.users,
            token_service=token_service,
            two_factor=two_factor,
            device_trust=devices,
            risk_engine=risk,
            geolocation=geolocation,
            finalizer=finalizer,
            audit=audit,
            logger=logger,
        ),
        "refresh": RefreshAccessTokenHandler(
            user_repo=repos.users,
            refresh_token_repo=repos.refresh_tokens,
            session_registry=sessions,
            token_service=token_service,
            audit=audit,
            logger=logger,
        ),
        "logout": LogoutUserHandler(session_registry=sessions, audit=audit, logger=logger),
        "verify_email": VerifyEmailHandler(
            user_repo=repos.users,
            verification_repo=repos.verification_tokens,
            notifications=notifications,
            audit=audit,
            logger=logger,
        ),
        "resend_verification": ResendVerificationHandler(
            user_repo=repos.users,
            email_tokens=email_tokens,
            logger=logger,
        ),
        "request_reset": RequestPasswordResetHandler(
            user_repo=repos.users,
            email_tokens=email_tokens,
            audit=audit,
            logger=logger,
        ),
        "confirm_reset": ConfirmPasswordResetHandler(
            user_repo=repos.users,
            reset_repo=repos.reset_tokens,
            password_change=password_change,
            audit=audit,
            logger=logger,
        ),
        "change_password": ChangePasswordHandler(
            user_repo=repos.users,
            password_service=password_service,
            password_change=password_change,
            audit=audit,
            logger=logger,
        ),
    }

    return AuthHarness(
        repos=repos,
        services=services,
        token_service=token_service,
        password_service=password_service,
        backup_codes=backup_codes,
        audit=audit,
        notifications=notifications,
        geolocation=geolocation,
        logger=logger,
        handlers=handlers,
    )


@pytest.fixture
def harness() -> AuthHarness:
    """Fresh auth core per test."""
    return build_harness()


@pytest.fixture
def mock_logger() -> Mock:
    return Mock()


def wrong_totp_code(secret: str) -> str:
    """A six-digit code rejected for ``secret`` right now."""
    totp = pyotp.TOTP(secret)
    for candidate in ("000000", "111111", "222222", "333333"):
        if not totp.verify(candidate, valid_window=2):
            return candidate
    raise AssertionError("no rejected candidate code")
