"""Application service factories.

Engines that need repositories are request-scoped: they are rebuilt for
every request around that request's repositories. Everything else they use
is an application-scoped singleton from ``infrastructure``.
"""

from dataclasses import dataclass

from fastapi import Depends

from src.application.services import (
    DeviceTrustService,
    EmailTokenService,
    LoginFinalizer,
    PasswordChangeService,
    RiskEngine,
    RiskThresholds,
    SessionRegistry,
    TwoFactorService,
)
from src.core.config import settings
from src.core.container.infrastructure import (
    get_audit,
    get_backup_code_service,
    get_device_enricher,
    get_geolocation,
    get_logger,
    get_notification_dispatcher,
    get_password_service,
    get_secure_token_generator,
    get_token_service,
    get_totp_service,
)
from src.core.container.repositories import RequestRepositories, get_repositories


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthServices:
    """Application services bound to one request's repositories."""

    repos: RequestRepositories
    sessions: SessionRegistry
    risk: RiskEngine
    devices: DeviceTrustService
    two_factor: TwoFactorService
    email_tokens: EmailTokenService
    finalizer: LoginFinalizer
    password_change: PasswordChangeService


def risk_thresholds() -> RiskThresholds:
    """Risk tunables from settings."""
    return RiskThresholds(
        max_distance_km=settings.risk_max_distance_km,
        lock_threshold=settings.risk_lock_threshold,
        alert_threshold=settings.risk_alert_threshold,
        lock_minutes=settings.risk_lock_minutes,
        velocity_window_minutes=settings.risk_velocity_window_minutes,
        velocity_threshold=settings.risk_velocity_threshold,
    )


def build_services(repos: RequestRepositories) -> AuthServices:
    """Wire the application services around ``repos``."""
    logger = get_logger()
    notifications = get_notification_dispatcher()

    sessions = SessionRegistry(repos.sessions, repos.refresh_tokens, logger)
    risk = RiskEngine(
        repos.users,
        repos.security_events,
        get_geolocation(),
        notifications,
        logger,
        thresholds=risk_thresholds(),
        retention_days=settings.security_event_retention_days,
    )
    devices = DeviceTrustService(
        repos.devices,
        get_secure_token_generator(),
        get_device_enricher(),
        notifications,
        logger,
        trust_days=settings.trusted_device_days,
    )
    two_factor = TwoFactorService(
        repos.users,
        get_totp_service(),
        get_backup_code_service(),
        logger,
        issuer=settings.totp_issuer,
    )
    email_tokens = EmailTokenService(
        repos.verification_tokens,
        repos.reset_tokens,
        get_secure_token_generator(),
        notifications,
        logger,
        url_base=settings.verification_url_base,
        verification_expire_hours=settings.email_verification_expire_hours,
        reset_expire_hours=settings.password_reset_expire_hours,
    )
    finalizer = LoginFinalizer(
        repos.users,
        get_token_service(),
        sessions,
        repos.refresh_tokens,
        get_device_enricher(),
        get_audit(),
        logger,
        access_expire_minutes=settings.access_token_expire_minutes,
    )
    password_change = PasswordChangeService(
        repos.users,
        get_password_service(),
        sessions,
        risk,
        notifications,
        logger,
    )
    return AuthServices(
        repos=repos,
        sessions=sessions,
        risk=risk,
        devices=devices,
        two_factor=two_factor,
        email_tokens=email_tokens,
        finalizer=finalizer,
        password_change=password_change,
    )


async def get_auth_services(
    repos: RequestRepositories = Depends(get_repositories),
) -> AuthServices:
    """Get the request's application services (request-scoped)."""
    return build_services(repos)
