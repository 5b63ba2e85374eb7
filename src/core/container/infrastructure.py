"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Cache and notification queue (Redis)
- Database (PostgreSQL)
- Audit trail (own sessions, commits immediately)
- Password hashing (bcrypt), JWT, TOTP, opaque tokens and backup codes
- Login enrichers (user agent parsing, GeoIP)
- Logging (structlog console adapter)
"""

from functools import lru_cache
from typing import TYPE_CHECKING, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.infrastructure.persistence.database import Database

if TYPE_CHECKING:
    from src.domain.protocols import (
        AuditProtocol,
        BackupCodeProtocol,
        CacheProtocol,
        DeviceEnricher,
        GeolocationResolver,
        LoggerProtocol,
        NotificationDispatcher,
        PasswordHashingProtocol,
        SecureTokenGenerator,
        TOTPProtocol,
        TokenServiceProtocol,
    )


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns RedisAdapter with connection pooling. The pool is shared across
    the entire application (geolocation cache and notification queue).

    Usage:
        cache = get_cache()
        await cache.set("key", "value", ttl=60)
    """
    from redis.asyncio import ConnectionPool, Redis

    from src.infrastructure.cache.redis_adapter import RedisAdapter

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        socket_keepalive=True,
    )
    redis_client = Redis(connection_pool=pool)
    return RedisAdapter(redis_client=redis_client)


@lru_cache()
def get_database() -> Database:
    """Get database manager singleton (app-scoped).

    Use get_db_session() for per-request sessions.
    """
    return Database(
        database_url=settings.database_url,
        echo=settings.db_echo,
    )


# ============================================================================
# Request-Scoped Dependencies (Per-Request)
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (request-scoped).

    One session is one unit of work:
        - Commits on success
        - Rolls back on exception
        - Always closes session

    Usage:
        @router.post("/auth/refresh")
        async def refresh(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    db = get_database()
    async with db.get_session() as session:
        yield session


# ============================================================================
# Audit (Application-Scoped, independent sessions)
# ============================================================================


@lru_cache()
def get_audit() -> "AuditProtocol":
    """Get audit trail adapter singleton (app-scoped).

    The adapter opens its own session per entry and commits immediately, so
    audit records persist even when the request's unit of work rolls back
    (a failed login is audited although nothing else is written).
    """
    from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter

    return PostgresAuditAdapter(
        session_factory=get_database().async_session,
        logger=get_logger(),
    )


# ============================================================================
# Security Services (Application-Scoped)
# ============================================================================


@lru_cache()
def get_password_service() -> "PasswordHashingProtocol":
    """Get password hashing service singleton (app-scoped).

    BcryptPasswordService with ``settings.bcrypt_rounds`` (12 by default,
    roughly 250ms per hash, run off the event loop).
    """
    from src.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=settings.bcrypt_rounds)


@lru_cache()
def get_token_service() -> "TokenServiceProtocol":
    """Get JWT token service singleton (app-scoped).

    RS256 when a key pair is configured, HS256 with the two secrets
    otherwise (a warning is logged outside development).
    """
    from src.infrastructure.security import JWTService, load_signing_keys

    return JWTService(
        load_signing_keys(settings, get_logger()),
        access_expire_minutes=settings.access_token_expire_minutes,
        refresh_expire_days=settings.refresh_token_expire_days,
        refresh_remember_days=settings.refresh_token_remember_days,
        pending_expire_minutes=settings.two_factor_pending_expire_minutes,
        issuer=settings.jwt_issuer,
    )


@lru_cache()
def get_secure_token_generator() -> "SecureTokenGenerator":
    """Opaque 64-hex tokens (verification, reset, remember-device)."""
    from src.infrastructure.security import SecureTokenService

    return SecureTokenService()


@lru_cache()
def get_backup_code_service() -> "BackupCodeProtocol":
    """Backup code generation and peppered hashing."""
    from src.infrastructure.security import BackupCodeService

    return BackupCodeService(pepper=settings.backup_code_pepper)


@lru_cache()
def get_totp_service() -> "TOTPProtocol":
    """TOTP secrets, provisioning URIs and verification (±2 steps)."""
    from src.infrastructure.security import PyOTPService

    return PyOTPService(valid_window=2)


# ============================================================================
# Enrichers and Notifications (Application-Scoped)
# ============================================================================


@lru_cache()
def get_geolocation() -> "GeolocationResolver":
    """Get IP geolocation resolver singleton (app-scoped).

    GeoLite2 lookups cached in Redis. Without ``geoip_database_path`` every
    public address resolves to None.
    """
    from src.infrastructure.enrichers import GeoIPResolver

    return GeoIPResolver(
        logger=get_logger(),
        cache=get_cache(),
        db_path=settings.geoip_database_path,
        cache_ttl_seconds=settings.geolocation_cache_ttl_seconds,
    )


@lru_cache()
def get_device_enricher() -> "DeviceEnricher":
    """User agent parser for session and device descriptions."""
    from src.infrastructure.enrichers import UserAgentDeviceEnricher

    return UserAgentDeviceEnricher(logger=get_logger())


@lru_cache()
def get_notification_dispatcher() -> "NotificationDispatcher":
    """Get notification dispatcher singleton (app-scoped).

    Jobs are pushed to the Redis list ``settings.notification_queue_key``;
    delivery belongs to a separate worker.
    """
    from src.infrastructure.notifications import RedisNotificationDispatcher

    return RedisNotificationDispatcher(
        cache=get_cache(),
        queue_key=settings.notification_queue_key,
        logger=get_logger(),
    )


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    env = settings.environment.value
    use_json = env in {"testing", "ci", "production"}
    return ConsoleAdapter(use_json=use_json, level=settings.log_level)
