"""Domain protocols (ports).

Infrastructure adapters implement these via structural typing; the
application layer depends only on the protocols.
"""

from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.cache_protocol import CacheProtocol
from src.domain.protocols.device_enricher_protocol import DeviceDetails, DeviceEnricher
from src.domain.protocols.email_verification_token_repository import (
    EmailVerificationTokenRepository,
)
from src.domain.protocols.geolocation_protocol import GeolocationResolver
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_protocol import NotificationDispatcher
from src.domain.protocols.password_hashing_protocol import PasswordHashingProtocol
from src.domain.protocols.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from src.domain.protocols.refresh_token_repository import RefreshTokenRepository
from src.domain.protocols.secure_token_protocol import (
    BackupCodeProtocol,
    SecureTokenGenerator,
)
from src.domain.protocols.security_event_repository import (
    SecurityEventRepository,
    SecurityStats,
)
from src.domain.protocols.session_repository import SessionRepository
from src.domain.protocols.token_service_protocol import (
    TokenClaims,
    TokenServiceProtocol,
    TokenSubject,
    TokenType,
)
from src.domain.protocols.totp_protocol import TOTPProtocol
from src.domain.protocols.trusted_device_repository import TrustedDeviceRepository
from src.domain.protocols.user_repository import UserRepository

__all__ = [
    "AuditProtocol",
    "BackupCodeProtocol",
    "CacheProtocol",
    "DeviceDetails",
    "DeviceEnricher",
    "EmailVerificationTokenRepository",
    "GeolocationResolver",
    "LoggerProtocol",
    "NotificationDispatcher",
    "PasswordHashingProtocol",
    "PasswordResetTokenRepository",
    "RefreshTokenRepository",
    "SecureTokenGenerator",
    "SecurityEventRepository",
    "SecurityStats",
    "SessionRepository",
    "TOTPProtocol",
    "TokenClaims",
    "TokenServiceProtocol",
    "TokenSubject",
    "TokenType",
    "TrustedDeviceRepository",
    "UserRepository",
]
