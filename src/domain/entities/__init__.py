"""Domain entities.

Pure business logic entities with no framework dependencies.
"""

from src.domain.entities.one_time_token import (
    EmailVerificationToken,
    OneTimeToken,
    PasswordResetToken,
)
from src.domain.entities.refresh_token import RefreshToken
from src.domain.entities.security_event import SecurityEvent
from src.domain.entities.session import Session
from src.domain.entities.trusted_device import TrustedDevice
from src.domain.entities.user import User, UserProfile

__all__ = [
    "EmailVerificationToken",
    "OneTimeToken",
    "PasswordResetToken",
    "RefreshToken",
    "SecurityEvent",
    "Session",
    "TrustedDevice",
    "User",
    "UserProfile",
]
