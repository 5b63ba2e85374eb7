"""Database models (SQLAlchemy 2.0 declarative).

Infrastructure only: the domain layer never imports these. Repositories map
them to and from the dataclass entities in src/domain/entities/.

Models:
    - user.py: User credential record
    - session.py: Login sessions
    - refresh_token.py: Refresh token digests and rotation chain
    - email_verification_token.py / password_reset_token.py: Single-use tokens
    - trusted_device.py: Trusted devices
    - security_event.py: Risk engine events
    - audit_log.py: Immutable audit trail
"""

from src.infrastructure.persistence.models.audit_log import AuditLog
from src.infrastructure.persistence.models.email_verification_token import (
    EmailVerificationToken,
)
from src.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from src.infrastructure.persistence.models.refresh_token import RefreshToken
from src.infrastructure.persistence.models.security_event import SecurityEvent
from src.infrastructure.persistence.models.session import Session
from src.infrastructure.persistence.models.trusted_device import TrustedDevice
from src.infrastructure.persistence.models.user import User

__all__ = [
    "AuditLog",
    "EmailVerificationToken",
    "PasswordResetToken",
    "RefreshToken",
    "SecurityEvent",
    "Session",
    "TrustedDevice",
    "User",
]
