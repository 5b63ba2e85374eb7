"""In-memory repository implementations.

Same protocols and the same atomic semantics as the SQLAlchemy adapters
(conditional revokes, counter increments, backup-code consumption), backed
by dicts. Used by unit tests and local development without PostgreSQL.

Each operation completes without awaiting, so on a single event loop it is
atomic with respect to other coroutines.
"""

from src.infrastructure.persistence.in_memory.device_repository import (
    InMemoryTrustedDeviceRepository,
)
from src.infrastructure.persistence.in_memory.security_event_repository import (
    InMemorySecurityEventRepository,
)
from src.infrastructure.persistence.in_memory.session_repository import (
    InMemoryRefreshTokenRepository,
    InMemorySessionRepository,
)
from src.infrastructure.persistence.in_memory.token_repository import (
    InMemoryEmailVerificationTokenRepository,
    InMemoryPasswordResetTokenRepository,
)
from src.infrastructure.persistence.in_memory.user_repository import (
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryEmailVerificationTokenRepository",
    "InMemoryPasswordResetTokenRepository",
    "InMemoryRefreshTokenRepository",
    "InMemorySecurityEventRepository",
    "InMemorySessionRepository",
    "InMemoryTrustedDeviceRepository",
    "InMemoryUserRepository",
]
