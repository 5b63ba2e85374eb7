"""Session, device and security-event queries (CQRS read operations).

Queries are immutable dataclasses with question-like names. Queries NEVER
change state.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class ListUserSessions:
    """List the active sessions of a user.

    Attributes:
        user_id: User identifier.
        current_session_id: Session of the caller (flagged in the result).

    Example:
        >>> query = ListUserSessions(user_id=user.id, current_session_id=session.id)
        >>> result = await handler.handle(query)
    """

    user_id: UUID
    current_session_id: UUID | None = None


@dataclass(frozen=True, kw_only=True)
class ListTrustedDevices:
    """List the trusted (unrevoked, unexpired) devices of a user."""

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class ListSecurityEvents:
    """List the most recent security events of a user.

    Attributes:
        user_id: User identifier.
        limit: Maximum number of events, newest first.
    """

    user_id: UUID
    limit: int = 50


@dataclass(frozen=True, kw_only=True)
class GetTwoFactorStatus:
    """Whether a user has 2FA enabled, and how many backup codes remain."""

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class GetSecurityStats:
    """Platform-wide security counters (admin only).

    Attributes:
        hours: Window size, clamped by the handler to 1..720 (30 days).
    """

    hours: int = 24
