"""Session and device commands (CQRS write operations).

Commands for revoking sessions and trusted devices on behalf of their
owner. Ownership is checked by the handlers: a resource that belongs to
someone else is reported as not found.
"""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class RevokeSession:
    """Revoke one session of the caller.

    Attributes:
        user_id: Authenticated user (must own the session).
        session_id: Session to revoke.
        ip_address: Client IP.
        user_agent: Client user agent.

    Example:
        >>> command = RevokeSession(user_id=user.id, session_id=session_id)
        >>> result = await handler.handle(command)
    """

    user_id: UUID
    session_id: UUID
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class RevokeAllSessions:
    """Revoke every session of the caller.

    Attributes:
        user_id: Authenticated user.
        except_session_id: Session to keep (usually the current one).
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    user_id: UUID
    except_session_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class RevokeTrustedDevice:
    """Revoke trust in one device of the caller.

    Attributes:
        user_id: Authenticated user (must own the device).
        device_id: Trusted device record.
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    user_id: UUID
    device_id: UUID
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class RevokeAllTrustedDevices:
    """Revoke trust in every device of the caller."""

    user_id: UUID
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, kw_only=True)
class TrustCurrentDevice:
    """Trust the device the caller is using right now.

    Attributes:
        user_id: Authenticated user.
        email: Address for the "device trusted" security alert.
        device_fingerprint: Client fingerprint (required).
        ip_address: Client IP.
        user_agent: Client user agent.
    """

    user_id: UUID
    email: str
    device_fingerprint: str | None
    ip_address: str | None = None
    user_agent: str | None = None
