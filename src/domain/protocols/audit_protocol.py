"""Audit sink protocol.

Append-only trail of security-relevant actions. The sink is write-only from
the auth core's point of view, and it must never raise: an audit outage
must not turn an allowed login into a denied one (or vice versa).

Usage:
    from src.domain.enums import AuditAction

    await audit.record(
        action=AuditAction.USER_LOGIN_FAILED,
        resource_type="session",
        ip_address=ip_address,
        user_agent=user_agent,
        context={"reason": "invalid_credentials"},
    )
"""

from typing import Any, Protocol
from uuid import UUID

from src.core.result import Result
from src.domain.enums import AuditAction
from src.domain.errors import AuditError


class AuditProtocol(Protocol):
    """Audit trail port.

    Implementations:
        - PostgresAuditAdapter: separate session, commits immediately
        - InMemoryAuditAdapter: list append (tests and development)

    Error Handling:
        Returns Failure(AuditError) instead of raising.
    """

    async def record(
        self,
        *,
        action: AuditAction,
        resource_type: str,
        user_id: UUID | None = None,
        resource_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        """Append one immutable audit entry.

        Args:
            action: What happened.
            resource_type: What was affected (user, session, device, ...).
            user_id: Who it concerns (None when unknown, e.g. failed login).
            resource_id: Affected resource.
            ip_address: Client IP.
            user_agent: Client user agent.
            context: Extra JSON context (never secrets).

        Returns:
            Success(None), or Failure(AuditError).
        """
        ...
