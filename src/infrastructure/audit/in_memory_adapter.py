"""In-memory implementation of AuditProtocol (tests and development)."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.core.result import Result, Success
from src.domain.enums import AuditAction
from src.domain.errors import AuditError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEntry:
    """Recorded audit entry."""

    action: AuditAction
    resource_type: str
    user_id: UUID | None = None
    resource_id: UUID | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    context: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class InMemoryAuditAdapter:
    """Appends entries to a list.

    Example:
        >>> audit = InMemoryAuditAdapter()
        >>> await audit.record(action=AuditAction.USER_LOGOUT, resource_type="session")
        >>> audit.actions()
        [<AuditAction.USER_LOGOUT: 'user_logout'>]
    """

    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

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
        self.entries.append(
            AuditEntry(
                action=action,
                resource_type=resource_type,
                user_id=user_id,
                resource_id=resource_id,
                ip_address=ip_address,
                user_agent=user_agent,
                context=dict(context or {}),
            )
        )
        return Success(value=None)

    def actions(self) -> list[AuditAction]:
        """Recorded actions in order."""
        return [entry.action for entry in self.entries]
