"""Security event repository protocol.

Security events are append-only: the port offers inserts, reads and the
single permitted mutation (``mark_reviewed``).
"""

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import SecurityEvent
from src.domain.enums import SecurityEventType


@dataclass(frozen=True, slots=True, kw_only=True)
class SecurityStats:
    """Aggregate counters over a time window.

    Attributes:
        total_events: Events in the window.
        high_severity_events: HIGH or CRITICAL events.
        account_locks: ACCOUNT_LOCKED events.
        average_risk_score: Mean risk score (0.0 when no events).
    """

    total_events: int
    high_severity_events: int
    account_locks: int
    average_risk_score: float


class SecurityEventRepository(Protocol):
    """Security event persistence port."""

    async def save(self, event: SecurityEvent) -> None:
        """Append an event."""
        ...

    async def find_by_id(self, event_id: UUID) -> SecurityEvent | None:
        """Find an event by ID."""
        ...

    async def count_by_ip(self, user_id: UUID, ip_address: str) -> int:
        """Count events of a user that came from an IP."""
        ...

    async def find_last_located(self, user_id: UUID) -> SecurityEvent | None:
        """Most recent event of a user that carries a resolved city."""
        ...

    async def count_since(
        self,
        user_id: UUID,
        event_types: Collection[SecurityEventType],
        since: datetime,
    ) -> int:
        """Count events of the given types created at or after ``since``."""
        ...

    async def find_by_user(self, user_id: UUID, *, limit: int = 50) -> list[SecurityEvent]:
        """Latest events of a user, newest first."""
        ...

    async def stats_since(self, since: datetime) -> SecurityStats:
        """Aggregate counters for events created at or after ``since``."""
        ...

    async def mark_reviewed(self, event_id: UUID, reviewer_id: UUID, at: datetime) -> bool:
        """Flag an event as reviewed. True if the event exists."""
        ...

    async def delete_older_than(self, before: datetime) -> int:
        """Purge events created before ``before`` (retention window)."""
        ...
