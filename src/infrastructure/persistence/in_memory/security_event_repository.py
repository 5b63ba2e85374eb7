"""In-memory SecurityEventRepository."""

from collections.abc import Collection
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from src.domain.entities import SecurityEvent
from src.domain.enums import SecurityEventType
from src.domain.protocols import SecurityStats


class InMemorySecurityEventRepository:
    """List-backed SecurityEventRepository (append-only)."""

    def __init__(self) -> None:
        self._events: list[SecurityEvent] = []

    async def save(self, event: SecurityEvent) -> None:
        self._events.append(replace(event, metadata=dict(event.metadata)))

    async def find_by_id(self, event_id: UUID) -> SecurityEvent | None:
        for event in self._events:
            if event.id == event_id:
                return replace(event)
        return None

    async def count_by_ip(self, user_id: UUID, ip_address: str) -> int:
        return sum(1 for e in self._events if e.user_id == user_id and e.ip_address == ip_address)

    async def find_last_located(self, user_id: UUID) -> SecurityEvent | None:
        located = [e for e in self._events if e.user_id == user_id and e.city]
        if not located:
            return None
        return replace(max(located, key=lambda e: e.created_at))

    async def count_since(
        self,
        user_id: UUID,
        event_types: Collection[SecurityEventType],
        since: datetime,
    ) -> int:
        return sum(
            1
            for e in self._events
            if e.user_id == user_id and e.event_type in event_types and e.created_at >= since
        )

    async def find_by_user(self, user_id: UUID, *, limit: int = 50) -> list[SecurityEvent]:
        events = sorted(
            (e for e in self._events if e.user_id == user_id),
            key=lambda e: e.created_at,
            reverse=True,
        )
        return [replace(e) for e in events[:limit]]

    async def stats_since(self, since: datetime) -> SecurityStats:
        window = [e for e in self._events if e.created_at >= since]
        scores = [e.risk_score for e in window]
        return SecurityStats(
            total_events=len(window),
            high_severity_events=sum(1 for e in window if e.severity.is_high_or_above()),
            account_locks=sum(
                1 for e in window if e.event_type == SecurityEventType.ACCOUNT_LOCKED
            ),
            average_risk_score=round(sum(scores) / len(scores), 2) if scores else 0.0,
        )

    async def mark_reviewed(self, event_id: UUID, reviewer_id: UUID, at: datetime) -> bool:
        for event in self._events:
            if event.id == event_id:
                event.is_reviewed = True
                event.reviewed_at = at
                event.reviewed_by = reviewer_id
                return True
        return False

    async def delete_older_than(self, before: datetime) -> int:
        kept = [e for e in self._events if e.created_at >= before]
        removed = len(self._events) - len(kept)
        self._events = kept
        return removed

    def all(self) -> list[SecurityEvent]:
        """Snapshot of every stored event, oldest first (test inspection)."""
        return [replace(e) for e in self._events]
