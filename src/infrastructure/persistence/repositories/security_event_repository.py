"""SQLAlchemy implementation of the SecurityEventRepository protocol.

Queries backing the risk engine:
    - count_by_ip: new-IP detection
    - find_last_located: last known location (most recent event with a city)
    - count_since: velocity window
"""

from collections.abc import Collection
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import CursorResult, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import SecurityEvent
from src.domain.enums import (
    SecurityActionType,
    SecurityEventType,
    SecuritySeverity,
)
from src.domain.protocols import SecurityStats
from src.infrastructure.persistence.models.security_event import (
    SecurityEvent as SecurityEventModel,
)

_HIGH_SEVERITIES = (SecuritySeverity.HIGH.value, SecuritySeverity.CRITICAL.value)


class SQLAlchemySecurityEventRepository:
    """SQLAlchemy implementation of SecurityEventRepository (append-only)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, event: SecurityEvent) -> None:
        self.session.add(self._to_model(event))
        await self.session.flush()

    async def find_by_id(self, event_id: UUID) -> SecurityEvent | None:
        model = await self.session.get(SecurityEventModel, event_id)
        return self._to_domain(model) if model is not None else None

    async def count_by_ip(self, user_id: UUID, ip_address: str) -> int:
        stmt = select(func.count()).where(
            SecurityEventModel.user_id == user_id,
            SecurityEventModel.ip_address == ip_address,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def find_last_located(self, user_id: UUID) -> SecurityEvent | None:
        stmt = (
            select(SecurityEventModel)
            .where(
                SecurityEventModel.user_id == user_id,
                SecurityEventModel.city.is_not(None),
            )
            .order_by(SecurityEventModel.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def count_since(
        self,
        user_id: UUID,
        event_types: Collection[SecurityEventType],
        since: datetime,
    ) -> int:
        stmt = select(func.count()).where(
            SecurityEventModel.user_id == user_id,
            SecurityEventModel.event_type.in_([t.value for t in event_types]),
            SecurityEventModel.created_at >= since,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def find_by_user(self, user_id: UUID, *, limit: int = 50) -> list[SecurityEvent]:
        stmt = (
            select(SecurityEventModel)
            .where(SecurityEventModel.user_id == user_id)
            .order_by(SecurityEventModel.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def stats_since(self, since: datetime) -> SecurityStats:
        """Aggregate counts over events created since ``since``."""
        stmt = select(
            func.count(),
            func.count().filter(SecurityEventModel.severity.in_(_HIGH_SEVERITIES)),
            func.count().filter(
                SecurityEventModel.event_type == SecurityEventType.ACCOUNT_LOCKED.value
            ),
            func.avg(SecurityEventModel.risk_score),
        ).where(SecurityEventModel.created_at >= since)
        result = await self.session.execute(stmt)
        total, high, locks, average = result.one()
        return SecurityStats(
            total_events=int(total),
            high_severity_events=int(high),
            account_locks=int(locks),
            average_risk_score=round(float(average), 2) if average is not None else 0.0,
        )

    async def mark_reviewed(self, event_id: UUID, reviewer_id: UUID, at: datetime) -> bool:
        stmt = (
            update(SecurityEventModel)
            .where(SecurityEventModel.id == event_id)
            .values(is_reviewed=True, reviewed_at=at, reviewed_by=reviewer_id)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount > 0

    async def delete_older_than(self, before: datetime) -> int:
        stmt = delete(SecurityEventModel).where(SecurityEventModel.created_at < before)
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    def _to_domain(self, model: SecurityEventModel) -> SecurityEvent:
        return SecurityEvent(
            id=model.id,
            user_id=model.user_id,
            event_type=SecurityEventType(model.event_type),
            severity=SecuritySeverity(model.severity),
            risk_score=model.risk_score,
            ip_address=model.ip_address,
            location=model.location,
            city=model.city,
            country=model.country,
            latitude=model.latitude,
            longitude=model.longitude,
            device_fingerprint=model.device_fingerprint,
            user_agent=model.user_agent,
            metadata=dict(model.event_metadata or {}),
            action_taken=model.action_taken,
            action_type=SecurityActionType(model.action_type),
            is_reviewed=model.is_reviewed,
            reviewed_at=model.reviewed_at,
            reviewed_by=model.reviewed_by,
            created_at=model.created_at or datetime.now(UTC),
        )

    def _to_model(self, event: SecurityEvent) -> SecurityEventModel:
        return SecurityEventModel(
            id=event.id,
            user_id=event.user_id,
            event_type=event.event_type.value,
            severity=event.severity.value,
            risk_score=event.risk_score,
            ip_address=event.ip_address,
            location=event.location,
            city=event.city,
            country=event.country,
            latitude=event.latitude,
            longitude=event.longitude,
            device_fingerprint=event.device_fingerprint,
            user_agent=event.user_agent,
            event_metadata=dict(event.metadata),
            action_taken=event.action_taken,
            action_type=event.action_type.value,
            is_reviewed=event.is_reviewed,
            reviewed_at=event.reviewed_at,
            reviewed_by=event.reviewed_by,
            created_at=event.created_at,
        )
