"""SQLAlchemy implementation of the TrustedDeviceRepository protocol."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import CursorResult, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import TrustedDevice
from src.domain.enums import DeviceType
from src.infrastructure.persistence.models.trusted_device import (
    TrustedDevice as TrustedDeviceModel,
)


class SQLAlchemyTrustedDeviceRepository:
    """SQLAlchemy implementation of TrustedDeviceRepository.

    "Active" means not revoked and not expired.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, device: TrustedDevice) -> None:
        self.session.add(self._to_model(device))
        await self.session.flush()

    async def find_by_id(self, device_id: UUID) -> TrustedDevice | None:
        model = await self.session.get(TrustedDeviceModel, device_id)
        return self._to_domain(model) if model is not None else None

    async def find_active(
        self,
        user_id: UUID,
        fingerprint: str,
        *,
        remember_token: str | None = None,
    ) -> TrustedDevice | None:
        stmt = select(TrustedDeviceModel).where(
            TrustedDeviceModel.user_id == user_id,
            TrustedDeviceModel.device_fingerprint == fingerprint,
            TrustedDeviceModel.is_revoked.is_(False),
            TrustedDeviceModel.expires_at > datetime.now(UTC),
        )
        if remember_token is not None:
            stmt = stmt.where(TrustedDeviceModel.remember_token == remember_token)
        result = await self.session.execute(stmt.order_by(TrustedDeviceModel.created_at.desc()))
        model = result.scalars().first()
        return self._to_domain(model) if model is not None else None

    async def find_by_remember_token(self, remember_token: str) -> TrustedDevice | None:
        stmt = select(TrustedDeviceModel).where(
            TrustedDeviceModel.remember_token == remember_token,
            TrustedDeviceModel.is_revoked.is_(False),
            TrustedDeviceModel.expires_at > datetime.now(UTC),
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model is not None else None

    async def list_active_by_user(self, user_id: UUID) -> list[TrustedDevice]:
        """Active devices, most recently used first."""
        stmt = (
            select(TrustedDeviceModel)
            .where(
                TrustedDeviceModel.user_id == user_id,
                TrustedDeviceModel.is_revoked.is_(False),
                TrustedDeviceModel.expires_at > datetime.now(UTC),
            )
            .order_by(TrustedDeviceModel.last_used_at.desc())
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_by_fingerprint(self, user_id: UUID, fingerprint: str) -> int:
        """Unrevoked records for the (user, fingerprint) pair, expired or not."""
        stmt = select(func.count()).where(
            TrustedDeviceModel.user_id == user_id,
            TrustedDeviceModel.device_fingerprint == fingerprint,
            TrustedDeviceModel.is_revoked.is_(False),
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def touch(self, device_id: UUID, at: datetime) -> None:
        stmt = (
            update(TrustedDeviceModel)
            .where(TrustedDeviceModel.id == device_id)
            .values(last_used_at=at)
        )
        await self.session.execute(stmt)

    async def revoke(self, device_id: UUID, reason: str) -> bool:
        stmt = (
            update(TrustedDeviceModel)
            .where(
                TrustedDeviceModel.id == device_id,
                TrustedDeviceModel.is_revoked.is_(False),
            )
            .values(is_revoked=True, revoked_at=datetime.now(UTC), revoked_reason=reason)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount > 0

    async def revoke_all_for_user(self, user_id: UUID, reason: str) -> int:
        stmt = (
            update(TrustedDeviceModel)
            .where(
                TrustedDeviceModel.user_id == user_id,
                TrustedDeviceModel.is_revoked.is_(False),
            )
            .values(is_revoked=True, revoked_at=datetime.now(UTC), revoked_reason=reason)
        )
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    async def delete_expired(self, before: datetime) -> int:
        stmt = delete(TrustedDeviceModel).where(TrustedDeviceModel.expires_at < before)
        result: CursorResult = await self.session.execute(stmt)  # type: ignore[assignment]
        return result.rowcount

    def _to_domain(self, model: TrustedDeviceModel) -> TrustedDevice:
        return TrustedDevice(
            id=model.id,
            user_id=model.user_id,
            device_fingerprint=model.device_fingerprint,
            remember_token=model.remember_token,
            expires_at=model.expires_at,
            device_name=model.device_name,
            device_type=DeviceType(model.device_type),
            browser=model.browser,
            os=model.os,
            ip_address=model.ip_address,
            location=model.location,
            city=model.city,
            country=model.country,
            is_revoked=model.is_revoked,
            revoked_at=model.revoked_at,
            revoked_reason=model.revoked_reason,
            last_used_at=model.last_used_at,
            created_at=model.created_at,
        )

    def _to_model(self, device: TrustedDevice) -> TrustedDeviceModel:
        return TrustedDeviceModel(
            id=device.id,
            user_id=device.user_id,
            device_fingerprint=device.device_fingerprint,
            remember_token=device.remember_token,
            expires_at=device.expires_at,
            device_name=device.device_name,
            device_type=device.device_type.value,
            browser=device.browser,
            os=device.os,
            ip_address=device.ip_address,
            location=device.location,
            city=device.city,
            country=device.country,
            is_revoked=device.is_revoked,
            revoked_at=device.revoked_at,
            revoked_reason=device.revoked_reason,
            last_used_at=device.last_used_at,
            created_at=device.created_at,
        )
