"""Risk and geolocation engine.

Scores a login attempt that already passed the password check and decides
whether to allow it, ask for a second factor, or lock the account.

Flow:
0. Locked account: deny with score 100 before any scoring
1. Resolve the IP and read the last known location (before this attempt
   records anything)
2. New IP for the user: +20, ``new_ip`` event, alert
3. Implausible travel from the last known location: +30,
   ``new_location`` event, alert
4. Velocity (risk-relevant events in the trailing window, including the
   ones just recorded): +25, ``suspicious_login`` event
5. Cap at 100 and decide: lock / require verification / allow

Alerts are best effort: a notification failure is logged and never changes
the decision.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from src.application.services.notifications import notify
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.entities import SecurityEvent
from src.domain.enums import (
    RISK_RELEVANT_EVENT_TYPES,
    NotificationKind,
    SecurityActionType,
    SecurityEventType,
    SecuritySeverity,
)
from src.domain.protocols import (
    GeolocationResolver,
    LoggerProtocol,
    NotificationDispatcher,
    SecurityEventRepository,
    SecurityStats,
    UserRepository,
)
from src.domain.value_objects import GeoLocation, haversine_km

NEW_IP_SCORE = 20
NEW_LOCATION_SCORE = 30
VELOCITY_SCORE = 25
MAX_RISK_SCORE = 100
SECURITY_EVENT_RETENTION_DAYS = 90


class RiskAlert:
    """Alert messages attached to assessments."""

    ACCOUNT_LOCKED = "Account is locked"
    NEW_IP = "Login from a new IP address"
    NEW_LOCATION = "Login from an unusual location"
    VELOCITY = "Multiple suspicious login attempts"
    LOCKED_BY_RISK = "Account locked due to suspicious activity"


@dataclass(frozen=True, slots=True, kw_only=True)
class RiskThresholds:
    """Tunables of the scoring heuristics.

    Attributes:
        max_distance_km: Travel beyond this from the last location is suspicious.
        lock_threshold: Score at or above which the account is locked.
        alert_threshold: Score at or above which a second factor is required.
        lock_minutes: Lock duration.
        velocity_window_minutes: Trailing window for the velocity check.
        velocity_threshold: Events in the window that trigger the penalty.
    """

    max_distance_km: int = 500
    lock_threshold: int = 80
    alert_threshold: int = 60
    lock_minutes: int = 60
    velocity_window_minutes: int = 5
    velocity_threshold: int = 3


@dataclass(frozen=True, slots=True, kw_only=True)
class LoginContext:
    """A login attempt as seen by the risk engine."""

    user_id: UUID
    email: str
    ip_address: str | None = None
    user_agent: str | None = None
    device_fingerprint: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RiskAssessment:
    """Outcome of ``analyze_login_attempt``.

    Attributes:
        allowed: False when the attempt must be rejected.
        risk_score: 0-100.
        requires_additional_verification: Ask for a second factor.
        alerts: Human-readable reasons.
        location: Resolved location of the attempt, if any.
    """

    allowed: bool
    risk_score: int
    requires_additional_verification: bool = False
    alerts: list[str] = field(default_factory=list)
    location: GeoLocation | None = None


class RiskEngine:
    """Adaptive login risk scoring backed by the security event log."""

    def __init__(
        self,
        user_repo: UserRepository,
        event_repo: SecurityEventRepository,
        geolocation: GeolocationResolver,
        notifications: NotificationDispatcher,
        logger: LoggerProtocol,
        thresholds: RiskThresholds | None = None,
        retention_days: int = SECURITY_EVENT_RETENTION_DAYS,
    ) -> None:
        self._user_repo = user_repo
        self._event_repo = event_repo
        self._geolocation = geolocation
        self._notifications = notifications
        self._logger = logger
        self._thresholds = thresholds or RiskThresholds()
        self._retention_days = retention_days

    @property
    def thresholds(self) -> RiskThresholds:
        return self._thresholds

    async def analyze_login_attempt(self, ctx: LoginContext) -> RiskAssessment:
        """Score a login attempt and apply the resulting action."""
        thresholds = self._thresholds

        # Step 0: Locked accounts never reach scoring
        user = await self._user_repo.find_by_id(ctx.user_id)
        if user is not None and user.is_locked():
            return RiskAssessment(
                allowed=False,
                risk_score=MAX_RISK_SCORE,
                alerts=[RiskAlert.ACCOUNT_LOCKED],
            )

        # Step 1: Resolve location; private ranges are not scored
        location = await self._geolocation.resolve(ctx.ip_address) if ctx.ip_address else None
        if ctx.ip_address is None or (location is not None and location.is_local):
            return RiskAssessment(allowed=True, risk_score=0, location=location)

        last_event = await self._event_repo.find_last_located(ctx.user_id)

        score = 0
        alerts: list[str] = []

        # Step 2: New IP
        if await self._event_repo.count_by_ip(ctx.user_id, ctx.ip_address) == 0:
            score += NEW_IP_SCORE
            alerts.append(RiskAlert.NEW_IP)
            await self.record_event(
                ctx,
                SecurityEventType.NEW_IP,
                SecuritySeverity.MEDIUM,
                risk_score=NEW_IP_SCORE,
                location=location,
                action_type=SecurityActionType.EMAIL_ALERT,
                action_taken=True,
            )
            await self._send_alert(ctx, "new_ip", location)

        # Step 3: Implausible travel
        if (
            last_event is not None
            and last_event.has_coordinates()
            and location is not None
            and location.has_coordinates
        ):
            previous = GeoLocation(
                city=last_event.city,
                country=last_event.country,
                latitude=last_event.latitude,
                longitude=last_event.longitude,
            )
            distance = haversine_km(previous, location)
            if distance > thresholds.max_distance_km:
                score += NEW_LOCATION_SCORE
                alerts.append(RiskAlert.NEW_LOCATION)
                await self.record_event(
                    ctx,
                    SecurityEventType.NEW_LOCATION,
                    SecuritySeverity.HIGH,
                    risk_score=min(score, MAX_RISK_SCORE),
                    location=location,
                    metadata={
                        "distance_km": distance,
                        "last_location": previous.display,
                        "new_location": location.display,
                    },
                    action_type=SecurityActionType.EMAIL_ALERT,
                    action_taken=True,
                )
                await self._send_alert(ctx, "new_location", location, distance_km=distance)

        # Step 4: Velocity, counted after this attempt's own events
        window_start = datetime.now(UTC) - timedelta(minutes=thresholds.velocity_window_minutes)
        recent = await self._event_repo.count_since(
            ctx.user_id, RISK_RELEVANT_EVENT_TYPES, window_start
        )
        if recent >= thresholds.velocity_threshold:
            score += VELOCITY_SCORE
            alerts.append(RiskAlert.VELOCITY)
            await self.record_event(
                ctx,
                SecurityEventType.SUSPICIOUS_LOGIN,
                SecuritySeverity.HIGH,
                risk_score=min(score, MAX_RISK_SCORE),
                location=location,
                metadata={"recent_events": recent},
            )

        # Step 5: Decide
        score = min(score, MAX_RISK_SCORE)
        if score >= thresholds.lock_threshold:
            await self._lock(ctx, location, score)
            alerts.append(RiskAlert.LOCKED_BY_RISK)
            return RiskAssessment(
                allowed=False,
                risk_score=score,
                alerts=alerts,
                location=location,
            )

        if score > 0:
            self._logger.info(
                "Login risk scored",
                user_id=str(ctx.user_id),
                risk_score=score,
                alerts=alerts,
            )
        return RiskAssessment(
            allowed=True,
            risk_score=score,
            requires_additional_verification=score >= thresholds.alert_threshold,
            alerts=alerts,
            location=location,
        )

    async def record_event(
        self,
        ctx: LoginContext,
        event_type: SecurityEventType,
        severity: SecuritySeverity,
        *,
        risk_score: int = 0,
        location: GeoLocation | None = None,
        metadata: Mapping[str, Any] | None = None,
        action_type: SecurityActionType = SecurityActionType.NONE,
        action_taken: bool = False,
    ) -> SecurityEvent:
        """Append a security event for the attempt described by ``ctx``."""
        event = SecurityEvent(
            id=uuid7(),
            user_id=ctx.user_id,
            event_type=event_type,
            severity=severity,
            risk_score=risk_score,
            ip_address=ctx.ip_address,
            location=location.display if location else None,
            city=location.city if location and not location.is_local else None,
            country=location.country if location and not location.is_local else None,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            device_fingerprint=ctx.device_fingerprint,
            user_agent=ctx.user_agent,
            metadata=dict(metadata or {}),
            action_taken=action_taken,
            action_type=action_type,
        )
        await self._event_repo.save(event)

        log = self._logger.warning if severity.is_high_or_above() else self._logger.info
        log(
            "Security event recorded",
            user_id=str(ctx.user_id),
            event_type=event_type.value,
            severity=severity.value,
            risk_score=risk_score,
        )
        return event

    async def get_user_security_events(
        self,
        user_id: UUID,
        limit: int = 50,
    ) -> list[SecurityEvent]:
        return await self._event_repo.find_by_user(user_id, limit=limit)

    async def get_security_stats(self, hours: int = 24) -> SecurityStats:
        """Aggregate counters over the last ``hours`` hours."""
        return await self._event_repo.stats_since(datetime.now(UTC) - timedelta(hours=hours))

    async def mark_reviewed(
        self,
        event_id: UUID,
        reviewer_id: UUID,
    ) -> Result[None, NotFoundError]:
        if not await self._event_repo.mark_reviewed(event_id, reviewer_id, datetime.now(UTC)):
            return Failure(
                error=NotFoundError(
                    code=ErrorCode.SECURITY_EVENT_NOT_FOUND,
                    message="Security event not found",
                    resource_type="SecurityEvent",
                    resource_id=str(event_id),
                )
            )
        return Success(value=None)

    async def purge_old_events(self, retention_days: int | None = None) -> int:
        """Delete events older than the retention window.

        Args:
            retention_days: Override for the configured retention (90 days by default).
        """
        days = self._retention_days if retention_days is None else retention_days
        cutoff = datetime.now(UTC) - timedelta(days=days)
        purged = await self._event_repo.delete_older_than(cutoff)
        if purged:
            self._logger.info("Security events purged", purged_count=purged)
        return purged

    async def _lock(self, ctx: LoginContext, location: GeoLocation | None, score: int) -> None:
        locked_until = datetime.now(UTC) + timedelta(minutes=self._thresholds.lock_minutes)
        await self._user_repo.update_fields(ctx.user_id, locked_until=locked_until)
        await self.record_event(
            ctx,
            SecurityEventType.ACCOUNT_LOCKED,
            SecuritySeverity.CRITICAL,
            risk_score=MAX_RISK_SCORE,
            location=location,
            metadata={
                "triggering_score": score,
                "locked_until": locked_until.isoformat(),
            },
            action_type=SecurityActionType.ACCOUNT_LOCKED,
            action_taken=True,
        )
        await self._send_alert(ctx, "account_locked", location)

    async def _send_alert(
        self,
        ctx: LoginContext,
        alert_type: str,
        location: GeoLocation | None,
        **extra: Any,
    ) -> None:
        await notify(
            self._notifications,
            self._logger,
            NotificationKind.SECURITY_ALERT,
            ctx.email,
            {
                "alert_type": alert_type,
                "ip_address": ctx.ip_address,
                "location": location.display if location else "Unknown",
                "timestamp": datetime.now(UTC).isoformat(),
                **extra,
            },
            user_id=ctx.user_id,
        )
