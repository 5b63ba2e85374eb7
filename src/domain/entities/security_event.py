"""Security event entity.

Append-only record produced by the risk engine during login analysis (and
by credential flows for password changes and failed 2FA). The only
permitted mutation is marking an event as reviewed.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.domain.enums import SecurityActionType, SecurityEventType, SecuritySeverity


@dataclass(slots=True, kw_only=True)
class SecurityEvent:
    """Security event.

    Attributes:
        id: Record identifier.
        user_id: Affected user.
        event_type: Kind of event.
        severity: Severity level.
        risk_score: 0-100 score at the time of the event.
        ip_address: Client IP.
        location: Location summary ("Madrid, Spain").
        city: Resolved city.
        country: Resolved country.
        latitude: Resolved latitude.
        longitude: Resolved longitude.
        device_fingerprint: Client fingerprint.
        user_agent: Client user agent.
        metadata: Free-form details (distance_km, last_location, ...).
        action_taken: Whether an automatic action was applied.
        action_type: Which action.
        is_reviewed: Whether an admin reviewed the event.
        reviewed_at: Review time.
        reviewed_by: Reviewer user id.
        created_at: Event time.
    """

    id: UUID
    user_id: UUID
    event_type: SecurityEventType
    severity: SecuritySeverity
    risk_score: int = 0
    ip_address: str | None = None
    location: str | None = None
    city: str | None = None
    country: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    device_fingerprint: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    action_taken: bool = False
    action_type: SecurityActionType = SecurityActionType.NONE
    is_reviewed: bool = False
    reviewed_at: datetime | None = None
    reviewed_by: UUID | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not 0 <= self.risk_score <= 100:
            raise ValueError("risk_score must be between 0 and 100")

    def has_coordinates(self) -> bool:
        """True if both latitude and longitude are known."""
        return self.latitude is not None and self.longitude is not None
