"""Domain enums.

Usage:
    from src.domain.enums import AuditAction, SecurityEventType, UserRole
"""

from src.domain.enums.audit_action import AuditAction
from src.domain.enums.device_type import DeviceType
from src.domain.enums.notification_kind import NotificationKind
from src.domain.enums.security_action_type import SecurityActionType
from src.domain.enums.security_event_type import (
    RISK_RELEVANT_EVENT_TYPES,
    SecurityEventType,
)
from src.domain.enums.security_severity import SecuritySeverity
from src.domain.enums.user_role import UserRole

__all__ = [
    "RISK_RELEVANT_EVENT_TYPES",
    "AuditAction",
    "DeviceType",
    "NotificationKind",
    "SecurityActionType",
    "SecurityEventType",
    "SecuritySeverity",
    "UserRole",
]
