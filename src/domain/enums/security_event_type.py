"""Security event types recorded by the risk engine."""

from enum import Enum


class SecurityEventType(str, Enum):
    """Kinds of security events.

    RISK_RELEVANT members feed the attempt-velocity heuristic.
    """

    SUSPICIOUS_LOGIN = "suspicious_login"
    NEW_LOCATION = "new_location"
    NEW_IP = "new_ip"
    NEW_DEVICE = "new_device"
    FAILED_2FA = "failed_2fa"
    ACCOUNT_LOCKED = "account_locked"
    PASSWORD_CHANGED = "password_changed"


RISK_RELEVANT_EVENT_TYPES: frozenset[SecurityEventType] = frozenset(
    {
        SecurityEventType.SUSPICIOUS_LOGIN,
        SecurityEventType.NEW_IP,
        SecurityEventType.NEW_LOCATION,
    }
)
