"""Out-of-band notification kinds.

Each kind maps to an email template owned by the delivery worker. The
priority is the default queue priority for that kind (lower is sooner).
"""

from enum import Enum


class NotificationKind(str, Enum):
    """Notification kinds accepted by the dispatcher."""

    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"
    PASSWORD_CHANGED = "password_changed"
    WELCOME = "welcome"
    SECURITY_ALERT = "security_alert"

    @property
    def default_priority(self) -> int:
        """Queue priority (1 = highest)."""
        return _PRIORITIES[self]


_PRIORITIES: dict[NotificationKind, int] = {
    NotificationKind.SECURITY_ALERT: 1,
    NotificationKind.PASSWORD_RESET: 1,
    NotificationKind.VERIFICATION: 2,
    NotificationKind.PASSWORD_CHANGED: 2,
    NotificationKind.WELCOME: 5,
}
