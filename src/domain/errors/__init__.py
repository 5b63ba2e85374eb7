"""Domain errors.

Usage:
    from src.domain.errors import AuditError, NotificationError, TokenError
"""

from src.domain.errors.audit_error import AuditError
from src.domain.errors.notification_error import NotificationError
from src.domain.errors.token_error import TokenError

__all__ = [
    "AuditError",
    "NotificationError",
    "TokenError",
]
