"""Automatic actions the risk engine can take for an event."""

from enum import Enum


class SecurityActionType(str, Enum):
    """Action attached to a security event."""

    EMAIL_ALERT = "email_alert"
    ACCOUNT_LOCKED = "account_locked"
    TWO_FACTOR_REQUIRED = "2fa_required"
    NONE = "none"
