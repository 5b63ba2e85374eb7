"""Audit action types.

Every security-relevant decision of the auth core is appended to the audit
log with one of these actions. Action-specific data goes in the JSON
``context`` column, so new actions need no schema change.

Categories:
    - Authentication: USER_* (registration, login, logout, refresh)
    - Credentials: PASSWORD_*, EMAIL_*
    - Two-factor: TWO_FACTOR_*
    - Sessions and devices: SESSION_*, DEVICE_*

Usage:
    from src.domain.enums import AuditAction

    await audit.record(
        action=AuditAction.USER_LOGIN_SUCCESS,
        user_id=user.id,
        resource_type="session",
        context={"method": "password", "two_factor": False},
    )
"""

from enum import Enum


class AuditAction(str, Enum):
    """Auditable actions.

    String Enum:
        Values are snake_case strings stored verbatim in the database.
    """

    # Authentication
    USER_REGISTERED = "user_registered"
    USER_LOGIN_SUCCESS = "user_login_success"
    USER_LOGIN_FAILED = "user_login_failed"
    USER_LOGIN_CHALLENGED = "user_login_challenged"
    USER_LOGOUT = "user_logout"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REFRESH_FAILED = "token_refresh_failed"

    # Credentials
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET_REQUESTED = "password_reset_requested"
    PASSWORD_RESET_COMPLETED = "password_reset_completed"
    PASSWORD_RESET_FAILED = "password_reset_failed"
    EMAIL_VERIFIED = "email_verified"
    EMAIL_VERIFICATION_FAILED = "email_verification_failed"

    # Two-factor
    TWO_FACTOR_ENABLED = "two_factor_enabled"
    TWO_FACTOR_DISABLED = "two_factor_disabled"
    TWO_FACTOR_FAILED = "two_factor_failed"
    BACKUP_CODES_REGENERATED = "backup_codes_regenerated"

    # Sessions and devices
    SESSION_REVOKED = "session_revoked"
    ALL_SESSIONS_REVOKED = "all_sessions_revoked"
    DEVICE_TRUSTED = "device_trusted"
    DEVICE_REVOKED = "device_revoked"

    # Security review
    SECURITY_EVENT_REVIEWED = "security_event_reviewed"
