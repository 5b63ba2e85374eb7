"""Machine-readable error codes.

Codes follow the ENTITY_ACTION_REASON convention and are carried by every
DomainError. The presentation layer maps them to HTTP status codes.

Categories:
- Validation (INVALID_*, VALIDATION_*)
- Resource (*_NOT_FOUND)
- Conflict (*_ALREADY_*)
- Authentication (INVALID_CREDENTIALS, TOKEN_*, SESSION_*, ACCOUNT_LOCKED)
- Authorization (PERMISSION_DENIED, EMAIL_NOT_VERIFIED)
- Infrastructure (AUDIT_*, CACHE_*, NOTIFICATION_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    PASSWORD_TOO_WEAK = "password_too_weak"
    PASSWORD_MISMATCH = "password_mismatch"
    TERMS_NOT_ACCEPTED = "terms_not_accepted"
    INVALID_TWO_FACTOR_CODE_FORMAT = "invalid_two_factor_code_format"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"
    SESSION_NOT_FOUND = "session_not_found"
    DEVICE_NOT_FOUND = "device_not_found"
    SECURITY_EVENT_NOT_FOUND = "security_event_not_found"

    # Conflict errors
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    EMAIL_ALREADY_VERIFIED = "email_already_verified"
    TWO_FACTOR_ALREADY_ENABLED = "two_factor_already_enabled"
    TWO_FACTOR_NOT_ENABLED = "two_factor_not_enabled"
    TWO_FACTOR_SECRET_MISSING = "two_factor_secret_missing"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_LOCKED = "account_locked"
    ACCOUNT_INACTIVE = "account_inactive"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    SESSION_REVOKED = "session_revoked"
    INVALID_TWO_FACTOR_CODE = "invalid_two_factor_code"
    LOGIN_DENIED_BY_RISK = "login_denied_by_risk"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"
    EMAIL_NOT_VERIFIED = "email_not_verified"

    # Infrastructure errors
    AUDIT_RECORD_FAILED = "audit_record_failed"
    CACHE_UNAVAILABLE = "cache_unavailable"
    NOTIFICATION_ENQUEUE_FAILED = "notification_enqueue_failed"
