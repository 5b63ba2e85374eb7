"""Application layer errors.

Factories for the DomainError values returned by the auth handlers.

Usage:
    from src.application.errors import invalid_credentials_error
"""

from src.application.errors.auth_errors import (
    INVALID_CREDENTIALS_MESSAGE,
    account_locked_error,
    invalid_credentials_error,
    invalid_link_error,
    token_failure,
    weak_password_error,
)

__all__ = [
    "INVALID_CREDENTIALS_MESSAGE",
    "account_locked_error",
    "invalid_credentials_error",
    "invalid_link_error",
    "token_failure",
    "weak_password_error",
]
