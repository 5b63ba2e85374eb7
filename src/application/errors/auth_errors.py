"""Error factories shared by the auth handlers.

Centralizes the client-facing wording of authentication failures so that
conditions meant to be indistinguishable (unknown email vs wrong password,
missing vs used vs expired token) produce byte-identical errors.
"""

from src.core.enums import ErrorCode
from src.core.errors import AuthenticationError, ValidationError
from src.domain.errors import TokenError

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"
INVALID_LINK_MESSAGE = "Invalid or expired link"


def invalid_credentials_error() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_CREDENTIALS,
        message=INVALID_CREDENTIALS_MESSAGE,
    )


def account_locked_error(minutes: int) -> AuthenticationError:
    """Error for a locked account, with the minutes left (rounded up)."""
    return AuthenticationError(
        code=ErrorCode.ACCOUNT_LOCKED,
        message=f"Account locked. Try again in {minutes} minutes.",
    )


def token_failure(reason: str) -> AuthenticationError:
    """Map a TokenError constant to an authentication error."""
    if reason == TokenError.EXPIRED_TOKEN:
        return AuthenticationError(code=ErrorCode.TOKEN_EXPIRED, message="Token has expired")
    return AuthenticationError(code=ErrorCode.TOKEN_INVALID, message=INVALID_TOKEN_MESSAGE)


def invalid_link_error() -> AuthenticationError:
    """Missing, used and expired one-time tokens all look like this."""
    return AuthenticationError(code=ErrorCode.TOKEN_INVALID, message=INVALID_LINK_MESSAGE)


def weak_password_error(message: str, field: str = "password") -> ValidationError:
    return ValidationError(code=ErrorCode.PASSWORD_TOO_WEAK, message=message, field=field)
