"""Data Transfer Objects (DTOs) for the application layer.

DTOs are response/result dataclasses returned by command and query handlers.
They transfer data from the application layer to the presentation layer.

Usage:
    from src.application.dtos import LoginChallenge, LoginTokens

Note:
    DTOs are NOT the same as:
    - Domain entities (may hold secrets such as password hashes)
    - API schemas (Pydantic models in the presentation layer)
"""

from src.application.dtos.auth_dtos import (
    GENERIC_RESET_MESSAGE,
    GENERIC_VERIFICATION_MESSAGE,
    AuthenticatedUser,
    GenericResponse,
    LoginChallenge,
    LoginOutcome,
    LoginTokens,
    RegisteredUser,
    TokenPair,
    TwoFactorStatus,
)

__all__ = [
    "GENERIC_RESET_MESSAGE",
    "GENERIC_VERIFICATION_MESSAGE",
    "AuthenticatedUser",
    "GenericResponse",
    "LoginChallenge",
    "LoginOutcome",
    "LoginTokens",
    "RegisteredUser",
    "TokenPair",
    "TwoFactorStatus",
]
