"""Core error classes.

Usage:
    from src.core.errors import DomainError, ConflictError, NotFoundError
"""

from src.core.errors.common_errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.core.errors.domain_error import DomainError

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
