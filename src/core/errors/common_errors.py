"""Error classes shared by every flow of the auth core.

Error Types:
- ValidationError: malformed input rejected before touching storage
- NotFoundError: resource missing (or deliberately reported as missing)
- ConflictError: duplicate or invalid state transition
- AuthenticationError: caller could not be authenticated
- AuthorizationError: caller is authenticated but not allowed

Usage:
    from src.core.errors import ConflictError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(
        error=ConflictError(
            code=ErrorCode.EMAIL_ALREADY_EXISTS,
            message="An account with this email already exists",
            resource_type="User",
            conflicting_field="email",
        )
    )
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Name of the offending field, if any.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Kind of resource (Session, TrustedDevice, ...).
        resource_id: Identifier that was looked up.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Duplicate resource or state conflict.

    Attributes:
        resource_type: Kind of resource in conflict.
        conflicting_field: Field that caused the conflict.
    """

    resource_type: str
    conflicting_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (bad credentials, bad token, locked account)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Authorization failure.

    Attributes:
        required_permission: Capability the caller was missing.
    """

    required_permission: str | None = None
