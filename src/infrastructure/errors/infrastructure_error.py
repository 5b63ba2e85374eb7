"""Infrastructure layer error types.

Adapters catch library exceptions (redis, geoip2) and return these inside
``Failure`` results. They inherit from DomainError, so callers handle them
like any other error.
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError
from src.infrastructure.enums import InfrastructureErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class InfrastructureError(DomainError):
    """Base infrastructure error.

    Attributes:
        infrastructure_code: Adapter-level code for logs.
        details: Additional context (key, operation, original error).
    """

    infrastructure_code: InfrastructureErrorCode | None = None
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheError(InfrastructureError):
    """Redis / cache failure."""

    pass
