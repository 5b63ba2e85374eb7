"""Audit sink error type.

Returned (never raised) by audit adapters when an entry cannot be stored.
Callers log it and carry on; an audit outage never changes an auth decision.

Usage:
    return Failure(
        error=AuditError(
            code=ErrorCode.AUDIT_RECORD_FAILED,
            message="Failed to record audit entry",
        )
    )
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditError(DomainError):
    """Audit recording failure."""

    pass
