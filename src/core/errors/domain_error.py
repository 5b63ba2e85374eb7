"""Base error type for the auth core.

Errors are values: they travel inside ``Failure`` results rather than being
raised. Every layer (core, domain, infrastructure) derives its error types
from DomainError so handlers can treat them uniformly.

Usage:
    from src.core.errors import DomainError
    from src.core.enums import ErrorCode

    @dataclass(frozen=True, slots=True, kw_only=True)
    class TwoFactorError(DomainError):
        pass
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error (not an Exception).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable, client-safe message.
        details: Optional debugging context (never secrets).
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """Render as ``code: message``."""
        return f"{self.code.value}: {self.message}"
