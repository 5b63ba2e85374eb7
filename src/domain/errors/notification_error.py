"""Notification dispatch error type."""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationError(DomainError):
    """Notification could not be enqueued.

    Attributes:
        kind: Notification kind that failed.
    """

    kind: str | None = None
