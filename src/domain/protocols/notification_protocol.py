"""Notification dispatcher protocol.

Out-of-band messages (verification links, reset links, security alerts) are
queued for a delivery worker outside this core. Delivery is at-least-once.
"""

from typing import Any, Protocol

from src.core.result import Result
from src.domain.enums import NotificationKind
from src.domain.errors import NotificationError


class NotificationDispatcher(Protocol):
    """Fire-and-forget notification queue."""

    async def enqueue(
        self,
        kind: NotificationKind,
        recipient: str,
        context: dict[str, Any],
        *,
        priority: int | None = None,
    ) -> Result[None, NotificationError]:
        """Queue a notification.

        Args:
            kind: Template kind.
            recipient: Email address.
            context: Template variables (JSON-serializable).
            priority: Queue priority (defaults to the kind's priority).

        Returns:
            Success(None), or Failure(NotificationError). Never raises.
        """
        ...
