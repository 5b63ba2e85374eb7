"""In-memory notification dispatcher (tests and development)."""

from dataclasses import dataclass, field
from typing import Any

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import NotificationKind
from src.domain.errors import NotificationError


@dataclass(frozen=True, slots=True, kw_only=True)
class QueuedNotification:
    """Captured notification."""

    kind: NotificationKind
    recipient: str
    context: dict[str, Any] = field(default_factory=dict)
    priority: int = 5


class InMemoryNotificationDispatcher:
    """Collects notifications in a list.

    Set ``fail = True`` to simulate a queue outage.
    """

    def __init__(self) -> None:
        self.sent: list[QueuedNotification] = []
        self.fail = False

    async def enqueue(
        self,
        kind: NotificationKind,
        recipient: str,
        context: dict[str, Any],
        *,
        priority: int | None = None,
    ) -> Result[None, NotificationError]:
        if self.fail:
            return Failure(
                error=NotificationError(
                    code=ErrorCode.NOTIFICATION_ENQUEUE_FAILED,
                    message="Notification could not be queued",
                    kind=kind.value,
                )
            )
        self.sent.append(
            QueuedNotification(
                kind=kind,
                recipient=recipient,
                context=dict(context),
                priority=priority if priority is not None else kind.default_priority,
            )
        )
        return Success(value=None)

    def of_kind(self, kind: NotificationKind) -> list[QueuedNotification]:
        """Notifications of one kind, in order."""
        return [n for n in self.sent if n.kind == kind]
