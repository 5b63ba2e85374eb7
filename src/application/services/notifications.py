"""Best-effort notification helper.

Notification failures never change the outcome of an auth flow; they are
logged and dropped.
"""

from typing import Any
from uuid import UUID

from src.core.result import Failure
from src.domain.enums import NotificationKind
from src.domain.protocols import LoggerProtocol, NotificationDispatcher


async def notify(
    notifications: NotificationDispatcher,
    logger: LoggerProtocol,
    kind: NotificationKind,
    recipient: str,
    context: dict[str, Any],
    *,
    user_id: UUID | None = None,
) -> bool:
    """Queue a notification, logging a warning on failure.

    Returns:
        True if the job was queued.
    """
    result = await notifications.enqueue(kind, recipient, context)
    if isinstance(result, Failure):
        logger.warning(
            "Notification not queued",
            user_id=str(user_id) if user_id else None,
            kind=kind.value,
            error_code=result.error.code.value,
        )
        return False
    return True
