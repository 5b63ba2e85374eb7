"""Redis-list notification dispatcher.

Serializes notification jobs as JSON and appends them to a Redis list
consumed by the delivery worker (outside this core). Delivery is
at-least-once: the worker retries using ``attempts``.

Job format:
    {
        "id": "0190c6c2-...",
        "kind": "password_reset",
        "recipient": "ana@example.com",
        "context": {"reset_url": "..."},
        "priority": 1,
        "attempts": 0,
        "created_at": "2026-10-19T10:00:00+00:00"
    }
"""

import json
from datetime import UTC, datetime
from typing import Any

from uuid_extensions import uuid7

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import NotificationKind
from src.domain.errors import NotificationError
from src.domain.protocols import CacheProtocol, LoggerProtocol


class RedisNotificationDispatcher:
    """NotificationDispatcher backed by a Redis list (RPUSH).

    Args:
        cache: Cache adapter exposing ``push``.
        queue_key: Redis list key.
        logger: Logger for enqueue outcomes.
    """

    def __init__(self, cache: CacheProtocol, queue_key: str, logger: LoggerProtocol) -> None:
        self._cache = cache
        self._queue_key = queue_key
        self._logger = logger

    async def enqueue(
        self,
        kind: NotificationKind,
        recipient: str,
        context: dict[str, Any],
        *,
        priority: int | None = None,
    ) -> Result[None, NotificationError]:
        """Queue a notification job.

        Returns:
            Success(None), or Failure(NotificationError) when the job cannot
            be serialized or pushed. Never raises.
        """
        job = {
            "id": str(uuid7()),
            "kind": kind.value,
            "recipient": recipient,
            "context": context,
            "priority": priority if priority is not None else kind.default_priority,
            "attempts": 0,
            "created_at": datetime.now(UTC).isoformat(),
        }

        try:
            payload = json.dumps(job, default=str)
        except (TypeError, ValueError) as e:
            self._logger.error("Notification job not serializable", error=e, kind=kind.value)
            return Failure(
                error=NotificationError(
                    code=ErrorCode.NOTIFICATION_ENQUEUE_FAILED,
                    message="Notification job could not be serialized",
                    kind=kind.value,
                )
            )

        match await self._cache.push(self._queue_key, payload):
            case Success(value=length):
                self._logger.debug(
                    "Notification enqueued",
                    kind=kind.value,
                    job_id=job["id"],
                    queue_length=length,
                )
                return Success(value=None)
            case Failure(error=error):
                self._logger.warning(
                    "Notification enqueue failed",
                    kind=kind.value,
                    error_message=error.message,
                )
                return Failure(
                    error=NotificationError(
                        code=ErrorCode.NOTIFICATION_ENQUEUE_FAILED,
                        message="Notification could not be queued",
                        details={"queue": self._queue_key},
                        kind=kind.value,
                    )
                )
