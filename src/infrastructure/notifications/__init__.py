"""Notification dispatchers.

- RedisNotificationDispatcher: JSON jobs on a Redis list
- InMemoryNotificationDispatcher: list-backed (tests and development)
"""

from src.infrastructure.notifications.in_memory_dispatcher import (
    InMemoryNotificationDispatcher,
    QueuedNotification,
)
from src.infrastructure.notifications.redis_dispatcher import RedisNotificationDispatcher

__all__ = [
    "InMemoryNotificationDispatcher",
    "QueuedNotification",
    "RedisNotificationDispatcher",
]
