"""Cache protocol for the domain layer.

The auth core uses the cache for geolocation results and as the
notification queue. Every operation returns a Result and implementations
fail open, so an unreachable cache degrades features instead of failing
authentication. ``is_healthy`` exposes the last observed connection state.

Architecture:
- Protocol-based (structural typing)
- All operations return Result types
- No framework dependencies in domain layer
"""

from typing import Any, Protocol

from src.core.errors import DomainError
from src.core.result import Result


class CacheProtocol(Protocol):
    """Key-value cache with JSON helpers and list push.

    Implementations:
        - RedisAdapter: redis.asyncio (production)
    """

    @property
    def is_healthy(self) -> bool:
        """Whether the last cache operation reached the server."""
        ...

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get a string value (None when missing)."""
        ...

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, DomainError]:
        """Get and decode a JSON object (None when missing)."""
        ...

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Set a string value with optional TTL in seconds."""
        ...

    async def set_json(
        self,
        key: str,
        value: dict[str, Any],
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Encode and set a JSON object with optional TTL in seconds."""
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete a key. True if it existed."""
        ...

    async def push(self, key: str, value: str) -> Result[int, DomainError]:
        """Append to a list. Returns the new list length."""
        ...

    async def ping(self) -> Result[bool, DomainError]:
        """Ping the server and refresh ``is_healthy``."""
        ...
