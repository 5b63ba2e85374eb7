"""Redis adapter implementing CacheProtocol.

Wraps an injected ``redis.asyncio.Redis`` client. The client is built once
by the container, passed by reference to every consumer and closed on
shutdown; there is no module-level client and no hidden reconnect timer.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError
- Returns Result types for all operations
- Fail-open: callers degrade when the cache is down
- ``is_healthy`` reflects the outcome of the last operation, so callers
  (and the health check) can see an outage without probing
"""

import json
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    Attributes:
        _redis: Async Redis client instance.
        _healthy: Outcome of the last operation.
    """

    def __init__(self, redis_client: Redis) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client instance (owned by the container).
        """
        self._redis = redis_client
        self._healthy = True

    @property
    def is_healthy(self) -> bool:
        """Whether the last cache operation reached Redis."""
        return self._healthy

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get value from Redis.

        Returns:
            Result with value if found, None if not found, or CacheError.
        """
        try:
            value = await self._redis.get(key)
        except RedisError as e:
            return self._failure(
                e, InfrastructureErrorCode.CACHE_GET_ERROR, "Failed to get key from cache", key
            )
        self._healthy = True
        if value is None:
            return Success(value=None)
        decoded = value.decode("utf-8") if isinstance(value, bytes) else value
        return Success(value=decoded)

    async def get_json(self, key: str) -> Result[dict[str, Any] | None, CacheError]:
        """Get JSON object from Redis.

        Returns:
            Result with parsed dict if found, None if not found, or CacheError.
        """
        result = await self.get(key)
        match result:
            case Failure(error=err):
                return Failure(error=err)
            case Success(value=None):
                return Success(value=None)
            case Success(value=raw):
                try:
                    parsed = json.loads(raw)
                except json.JSONDecodeError as e:
                    return Failure(
                        error=CacheError(
                            code=ErrorCode.CACHE_UNAVAILABLE,
                            infrastructure_code=InfrastructureErrorCode.CACHE_SERIALIZATION_ERROR,
                            message="Failed to parse cached JSON",
                            details={"key": key, "error": str(e)},
                        )
                    )
                return Success(value=parsed)
        return Success(value=None)

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set value in Redis.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time to live in seconds (None = no expiration).
        """
        try:
            if ttl is not None:
                await self._redis.setex(key, ttl, value)
            else:
                await self._redis.set(key, value)
        except RedisError as e:
            return self._failure(
                e, InfrastructureErrorCode.CACHE_SET_ERROR, "Failed to set key in cache", key
            )
        self._healthy = True
        return Success(value=None)

    async def set_json(
        self,
        key: str,
        value: dict[str, Any],
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set JSON object in Redis."""
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_UNAVAILABLE,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SERIALIZATION_ERROR,
                    message="Failed to serialize value for cache",
                    details={"key": key, "error": str(e)},
                )
            )
        return await self.set(key, serialized, ttl)

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete key from Redis.

        Returns:
            Result with True if deleted, False if key didn't exist, or CacheError.
        """
        try:
            deleted_count = await self._redis.delete(key)
        except RedisError as e:
            return self._failure(
                e,
                InfrastructureErrorCode.CACHE_DELETE_ERROR,
                "Failed to delete key from cache",
                key,
            )
        self._healthy = True
        return Success(value=deleted_count > 0)

    async def push(self, key: str, value: str) -> Result[int, CacheError]:
        """Append value to a Redis list (RPUSH).

        Returns:
            Result with the new list length, or CacheError.
        """
        try:
            length = await self._redis.rpush(key, value)
        except RedisError as e:
            return self._failure(
                e, InfrastructureErrorCode.CACHE_SET_ERROR, "Failed to push to list", key
            )
        self._healthy = True
        return Success(value=int(length))

    async def ping(self) -> Result[bool, CacheError]:
        """Ping Redis and refresh the health flag."""
        try:
            pong = await self._redis.ping()
        except RedisError as e:
            return self._failure(
                e, InfrastructureErrorCode.CACHE_CONNECTION_ERROR, "Redis ping failed", None
            )
        self._healthy = bool(pong)
        return Success(value=self._healthy)

    async def close(self) -> None:
        """Close the client and its connection pool."""
        await self._redis.aclose()

    def _failure(
        self,
        error: RedisError,
        infrastructure_code: InfrastructureErrorCode,
        message: str,
        key: str | None,
    ) -> Failure[CacheError]:
        if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            self._healthy = False
        return Failure(
            error=CacheError(
                code=ErrorCode.CACHE_UNAVAILABLE,
                infrastructure_code=infrastructure_code,
                message=message,
                details={"key": key, "error": str(error), "type": type(error).__name__},
            )
        )
