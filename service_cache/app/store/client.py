"""
Key-value client adapter used by the cache service.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Union

import redis.asyncio as redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    DataError,
    InvalidResponse,
    ResponseError,
    TimeoutError as RedisTimeoutError,
)

from shared.errors import StoreConnectivityError, StoreError, StoreProtocolError
from shared.logging import get_logger

from .memory import InMemoryStore


MEMORY_SCHEME = "memory://"


class KeyValueClient:
    """Thin async adapter over a Redis-compatible connection.

    The adapter holds no state of its own beyond the connection it was
    given. It does not retry: every failure is translated into
    `StoreConnectivityError` or `StoreProtocolError` and raised to the
    caller.
    """

    def __init__(self, connection: Union[redis.Redis, InMemoryStore]):
        self._connection = connection
        self.logger = get_logger("cache.store.client")

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float = 5.0) -> "KeyValueClient":
        """Build a client for ``redis://``, ``rediss://``, ``unix://`` or ``memory://`` URLs."""
        if url.startswith(MEMORY_SCHEME):
            return cls(InMemoryStore())

        connection = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
            health_check_interval=30,
        )
        return cls(connection)

    @property
    def connection(self) -> Union[redis.Redis, InMemoryStore]:
        return self._connection

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Store ``value`` under ``key``, optionally expiring after ``ttl_seconds``."""
        if ttl_seconds is not None:
            self._validate_ttl(ttl_seconds)

        async with self._translate_errors("set", key):
            await self._connection.set(key, value, ex=ttl_seconds)

        self.logger.debug("Stored value", key=key, ttl=ttl_seconds)
        return True

    async def get(self, key: str) -> Optional[str]:
        """Return the value under ``key``, or None when missing or expired."""
        async with self._translate_errors("get", key):
            value = await self._connection.get(key)

        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise StoreProtocolError("Stored value is not valid UTF-8", {"key": key}) from exc
        return value

    async def expire(self, key: str, seconds: int) -> bool:
        """Set or refresh the TTL of an existing key. Returns whether the key existed."""
        self._validate_ttl(seconds)

        async with self._translate_errors("expire", key):
            existed = await self._connection.expire(key, seconds)

        if not existed:
            self.logger.debug("Expire on missing key", key=key)
        return bool(existed)

    async def ttl(self, key: str) -> int:
        """Remaining TTL in seconds; -1 when the key has no expiry, -2 when missing."""
        async with self._translate_errors("ttl", key):
            return int(await self._connection.ttl(key))

    async def ping(self) -> bool:
        async with self._translate_errors("ping"):
            return bool(await self._connection.ping())

    async def health_check(self) -> bool:
        """Check store health without raising."""
        try:
            return await self.ping()
        except StoreError:
            return False

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self._connection.aclose()
        self.logger.info("Key-value client closed")

    @asynccontextmanager
    async def _translate_errors(self, operation: str, key: Optional[str] = None) -> AsyncIterator[None]:
        details = {"operation": operation}
        if key is not None:
            details["key"] = key

        try:
            yield
        except (RedisConnectionError, RedisTimeoutError, OSError) as exc:
            self.logger.error("Store unreachable", error=str(exc), **details)
            raise StoreConnectivityError(str(exc) or "Store unreachable", details) from exc
        except (ResponseError, DataError, InvalidResponse, UnicodeDecodeError) as exc:
            self.logger.error("Store protocol error", error=str(exc), **details)
            raise StoreProtocolError(str(exc) or "Malformed store response", details) from exc

    @staticmethod
    def _validate_ttl(seconds: int) -> None:
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValueError("ttl must be a positive integer number of seconds")
