"""
In-memory stand-in for the subset of the Redis command set the cache uses.
"""

import time
from typing import Callable, Dict, Optional, Tuple, Union

from redis.exceptions import DataError, ResponseError


StoredValue = Union[str, bytes, int, float]


class InMemoryStore:
    """Process-local key-value store mirroring `redis.asyncio.Redis` semantics.

    Only GET, SET (with EX), EXPIRE, TTL, PING and close are provided. Values
    are stored as strings, the way a client created with
    ``decode_responses=True`` returns them. Expiry is lazy: an entry whose
    deadline has passed is dropped the next time it is touched, and every
    SET also sweeps out entries that expired without being read again.

    The clock is injectable so that expiry can be driven by a simulated
    time source instead of wall-clock sleeps.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        # key -> (value, expires_at); expires_at None means no expiry
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}
        self.closed = False

    async def get(self, name: str) -> Optional[str]:
        entry = self._live_entry(name)
        return entry[0] if entry else None

    async def set(self, name: str, value: StoredValue, ex: Optional[int] = None) -> bool:
        if ex is not None and (not isinstance(ex, int) or ex <= 0):
            raise ResponseError("invalid expire time in 'set' command")

        self._purge_expired()

        # SET without KEEPTTL discards any previous expiry
        expires_at = self._clock() + ex if ex is not None else None
        self._data[name] = (self._encode(value), expires_at)
        return True

    async def expire(self, name: str, time: int) -> bool:
        entry = self._live_entry(name)
        if entry is None:
            return False

        if time <= 0:
            self._data.pop(name, None)
            return True

        self._data[name] = (entry[0], self._clock() + time)
        return True

    async def ttl(self, name: str) -> int:
        entry = self._live_entry(name)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return max(0, round(entry[1] - self._clock()))

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._data.items() if expires_at is not None and expires_at <= now]
        for key in expired:
            del self._data[key]

    def _live_entry(self, name: str) -> Optional[Tuple[str, Optional[float]]]:
        entry = self._data.get(name)
        if entry is None:
            return None

        expires_at = entry[1]
        if expires_at is not None and expires_at <= self._clock():
            self._data.pop(name, None)
            return None
        return entry

    @staticmethod
    def _encode(value: StoredValue) -> str:
        if isinstance(value, bool) or not isinstance(value, (str, bytes, int, float)):
            raise DataError(
                f"Invalid input of type: '{type(value).__name__}'. "
                "Convert to a bytes, string, int or float first."
            )
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def __len__(self) -> int:
        return len(self._data)
