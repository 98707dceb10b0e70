"""
Cache-aside interceptor backed by the key-value store.
"""

from typing import Optional, TYPE_CHECKING

from shared.errors import SerializationError, StoreError
from shared.logging import get_logger

from ..store.client import KeyValueClient
from ..store.result import capture
from .codec import decode, encode
from .pipeline import CacheRequest, CacheResponse, Handler

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_CACHE_TTL = 3600
CACHEABLE_METHODS = frozenset({"GET"})


class CacheAsideInterceptor:
    """Serve responses from the store, populating it on a miss.

    The cache key is ``key_prefix`` followed by the request path and raw
    query string. On a hit the rest of the chain is skipped entirely, so any
    side effects of the producer do not happen. Concurrent misses on the
    same key each run the producer and each write the result.

    With ``fail_open`` (the default) store failures degrade to a miss on the
    read path and are only logged on the write path, so the caller still gets
    the computed body. Without it every store or codec error propagates.
    """

    def __init__(
        self,
        client: KeyValueClient,
        *,
        ttl_seconds: int = DEFAULT_CACHE_TTL,
        key_prefix: str = "",
        fail_open: bool = True,
        metrics: Optional["MetricsCollector"] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self.client = client
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self.fail_open = fail_open
        self.metrics = metrics
        self.logger = get_logger("cache.cache_aside")

    def cache_key(self, request: CacheRequest) -> str:
        return f"{self.key_prefix}{request.identity}"

    async def __call__(self, request: CacheRequest, call_next: Handler) -> CacheResponse:
        if request.method.upper() not in CACHEABLE_METHODS:
            return await call_next(request)

        key = self.cache_key(request)

        cached = await self._read(key)
        if cached is not None:
            self.logger.debug("Cache hit", key=key)
            self._count("cache_hits_total", route=request.path)
            return cached

        self.logger.debug("Cache miss", key=key)
        self._count("cache_misses_total", route=request.path)

        response = await call_next(request)
        if response.status_code == 200:
            await self._write(key, response)
        return response

    async def _read(self, key: str) -> Optional[CacheResponse]:
        """Look up a cached body. None means miss."""
        result = await capture(self.client.get(key))
        if not result.ok:
            self._store_failed("get", key, result.error)
            return None

        if result.value is None:
            return None

        try:
            body = decode(result.value)
        except SerializationError:
            if not self.fail_open:
                raise
            self.logger.warning("Discarding malformed cache payload", key=key)
            return None

        return CacheResponse(body=body, status_code=200, source="cache")

    async def _write(self, key: str, response: CacheResponse) -> None:
        """Store the producer's body. Failures never discard the response when failing open."""
        try:
            payload = encode(response.body)
        except SerializationError as exc:
            if not self.fail_open:
                raise
            self.logger.error("Response body not cacheable", key=key, error=exc.message)
            return

        result = await capture(self.client.set(key, payload, ttl_seconds=self.ttl_seconds))
        if not result.ok:
            self._store_failed("set", key, result.error)
            return

        self.logger.debug("Cached response", key=key, ttl=self.ttl_seconds)

    def _store_failed(self, operation: str, key: str, error: StoreError) -> None:
        self._count("cache_store_errors_total", operation=operation)
        if not self.fail_open:
            raise error

        self.logger.warning(
            "Store unavailable, bypassing cache",
            operation=operation,
            key=key,
            code=error.code,
            error=error.message,
        )

    def _count(self, metric_name: str, **labels) -> None:
        if self.metrics is not None:
            self.metrics.increment_counter(metric_name, **labels)
