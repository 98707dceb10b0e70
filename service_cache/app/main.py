"""
Cache service: a FastAPI route answered through the cache-aside chain.
"""

from typing import Dict, Optional

from fastapi import Body, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from shared.base_service import BaseService
from shared.config import ServiceConfig

from .caching.cache_aside import CacheAsideInterceptor
from .caching.pipeline import CacheRequest, InterceptorChain, as_handler
from .demo import run_string_demo
from .producers import DataSource
from .store.client import KeyValueClient


class StringDemoRequest(BaseModel):
    """Parameters for the string round-trip demo."""

    key: str = Field(default="name", min_length=1)
    value: str = "John Doe"
    ttl_seconds: int = Field(default=10, gt=0)


class CacheService(BaseService):
    """Cache service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        client: Optional[KeyValueClient] = None,
        data_source: Optional[DataSource] = None,
    ):
        super().__init__("cache", 8000, config=config)

        self.client = client or KeyValueClient.from_url(
            self.config.redis_url,
            socket_timeout=self.config.redis_socket_timeout,
        )
        self.data_source = data_source or DataSource()
        self.cache_aside = CacheAsideInterceptor(
            self.client,
            ttl_seconds=self.config.cache_ttl_seconds,
            key_prefix=self.config.cache_key_prefix,
            fail_open=self.config.cache_fail_open,
            metrics=self.metrics,
        )
        self.data_chain = InterceptorChain(
            as_handler(self.data_source.fetch_data),
            [self.cache_aside],
        )

        self._setup_cache_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.cache_service = self

    def _setup_cache_routes(self):
        """Set up cache-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "cache",
                "message": "Cache-aside example service",
                "version": "1.0.0",
                "ttl_seconds": self.cache_aside.ttl_seconds,
            }

        @self.app.get("/api/data")
        async def get_data(request: Request):
            """Data route served through the cache-aside chain."""
            response = await self.data_chain.handle(CacheRequest.from_request(request))
            return JSONResponse(
                status_code=response.status_code,
                content=response.body,
                headers={"X-Cache": "HIT" if response.from_cache else "MISS"},
            )

        @self.app.post("/api/strings/demo")
        async def string_demo(params: Optional[StringDemoRequest] = Body(default=None)):
            """Run set / expire / get against the store."""
            params = params or StringDemoRequest()
            value = await run_string_demo(
                self.client,
                key=params.key,
                value=params.value,
                ttl_seconds=params.ttl_seconds,
            )
            return {
                "key": params.key,
                "value": value,
                "ttl_seconds": await self.client.ttl(params.key),
            }

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check the key-value store."""
        return {"store": "ok" if await self.client.health_check() else "unavailable"}

    async def _on_shutdown(self) -> None:
        await self.client.close()


def create_app():
    """Create cache service application."""
    service = CacheService()
    return service.app


if __name__ == "__main__":
    service = CacheService()
    service.run()
