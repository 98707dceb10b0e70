"""
Interceptor chain carrying explicit request and response values.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, Sequence

from fastapi import Request


@dataclass(frozen=True)
class CacheRequest:
    """The parts of an inbound request that identify it for caching."""

    method: str
    path: str
    query: str = ""

    @property
    def identity(self) -> str:
        """Path plus raw query string, used verbatim (no parameter reordering)."""
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    @classmethod
    def from_request(cls, request: Request) -> "CacheRequest":
        return cls(method=request.method, path=request.url.path, query=request.url.query)


@dataclass(frozen=True)
class CacheResponse:
    """Response body travelling back through the chain."""

    body: Any
    status_code: int = 200
    source: str = "producer"

    @property
    def from_cache(self) -> bool:
        return self.source == "cache"


Handler = Callable[[CacheRequest], Awaitable[CacheResponse]]


class Interceptor(Protocol):
    """A chain stage: receives the request and the next handler, returns a response."""

    async def __call__(self, request: CacheRequest, call_next: Handler) -> CacheResponse:
        ...


def as_handler(producer: Callable[[], Awaitable[Any]]) -> Handler:
    """Wrap a body-producing coroutine function as the terminal chain handler."""

    async def handler(request: CacheRequest) -> CacheResponse:
        return CacheResponse(body=await producer())

    return handler


class InterceptorChain:
    """Composes interceptors around a terminal handler.

    The first interceptor in ``interceptors`` is the outermost stage.
    """

    def __init__(self, handler: Handler, interceptors: Sequence[Interceptor] = ()):
        self.interceptors = list(interceptors)
        self._entry = handler
        for interceptor in reversed(self.interceptors):
            self._entry = self._bind(interceptor, self._entry)

    async def handle(self, request: CacheRequest) -> CacheResponse:
        return await self._entry(request)

    @staticmethod
    def _bind(interceptor: Interceptor, call_next: Handler) -> Handler:
        async def stage(request: CacheRequest) -> CacheResponse:
            return await interceptor(request, call_next)

        return stage
