"""
Cache-aside caching for the cache service.

Requests flow through an `InterceptorChain`; the `CacheAsideInterceptor`
answers from the key-value store when it can and otherwise lets the
producer compute the body, storing it with a TTL on the way out.
"""

from .cache_aside import CacheAsideInterceptor, DEFAULT_CACHE_TTL
from .pipeline import CacheRequest, CacheResponse, InterceptorChain, as_handler

__all__ = [
    "CacheAsideInterceptor",
    "CacheRequest",
    "CacheResponse",
    "DEFAULT_CACHE_TTL",
    "InterceptorChain",
    "as_handler",
]
