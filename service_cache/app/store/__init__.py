"""
Key-value store access for the cache service.

`KeyValueClient` is the only component that talks to the store. It wraps a
`redis.asyncio` connection (or the in-memory `InMemoryStore` for local runs)
and translates driver failures into the service error taxonomy.
"""

from .client import KeyValueClient
from .memory import InMemoryStore
from .result import StoreResult, capture

__all__ = ["KeyValueClient", "InMemoryStore", "StoreResult", "capture"]
