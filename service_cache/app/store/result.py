"""
Explicit success/error values for store calls.
"""

from dataclasses import dataclass
from typing import Awaitable, Generic, Optional, TypeVar

from shared.errors import StoreError


T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a single store operation."""

    value: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Optional[T]:
        """Return the value or raise the captured store error."""
        if self.error is not None:
            raise self.error
        return self.value


async def capture(operation: Awaitable[T]) -> "StoreResult[T]":
    """Await a store operation and fold `StoreError` into the result.

    Anything that is not a `StoreError` is a programming error and is left
    to propagate.
    """
    try:
        return StoreResult(value=await operation)
    except StoreError as exc:
        return StoreResult(error=exc)
