"""
Shared error handling for the cache-aside service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class CacheServiceException(Exception):
    """Base exception for service errors."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class StoreError(CacheServiceException):
    """Errors raised while talking to the key-value store."""

    status_code = 503


class StoreConnectivityError(StoreError):
    """The store could not be reached or timed out."""

    def __init__(self, message: str = "Store unreachable", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_CONNECTIVITY_ERROR", message, details)


class StoreProtocolError(StoreError):
    """The store answered with an error or a malformed reply."""

    def __init__(self, message: str = "Malformed store response", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_PROTOCOL_ERROR", message, details)


class SerializationError(CacheServiceException):
    """A response body could not be encoded or decoded."""

    status_code = 500

    def __init__(self, message: str = "Serialization failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERIALIZATION_ERROR", message, details)
