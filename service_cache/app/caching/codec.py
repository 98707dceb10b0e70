"""
JSON codec for cached response bodies.
"""

import json
from typing import Any

from shared.errors import SerializationError


def encode(body: Any) -> str:
    """Serialize a response body for storage."""
    try:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Body is not JSON encodable: {exc}") from exc


def decode(payload: str) -> Any:
    """Deserialize a stored body."""
    try:
        return json.loads(payload)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cached payload is not valid JSON: {exc}") from exc
