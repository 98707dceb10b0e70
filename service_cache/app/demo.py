"""
String round trip against the key-value store: set, expire, get.
"""

from typing import Optional

from shared.logging import get_logger

from .store.client import KeyValueClient


logger = get_logger("cache.demo")


async def run_string_demo(
    client: KeyValueClient,
    key: str = "name",
    value: str = "John Doe",
    ttl_seconds: int = 10,
) -> Optional[str]:
    """Store ``value``, give it a TTL and read it back."""
    await client.set(key, value)
    await client.expire(key, ttl_seconds)
    stored = await client.get(key)

    logger.info("String demo", key=key, value=stored, ttl=ttl_seconds)
    return stored
