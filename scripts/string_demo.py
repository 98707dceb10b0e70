#!/usr/bin/env python3
"""
Store a string, give it a TTL and read it back.

Runs the same set / expire / get sequence as the service's
``POST /api/strings/demo`` route, straight from a developer workstation.
Pass ``--wait`` to sleep past the TTL and show that the key is gone.
"""

import argparse
import asyncio
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from service_cache.app.demo import run_string_demo  # noqa: E402
from service_cache.app.store.client import KeyValueClient  # noqa: E402
from shared.errors import StoreError  # noqa: E402
from shared.logging import configure_logging  # noqa: E402


async def demo(*, redis_url: str, key: str, value: str, ttl: int, wait: bool) -> int:
    """Execute the round trip and print what the store returns."""
    client = KeyValueClient.from_url(redis_url)
    try:
        stored = await run_string_demo(client, key=key, value=value, ttl_seconds=ttl)
        print(stored)

        if wait:
            await asyncio.sleep(ttl + 1)
            print(await client.get(key))
    finally:
        await client.close()
    return 0


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set, expire and get a string in the key-value store.")
    parser.add_argument("--redis-url", default=os.getenv("CACHE_REDIS_URL", "redis://localhost:6379/0"), help="Store connection URL (memory:// for an in-process store)")
    parser.add_argument("--key", default="name", help="Key to write")
    parser.add_argument("--value", default="John Doe", help="Value to store")
    parser.add_argument("--ttl", type=int, default=10, help="Seconds before the key expires")
    parser.add_argument("--wait", action="store_true", help="Sleep past the TTL and read the key again")
    parser.add_argument("--log-level", default=os.getenv("CACHE_LOG_LEVEL", "warning"), help="Log level")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    configure_logging("cache", args.log_level)
    try:
        return asyncio.run(
            demo(
                redis_url=args.redis_url,
                key=args.key,
                value=args.value,
                ttl=args.ttl,
                wait=args.wait,
            )
        )
    except KeyboardInterrupt:
        return 130
    except (StoreError, ValueError) as exc:
        print(f"[string-demo] failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
