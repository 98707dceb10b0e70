"""
Unit tests for the key-value client adapter.
"""

import pytest
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError, TimeoutError as RedisTimeoutError

from service_cache.app.demo import run_string_demo
from service_cache.app.store.client import KeyValueClient
from service_cache.app.store.memory import InMemoryStore
from shared.errors import StoreConnectivityError, StoreProtocolError


class TestKeyValueClient:
    """Test cases for KeyValueClient against the in-memory store."""

    @pytest.mark.asyncio
    async def test_get_after_set_returns_value(self, kv_client):
        """A value is readable right after it is written."""
        assert await kv_client.set("greeting", "hello") is True
        assert await kv_client.get("greeting") == "hello"

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, kv_client):
        assert await kv_client.get("nope") is None

    @pytest.mark.asyncio
    async def test_set_overwrites_previous_value(self, kv_client):
        await kv_client.set("k", "first")
        await kv_client.set("k", "second")
        assert await kv_client.get("k") == "second"

    @pytest.mark.asyncio
    async def test_set_with_ttl_expires(self, kv_client, clock):
        """Entries disappear once their TTL has elapsed."""
        await kv_client.set("session", "abc", ttl_seconds=5)

        clock.advance(4.9)
        assert await kv_client.get("session") == "abc"

        clock.advance(0.2)
        assert await kv_client.get("session") is None

    @pytest.mark.asyncio
    async def test_expire_refreshes_ttl(self, kv_client, clock):
        await kv_client.set("k", "v", ttl_seconds=5)
        clock.advance(4)

        assert await kv_client.expire("k", 10) is True
        clock.advance(9)
        assert await kv_client.get("k") == "v"

        clock.advance(2)
        assert await kv_client.get("k") is None

    @pytest.mark.asyncio
    async def test_expire_missing_key_returns_false(self, kv_client):
        assert await kv_client.expire("ghost", 10) is False

    @pytest.mark.asyncio
    async def test_ttl_reports_remaining_seconds(self, kv_client, clock):
        await kv_client.set("k", "v")
        assert await kv_client.ttl("k") == -1

        await kv_client.expire("k", 30)
        clock.advance(10)
        assert await kv_client.ttl("k") == 20

        assert await kv_client.ttl("missing") == -2

    @pytest.mark.asyncio
    async def test_invalid_ttl_rejected(self, kv_client):
        with pytest.raises(ValueError):
            await kv_client.set("k", "v", ttl_seconds=0)

        with pytest.raises(ValueError):
            await kv_client.expire("k", -1)

    @pytest.mark.asyncio
    async def test_name_scenario(self, kv_client, clock):
        """set name, expire in 10s, read back, then read after 11s."""
        assert await run_string_demo(kv_client) == "John Doe"

        clock.advance(11)
        assert await kv_client.get("name") is None

    @pytest.mark.asyncio
    async def test_health_check(self, kv_client):
        assert await kv_client.ping() is True
        assert await kv_client.health_check() is True

    @pytest.mark.asyncio
    async def test_close_releases_connection(self, kv_client, memory_store):
        await kv_client.close()
        assert memory_store.closed is True


class TestKeyValueClientErrors:
    """Driver failures are translated into the store error taxonomy."""

    @pytest.fixture
    def connection(self):
        """Mock redis.asyncio connection."""
        return AsyncMock()

    @pytest.fixture
    def client(self, connection):
        return KeyValueClient(connection)

    @pytest.mark.asyncio
    async def test_connection_error_becomes_connectivity_error(self, client, connection):
        connection.get.side_effect = RedisConnectionError("Connection refused")

        with pytest.raises(StoreConnectivityError) as exc_info:
            await client.get("k")

        assert exc_info.value.code == "STORE_CONNECTIVITY_ERROR"
        assert exc_info.value.details == {"operation": "get", "key": "k"}

    @pytest.mark.asyncio
    async def test_timeout_becomes_connectivity_error(self, client, connection):
        connection.set.side_effect = RedisTimeoutError("Timeout reading from socket")

        with pytest.raises(StoreConnectivityError):
            await client.set("k", "v", ttl_seconds=10)

    @pytest.mark.asyncio
    async def test_response_error_becomes_protocol_error(self, client, connection):
        connection.expire.side_effect = ResponseError("WRONGTYPE Operation against a key")

        with pytest.raises(StoreProtocolError) as exc_info:
            await client.expire("k", 10)

        assert exc_info.value.code == "STORE_PROTOCOL_ERROR"

    @pytest.mark.asyncio
    async def test_ping_failure_reported_by_health_check(self, client, connection):
        connection.ping.side_effect = RedisConnectionError("down")
        assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_set_passes_ttl_as_ex(self, client, connection):
        await client.set("k", "v", ttl_seconds=3600)
        connection.set.assert_awaited_once_with("k", "v", ex=3600)

    @pytest.mark.asyncio
    async def test_bytes_values_are_decoded(self, client, connection):
        connection.get.return_value = b"John Doe"
        assert await client.get("name") == "John Doe"

    @pytest.mark.asyncio
    async def test_undecodable_bytes_are_protocol_errors(self, client, connection):
        connection.get.return_value = b"\xff\xfe"

        with pytest.raises(StoreProtocolError):
            await client.get("name")

    @pytest.mark.asyncio
    async def test_driver_decode_failure_becomes_protocol_error(self, client, connection):
        # decode_responses=True makes the driver itself raise on non-UTF-8 values
        connection.get.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

        with pytest.raises(StoreProtocolError) as exc_info:
            await client.get("name")

        assert exc_info.value.details == {"operation": "get", "key": "name"}


class TestFromUrl:
    """Client construction from connection URLs."""

    def test_memory_url_builds_in_memory_store(self):
        client = KeyValueClient.from_url("memory://")
        assert isinstance(client.connection, InMemoryStore)

    def test_redis_url_builds_redis_client(self):
        import redis.asyncio as redis

        client = KeyValueClient.from_url("redis://localhost:6379/0", socket_timeout=1.5)
        assert isinstance(client.connection, redis.Redis)
