"""Integration tests for the Redis store using testcontainers."""

import pytest

# Skip all tests if redis or testcontainers are not installed
pytest.importorskip("redis")
pytest.importorskip("testcontainers")

import redis.asyncio
from testcontainers.redis import RedisContainer

from pokecatalog import CacheStore
from pokecatalog.adapters.redis import AsyncRedisStore


@pytest.fixture(scope="module")
def redis_container():
    """Start a Redis container for the test module."""
    with RedisContainer() as container:
        yield container


@pytest.fixture
async def redis_store(redis_container):
    """Create an AsyncRedisStore with a test prefix."""
    client = redis.asyncio.Redis(
        host=redis_container.get_container_host_ip(),
        port=redis_container.get_exposed_port(6379),
        decode_responses=False,
    )
    store = AsyncRedisStore(client, prefix="test")
    yield store
    await client.flushdb()
    await store.disconnect()


class TestAsyncRedisStore:
    """Integration tests for AsyncRedisStore."""

    async def test_get_nonexistent_returns_none(
        self, redis_store: AsyncRedisStore
    ) -> None:
        assert await redis_store.get("nonexistent") is None

    async def test_set_and_get(self, redis_store: AsyncRedisStore) -> None:
        await redis_store.set("key1", '{"id": 1}')
        assert await redis_store.get("key1") == '{"id": 1}'

    async def test_keys_oldest_first(self, redis_store: AsyncRedisStore) -> None:
        for key in ("b", "a", "c"):
            await redis_store.set(key, key)
        await redis_store.set("b", "again")

        assert await redis_store.list_keys() == ["b", "a", "c"]

    async def test_remove_many(self, redis_store: AsyncRedisStore) -> None:
        for key in ("a", "b", "c"):
            await redis_store.set(key, key)

        await redis_store.remove_many(["a", "c"])

        assert await redis_store.list_keys() == ["b"]
        assert await redis_store.get("a") is None

    async def test_clear(self, redis_store: AsyncRedisStore) -> None:
        await redis_store.set("key1", "x")
        await redis_store.set("key2", "y")

        await redis_store.clear()

        assert await redis_store.list_keys() == []
        assert await redis_store.get("key1") is None

    async def test_backs_cache_eviction(self, redis_store: AsyncRedisStore) -> None:
        cache = CacheStore(redis_store, max_items=5, evict_count=2)
        for i in range(6):
            await cache.set(f"url-{i}", i)

        assert await redis_store.list_keys() == ["url-2", "url-3", "url-4", "url-5"]
        assert await cache.get("url-0") is None
