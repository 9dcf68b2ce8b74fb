"""Redis durable store."""

from __future__ import annotations

from typing import Any

from redis.exceptions import ResponseError

from pokecatalog.errors import StorageFullError


def _decode(data: bytes | str) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data


class AsyncRedisStore:
    """Async Redis durable store.

    Payloads live under ``{prefix}:cache:{key}``. A sorted-set index scored
    by a write counter keeps first-insertion order, so ``list_keys`` returns
    the oldest keys first. Redis ``OOM`` replies surface as
    ``StorageFullError``.
    """

    def __init__(
        self,
        client: Any,  # redis.asyncio.Redis
        *,
        prefix: str = "pokecatalog",
    ) -> None:
        self._client = client
        self._prefix = prefix

    def _cache_key(self, key: str) -> str:
        """Generate full Redis key for a payload."""
        return f"{self._prefix}:cache:{key}"

    @property
    def _index_key(self) -> str:
        return f"{self._prefix}:index"

    @property
    def _seq_key(self) -> str:
        return f"{self._prefix}:seq"

    async def get(self, key: str) -> str | None:
        """Get a stored payload by key."""
        data = await self._client.get(self._cache_key(key))
        if data is None:
            return None
        return _decode(data)

    async def set(self, key: str, value: str) -> None:
        """Store a payload and record its insertion position."""
        try:
            seq = await self._client.incr(self._seq_key)
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.set(self._cache_key(key), value)
                pipe.zadd(self._index_key, {key: seq}, nx=True)
                await pipe.execute()
        except ResponseError as exc:
            if str(exc).startswith("OOM"):
                raise StorageFullError(str(exc)) from exc
            raise

    async def list_keys(self) -> list[str]:
        """List keys in first-insertion order."""
        keys = await self._client.zrange(self._index_key, 0, -1)
        return [_decode(key) for key in keys]

    async def remove_many(self, keys: list[str]) -> None:
        """Remove several keys and their index entries."""
        if not keys:
            return
        await self._client.delete(*(self._cache_key(key) for key in keys))
        await self._client.zrem(self._index_key, *keys)

    async def clear(self) -> None:
        """Remove all payloads and the index."""
        # Use SCAN to find and delete all payload keys
        cursor: int = 0
        pattern = f"{self._prefix}:cache:*"
        while True:
            result = await self._client.scan(cursor, match=pattern, count=100)
            cursor = result[0]
            keys = result[1]
            if keys:
                await self._client.delete(*keys)
            if cursor == 0:
                break
        await self._client.delete(self._index_key, self._seq_key)

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
