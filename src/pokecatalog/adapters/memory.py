"""In-memory durable store (async only)."""

import asyncio

from pokecatalog.errors import StorageFullError


class AsyncMemoryStore:
    """Async in-memory key-value store with an optional byte quota.

    Keys enumerate in insertion order. With ``max_bytes`` set, a write that
    would push the total payload size over the quota raises
    ``StorageFullError``, the same way a full device database does.
    """

    def __init__(self, max_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._max_bytes = max_bytes
        self._lock = asyncio.Lock()

    @property
    def used_bytes(self) -> int:
        return sum(len(value.encode()) for value in self._data.values())

    async def get(self, key: str) -> str | None:
        """Get a stored payload by key."""
        async with self._lock:
            return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        """Store a payload, raising StorageFullError past the quota."""
        async with self._lock:
            if self._max_bytes is not None:
                current = self.used_bytes - len(self._data.get(key, "").encode())
                if current + len(value.encode()) > self._max_bytes:
                    raise StorageFullError("database or disk is full")
            self._data[key] = value

    async def list_keys(self) -> list[str]:
        """List keys in insertion order."""
        async with self._lock:
            return list(self._data)

    async def remove_many(self, keys: list[str]) -> None:
        """Remove several keys at once."""
        async with self._lock:
            for key in keys:
                self._data.pop(key, None)

    async def clear(self) -> None:
        """Remove every stored key."""
        async with self._lock:
            self._data.clear()

    async def disconnect(self) -> None:
        """Disconnect from the storage backend (no-op for memory)."""
        pass
