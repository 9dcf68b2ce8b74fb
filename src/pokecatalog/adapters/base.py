"""Base protocol for durable key-value stores."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DurableStore(Protocol):
    """Async string key-value store backing the durable cache tier.

    Implementations raise ``StorageFullError`` from ``set`` when the
    backing storage is out of space.
    """

    async def get(self, key: str) -> str | None:
        """Get a stored payload by key."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store a payload."""
        ...

    async def list_keys(self) -> list[str]:
        """List stored keys, oldest first where the backend can tell."""
        ...

    async def remove_many(self, keys: list[str]) -> None:
        """Remove several keys at once."""
        ...

    async def clear(self) -> None:
        """Remove every stored key."""
        ...

    async def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        ...
