"""Durable store adapters for the cache's persistent tier (async only)."""

from contextlib import suppress

from pokecatalog.adapters.base import DurableStore
from pokecatalog.adapters.memory import AsyncMemoryStore

# Optional adapters - only available when dependencies are installed
with suppress(ImportError):
    from pokecatalog.adapters.redis import AsyncRedisStore

__all__ = [
    "AsyncMemoryStore",
    "AsyncRedisStore",
    "DurableStore",
]
