"""Two-tier read cache: a process-local fast tier over a durable store."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from pokecatalog.adapters.base import DurableStore
from pokecatalog.duration import parse_duration
from pokecatalog.errors import FailureKind, StorageFullError
from pokecatalog.types import CacheEntry, Duration

logger = logging.getLogger(__name__)


def _serialize_entry(entry: CacheEntry[Any]) -> str:
    """Serialize a cache entry to JSON."""
    return json.dumps({"data": entry.data, "storedAt": entry.stored_at})


def _deserialize_entry(data: str) -> CacheEntry[Any]:
    """Deserialize JSON to a cache entry."""
    obj = json.loads(data)
    return CacheEntry(data=obj["data"], stored_at=obj["storedAt"])


class CacheStore:
    """Best-effort cache keyed by canonical request URL.

    Reads check the fast tier first and fall back to the durable store,
    repopulating the fast tier on a durable hit. Entries older than ``ttl``
    read as absent. Durable failures are logged and never raised: a write
    always lands in the fast tier.

    The durable size bound is approximate under concurrency: overlapping
    writes of new keys may each skip eviction and overshoot ``max_items``
    by one entry per writer until the next write evicts.
    """

    def __init__(
        self,
        durable: DurableStore,
        *,
        ttl: Duration = "30m",
        max_items: int = 50,
        evict_count: int = 10,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_items < 1:
            raise ValueError("max_items must be >= 1")
        if not 1 <= evict_count <= max_items:
            raise ValueError("evict_count must be between 1 and max_items")
        self._durable = durable
        self._ttl = parse_duration(ttl)
        self._max_items = max_items
        self._evict_count = evict_count
        self._clock = clock or time.time
        self._memory: dict[str, CacheEntry[Any]] = {}

    def _now(self) -> int:
        return int(self._clock() * 1000)

    def _is_fresh(self, entry: CacheEntry[Any], now: int) -> bool:
        """Check that the entry is still within its TTL."""
        return now - entry.stored_at < self._ttl

    def in_memory(self, key: str) -> bool:
        """Whether ``key`` currently sits in the fast tier."""
        return key in self._memory

    async def get(self, key: str) -> Any | None:
        """Return the cached payload for ``key`` or None."""
        now = self._now()

        entry = self._memory.get(key)
        if entry is not None:
            if self._is_fresh(entry, now):
                return entry.data
            del self._memory[key]

        try:
            stored = await self._durable.get(key)
        except Exception:
            logger.warning("Durable cache read failed for %s", key, exc_info=True)
            return None
        if stored is None:
            return None

        try:
            entry = _deserialize_entry(stored)
        except (ValueError, KeyError, TypeError):
            logger.debug("Discarding undecodable cache payload for %s", key)
            return None

        if not self._is_fresh(entry, now):
            await self._remove_durable([key])
            return None

        self._memory[key] = entry
        return entry.data

    async def set(self, key: str, data: Any) -> None:
        """Store ``data`` under ``key`` in both tiers."""
        entry: CacheEntry[Any] = CacheEntry(data=data, stored_at=self._now())
        self._memory[key] = entry

        try:
            payload = _serialize_entry(entry)
            keys = await self._durable.list_keys()
            if len(keys) >= self._max_items and key not in keys:
                victims = keys[: self._evict_count]
                logger.debug("Cache full, evicting %d oldest keys", len(victims))
                await self._durable.remove_many(victims)
                for victim in victims:
                    self._memory.pop(victim, None)
            await self._durable.set(key, payload)
        except StorageFullError:
            logger.warning("Durable cache storage is full, clearing it to recover")
            await self.clear()
            try:
                await self._durable.set(key, payload)
            except Exception:
                logger.error(
                    "Cache write for %s failed after clearing",
                    key,
                    extra={"failure_kind": FailureKind.CACHE_WRITE_FAILURE},
                )
        except Exception:
            logger.error(
                "Failed to persist cache entry %s",
                key,
                exc_info=True,
                extra={"failure_kind": FailureKind.CACHE_WRITE_FAILURE},
            )
        finally:
            self._memory[key] = entry

    async def clear(self) -> None:
        """Drop every entry from both tiers."""
        self._memory.clear()
        try:
            await self._durable.clear()
        except Exception:
            logger.error("Failed to clear durable cache", exc_info=True)

    async def close(self) -> None:
        """Disconnect the durable store."""
        await self._durable.disconnect()

    async def _remove_durable(self, keys: list[str]) -> None:
        try:
            await self._durable.remove_many(keys)
        except Exception:
            logger.debug("Failed to drop expired keys %s", keys, exc_info=True)
