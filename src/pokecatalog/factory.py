"""Composition root wiring the client components together."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from pokecatalog.adapters.base import DurableStore
from pokecatalog.adapters.memory import AsyncMemoryStore
from pokecatalog.cache import CacheStore
from pokecatalog.connectivity import ConnectivityMonitor, ConnectivitySource
from pokecatalog.controller import ListController
from pokecatalog.details import DetailsLoader
from pokecatalog.gateway import BASE_URL, CatalogGateway
from pokecatalog.localization import DEFAULT_LOCALES
from pokecatalog.network import NetworkClient
from pokecatalog.types import Duration


@dataclass
class Catalog:
    """The wired client: one cache, one network client, shared by everything."""

    connectivity: ConnectivitySource
    network: NetworkClient
    cache: CacheStore
    gateway: CatalogGateway
    controller: ListController
    details: DetailsLoader

    async def aclose(self) -> None:
        """Stop the controller, then release the HTTP client and the store."""
        await self.controller.aclose()
        await self.network.aclose()
        await self.cache.close()


def create_catalog(
    *,
    durable: DurableStore | None = None,
    connectivity: ConnectivitySource | None = None,
    client: httpx.AsyncClient | None = None,
    base_url: str = BASE_URL,
    timeout: Duration = "8s",
    retries: int = 3,
    backoff: Duration = "1s",
    cache_ttl: Duration = "30m",
    cache_max_items: int = 50,
    page_size: int = 20,
    batch_size: int = 5,
    debounce: Duration = "600ms",
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> Catalog:
    """Create a fully wired catalog client.

    Args:
        durable: Durable store for the cache (default: in-memory store)
        connectivity: Connectivity signal (default: always-online monitor)
        client: HTTP client to use instead of a fresh ``httpx.AsyncClient``
        base_url: Catalog API root
        timeout: Per-attempt request timeout
        retries: Extra attempts for retryable failures
        backoff: Base backoff delay, doubled each retry
        cache_ttl: Time to live of cached payloads
        cache_max_items: Durable entries kept before evicting the oldest
        page_size: Items per list page
        batch_size: Concurrent detail fetches
        debounce: Quiet period before a search runs
        locales: Preferred languages for display names

    Returns:
        Catalog with the controller, details loader and their collaborators
    """
    connectivity = connectivity or ConnectivityMonitor()
    network = NetworkClient(
        connectivity,
        client=client,
        timeout=timeout,
        retries=retries,
        backoff=backoff,
    )
    cache = CacheStore(
        durable or AsyncMemoryStore(),
        ttl=cache_ttl,
        max_items=cache_max_items,
        evict_count=min(10, cache_max_items),
    )
    gateway = CatalogGateway(network, cache, base_url=base_url)
    return Catalog(
        connectivity=connectivity,
        network=network,
        cache=cache,
        gateway=gateway,
        controller=ListController(
            gateway,
            connectivity,
            page_size=page_size,
            batch_size=batch_size,
            debounce=debounce,
        ),
        details=DetailsLoader(gateway, locales=locales, batch_size=batch_size),
    )


__all__ = ["Catalog", "create_catalog"]
