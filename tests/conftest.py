"""Shared pytest fixtures."""

from collections.abc import AsyncIterator

import httpx
import pytest
from helpers import BASE_URL, FakeClock, RecordingSleep

from pokecatalog import (
    AsyncMemoryStore,
    CacheStore,
    CatalogGateway,
    ConnectivityMonitor,
    NetworkClient,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def connectivity() -> ConnectivityMonitor:
    """Create an online connectivity monitor for each test."""
    return ConnectivityMonitor(connected=True)


@pytest.fixture
def durable() -> AsyncMemoryStore:
    """Create a fresh AsyncMemoryStore for each test."""
    return AsyncMemoryStore()


@pytest.fixture
def cache(durable: AsyncMemoryStore, clock: FakeClock) -> CacheStore:
    """Create a CacheStore over the memory store with a fake clock."""
    return CacheStore(durable, clock=clock)


@pytest.fixture
async def network(
    connectivity: ConnectivityMonitor, recording_sleep: RecordingSleep
) -> AsyncIterator[NetworkClient]:
    """Create a NetworkClient whose backoff sleeps are only recorded."""
    http = httpx.AsyncClient()
    yield NetworkClient(connectivity, client=http, sleep=recording_sleep)
    await http.aclose()


@pytest.fixture
def gateway(network: NetworkClient, cache: CacheStore) -> CatalogGateway:
    return CatalogGateway(network, cache, base_url=BASE_URL)
