"""pokecatalog - Resilient, cache-first client for the PokeAPI catalog."""

from contextlib import suppress

# Durable stores (async only)
from pokecatalog.adapters import AsyncMemoryStore, DurableStore

# Building blocks
from pokecatalog.batch import run_batched, skip_failures
from pokecatalog.cache import CacheStore
from pokecatalog.cancel import CancelToken
from pokecatalog.connectivity import ConnectivityMonitor, ConnectivitySource
from pokecatalog.controller import ListController
from pokecatalog.details import DetailsLoader

# Duration parsing
from pokecatalog.duration import parse_duration

# Errors
from pokecatalog.errors import FailureKind, FetchError, StorageFullError
from pokecatalog.factory import Catalog, create_catalog
from pokecatalog.gateway import CatalogGateway
from pokecatalog.localization import display_name, localized_name
from pokecatalog.network import NetworkClient

# Core types
from pokecatalog.types import (
    CacheEntry,
    Duration,
    ListState,
    LocalizedName,
    Mode,
    NamedResource,
    Page,
    Pokemon,
    PokemonDetails,
    StatLine,
    StatValue,
)

# Optional adapter imports - only available when dependencies are installed
with suppress(ImportError):
    from pokecatalog.adapters import AsyncRedisStore

__version__ = "0.1.0"

__all__ = [
    "AsyncMemoryStore",
    "AsyncRedisStore",
    "CacheEntry",
    "CacheStore",
    "CancelToken",
    "Catalog",
    "CatalogGateway",
    "ConnectivityMonitor",
    "ConnectivitySource",
    "DetailsLoader",
    "DurableStore",
    "Duration",
    "FailureKind",
    "FetchError",
    "ListController",
    "ListState",
    "LocalizedName",
    "Mode",
    "NamedResource",
    "NetworkClient",
    "Page",
    "Pokemon",
    "PokemonDetails",
    "StatLine",
    "StatValue",
    "StorageFullError",
    "create_catalog",
    "display_name",
    "localized_name",
    "parse_duration",
    "run_batched",
    "skip_failures",
]
