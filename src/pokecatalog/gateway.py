"""Cache-aware reads against the PokeAPI catalog."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pokecatalog.cache import CacheStore
from pokecatalog.cancel import CancelToken
from pokecatalog.errors import FailureKind, FetchError
from pokecatalog.network import NetworkClient
from pokecatalog.types import NamedResource, Page, Pokemon

logger = logging.getLogger(__name__)

T = TypeVar("T")

BASE_URL = "https://pokeapi.co/api/v2"

# Upstream types with no real membership
SENTINEL_TYPES = frozenset({"unknown", "shadow"})


@dataclass(slots=True)
class _Flight:
    """A network fetch shared by every concurrent reader of one URL."""

    task: asyncio.Task[Any]
    token: CancelToken
    waiters: int = 0


class CatalogGateway:
    """Read-through access to the catalog.

    Every read is keyed by its canonical URL. A cache hit returns without
    touching the network; a miss fetches, stores the raw decoded payload
    and returns it. Network failures pass through untouched.
    """

    def __init__(
        self,
        network: NetworkClient,
        cache: CacheStore,
        *,
        base_url: str = BASE_URL,
    ) -> None:
        self._network = network
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._in_flight: dict[str, _Flight] = {}
        self._lock = asyncio.Lock()

    def pokemon_url(self, name_or_url: str) -> str:
        """Canonical detail URL for an id, a name or a full resource URL."""
        ref = name_or_url.strip()
        if ref.startswith(("http://", "https://")):
            return ref if ref.endswith("/") else f"{ref}/"
        return f"{self._base_url}/pokemon/{ref.lower()}/"

    def page_url(self, offset: int, limit: int) -> str:
        return f"{self._base_url}/pokemon?limit={limit}&offset={offset}"

    def type_url(self, type_name: str | None = None) -> str:
        if type_name is None:
            return f"{self._base_url}/type"
        return f"{self._base_url}/type/{type_name.strip().lower()}"

    async def fetch(self, url: str, *, cancel: CancelToken | None = None) -> Any:
        """Return the raw payload for ``url``, from cache when possible.

        Concurrent misses on the same URL share a single network fetch.
        """
        if cancel is not None:
            cancel.raise_if_cancelled(url)
        cached = await self._cache.get(url)
        if cached is not None:
            logger.debug("Cache hit for %s", url)
            return cached
        return await self._coalesce(url, cancel)

    async def _load(self, url: str, token: CancelToken) -> Any:
        data = await self._network.fetch_json(url, cancel=token)
        await self._cache.set(url, data)
        return data

    async def _coalesce(self, url: str, cancel: CancelToken | None) -> Any:
        """Join the in-flight fetch for ``url``, starting one if there is none.

        The shared fetch runs under its own token, which is only cancelled
        once every caller waiting on it has gone away.
        """
        async with self._lock:
            flight = self._in_flight.get(url)
            if flight is None:
                token = CancelToken()
                started = _Flight(asyncio.ensure_future(self._load(url, token)), token)
                started.task.add_done_callback(lambda _: self._land(url, started))
                self._in_flight[url] = flight = started
            flight.waiters += 1

        try:
            if cancel is None:
                return await asyncio.shield(flight.task)

            watcher = asyncio.ensure_future(cancel.wait())
            try:
                await asyncio.wait(
                    {flight.task, watcher}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                watcher.cancel()
            cancel.raise_if_cancelled(url)
            return flight.task.result()
        finally:
            flight.waiters -= 1
            if flight.waiters == 0 and not flight.task.done():
                logger.debug("Abandoning fetch for %s", url)
                self._land(url, flight)
                flight.token.cancel()

    def _land(self, url: str, flight: _Flight) -> None:
        if self._in_flight.get(url) is flight:
            del self._in_flight[url]
        if flight.task.done() and not flight.task.cancelled():
            # Waiters that already left never retrieve the outcome
            flight.task.exception()

    async def get_types(self) -> list[NamedResource]:
        """All types that have a real membership list."""
        data = await self.fetch(self.type_url())
        return _parse(
            self.type_url(),
            lambda: [
                NamedResource.from_json(t)
                for t in data["results"]
                if t["name"] not in SENTINEL_TYPES
            ],
        )

    async def get_type_members(self, type_name: str) -> list[NamedResource]:
        """Every Pokémon reference belonging to ``type_name``, in upstream order."""
        url = self.type_url(type_name)
        data = await self.fetch(url)
        return _parse(
            url, lambda: [NamedResource.from_json(p["pokemon"]) for p in data["pokemon"]]
        )

    async def get_page(self, offset: int, limit: int) -> Page:
        """One page of the paginated Pokémon list."""
        url = self.page_url(offset, limit)
        data = await self.fetch(url)
        return _parse(url, lambda: Page.from_json(data))

    async def get_pokemon(
        self, name_or_url: str, *, cancel: CancelToken | None = None
    ) -> Pokemon:
        """Detail for a Pokémon by id, name or resource URL."""
        url = self.pokemon_url(name_or_url)
        data = await self.fetch(url, cancel=cancel)
        return _parse(url, lambda: Pokemon.from_json(data))

    async def get_resource(
        self, url: str, *, cancel: CancelToken | None = None
    ) -> dict[str, Any]:
        """Raw payload of a related resource (species, type, ability, stat)."""
        data = await self.fetch(url, cancel=cancel)
        if not isinstance(data, dict):
            raise FetchError(FailureKind.INVALID_RESPONSE, url=url)
        return data


def _parse(url: str, build: Callable[[], T]) -> T:
    """Run ``build`` over a payload, mapping shape errors to INVALID_RESPONSE."""
    try:
        return build()
    except (AttributeError, KeyError, TypeError) as exc:
        raise FetchError(
            FailureKind.INVALID_RESPONSE, f"Unexpected payload: {exc!r}", url=url
        ) from exc
