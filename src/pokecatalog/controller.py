"""List screen state machine: browsing, type filtering and debounced search."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pokecatalog.batch import run_batched, skip_failures
from pokecatalog.cancel import CancelToken
from pokecatalog.connectivity import ConnectivitySource
from pokecatalog.duration import parse_duration
from pokecatalog.errors import FailureKind, FetchError
from pokecatalog.gateway import CatalogGateway
from pokecatalog.types import Duration, ListState, Mode, NamedResource, Pokemon

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load."
NOT_FOUND = "Not found."

StateListener = Callable[[ListState], None]


def _error_message(exc: FetchError, message: str) -> str | None:
    # The offline banner already covers OFFLINE; CANCELLED is always silent.
    if exc.kind in (FailureKind.OFFLINE, FailureKind.CANCELLED):
        return None
    return message


class ListController:
    """Owns the accumulated, deduplicated list the presentation layer reads.

    ``load_more`` pages through the catalog (``Mode.BROWSING``) or through
    the membership queue of the selected type (``Mode.CATEGORY``). ``search``
    debounces keystrokes and performs a single exact lookup
    (``Mode.SEARCHING``).

    Every mode change bumps a generation counter. Loads compare it on
    completion and drop their result if the controller has moved on.
    Search attempts each carry their own ``CancelToken``; a superseded
    attempt never touches the list or the error.
    """

    def __init__(
        self,
        gateway: CatalogGateway,
        connectivity: ConnectivitySource,
        *,
        page_size: int = 20,
        batch_size: int = 5,
        debounce: Duration = "600ms",
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._gateway = gateway
        self._page_size = page_size
        self._batch_size = batch_size
        self._debounce = parse_duration(debounce)

        self._items: list[Pokemon] = []
        self._ids: set[int] = set()
        self._loading = False
        self._error: str | None = None
        self._mode = Mode.BROWSING
        self._selected_type: str | None = None
        self._query = ""
        self._types: tuple[NamedResource, ...] = ()
        self._offset = 0
        self._queue: list[NamedResource] = []
        self._exhausted = False
        self._generation = 0

        self._search_token: CancelToken | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._listeners: list[StateListener] = []

        self._is_offline = not connectivity.is_connected
        self._unsubscribe = connectivity.subscribe(self._on_connectivity)

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ListState:
        return ListState(
            items=tuple(self._items),
            loading=self._loading,
            error=self._error,
            is_offline=self._is_offline,
            mode=self._mode,
            selected_type=self._selected_type,
            query=self._query,
            types=self._types,
        )

    @property
    def offset(self) -> int:
        return self._offset

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    def _on_connectivity(self, connected: bool) -> None:
        self._is_offline = not connected
        self._notify()

    # -------------------------------------------------------------------------
    # User intents
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Load the type filter list and the first page."""
        try:
            self._types = tuple(await self._gateway.get_types())
        except FetchError as exc:
            logger.info("Type list unavailable: %s", exc)
        else:
            self._notify()
        await self.load_more()

    async def load_more(self) -> None:
        """Append the next page of the current mode, if there is one."""
        if self._loading or self._mode is Mode.SEARCHING:
            return

        mode = self._mode
        offset = self._offset
        refs: list[NamedResource] = []
        if mode is Mode.CATEGORY:
            refs = self._queue[offset : offset + self._page_size]
            if not refs:
                return
        elif self._exhausted:
            return

        generation = self._generation
        self._loading = True
        self._error = None
        self._notify()

        exhausted = False
        try:
            if mode is Mode.BROWSING:
                page = await self._gateway.get_page(offset, self._page_size)
                refs = page.results
                exhausted = page.next is None
            found = await self._fetch_details(refs)
        except FetchError as exc:
            if generation == self._generation:
                self._error = _error_message(exc, LOAD_ERROR)
        else:
            if generation == self._generation:
                self._append(found)
                self._offset = offset + self._page_size
                self._exhausted = exhausted
            else:
                logger.debug("Dropping stale %s page at offset %d", mode.value, offset)
        finally:
            if generation == self._generation:
                self._loading = False
                self._notify()

    async def select_category(self, type_name: str) -> None:
        """Filter by ``type_name``.

        Selecting the active type again clears the filter and reloads the
        first browsing page.
        """
        if type_name == self._selected_type:
            self._reset(Mode.BROWSING)
            self._notify()
            await self.load_more()
            return

        self._cancel_search()
        self._query = ""
        self._reset(Mode.CATEGORY, type_name)
        await self._load_category()

    def search(self, text: str) -> asyncio.Task[None]:
        """Handle a keystroke in the search box.

        Returns the task doing the (debounced) work so callers can await it.
        """
        self._cancel_search()
        self._query = text

        if not text.strip():
            self._reset(Mode.BROWSING)
            self._notify()
            return self._spawn(self.load_more())

        # The list stays on screen until the lookup settles.
        self._generation += 1
        self._mode = Mode.SEARCHING
        self._selected_type = None
        self._queue = []
        self._offset = 0
        self._loading = False
        self._error = None
        token = CancelToken()
        self._search_token = token
        self._notify()
        return self._spawn(self._run_search(text.strip(), token))

    async def retry(self) -> None:
        """Re-run whichever load failed last."""
        if self._mode is Mode.CATEGORY and not self._queue:
            if not self._loading:
                await self._load_category()
            return
        await self.load_more()

    async def aclose(self) -> None:
        """Cancel pending work and stop listening to connectivity."""
        self._cancel_search()
        self._unsubscribe()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _reset(self, mode: Mode, selected_type: str | None = None) -> None:
        self._generation += 1
        self._mode = mode
        self._selected_type = selected_type
        self._items = []
        self._ids = set()
        self._offset = 0
        self._queue = []
        self._exhausted = False
        self._loading = False
        self._error = None

    def _append(self, found: list[Pokemon]) -> None:
        for pokemon in found:
            if pokemon.id in self._ids:
                continue
            self._ids.add(pokemon.id)
            self._items.append(pokemon)

    def _cancel_search(self) -> None:
        if self._search_token is not None:
            self._search_token.cancel()
            self._search_token = None

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task[None]:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _fetch_details(self, refs: list[NamedResource]) -> list[Pokemon]:
        async def detail(ref: NamedResource) -> Pokemon:
            return await self._gateway.get_pokemon(ref.url)

        found = await run_batched(refs, skip_failures(detail), self._batch_size)
        return [pokemon for pokemon in found if pokemon is not None]

    async def _load_category(self) -> None:
        generation = self._generation
        type_name = self._selected_type
        if type_name is None:
            return

        self._loading = True
        self._error = None
        self._notify()
        try:
            members = await self._gateway.get_type_members(type_name)
            if generation != self._generation:
                return
            self._queue = members
            found = await self._fetch_details(members[: self._page_size])
        except FetchError as exc:
            if generation == self._generation:
                self._error = _error_message(exc, LOAD_ERROR)
        else:
            if generation == self._generation:
                self._items = []
                self._ids = set()
                self._append(found)
                self._offset = self._page_size
        finally:
            if generation == self._generation:
                self._loading = False
                self._notify()

    async def _run_search(self, text: str, token: CancelToken) -> None:
        if await token.sleep(self._debounce):
            return

        self._loading = True
        self._error = None
        self._notify()
        try:
            found = await self._gateway.get_pokemon(text, cancel=token)
        except FetchError as exc:
            if not token.cancelled:
                self._error = _error_message(exc, NOT_FOUND)
        else:
            if not token.cancelled:
                self._items = [found]
                self._ids = {found.id}
        finally:
            if not token.cancelled:
                self._loading = False
                self._notify()
