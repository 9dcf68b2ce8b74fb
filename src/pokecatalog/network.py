"""Network client: one logical JSON fetch with timeout, retries and offline checks."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

from pokecatalog.cancel import CancelToken
from pokecatalog.connectivity import ConnectivitySource
from pokecatalog.duration import parse_duration
from pokecatalog.errors import FailureKind, FetchError
from pokecatalog.types import Duration

logger = logging.getLogger(__name__)

R = TypeVar("R")

Sleep = Callable[[float], Awaitable[None]]


class NetworkClient:
    """Fetches decoded JSON or raises a typed ``FetchError``.

    Retryable failures (timeouts, 5xx, transport errors) are retried up to
    ``retries`` more times, sleeping ``backoff * 2**attempt`` plus up to
    ``jitter`` between attempts. Offline, 4xx and cancellation fail at once.
    """

    def __init__(
        self,
        connectivity: ConnectivitySource,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: Duration = "8s",
        retries: int = 3,
        backoff: Duration = "1s",
        jitter: Duration = "200ms",
        sleep: Sleep | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self._connectivity = connectivity
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )
        self._timeout = parse_duration(timeout)
        self._retries = retries
        self._backoff = parse_duration(backoff)
        self._jitter = parse_duration(jitter)
        self._sleep: Sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    async def __aenter__(self) -> NetworkClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def backoff_delay(self, attempt: int, backoff: int | None = None) -> float:
        """Delay in milliseconds before retry number ``attempt`` (0-based)."""
        base = self._backoff if backoff is None else backoff
        return base * 2**attempt + self._rng.uniform(0, self._jitter)

    async def fetch_json(
        self,
        url: str,
        *,
        timeout: Duration | None = None,
        retries: int | None = None,
        backoff: Duration | None = None,
        cancel: CancelToken | None = None,
    ) -> Any:
        """Fetch ``url`` and return its decoded JSON body."""
        timeout_ms = self._timeout if timeout is None else parse_duration(timeout)
        max_retries = self._retries if retries is None else retries
        backoff_ms = self._backoff if backoff is None else parse_duration(backoff)

        attempt = 0
        while True:
            if cancel is not None:
                cancel.raise_if_cancelled(url)
            if not self._connectivity.is_connected:
                raise FetchError(FailureKind.OFFLINE, url=url)

            try:
                return await self._attempt(url, timeout_ms / 1000, cancel)
            except FetchError as exc:
                if not exc.retryable:
                    raise
                if attempt >= max_retries:
                    logger.warning(
                        "Giving up on %s after %d attempts: %s", url, attempt + 1, exc
                    )
                    raise
                delay = self.backoff_delay(attempt, backoff_ms)
                logger.debug(
                    "Attempt %d for %s failed (%s), retrying in %.0fms",
                    attempt + 1,
                    url,
                    exc,
                    delay,
                )

            await self._race(self._sleep(delay / 1000), cancel, url)
            attempt += 1

    async def _attempt(
        self, url: str, timeout: float, cancel: CancelToken | None
    ) -> Any:
        try:
            response = await self._race(
                self._client.get(url, timeout=timeout), cancel, url, timeout=timeout
            )
        except httpx.TimeoutException as exc:
            raise FetchError(FailureKind.TIMEOUT, url=url) from exc
        except httpx.TransportError as exc:
            raise FetchError(FailureKind.NETWORK_ERROR, str(exc), url=url) from exc

        if not response.is_success:
            kind = (
                FailureKind.SERVER_ERROR
                if response.status_code >= 500
                else FailureKind.HTTP_ERROR
            )
            raise FetchError(kind, url=url, status=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(FailureKind.INVALID_RESPONSE, url=url) from exc

    async def _race(
        self,
        awaitable: Awaitable[R],
        cancel: CancelToken | None,
        url: str,
        *,
        timeout: float | None = None,
    ) -> R:
        """Await ``awaitable`` unless the token fires or ``timeout`` elapses first."""
        if cancel is None and timeout is None:
            return await awaitable

        work = asyncio.ensure_future(awaitable)
        watcher = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
        pending = {work} if watcher is None else {work, watcher}
        try:
            done, _ = await asyncio.wait(
                pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            leftovers = [task for task in pending if not task.done()]
            for task in leftovers:
                task.cancel()
            if leftovers:
                await asyncio.gather(*leftovers, return_exceptions=True)

        if cancel is not None and cancel.cancelled:
            if work.done() and not work.cancelled():
                work.exception()  # mark retrieved
            raise FetchError(FailureKind.CANCELLED, url=url)
        if work in done:
            return work.result()
        raise FetchError(FailureKind.TIMEOUT, url=url)
