"""Cancellation tokens for long-running calls."""

import asyncio

from pokecatalog.duration import to_seconds
from pokecatalog.errors import FailureKind, FetchError
from pokecatalog.types import Duration


class CancelToken:
    """A one-shot cancellation signal owned by whoever issued the request.

    Calls that accept a token check it before starting new sub-work and
    race their awaits against it.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self, url: str | None = None) -> None:
        if self._event.is_set():
            raise FetchError(FailureKind.CANCELLED, url=url)

    async def sleep(self, delay: Duration | float) -> bool:
        """Sleep for ``delay`` unless cancelled first.

        Floats are seconds, anything else goes through ``parse_duration``.
        Returns True if the token was cancelled before the delay elapsed.
        """
        seconds = delay if isinstance(delay, float) else to_seconds(delay)
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
