"""Bounded-concurrency batch execution."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from functools import wraps
from typing import TypeVar

from pokecatalog.cancel import CancelToken
from pokecatalog.errors import FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_batched(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int = 5,
    *,
    cancel: CancelToken | None = None,
) -> list[R]:
    """Run ``worker`` over ``items`` in consecutive concurrent groups.

    At most ``batch_size`` workers run at once and groups run one after
    another. Results come back in input order. If any worker raises, the
    rest of its group is cancelled and the exception propagates; there are
    no partial results.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    results: list[R] = []
    for start in range(0, len(items), batch_size):
        if cancel is not None:
            cancel.raise_if_cancelled()
        tasks = [
            asyncio.ensure_future(worker(item))
            for item in items[start : start + batch_size]
        ]
        try:
            results.extend(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
    return results


def skip_failures(
    worker: Callable[[T], Awaitable[R]],
) -> Callable[[T], Awaitable[R | None]]:
    """Wrap ``worker`` so a failed fetch yields None instead of raising."""

    @wraps(worker)
    async def wrapper(item: T) -> R | None:
        try:
            return await worker(item)
        except FetchError as exc:
            logger.debug("Skipping %r: %s", item, exc)
            return None

    return wrapper
