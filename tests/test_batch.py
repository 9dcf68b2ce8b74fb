"""Tests for bounded-concurrency batch execution."""

import asyncio

import pytest

from pokecatalog import CancelToken, FailureKind, FetchError, run_batched, skip_failures


class TestRunBatched:
    async def test_results_follow_input_order(self) -> None:
        async def worker(i: int) -> str:
            # Later items finish first
            await asyncio.sleep((10 - i) / 1000)
            return f"r{i}"

        results = await run_batched(list(range(1, 10)), worker, batch_size=5)

        assert results == [f"r{i}" for i in range(1, 10)]

    async def test_concurrency_is_bounded_per_group(self) -> None:
        active = 0
        peak = 0
        started: list[int] = []

        async def worker(i: int) -> int:
            nonlocal active, peak
            started.append(i)
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.005)
            active -= 1
            return i

        await run_batched(list(range(9)), worker, batch_size=5)

        assert peak == 5
        assert started[:5] == [0, 1, 2, 3, 4]

    async def test_groups_run_sequentially(self) -> None:
        finished: list[int] = []
        release = asyncio.Event()

        async def worker(i: int) -> int:
            if i == 0:
                await release.wait()
            finished.append(i)
            return i

        task = asyncio.ensure_future(run_batched([0, 1, 2], worker, batch_size=2))
        await asyncio.sleep(0.01)
        assert finished == [1]  # item 2 waits for item 0's group
        release.set()

        assert await task == [0, 1, 2]
        assert finished == [1, 0, 2]

    async def test_failure_aborts_the_whole_call(self) -> None:
        started: list[int] = []
        cancelled: list[int] = []

        async def worker(i: int) -> int:
            started.append(i)
            if i == 1:
                raise FetchError(FailureKind.SERVER_ERROR)
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                cancelled.append(i)
                raise
            return i

        with pytest.raises(FetchError):
            await run_batched(list(range(6)), worker, batch_size=3)

        assert started == [0, 1, 2]
        assert sorted(cancelled) == [0, 2]

    async def test_empty_input(self) -> None:
        async def worker(i: int) -> int:
            return i

        assert await run_batched([], worker) == []

    async def test_invalid_batch_size(self) -> None:
        async def worker(i: int) -> int:
            return i

        with pytest.raises(ValueError, match="batch_size"):
            await run_batched([1], worker, batch_size=0)

    async def test_cancel_stops_before_next_group(self) -> None:
        token = CancelToken()
        seen: list[int] = []

        async def worker(i: int) -> int:
            seen.append(i)
            token.cancel()
            return i

        with pytest.raises(FetchError) as info:
            await run_batched([1, 2, 3, 4], worker, batch_size=2, cancel=token)

        assert info.value.kind is FailureKind.CANCELLED
        assert seen == [1, 2]


class TestSkipFailures:
    async def test_fetch_errors_become_none(self) -> None:
        async def worker(i: int) -> int:
            if i % 2:
                raise FetchError(FailureKind.HTTP_ERROR, status=404)
            return i

        results = await run_batched([0, 1, 2, 3], skip_failures(worker), batch_size=5)

        assert results == [0, None, 2, None]

    async def test_other_errors_still_propagate(self) -> None:
        async def worker(i: int) -> int:
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await run_batched([0], skip_failures(worker))
