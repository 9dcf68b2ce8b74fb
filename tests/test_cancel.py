"""Tests for cancellation tokens and the connectivity signal."""

import asyncio

import pytest

from pokecatalog import CancelToken, ConnectivityMonitor, FailureKind, FetchError


class TestCancelToken:
    def test_starts_uncancelled(self) -> None:
        token = CancelToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_raise_if_cancelled(self) -> None:
        token = CancelToken()
        token.cancel()

        with pytest.raises(FetchError) as info:
            token.raise_if_cancelled("https://x.test/")

        assert info.value.kind is FailureKind.CANCELLED
        assert info.value.url == "https://x.test/"

    async def test_sleep_runs_to_completion(self) -> None:
        assert await CancelToken().sleep("10ms") is False

    async def test_sleep_ends_early_on_cancel(self) -> None:
        token = CancelToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)

        assert await token.sleep("5s") is True


class TestConnectivityMonitor:
    def test_notifies_on_change_only(self) -> None:
        monitor = ConnectivityMonitor()
        seen: list[bool] = []
        monitor.subscribe(seen.append)

        monitor.set_connected(True)
        monitor.set_connected(False)
        monitor.set_connected(False)

        assert seen == [False]
        assert not monitor.is_connected

    def test_unsubscribe(self) -> None:
        monitor = ConnectivityMonitor()
        seen: list[bool] = []
        unsubscribe = monitor.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        monitor.set_connected(False)

        assert seen == []
