"""Online/offline signal shared by the network client and the controller."""

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]


@runtime_checkable
class ConnectivitySource(Protocol):
    """Current connectivity plus change notifications."""

    @property
    def is_connected(self) -> bool:
        """Synchronous check of the current state."""
        ...

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        ...


class ConnectivityMonitor:
    """In-process connectivity signal fed by the host platform."""

    def __init__(self, connected: bool = True) -> None:
        self._connected = connected
        self._listeners: list[Listener] = []

    @property
    def is_connected(self) -> bool:
        return self._connected

    def set_connected(self, connected: bool) -> None:
        """Update the state and notify listeners when it changes."""
        if connected == self._connected:
            return
        self._connected = connected
        logger.info("Connectivity changed: %s", "online" if connected else "offline")
        for listener in list(self._listeners):
            listener(connected)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
