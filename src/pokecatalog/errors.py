"""Failure taxonomy for catalog reads."""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Why a fetch failed."""

    OFFLINE = "OFFLINE"
    TIMEOUT = "TIMEOUT"
    SERVER_ERROR = "SERVER_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    CANCELLED = "CANCELLED"
    CACHE_WRITE_FAILURE = "CACHE_WRITE_FAILURE"


_RETRYABLE = frozenset(
    {
        FailureKind.TIMEOUT,
        FailureKind.SERVER_ERROR,
        FailureKind.NETWORK_ERROR,
        FailureKind.INVALID_RESPONSE,
    }
)


class FetchError(Exception):
    """A typed failure raised by the network client and passed through the gateway."""

    def __init__(
        self,
        kind: FailureKind,
        message: str | None = None,
        *,
        url: str | None = None,
        status: int | None = None,
    ) -> None:
        self.kind = kind
        self.url = url
        self.status = status
        if message is None:
            message = kind.value if status is None else f"{kind.value}:{status}"
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Whether another attempt could succeed."""
        return self.kind in _RETRYABLE

    def __repr__(self) -> str:
        return f"FetchError(kind={self.kind.value}, url={self.url!r}, status={self.status})"


class StorageFullError(Exception):
    """Raised by durable stores when the backing storage has no room left."""
