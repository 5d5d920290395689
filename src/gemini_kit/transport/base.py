"""
Transport abstraction.

A transport performs raw exchanges only: it never retries and never
classifies non-2xx responses. Those are the executor's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
    from contextlib import AbstractAsyncContextManager


def merge_headers(*sources: Mapping[str, str]) -> dict[str, str]:
    """Merge header maps; later sources win, whatever the letter case.

    The surviving entry keeps the spelling of the source that set it last.
    """
    merged: dict[str, tuple[str, str]] = {}
    for source in sources:
        for name, value in source.items():
            merged[name.lower()] = (name, value)
    return dict(merged.values())


@dataclass
class TransportRequest:
    """A fully-resolved wire request.

    Attributes:
        method: HTTP method
        url: Absolute URL
        headers: Final request headers
        content: Encoded body
        params: Query parameters
        timeout: Timeout in seconds
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes | None = None
    params: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None


@dataclass
class TransportResponse:
    """Status, headers and body of a completed exchange."""

    status_code: int
    headers: dict[str, str]
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class StreamResponse:
    """An open streaming response.

    ``chunks`` is a lazy, single-consumption iterator of raw byte chunks
    (or of extracted event payloads when the transport delivers payloads).
    """

    def __init__(
        self,
        status_code: int,
        headers: dict[str, str],
        chunks: AsyncIterator[bytes],
        read: Callable[[], Awaitable[bytes]],
    ) -> None:
        self.status_code = status_code
        self.headers = headers
        self.chunks = chunks
        self._read = read

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    async def aread(self) -> bytes:
        """Read the whole remaining body (used for error responses)."""
        return await self._read()


class Transport(ABC):
    """Abstract transport.

    Implementations must be safe to share between concurrent calls.
    """

    delivers_payloads: bool = False
    """True when stream chunks are already-extracted event payloads
    instead of raw SSE bytes."""

    @abstractmethod
    async def send(self, request: TransportRequest) -> TransportResponse:
        """Perform a single request/response exchange.

        Raises:
            NetworkError: If the server could not be reached
            Timeout: If the timeout elapsed
        """
        ...

    @abstractmethod
    def open_stream(
        self, request: TransportRequest
    ) -> AbstractAsyncContextManager[StreamResponse]:
        """Open a response as a stream of byte chunks.

        Leaving the context releases the underlying connection, cancelling
        the request if it is still in flight.
        """
        ...

    @abstractmethod
    async def upload(self, request: TransportRequest, data: bytes) -> TransportResponse:
        """Transfer a raw byte payload."""
        ...

    async def aclose(self) -> None:
        """Release pooled connections."""
        return None

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
