"""Buffered fallback transport.

For environments where incremental delivery is unavailable or unreliable
(some proxies, test doubles, restricted runtimes). The whole response body
is fetched with one request and then handed to the decoder, either as a
single chunk or pre-split into event payloads.

Known limitation: because the body is buffered in full before the first
message is produced, callers get neither a latency nor a memory benefit
from streaming on this transport.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from gemini_kit.pipeline.decode import DATA_PREFIX, event_payload, split_event_blocks
from gemini_kit.transport.base import StreamResponse, TransportRequest
from gemini_kit.transport.http import HttpTransport

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx


class BufferedTransport(HttpTransport):
    """Transport that fetches the full body, then re-chunks it.

    Args:
        split_events: Split the body on SSE boundaries and deliver one
            extracted payload per chunk instead of one raw chunk
        timeout: Default timeout in seconds
        proxy: Proxy URL
        client: Pre-built httpx client
    """

    def __init__(
        self,
        *,
        split_events: bool = False,
        timeout: float | None = None,
        proxy: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(timeout=timeout, proxy=proxy, client=client)
        self._split_events = split_events

    @property
    def delivers_payloads(self) -> bool:  # type: ignore[override]
        return self._split_events

    @asynccontextmanager
    async def open_stream(self, request: TransportRequest) -> AsyncIterator[StreamResponse]:
        """Fetch the complete response and expose it as a chunk stream."""
        response = await self.send(request)
        body = response.content

        async def whole_body() -> AsyncIterator[bytes]:
            if body:
                yield body

        async def payloads() -> AsyncIterator[bytes]:
            text = body.decode("utf-8", errors="replace").replace("\r\n", "\n")
            blocks, remainder = split_event_blocks(text)
            if remainder.strip():
                blocks.append(remainder)
            for block in blocks:
                payload = event_payload(block, DATA_PREFIX)
                if payload:
                    yield payload.encode("utf-8")

        async def read() -> bytes:
            return body

        chunks = payloads() if self._split_events and response.is_success else whole_body()
        yield StreamResponse(
            status_code=response.status_code,
            headers=response.headers,
            chunks=chunks,
            read=read,
        )
