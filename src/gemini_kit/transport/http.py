"""HTTP transports built on httpx.

Provides:
- HttpTransport: shared httpx client management, plain exchanges and uploads
- StreamingTransport: true incremental delivery of response chunks
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

import httpx

from gemini_kit._features import HAS_HTTP2
from gemini_kit.errors import NetworkError, StreamingError, Timeout
from gemini_kit.telemetry import get_logger
from gemini_kit.transport.base import (
    StreamResponse,
    Transport,
    TransportRequest,
    TransportResponse,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


# Default timeouts
_DEFAULT_TIMEOUT = 60.0
_DEFAULT_CONNECT_TIMEOUT = 10.0

_UA_VERSION: str | None = None

logger = get_logger("gemini_kit.transport")


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("GEMINI_HTTP_TRUST_ENV", "0") == "1"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            _UA_VERSION = version("gemini-kit-python")
        except PackageNotFoundError:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


class HttpTransport(Transport):
    """Base httpx transport: one lazily-created AsyncClient shared by all calls.

    Subclasses decide how streaming responses are delivered.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            timeout: Default timeout in seconds (requests may override it)
            proxy: Proxy URL
            client: Pre-built httpx client (the transport does not own it)
        """
        self._timeout = timeout or _DEFAULT_TIMEOUT

        # Resolve proxy: default to direct connection unless trust_env is enabled.
        if proxy is not None:
            self._proxy = proxy
        elif _trust_env_enabled():
            self._proxy = os.getenv("GEMINI_PROXY_URL")
        else:
            self._proxy = None

        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=_DEFAULT_CONNECT_TIMEOUT),
                proxy=self._proxy,
                http2=HAS_HTTP2,
                trust_env=_trust_env_enabled(),
                headers={"User-Agent": f"gemini-kit-python/{_get_ua_version()}"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _build(self, request: TransportRequest, content: bytes | None) -> httpx.Request:
        return self._get_client().build_request(
            method=request.method,
            url=request.url,
            content=content,
            headers=request.headers,
            params=request.params or None,
            timeout=request.timeout if request.timeout is not None else self._timeout,
        )

    async def _exchange(
        self, request: TransportRequest, content: bytes | None
    ) -> TransportResponse:
        client = self._get_client()
        http_request = self._build(request, content)
        logger.debug("HTTP request", method=request.method, url=request.url)
        try:
            response = await client.send(http_request)
        except httpx.TimeoutException as e:
            raise Timeout() from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e

        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
        )

    async def send(self, request: TransportRequest) -> TransportResponse:
        """Perform a single exchange.

        Args:
            request: Wire request

        Returns:
            Status, headers and body; non-2xx responses are returned, not raised

        Raises:
            NetworkError: On connection errors
            Timeout: When the timeout elapses
        """
        return await self._exchange(request, request.content)

    async def upload(self, request: TransportRequest, data: bytes) -> TransportResponse:
        """Send ``data`` as the request body."""
        return await self._exchange(request, data)

    @asynccontextmanager
    async def _open_http_stream(
        self, request: TransportRequest
    ) -> AsyncIterator[httpx.Response]:
        """Send a request and keep the response body unread."""
        client = self._get_client()
        http_request = self._build(request, request.content)
        logger.debug("HTTP stream request", method=request.method, url=request.url)
        try:
            response = await client.send(http_request, stream=True)
        except httpx.TimeoutException as e:
            raise Timeout() from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{type(e).__name__}: {e}") from e

        try:
            yield response
        finally:
            await response.aclose()

    @staticmethod
    async def _read_body(response: httpx.Response) -> bytes:
        try:
            return await response.aread()
        except httpx.HTTPError as e:
            raise StreamingError(f"{type(e).__name__}: {e}") from e


class StreamingTransport(HttpTransport):
    """Transport delivering response chunks as they arrive.

    Example:
        >>> transport = StreamingTransport()
        >>> async with transport.open_stream(request) as stream:
        ...     async for chunk in stream.chunks:
        ...         process(chunk)
    """

    @asynccontextmanager
    async def open_stream(self, request: TransportRequest) -> AsyncIterator[StreamResponse]:
        """Open a streaming response.

        Args:
            request: Wire request

        Yields:
            StreamResponse whose chunks arrive incrementally
        """
        async with self._open_http_stream(request) as response:

            async def chunks() -> AsyncIterator[bytes]:
                try:
                    async for chunk in response.aiter_bytes():
                        yield chunk
                except httpx.HTTPError as e:
                    raise StreamingError(f"{type(e).__name__}: {e}") from e

            yield StreamResponse(
                status_code=response.status_code,
                headers=dict(response.headers),
                chunks=chunks(),
                read=lambda: self._read_body(response),
            )
