"""Root pytest fixtures for gemini-kit tests."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from gemini_kit.config import ClientConfiguration
from gemini_kit.transport.base import (
    StreamResponse,
    Transport,
    TransportRequest,
    TransportResponse,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

TEST_API_KEY = "test-api-key"
TEST_BASE_URL = "https://gemini.test/v1beta"
TEST_UPLOAD_BASE_URL = "https://gemini.test/upload/v1beta"

_GEMINI_ENV = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_BASE_URL",
    "GEMINI_UPLOAD_BASE_URL",
    "GEMINI_OPENAI_BASE_URL",
    "GEMINI_TIMEOUT_SECS",
    "GEMINI_MAX_RETRIES",
    "GEMINI_TRANSPORT",
    "GEMINI_OPENAI_COMPAT",
    "GEMINI_HTTP_TRUST_ENV",
    "GEMINI_PROXY_URL",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test without Gemini environment variables or a keyring."""
    for name in _GEMINI_ENV:
        monkeypatch.delenv(name, raising=False)
    with patch("gemini_kit.transport.auth._try_keyring", return_value=None):
        yield


class FakeTransport(Transport):
    """In-memory transport that replays scripted outcomes.

    ``responses`` feeds ``send``; ``upload_responses`` feeds ``upload``.
    An Exception in either list is raised instead of returned.
    """

    def __init__(
        self,
        responses: list[TransportResponse | Exception] | None = None,
        *,
        upload_responses: list[TransportResponse | Exception] | None = None,
        stream_status: int = 200,
        stream_chunks: list[bytes] | None = None,
        delivers_payloads: bool = False,
    ) -> None:
        self.responses = list(responses or [])
        self.upload_responses = list(upload_responses or [])
        self.stream_status = stream_status
        self.stream_chunks = list(stream_chunks or [])
        self.delivers_payloads = delivers_payloads
        self.sent: list[TransportRequest] = []
        self.uploads: list[tuple[TransportRequest, bytes]] = []
        self.streams: list[TransportRequest] = []
        self.stream_closed = False
        self.closed = False

    @staticmethod
    def _next(queue: list[TransportResponse | Exception]) -> TransportResponse:
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def send(self, request: TransportRequest) -> TransportResponse:
        self.sent.append(request)
        return self._next(self.responses)

    async def upload(self, request: TransportRequest, data: bytes) -> TransportResponse:
        self.uploads.append((request, data))
        return self._next(self.upload_responses)

    @asynccontextmanager
    async def open_stream(self, request: TransportRequest) -> AsyncIterator[StreamResponse]:
        self.streams.append(request)
        chunks = list(self.stream_chunks)

        async def iterate() -> AsyncIterator[bytes]:
            for chunk in chunks:
                yield chunk

        async def read() -> bytes:
            return b"".join(chunks)

        try:
            yield StreamResponse(self.stream_status, {}, iterate(), read)
        finally:
            self.stream_closed = True

    async def aclose(self) -> None:
        self.closed = True


def json_response(
    status_code: int = 200, body: str = "{}", headers: dict[str, str] | None = None
) -> TransportResponse:
    """Build a TransportResponse with a JSON body."""
    return TransportResponse(
        status_code=status_code,
        headers={"content-type": "application/json", **(headers or {})},
        content=body.encode(),
    )


@pytest.fixture
def fake_transport() -> type[FakeTransport]:
    """The FakeTransport class, for building scripted transports."""
    return FakeTransport


@pytest.fixture
def make_response():
    """Factory for JSON TransportResponses."""
    return json_response


@pytest.fixture
def config() -> ClientConfiguration:
    """Configuration pointing at test hosts with a custom header."""
    return ClientConfiguration(
        api_key=TEST_API_KEY,
        base_url=TEST_BASE_URL,
        upload_base_url=TEST_UPLOAD_BASE_URL,
        custom_headers={"X-Test": "1"},
    )


@pytest.fixture
def recorded_sleeps() -> list[float]:
    """Delays passed to the fake sleep."""
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps: list[float]):
    """Awaitable sleep that only records its delay."""

    async def sleep(delay: float) -> None:
        recorded_sleeps.append(delay)

    return sleep
