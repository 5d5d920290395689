"""Tests for the GeminiClient facade."""

from __future__ import annotations

import json

import pytest

from gemini_kit import GeminiClient
from gemini_kit.client import model_path, resource_path
from gemini_kit.errors import FileError, InvalidConfiguration
from gemini_kit.transport import BufferedTransport, StreamingTransport
from gemini_kit.types import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    RequestDescriptor,
)

GENERATE_BODY = json.dumps(
    {"candidates": [{"content": {"role": "model", "parts": [{"text": "Hi there"}]}}]}
)


class TestPaths:
    """Tests for resource path helpers."""

    @pytest.mark.parametrize("name", ["gemini-pro", "models/gemini-pro", "/models/gemini-pro"])
    def test_model_path(self, name: str) -> None:
        """Both bare and prefixed model names are accepted."""
        assert model_path(name) == "models/gemini-pro"

    @pytest.mark.parametrize("name", ["abc", "files/abc"])
    def test_resource_path(self, name: str) -> None:
        """Bare file ids get the files/ prefix."""
        assert resource_path(name) == "files/abc"


class TestConstruction:
    """Tests for client construction."""

    def test_transport_from_config(self, config) -> None:
        """The configured strategy picks the transport."""
        assert isinstance(GeminiClient(config).transport, StreamingTransport)
        client = GeminiClient(config.with_options(transport="buffered"))
        assert isinstance(client.transport, BufferedTransport)

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch, fake_transport) -> None:
        """Environment configuration is used."""
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        client = GeminiClient.from_environment(transport=fake_transport())
        assert client.config.api_key == "env-key"

    def test_from_environment_without_key(self) -> None:
        """A missing key fails at construction."""
        with pytest.raises(InvalidConfiguration):
            GeminiClient.from_environment()

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, config, fake_transport) -> None:
        """Leaving the context closes the transport."""
        transport = fake_transport()
        async with GeminiClient(config, transport=transport):
            pass
        assert transport.closed


class TestOperations:
    """Tests for facade operations over a fake transport."""

    @pytest.mark.asyncio
    async def test_generate_text(self, config, fake_transport, make_response) -> None:
        """Prompt helpers build a full request."""
        transport = fake_transport([make_response(200, GENERATE_BODY)])
        client = GeminiClient(config, transport=transport)

        response = await client.generate_text(
            "gemini-pro", "Hello", system_instruction="Be brief"
        )

        assert response.text == "Hi there"
        request = transport.sent[0]
        assert request.url.endswith("/models/gemini-pro:generateContent")
        body = json.loads(request.content)
        assert body["contents"] == [{"role": "user", "parts": [{"text": "Hello"}]}]
        assert body["systemInstruction"] == {"parts": [{"text": "Be brief"}]}

    @pytest.mark.asyncio
    async def test_stream_text(self, config, fake_transport) -> None:
        """Streaming yields partial responses."""
        transport = fake_transport(
            stream_chunks=[
                b'data: {"candidates": [{"content": {"parts": [{"text": "A"}]}}]}\n\n',
                b'data: {"candidates": [{"content": {"parts": [{"text": "B"}]}}]}\n\n',
            ]
        )
        client = GeminiClient(config, transport=transport)

        chunks = [c.text async for c in client.stream_text("models/gemini-pro", "Hi")]

        assert chunks == ["A", "B"]
        assert transport.streams[0].url.endswith("/models/gemini-pro:streamGenerateContent")
        assert transport.streams[0].params == {"alt": "sse"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["stream_text", "stream_generate_content", "stream"])
    async def test_abandoned_stream_closes_response(self, config, fake_transport, operation) -> None:
        """Closing a client stream early releases the transport stream at once."""
        chunk = b'data: {"candidates": [{"content": {"parts": [{"text": "A"}]}}]}\n\n'
        transport = fake_transport(stream_chunks=[chunk, chunk])
        client = GeminiClient(config, transport=transport)
        request = GenerateContentRequest(contents=[Content.user("Hi")])

        if operation == "stream_text":
            stream = client.stream_text("gemini-pro", "Hi")
        elif operation == "stream_generate_content":
            stream = client.stream_generate_content("gemini-pro", request)
        else:
            descriptor = RequestDescriptor("models/gemini-pro:streamGenerateContent", body=request)
            stream = client.stream(descriptor, GenerateContentResponse)

        first = await stream.__anext__()
        assert first.text == "A"
        assert not transport.stream_closed

        await stream.aclose()

        assert transport.stream_closed

    @pytest.mark.asyncio
    async def test_count_tokens_from_generate_request(
        self, config, fake_transport, make_response
    ) -> None:
        """A generation request is reduced to its countable fields."""
        transport = fake_transport([make_response(200, '{"totalTokens": 7}')])
        client = GeminiClient(config, transport=transport)
        request = GenerateContentRequest(contents=[Content.user("hi")])

        response = await client.count_tokens("gemini-pro", request)

        assert response.total_tokens == 7
        assert transport.sent[0].url.endswith("/models/gemini-pro:countTokens")
        assert json.loads(transport.sent[0].content) == {
            "contents": [{"role": "user", "parts": [{"text": "hi"}]}]
        }

    @pytest.mark.asyncio
    async def test_file_operations(self, config, fake_transport, make_response) -> None:
        """get, list and delete address the files collection."""
        transport = fake_transport(
            [
                make_response(200, '{"name": "files/abc", "mimeType": "text/plain"}'),
                make_response(200, '{"files": [], "nextPageToken": "next"}'),
                make_response(200, "{}"),
            ]
        )
        client = GeminiClient(config, transport=transport)

        file = await client.get_file("abc")
        page = await client.list_files(page_token="tok")
        await client.delete_file("files/abc")

        assert file.name == "files/abc"
        assert page.next_page_token == "next"
        get_request, list_request, delete_request = transport.sent
        assert (get_request.method, get_request.url) == ("GET", "https://gemini.test/v1beta/files/abc")
        assert list_request.params == {"pageToken": "tok"}
        assert (delete_request.method, delete_request.url) == (
            "DELETE",
            "https://gemini.test/v1beta/files/abc",
        )

    @pytest.mark.asyncio
    async def test_iter_files_follows_pages(self, config, fake_transport, make_response) -> None:
        """Iteration stops when no page token is returned."""
        transport = fake_transport(
            [
                make_response(200, '{"files": [{"name": "files/a", "mimeType": "x/y"}], "nextPageToken": "p2"}'),
                make_response(200, '{"files": [{"name": "files/b", "mimeType": "x/y"}]}'),
            ]
        )
        client = GeminiClient(config, transport=transport)

        names = [f.name async for f in client.iter_files()]

        assert names == ["files/a", "files/b"]
        assert transport.sent[1].params == {"pageToken": "p2"}

    @pytest.mark.asyncio
    async def test_upload_file_from_path(self, config, fake_transport, make_response, tmp_path) -> None:
        """MIME type and display name come from the path."""
        path = tmp_path / "notes.txt"
        path.write_bytes(b"hello")
        transport = fake_transport(
            [make_response(200, "{}", {"X-Goog-Upload-URL": "https://u/session"})],
            upload_responses=[make_response(200, '{"file": {"name": "files/n", "mimeType": "text/plain"}}')],
        )
        client = GeminiClient(config, transport=transport)

        file = await client.upload_file_from_path(path)

        assert file.name == "files/n"
        initiate = transport.sent[0]
        assert initiate.headers["X-Goog-Upload-Header-Content-Type"] == "text/plain"
        assert json.loads(initiate.content) == {"file": {"display_name": "notes.txt"}}
        assert transport.uploads[0][1] == b"hello"

    @pytest.mark.asyncio
    async def test_upload_unknown_extension(self, config, fake_transport, make_response, tmp_path) -> None:
        """Unknown extensions fall back to application/octet-stream."""
        path = tmp_path / "blob.gemini-unknown"
        path.write_bytes(b"\x00\x01")
        transport = fake_transport(
            [make_response(200, "{}", {"X-Goog-Upload-URL": "https://u/session"})],
            upload_responses=[make_response(200, '{"name": "files/b", "mimeType": "application/octet-stream"}')],
        )
        client = GeminiClient(config, transport=transport)

        await client.upload_file_from_path(path, display_name="blob")

        headers = transport.sent[0].headers
        assert headers["X-Goog-Upload-Header-Content-Type"] == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, config, fake_transport, tmp_path) -> None:
        """Unreadable paths raise FileError before any request."""
        transport = fake_transport()
        client = GeminiClient(config, transport=transport)

        with pytest.raises(FileError):
            await client.upload_file_from_path(tmp_path / "missing.txt")

        assert transport.sent == []
