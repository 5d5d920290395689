"""Core GeminiClient implementation.

The client composes the configuration, one transport, the retrying
executor and the uploader, and exposes one method per API operation.
"""

from __future__ import annotations

import asyncio
import mimetypes
from contextlib import aclosing
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from gemini_kit.config import ClientConfiguration
from gemini_kit.errors import FileError
from gemini_kit.resilience import RequestExecutor
from gemini_kit.telemetry import get_logger
from gemini_kit.transport import create_transport
from gemini_kit.types.content import (
    Content,
    CountTokensRequest,
    CountTokensResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
)
from gemini_kit.types.files import File, ListFilesResponse
from gemini_kit.types.request import RequestDescriptor
from gemini_kit.types.response import EmptyResponse
from gemini_kit.upload import ResumableUploader

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from gemini_kit.transport.base import Transport

T = TypeVar("T")

DEFAULT_MIME_TYPE = "application/octet-stream"

logger = get_logger("gemini_kit.client")


def model_path(model: str) -> str:
    """Normalise a model name to its resource path (``models/<id>``)."""
    model = model.strip().strip("/")
    if model.startswith("models/"):
        return model
    return f"models/{model}"


def resource_path(name: str, collection: str = "files") -> str:
    """Normalise a resource name such as ``abc`` or ``files/abc``."""
    name = name.strip().strip("/")
    if "/" in name:
        return name
    return f"{collection}/{name}"


class GeminiClient:
    """Async client for the Gemini API.

    Example:
        >>> async with GeminiClient.from_environment() as client:
        ...     response = await client.generate_text("gemini-2.5-flash", "Hello!")
        ...     print(response.text)

        >>> # Streaming
        >>> async for chunk in client.stream_text("gemini-2.5-flash", "Tell me a story"):
        ...     print(chunk.text, end="")
    """

    def __init__(
        self,
        config: ClientConfiguration,
        *,
        transport: Transport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration
            transport: Transport to use (default: chosen from ``config.transport``)
            sleep: Awaitable used for retry backoff
        """
        self._config = config
        self._transport = transport or create_transport(config.transport, timeout=config.timeout)
        self._executor = RequestExecutor(config, self._transport, sleep=sleep)
        self._uploader = ResumableUploader(config, self._transport)

    @classmethod
    def from_environment(
        cls, *, transport: Transport | None = None, **overrides: Any
    ) -> GeminiClient:
        """Create a client configured from environment variables.

        Args:
            transport: Optional transport override
            **overrides: ClientConfiguration fields that win over the environment

        Raises:
            InvalidConfiguration: If no API key can be resolved
        """
        return cls(ClientConfiguration.from_environment(**overrides), transport=transport)

    @property
    def config(self) -> ClientConfiguration:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    # Generation

    async def generate_content(
        self, model: str, request: GenerateContentRequest
    ) -> GenerateContentResponse:
        """Generate a complete response.

        Args:
            model: Model name, with or without the ``models/`` prefix
            request: Generation request

        Returns:
            The model's response
        """
        descriptor = RequestDescriptor(f"{model_path(model)}:generateContent", body=request)
        return await self._executor.execute(descriptor, GenerateContentResponse)

    async def generate_text(
        self,
        model: str,
        prompt: str,
        *,
        system_instruction: str | None = None,
        config: GenerationConfig | None = None,
    ) -> GenerateContentResponse:
        """Generate a response to a single user prompt."""
        return await self.generate_content(
            model, _text_request(prompt, system_instruction, config)
        )

    async def stream_generate_content(
        self, model: str, request: GenerateContentRequest
    ) -> AsyncIterator[GenerateContentResponse]:
        """Stream a response as it is generated.

        Args:
            model: Model name, with or without the ``models/`` prefix
            request: Generation request

        Yields:
            Partial responses in arrival order
        """
        descriptor = RequestDescriptor(f"{model_path(model)}:streamGenerateContent", body=request)
        async with aclosing(self._executor.stream(descriptor, GenerateContentResponse)) as chunks:
            async for chunk in chunks:
                yield chunk

    async def stream_text(
        self,
        model: str,
        prompt: str,
        *,
        system_instruction: str | None = None,
        config: GenerationConfig | None = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Stream a response to a single user prompt."""
        request = _text_request(prompt, system_instruction, config)
        async with aclosing(self.stream_generate_content(model, request)) as chunks:
            async for chunk in chunks:
                yield chunk

    async def count_tokens(
        self, model: str, request: CountTokensRequest | GenerateContentRequest
    ) -> CountTokensResponse:
        """Count the tokens a request would consume."""
        if isinstance(request, GenerateContentRequest):
            request = CountTokensRequest(
                contents=request.contents,
                system_instruction=request.system_instruction,
                tools=request.tools,
            )
        descriptor = RequestDescriptor(f"{model_path(model)}:countTokens", body=request)
        return await self._executor.execute(descriptor, CountTokensResponse)

    # Files

    async def upload_file(self, data: bytes, mime_type: str, display_name: str) -> File:
        """Upload raw bytes with the resumable protocol.

        Args:
            data: File contents
            mime_type: MIME type of the contents
            display_name: Human-readable name

        Returns:
            The created File resource
        """
        return await self._uploader.upload(data, mime_type, display_name)

    async def upload_file_from_path(
        self,
        path: str | Path,
        *,
        display_name: str | None = None,
        mime_type: str | None = None,
    ) -> File:
        """Upload a local file.

        The MIME type is guessed from the extension when not given, and the
        display name defaults to the file name.

        Raises:
            FileError: If the file cannot be read
        """
        path = Path(path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FileError(f"cannot read {path}: {e}") from e

        if mime_type is None:
            mime_type = mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
        return await self.upload_file(data, mime_type, display_name or path.name)

    async def get_file(self, name: str) -> File:
        """Fetch the metadata of an uploaded file."""
        return await self._executor.execute(RequestDescriptor.get(resource_path(name)), File)

    async def list_files(
        self, page_token: str | None = None, *, page_size: int | None = None
    ) -> ListFilesResponse:
        """List uploaded files, one page at a time."""
        params: dict[str, str] = {}
        if page_token:
            params["pageToken"] = page_token
        if page_size is not None:
            params["pageSize"] = str(page_size)
        descriptor = RequestDescriptor.get("files", params=params)
        return await self._executor.execute(descriptor, ListFilesResponse)

    async def iter_files(self, *, page_size: int | None = None) -> AsyncIterator[File]:
        """Iterate over every uploaded file, following page tokens."""
        page_token: str | None = None
        while True:
            page = await self.list_files(page_token, page_size=page_size)
            for file in page.files or []:
                yield file
            page_token = page.next_page_token
            if not page_token:
                return

    async def delete_file(self, name: str) -> None:
        """Delete an uploaded file."""
        path = resource_path(name)
        await self._executor.execute(RequestDescriptor.delete(path), EmptyResponse)
        logger.info("File deleted", name=path)

    # Generic calls

    async def request(self, descriptor: RequestDescriptor, response_type: type[T] | Any) -> T:
        """Execute an arbitrary single-response call with retries."""
        return await self._executor.execute(descriptor, response_type)

    async def stream(
        self, descriptor: RequestDescriptor, message_type: type[T] | Any
    ) -> AsyncIterator[T]:
        """Execute an arbitrary streaming call."""
        async with aclosing(self._executor.stream(descriptor, message_type)) as messages:
            async for message in messages:
                yield message

    # Lifecycle

    async def aclose(self) -> None:
        """Release the transport's connections."""
        await self._transport.aclose()

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()


def _text_request(
    prompt: str,
    system_instruction: str | None,
    config: GenerationConfig | None,
) -> GenerateContentRequest:
    return GenerateContentRequest(
        contents=[Content.user(prompt)],
        system_instruction=Content.system(system_instruction) if system_instruction else None,
        generation_config=config,
    )
