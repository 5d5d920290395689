"""Retrying request executor.

Turns a RequestDescriptor into wire requests, applies the retry policy to
single-response calls and wires streaming responses into a decoder.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from gemini_kit.errors import (
    GeminiError,
    InvalidResponse,
    NetworkError,
    Timeout,
    classify_response,
)
from gemini_kit.pipeline import create_decoder
from gemini_kit.resilience.retry import RetryPolicy
from gemini_kit.telemetry import get_logger
from gemini_kit.transport.base import Transport, TransportRequest, merge_headers

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from gemini_kit.config import ClientConfiguration
    from gemini_kit.types.request import RequestDescriptor

T = TypeVar("T")

logger = get_logger("gemini_kit.executor")


def decode_body(content: bytes, response_type: type[T] | Any) -> T:
    """Decode a response body into ``response_type``.

    An empty body decodes as an empty JSON object.

    Raises:
        InvalidResponse: If the body does not match the expected shape
    """
    adapter: TypeAdapter[T] = TypeAdapter(response_type)
    try:
        if not content.strip():
            return adapter.validate_python({})
        return adapter.validate_json(content)
    except ValidationError as e:
        raise InvalidResponse(str(e)) from e


class RequestExecutor:
    """Executes API calls over a transport.

    Example:
        >>> executor = RequestExecutor(config, create_transport())
        >>> response = await executor.execute(descriptor, GenerateContentResponse)
    """

    def __init__(
        self,
        config: ClientConfiguration,
        transport: Transport,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the executor.

        Args:
            config: Shared client configuration
            transport: Transport used for every exchange
            sleep: Awaitable used for backoff waits
        """
        self._config = config
        self._transport = transport
        self._sleep = sleep
        self._policy = RetryPolicy(max_attempts=config.max_retries)

    @property
    def config(self) -> ClientConfiguration:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def build_request(self, descriptor: RequestDescriptor) -> TransportRequest:
        """Resolve a descriptor into a wire request."""
        headers = merge_headers(self._config.auth_headers(descriptor.target), descriptor.headers)
        return TransportRequest(
            method=descriptor.method,
            url=self._config.build_url(descriptor.target, descriptor.path),
            headers=headers,
            content=descriptor.serialize_body(),
            params=dict(descriptor.params),
            timeout=self._config.timeout,
        )

    async def execute(self, descriptor: RequestDescriptor, response_type: type[T] | Any) -> T:
        """Perform a single-response call with retries.

        Args:
            descriptor: Call description
            response_type: Type the successful body is decoded into

        Returns:
            Decoded response

        Raises:
            GeminiError: The classified failure of the last attempt, or the
                first non-retryable failure
        """
        request = self.build_request(descriptor)
        last_error: GeminiError | None = None

        for attempt in range(self._policy.max_attempts):
            logger.debug(
                "Sending request",
                method=request.method,
                path=descriptor.path,
                attempt=attempt + 1,
            )
            try:
                response = await self._transport.send(request)
            except (NetworkError, Timeout) as e:
                last_error = e
            else:
                error = classify_response(response.status_code, response.content, descriptor.path)
                if error is None:
                    return decode_body(response.content, response_type)
                if self._policy.is_terminal(error):
                    raise error
                last_error = error

            if self._policy.has_attempts_left(attempt):
                delay = self._policy.delay_for(attempt)
                logger.warning(
                    "Retrying request",
                    path=descriptor.path,
                    attempt=attempt + 1,
                    delay=delay,
                    error_kind=last_error.kind.value,
                )
                await self._sleep(delay)

        if last_error is not None:
            raise last_error
        raise NetworkError("Unknown error")

    async def stream(
        self, descriptor: RequestDescriptor, message_type: type[T] | Any
    ) -> AsyncIterator[T]:
        """Perform a streaming call and yield decoded messages.

        Streams are never retried. Closing the generator releases the
        connection.

        Args:
            descriptor: Call description
            message_type: Type of each streamed message

        Yields:
            Decoded messages in arrival order
        """
        request = self.build_request(descriptor)
        request.params["alt"] = "sse"

        logger.debug("Opening stream", method=request.method, path=descriptor.path)
        async with self._transport.open_stream(request) as response:
            if not response.is_success:
                body = await response.aread()
                error = classify_response(response.status_code, body, descriptor.path)
                if error is not None:
                    raise error

            decoder = create_decoder(self._transport.delivers_payloads, message_type)
            async with aclosing(decoder.decode(response.chunks)) as messages:
                async for message in messages:
                    yield message
