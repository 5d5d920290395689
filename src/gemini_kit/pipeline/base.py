"""
Base abstractions for the streaming pipeline.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from gemini_kit.errors import error_from_event_payload
from gemini_kit.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

T = TypeVar("T")

logger = get_logger("gemini_kit.pipeline")

DONE_SIGNAL = "[DONE]"


class Decoder(ABC, Generic[T]):
    """Abstract decoder that converts a chunk stream into typed messages.

    A decoder instance holds configuration only; every call to ``decode``
    owns its own buffer, so one decoder may serve several streams.
    """

    def __init__(self, message_type: type[T] | Any, done_signal: str = DONE_SIGNAL) -> None:
        """Initialize the decoder.

        Args:
            message_type: Target type of every message (pydantic model or any
                type pydantic can validate)
            done_signal: Payload that terminates the stream
        """
        self._adapter: TypeAdapter[T] = TypeAdapter(message_type)
        self._done_signal = done_signal

    @property
    def done_signal(self) -> str:
        return self._done_signal

    @abstractmethod
    def decode(self, chunks: AsyncIterator[bytes]) -> AsyncIterator[T]:
        """Decode a chunk stream into typed messages.

        Args:
            chunks: Async iterator of chunks from the transport

        Yields:
            Successfully decoded messages, in arrival order
        """
        ...

    def parse_payload(self, payload: str) -> T | None:
        """Decode one event payload.

        Malformed payloads are dropped (None is returned) so that one bad
        event cannot abort an otherwise healthy stream.

        Raises:
            ApiError: If the payload is a server error envelope
        """
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            logger.debug("Dropping malformed stream event", payload=payload[:200])
            return None

        error = error_from_event_payload(data)
        if error is not None:
            raise error

        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            logger.debug(
                "Dropping undecodable stream event",
                payload=payload[:200],
                errors=e.error_count(),
            )
            return None
