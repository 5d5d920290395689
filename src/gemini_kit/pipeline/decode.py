"""
Stream decoders.

Implements:
- SSEDecoder: raw Server-Sent Events bytes -> typed messages
- PayloadDecoder: one already-extracted JSON payload per chunk -> typed messages

Both produce the same visible sequence for the same response: decoded
messages in delimiter order, with malformed events and the sentinel never
emitted.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gemini_kit.pipeline.base import DONE_SIGNAL, Decoder, T

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

DATA_PREFIX = "data: "
EVENT_DELIMITER = "\n\n"


def split_event_blocks(
    text: str, delimiter: str = EVENT_DELIMITER
) -> tuple[list[str], str]:
    """Split text into complete event blocks and an incomplete remainder.

    Args:
        text: Buffered stream text (line endings already normalised to LF)
        delimiter: Event delimiter

    Returns:
        Tuple of (complete blocks in order, remaining text)
    """
    blocks: list[str] = []
    while True:
        index = text.find(delimiter)
        if index < 0:
            return blocks, text
        blocks.append(text[:index])
        text = text[index + len(delimiter) :]


def event_payload(block: str, prefix: str = DATA_PREFIX) -> str:
    """Concatenate the data lines of one event block.

    Multiple data lines are joined in order with no separator.
    """
    return "".join(
        line[len(prefix) :] for line in block.split("\n") if line.startswith(prefix)
    )


@dataclass
class StreamDecoderState:
    """Accumulation buffer for one in-flight stream.

    Created when a stream starts, mutated only by the decoding loop, and
    dropped when the stream finishes or is abandoned.
    """

    delimiter: str = EVENT_DELIMITER
    buffer: str = ""
    _text_decoder: Any = field(
        default_factory=lambda: codecs.getincrementaldecoder("utf-8")(errors="replace")
    )

    def feed(self, chunk: bytes) -> list[str]:
        """Append a chunk and return every event block it completes."""
        # Multi-byte characters split across chunks are held back by the
        # incremental decoder; CR LF pairs split across chunks are joined
        # here because the replacement runs on the whole buffer.
        self.buffer = (self.buffer + self._text_decoder.decode(chunk)).replace("\r\n", "\n")
        blocks, self.buffer = split_event_blocks(self.buffer, self.delimiter)
        return blocks

    def flush(self) -> str:
        """Return the remaining, possibly incomplete, event text."""
        remainder = (self.buffer + self._text_decoder.decode(b"", final=True)).replace(
            "\r\n", "\n"
        )
        self.buffer = ""
        return remainder


class SSEDecoder(Decoder[T]):
    """Server-Sent Events decoder.

    Parses SSE format:
    ```
    data: {"key": "value"}

    data: {"key": "value2"}

    data: [DONE]
    ```

    Event boundaries may fall anywhere inside chunks; the decoder buffers
    until a complete event is available.

    Example:
        >>> decoder = SSEDecoder(GenerateContentResponse)
        >>> async for message in decoder.decode(chunks):
        ...     print(message.text, end="")
    """

    def __init__(
        self,
        message_type: type[T] | Any,
        *,
        prefix: str = DATA_PREFIX,
        delimiter: str = EVENT_DELIMITER,
        done_signal: str = DONE_SIGNAL,
    ) -> None:
        """Initialize SSE decoder.

        Args:
            message_type: Target message type
            prefix: Data line prefix to strip
            delimiter: Event delimiter
            done_signal: Signal indicating end of stream
        """
        super().__init__(message_type, done_signal)
        self._prefix = prefix
        self._delimiter = delimiter

    async def decode(self, chunks: AsyncIterator[bytes]) -> AsyncIterator[T]:
        """Decode an SSE byte stream into typed messages.

        Args:
            chunks: Async iterator of raw bytes

        Yields:
            Decoded messages
        """
        state = StreamDecoderState(delimiter=self._delimiter)

        async for chunk in chunks:
            for block in state.feed(chunk):
                payload = event_payload(block, self._prefix)
                if payload == self._done_signal:
                    return
                if payload:
                    message = self.parse_payload(payload)
                    if message is not None:
                        yield message

        # Whatever is left is treated as one final, possibly unterminated, event
        payload = event_payload(state.flush(), self._prefix)
        if payload and payload != self._done_signal:
            message = self.parse_payload(payload)
            if message is not None:
                yield message


class PayloadDecoder(Decoder[T]):
    """Decoder for transports that already extract one payload per chunk."""

    async def decode(self, chunks: AsyncIterator[bytes]) -> AsyncIterator[T]:
        """Decode pre-extracted payloads into typed messages.

        Args:
            chunks: Async iterator of payload bytes

        Yields:
            Decoded messages
        """
        async for chunk in chunks:
            payload = chunk.decode("utf-8", errors="replace").strip()
            if payload == self._done_signal:
                return
            if payload:
                message = self.parse_payload(payload)
                if message is not None:
                    yield message


def create_decoder(
    delivers_payloads: bool,
    message_type: type[T] | Any,
    *,
    done_signal: str = DONE_SIGNAL,
) -> Decoder[T]:
    """Create the decoder matching a transport's delivery style.

    Args:
        delivers_payloads: Transport capability flag
        message_type: Target message type
        done_signal: Stream termination sentinel

    Returns:
        PayloadDecoder for payload-delivering transports, SSEDecoder otherwise
    """
    if delivers_payloads:
        return PayloadDecoder(message_type, done_signal)
    return SSEDecoder(message_type, done_signal=done_signal)
