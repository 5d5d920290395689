"""
Streaming pipeline - turns transport chunks into typed messages.
"""

from gemini_kit.pipeline.base import DONE_SIGNAL, Decoder
from gemini_kit.pipeline.decode import (
    DATA_PREFIX,
    EVENT_DELIMITER,
    PayloadDecoder,
    SSEDecoder,
    StreamDecoderState,
    create_decoder,
    event_payload,
    split_event_blocks,
)

__all__ = [
    "DATA_PREFIX",
    "DONE_SIGNAL",
    "EVENT_DELIMITER",
    "Decoder",
    "PayloadDecoder",
    "SSEDecoder",
    "StreamDecoderState",
    "create_decoder",
    "event_payload",
    "split_event_blocks",
]
