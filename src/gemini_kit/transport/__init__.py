"""
Transport layer - raw HTTP exchanges for API communication.

Provides:
- Transport interface (send / open_stream / upload)
- StreamingTransport: httpx with incremental chunk delivery
- BufferedTransport: whole-body fallback
- API key resolution
"""

from gemini_kit.transport.auth import get_auth_header, resolve_api_key
from gemini_kit.transport.base import (
    StreamResponse,
    Transport,
    TransportRequest,
    TransportResponse,
    merge_headers,
)
from gemini_kit.transport.buffered import BufferedTransport
from gemini_kit.transport.factory import create_transport
from gemini_kit.transport.http import HttpTransport, StreamingTransport

__all__ = [
    "BufferedTransport",
    "HttpTransport",
    "StreamResponse",
    "StreamingTransport",
    "Transport",
    "TransportRequest",
    "TransportResponse",
    "create_transport",
    "get_auth_header",
    "merge_headers",
    "resolve_api_key",
]
