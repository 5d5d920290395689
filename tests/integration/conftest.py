"""
Integration test fixtures.

Builders for Gemini-shaped payloads served through pytest-httpx.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from gemini_kit import ClientConfiguration, GeminiClient

BASE_URL = "https://gemini.test/v1beta"
UPLOAD_BASE_URL = "https://gemini.test/upload/v1beta"


def gemini_response(text: str, finish_reason: str | None = "STOP") -> dict[str, Any]:
    """Create a mock generateContent response (or stream chunk)."""
    candidate: dict[str, Any] = {
        "content": {"role": "model", "parts": [{"text": text}]},
        "index": 0,
    }
    if finish_reason:
        candidate["finishReason"] = finish_reason
    return {
        "candidates": [candidate],
        "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 2, "totalTokenCount": 5},
        "modelVersion": "gemini-2.5-flash",
    }


def sse_body(*payloads: dict[str, Any]) -> bytes:
    """Encode payloads as a Server-Sent Events body."""
    return "".join(f"data: {json.dumps(p)}\r\n\r\n" for p in payloads).encode()


def error_body(code: int, message: str, status: str) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "status": status}}


@pytest.fixture
def http_config() -> ClientConfiguration:
    return ClientConfiguration(
        api_key="test-api-key",
        base_url=BASE_URL,
        upload_base_url=UPLOAD_BASE_URL,
    )


@pytest.fixture
def make_client(http_config: ClientConfiguration, fake_sleep):
    """Factory for clients over real httpx transports (served by httpx_mock)."""

    def factory(transport: str = "streaming", **changes: Any) -> GeminiClient:
        return GeminiClient(
            http_config.with_options(transport=transport, **changes), sleep=fake_sleep
        )

    return factory


@pytest.fixture
def payloads():
    """Payload builders: ``payloads.response``, ``payloads.sse`` and ``payloads.error``."""

    class Payloads:
        response = staticmethod(gemini_response)
        sse = staticmethod(sse_body)
        error = staticmethod(error_body)

    return Payloads
