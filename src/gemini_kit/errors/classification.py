"""Error classification: map an HTTP status and body to one GeminiError.

Status-only rules run first because servers may answer 401/403/404/429/503
with bodies that are not JSON at all.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from gemini_kit.errors.base import (
    ApiError,
    AuthenticationFailed,
    GeminiError,
    InvalidModel,
    InvalidRequest,
    ModelNotFound,
    NetworkError,
    QuotaExceeded,
    RateLimitExceeded,
)
from gemini_kit.types.response import ErrorResponse

if TYPE_CHECKING:
    from gemini_kit.types.response import ErrorDetail


def classify_response(
    status_code: int,
    body: bytes | str | None = None,
    path: str = "",
) -> GeminiError | None:
    """Classify a response into an error.

    Args:
        status_code: HTTP status code
        body: Raw response body
        path: Endpoint path the request addressed

    Returns:
        The classified error, or None for 2xx responses
    """
    if 200 <= status_code < 300:
        return None

    if status_code == 401:
        return AuthenticationFailed(
            "Invalid or expired API key", status_code=status_code
        )
    if status_code == 403:
        return AuthenticationFailed(
            "API key lacks required permissions", status_code=status_code
        )

    if status_code == 404:
        if "/models/" in _strip_query(path) or _strip_query(path).startswith("models/"):
            return ModelNotFound(model_name_from_path(path), status_code=status_code)
        return InvalidRequest(f"Endpoint not found: {path}", status_code=status_code)

    if status_code == 429:
        return RateLimitExceeded(status_code=status_code)

    if status_code == 503:
        return NetworkError("Service temporarily unavailable", status_code=status_code)

    parsed = parse_error_body(body)
    if parsed is None:
        return ApiError(
            status_code,
            f"HTTP {status_code}",
            _body_text(body) or None,
            status_code=status_code,
        )

    detail = parsed.error
    if "quota" in detail.message:
        return QuotaExceeded(status_code=status_code)
    if "model" in detail.message:
        return InvalidModel(detail.message, status_code=status_code)
    return ApiError(
        status_code,
        detail.message,
        render_details(detail),
        status_code=status_code,
    )


def parse_error_body(body: bytes | str | None) -> ErrorResponse | None:
    """Parse a structured error envelope.

    Args:
        body: Raw response body

    Returns:
        Typed envelope, or None when the body is not an error envelope
    """
    if not body:
        return None
    try:
        return ErrorResponse.model_validate_json(body)
    except ValidationError:
        return None


def error_from_event_payload(payload: Any) -> ApiError | None:
    """Build an ApiError from an error envelope received inside a stream.

    Args:
        payload: A decoded JSON event payload

    Returns:
        ApiError if the payload is an error envelope, None otherwise
    """
    if not isinstance(payload, dict) or set(payload) != {"error"}:
        return None
    try:
        envelope = ErrorResponse.model_validate(payload)
    except ValidationError:
        return None
    detail = envelope.error
    return ApiError(detail.code or 0, detail.message, render_details(detail))


def render_details(detail: ErrorDetail) -> str | None:
    """Render the error details list as text, falling back to the status."""
    if detail.details:
        return json.dumps(detail.details, separators=(",", ":"), default=str)
    return detail.status


def model_name_from_path(path: str) -> str:
    """Extract the model name from a model resource path.

    ``/models/gemini-2.5-flash:generateContent`` -> ``gemini-2.5-flash``
    """
    segment = _strip_query(path).rstrip("/").split("/")[-1]
    name = segment.split(":", 1)[0]
    return name or "unknown"


def _strip_query(path: str) -> str:
    return path.split("?", 1)[0]


def _body_text(body: bytes | str | None) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body
