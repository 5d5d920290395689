"""Error taxonomy and classification for gemini-kit."""

from gemini_kit.errors.base import (
    ApiError,
    AuthenticationFailed,
    ErrorContext,
    ErrorKind,
    FileError,
    GeminiError,
    InvalidConfiguration,
    InvalidModel,
    InvalidRequest,
    InvalidResponse,
    ModelNotFound,
    NetworkError,
    QuotaExceeded,
    RateLimitExceeded,
    StreamingError,
    Timeout,
    UnsupportedPlatform,
)
from gemini_kit.errors.classification import (
    classify_response,
    error_from_event_payload,
    parse_error_body,
)

__all__ = [
    "ApiError",
    "AuthenticationFailed",
    "ErrorContext",
    "ErrorKind",
    "FileError",
    "GeminiError",
    "InvalidConfiguration",
    "InvalidModel",
    "InvalidRequest",
    "InvalidResponse",
    "ModelNotFound",
    "NetworkError",
    "QuotaExceeded",
    "RateLimitExceeded",
    "StreamingError",
    "Timeout",
    "UnsupportedPlatform",
    "classify_response",
    "error_from_event_payload",
    "parse_error_body",
]
