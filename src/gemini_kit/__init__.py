"""gemini-kit-python: async client for the Google Gemini API.

Covers content generation (complete and streamed), token counting and the
Files API, with typed pydantic models, retries with exponential backoff and
a closed error taxonomy.
"""

from __future__ import annotations

from gemini_kit._features import HAS_HTTP2, HAS_KEYRING
from gemini_kit.client import GeminiClient
from gemini_kit.config import ClientConfiguration
from gemini_kit.errors import (
    ApiError,
    AuthenticationFailed,
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
from gemini_kit.telemetry import configure_logging
from gemini_kit.types import (
    Content,
    CountTokensRequest,
    CountTokensResponse,
    File,
    FileState,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    ListFilesResponse,
    Part,
    RequestDescriptor,
    RequestTarget,
    Role,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "ClientConfiguration",
    "GeminiClient",
    "configure_logging",
    # Feature flags
    "HAS_HTTP2",
    "HAS_KEYRING",
    # Errors
    "ApiError",
    "AuthenticationFailed",
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
    # Types
    "Content",
    "CountTokensRequest",
    "CountTokensResponse",
    "File",
    "FileState",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "ListFilesResponse",
    "Part",
    "RequestDescriptor",
    "RequestTarget",
    "Role",
    # Version
    "__version__",
]
