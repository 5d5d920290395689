"""Error taxonomy for gemini-kit.

Every failure surfaced by the client is a subclass of GeminiError carrying
a closed ErrorKind tag, so callers can either catch a specific class or
switch on ``error.kind``:

- AuthenticationFailed, RateLimitExceeded, QuotaExceeded
- ModelNotFound, InvalidModel, InvalidRequest
- ApiError: generic server-reported failure
- NetworkError, Timeout: transport-level failures (retried)
- InvalidResponse: a 2xx body that failed to decode
- FileError, StreamingError, UnsupportedPlatform, InvalidConfiguration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

_TROUBLESHOOTING_URL = "https://ai.google.dev/gemini-api/docs/troubleshooting"


class ErrorKind(str, Enum):
    """Closed set of error kinds."""

    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    QUOTA_EXCEEDED = "quota_exceeded"
    MODEL_NOT_FOUND = "model_not_found"
    INVALID_MODEL = "invalid_model"
    INVALID_REQUEST = "invalid_request"
    API_ERROR = "api_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    INVALID_RESPONSE = "invalid_response"
    FILE_ERROR = "file_error"
    STREAMING_ERROR = "streaming_error"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    INVALID_CONFIGURATION = "invalid_configuration"


@dataclass
class ErrorContext:
    """Structured error context for diagnostics."""

    source: str | None = None
    """Layer that raised the error (e.g., 'transport', 'stream', 'upload')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class GeminiError(Exception):
    """Base class for all gemini-kit errors.

    Attributes:
        kind: Error kind tag
        message: Human-readable description
        status_code: HTTP status the error was classified from, if any
        context: Structured error context
    """

    kind: ClassVar[ErrorKind]
    recovery_suggestion: ClassVar[str] = (
        "Review the error details and adjust your request accordingly."
    )
    help_url: ClassVar[str] = _TROUBLESHOOTING_URL

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = context or ErrorContext()
        if status_code is not None:
            self.context.details["status_code"] = status_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    @property
    def retryable(self) -> bool:
        """Whether the executor may retry after this error.

        False unless a subclass marks itself transient. Only unclassified
        server errors and transport failures are.
        """
        return False

    def with_hint(self, hint: str) -> GeminiError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self


class AuthenticationFailed(GeminiError):
    """Credential invalid, expired or lacking scope."""

    kind = ErrorKind.AUTHENTICATION_FAILED
    recovery_suggestion = (
        "Check your API key and ensure it has the necessary permissions "
        "for the requested operation."
    )
    help_url = "https://ai.google.dev/tutorials/setup"

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        super().__init__(f"Authentication failed: {detail}", **kwargs)


class RateLimitExceeded(GeminiError):
    """Server-side throttling. Never retried automatically."""

    kind = ErrorKind.RATE_LIMIT_EXCEEDED
    recovery_suggestion = (
        "Wait before retrying and reduce request frequency, or upgrade "
        "your plan for higher limits."
    )
    help_url = "https://ai.google.dev/pricing"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(
            "Rate limit exceeded. Too many requests in a short time period.",
            **kwargs,
        )


class QuotaExceeded(GeminiError):
    """Plan or usage limit reached."""

    kind = ErrorKind.QUOTA_EXCEEDED
    recovery_suggestion = (
        "Check your usage in the Google Cloud Console and consider "
        "upgrading your plan."
    )
    help_url = "https://ai.google.dev/pricing"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(
            "API quota exceeded. You have reached your usage limit.", **kwargs
        )


class ModelNotFound(GeminiError):
    """Addressed model does not exist or is not accessible."""

    kind = ErrorKind.MODEL_NOT_FOUND
    recovery_suggestion = "Verify the model name is correct."
    help_url = "https://ai.google.dev/models/gemini"

    def __init__(self, name: str, **kwargs: Any) -> None:
        self.name = name
        super().__init__(
            f"Model '{name}' not found or not accessible with your API key.",
            **kwargs,
        )


class InvalidModel(GeminiError):
    """Model is known but unsupported for the request."""

    kind = ErrorKind.INVALID_MODEL
    recovery_suggestion = (
        "Check the model name spelling and ensure it's a supported model "
        "for your API key tier."
    )
    help_url = "https://ai.google.dev/models/gemini"

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        super().__init__(f"Invalid model specified: {detail}", **kwargs)


class InvalidRequest(GeminiError):
    """Malformed caller input or unknown endpoint."""

    kind = ErrorKind.INVALID_REQUEST
    recovery_suggestion = (
        "Review the request format and parameters according to the API "
        "documentation."
    )

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        super().__init__(f"Invalid request: {detail}", **kwargs)


class ApiError(GeminiError):
    """Server-reported failure not otherwise classified."""

    kind = ErrorKind.API_ERROR

    def __init__(
        self,
        code: int,
        message: str,
        details: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.code = code
        self.api_message = message
        self.details = details
        description = f"API error {code}: {message}"
        if details:
            description += f"\nDetails: {details}"
        kwargs.setdefault("status_code", code or None)
        super().__init__(description, **kwargs)

    @property
    def recovery_suggestion(self) -> str:  # type: ignore[override]
        if 500 <= self.code < 600:
            return (
                "This is a server error. Wait a moment and try again. If it "
                "persists, check the service status."
            )
        if self.code == 400:
            return (
                "Review your request parameters and ensure they meet the API "
                "requirements."
            )
        return GeminiError.recovery_suggestion

    @property
    def retryable(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


class NetworkError(GeminiError):
    """Server could not be reached or is unavailable."""

    kind = ErrorKind.NETWORK_ERROR
    recovery_suggestion = (
        "Check your internet connection and try again. If the problem "
        "persists, the service may be temporarily unavailable."
    )

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        kwargs.setdefault("context", ErrorContext(source="transport"))
        super().__init__(f"Network error: {detail}", **kwargs)

    @property
    def retryable(self) -> bool:
        return True


class Timeout(GeminiError):
    """The configured timeout elapsed before a response arrived."""

    kind = ErrorKind.TIMEOUT
    recovery_suggestion = (
        "Try reducing the request size or complexity, or increase the "
        "configured timeout."
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("context", ErrorContext(source="transport"))
        super().__init__(
            "Request timed out. The server did not respond within the "
            "timeout period.",
            **kwargs,
        )

    @property
    def retryable(self) -> bool:
        return True


class InvalidResponse(GeminiError):
    """A successful response body could not be decoded."""

    kind = ErrorKind.INVALID_RESPONSE
    recovery_suggestion = (
        "This may be a temporary issue. If the problem persists, check for "
        "service status updates."
    )

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        super().__init__(f"Invalid response from server: {detail}", **kwargs)


class FileError(GeminiError):
    """Failure in the file upload protocol."""

    kind = ErrorKind.FILE_ERROR
    recovery_suggestion = (
        "Verify the file exists, is accessible, and you have the necessary "
        "permissions."
    )
    help_url = "https://ai.google.dev/gemini-api/docs/prompting_with_media"

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        kwargs.setdefault("context", ErrorContext(source="upload"))
        super().__init__(f"File operation error: {detail}", **kwargs)


class StreamingError(GeminiError):
    """The event stream failed after it had started."""

    kind = ErrorKind.STREAMING_ERROR
    recovery_suggestion = (
        "Check your connection stability and try establishing a new "
        "streaming connection."
    )

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        kwargs.setdefault("context", ErrorContext(source="stream"))
        super().__init__(f"Streaming error: {detail}", **kwargs)


class UnsupportedPlatform(GeminiError):
    """Requested transport strategy is not available."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM
    recovery_suggestion = (
        "Choose one of the supported transports: streaming, buffered or "
        "buffered-events."
    )

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        super().__init__(f"Unsupported platform: {detail}", **kwargs)


class InvalidConfiguration(GeminiError):
    """Client configuration is missing or inconsistent."""

    kind = ErrorKind.INVALID_CONFIGURATION
    recovery_suggestion = (
        "Review your configuration settings and ensure all required fields "
        "are properly set."
    )
    help_url = "https://ai.google.dev/tutorials/setup"

    def __init__(self, detail: str, **kwargs: Any) -> None:
        self.detail = detail
        kwargs.setdefault("context", ErrorContext(source="config"))
        super().__init__(f"Invalid configuration: {detail}", **kwargs)
