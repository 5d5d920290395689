"""
Client configuration.

A ClientConfiguration is created once per client and shared read-only by
every call made through it.

Environment variables read by ``ClientConfiguration.from_environment()``:
- GEMINI_API_KEY (or GOOGLE_API_KEY / keyring): API key
- GEMINI_BASE_URL, GEMINI_UPLOAD_BASE_URL, GEMINI_OPENAI_BASE_URL
- GEMINI_TIMEOUT_SECS: request timeout in seconds
- GEMINI_MAX_RETRIES: maximum number of attempts per request
- GEMINI_TRANSPORT: streaming | buffered | buffered-events
- GEMINI_OPENAI_COMPAT: "1" or "true" to enable OpenAI compatibility mode
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from gemini_kit.errors import InvalidConfiguration
from gemini_kit.transport.auth import get_auth_header, resolve_api_key
from gemini_kit.transport.base import merge_headers
from gemini_kit.types.request import RequestTarget

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_UPLOAD_BASE_URL = "https://generativelanguage.googleapis.com/upload/v1beta"
DEFAULT_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_TRANSPORT = "streaming"


@dataclass(frozen=True)
class ClientConfiguration:
    """Immutable client configuration.

    Attributes:
        api_key: API key used for every request
        base_url: Base URL for standard endpoints
        upload_base_url: Base URL for file uploads
        openai_base_url: Base URL for OpenAI-compatible endpoints
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts per request
        custom_headers: Headers added to every request
        use_openai_compatibility: Preference flag for OpenAI-compatible
            mode. It is carried for callers only; requests choose their
            endpoint and auth style through RequestDescriptor.target
        transport: Transport strategy name

    Example:
        >>> config = ClientConfiguration(api_key="AIza...", timeout=120, max_retries=5)
        >>> config = ClientConfiguration.from_environment()
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    upload_base_url: str = DEFAULT_UPLOAD_BASE_URL
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    custom_headers: Mapping[str, str] = field(default_factory=dict)
    use_openai_compatibility: bool = False
    transport: str = DEFAULT_TRANSPORT

    def __post_init__(self) -> None:
        if not self.api_key:
            raise InvalidConfiguration("API key is required").with_hint(
                "Set GEMINI_API_KEY or pass api_key explicitly"
            )
        if self.timeout <= 0:
            raise InvalidConfiguration(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise InvalidConfiguration(
                f"max_retries must not be negative, got {self.max_retries}"
            )
        # Freeze the header mapping so the shared configuration stays read-only
        object.__setattr__(
            self, "custom_headers", MappingProxyType(dict(self.custom_headers))
        )

    @classmethod
    def from_environment(cls, **overrides: Any) -> ClientConfiguration:
        """Create a configuration from environment variables.

        Args:
            **overrides: Explicit values that take precedence over the environment

        Returns:
            ClientConfiguration instance

        Raises:
            InvalidConfiguration: If no API key can be resolved
        """
        values: dict[str, Any] = {
            "api_key": resolve_api_key(overrides.pop("api_key", None)) or "",
        }

        for attr, env_var in (
            ("base_url", "GEMINI_BASE_URL"),
            ("upload_base_url", "GEMINI_UPLOAD_BASE_URL"),
            ("openai_base_url", "GEMINI_OPENAI_BASE_URL"),
            ("transport", "GEMINI_TRANSPORT"),
        ):
            env_value = os.getenv(env_var)
            if env_value:
                values[attr] = env_value

        env_timeout = os.getenv("GEMINI_TIMEOUT_SECS")
        if env_timeout:
            with suppress(ValueError):
                values["timeout"] = float(env_timeout)

        env_retries = os.getenv("GEMINI_MAX_RETRIES")
        if env_retries:
            with suppress(ValueError):
                values["max_retries"] = int(env_retries)

        env_compat = os.getenv("GEMINI_OPENAI_COMPAT")
        if env_compat:
            values["use_openai_compatibility"] = env_compat.lower() in ("1", "true", "yes")

        values.update(overrides)
        return cls(**values)

    def with_options(self, **changes: Any) -> ClientConfiguration:
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    def standard_headers(self) -> dict[str, str]:
        """Headers for standard API requests (API key header)."""
        return merge_headers(
            self.custom_headers,
            get_auth_header(self.api_key),
            {"Content-Type": "application/json"},
        )

    def openai_headers(self) -> dict[str, str]:
        """Headers for OpenAI-compatible requests (Bearer token)."""
        return merge_headers(
            self.custom_headers,
            get_auth_header(self.api_key, bearer=True),
            {"Content-Type": "application/json"},
        )

    def auth_headers(self, target: RequestTarget) -> dict[str, str]:
        """Base headers for a request target."""
        if target == RequestTarget.OPENAI:
            return self.openai_headers()
        return self.standard_headers()

    def upload_headers(self, content_length: int, mime_type: str) -> dict[str, str]:
        """Headers that start a resumable upload session.

        Args:
            content_length: Total size of the file in bytes
            mime_type: MIME type of the file

        Returns:
            Headers for the upload initiate request
        """
        return merge_headers(
            self.custom_headers,
            get_auth_header(self.api_key),
            {
                "X-Goog-Upload-Protocol": "resumable",
                "X-Goog-Upload-Command": "start",
                "X-Goog-Upload-Header-Content-Length": str(content_length),
                "X-Goog-Upload-Header-Content-Type": mime_type,
                "Content-Type": "application/json",
            },
        )

    def base_url_for(self, target: RequestTarget) -> str:
        """Resolve the base URL for a request target."""
        if target == RequestTarget.UPLOAD:
            return self.upload_base_url
        if target == RequestTarget.OPENAI:
            return self.openai_base_url
        return self.base_url

    def build_url(self, target: RequestTarget, path: str) -> str:
        """Join the target's base URL and an endpoint path with one slash."""
        return f"{self.base_url_for(target).rstrip('/')}/{path.lstrip('/')}"

    def __repr__(self) -> str:
        return (
            f"ClientConfiguration(api_key='***', base_url={self.base_url!r}, "
            f"timeout={self.timeout}, max_retries={self.max_retries}, "
            f"transport={self.transport!r}, "
            f"use_openai_compatibility={self.use_openai_compatibility})"
        )
