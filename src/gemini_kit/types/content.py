"""
Content generation request and response models.

Only the fields the client itself relies on are modelled explicitly; tools,
safety settings and other feature-specific payloads pass through as plain
JSON objects, and unknown response fields are preserved.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="allow",
    protected_namespaces=(),
)


class Role(str, Enum):
    """Content author role."""

    USER = "user"
    MODEL = "model"


class Part(BaseModel):
    """One part of a content turn."""

    model_config = _WIRE_CONFIG

    text: str | None = None
    inline_data: dict[str, Any] | None = None
    file_data: dict[str, Any] | None = None

    @classmethod
    def from_text(cls, text: str) -> Part:
        """Create a text part."""
        return cls(text=text)

    @classmethod
    def from_file(cls, uri: str, mime_type: str) -> Part:
        """Reference an uploaded file by URI."""
        return cls(file_data={"fileUri": uri, "mimeType": mime_type})


class Content(BaseModel):
    """A single conversation turn."""

    model_config = _WIRE_CONFIG

    role: Role | None = None
    parts: list[Part] = Field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> Content:
        """Create a user turn."""
        return cls(role=Role.USER, parts=[Part.from_text(text)])

    @classmethod
    def model(cls, text: str) -> Content:
        """Create a model turn."""
        return cls(role=Role.MODEL, parts=[Part.from_text(text)])

    @classmethod
    def system(cls, text: str) -> Content:
        """Create a system instruction (no role)."""
        return cls(parts=[Part.from_text(text)])

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.parts if part.text)


class GenerationConfig(BaseModel):
    """Sampling parameters."""

    model_config = _WIRE_CONFIG

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    candidate_count: int | None = None
    max_output_tokens: int | None = None
    stop_sequences: list[str] | None = None
    response_mime_type: str | None = None


class GenerateContentRequest(BaseModel):
    """Body of generateContent / streamGenerateContent."""

    model_config = _WIRE_CONFIG

    contents: list[Content]
    system_instruction: Content | None = None
    generation_config: GenerationConfig | None = None
    tools: list[dict[str, Any]] | None = None
    tool_config: dict[str, Any] | None = None
    safety_settings: list[dict[str, Any]] | None = None


class UsageMetadata(BaseModel):
    """Token accounting for one response."""

    model_config = _WIRE_CONFIG

    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    total_token_count: int | None = None
    cached_content_token_count: int | None = None


class Candidate(BaseModel):
    """One generated candidate."""

    model_config = _WIRE_CONFIG

    content: Content | None = None
    finish_reason: str | None = None
    safety_ratings: list[dict[str, Any]] | None = None
    token_count: int | None = None
    index: int | None = None


class GenerateContentResponse(BaseModel):
    """Response (or one streamed chunk) of content generation."""

    model_config = _WIRE_CONFIG

    candidates: list[Candidate] | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None

    @property
    def text(self) -> str:
        """Text of the first candidate, or an empty string."""
        if not self.candidates or self.candidates[0].content is None:
            return ""
        return self.candidates[0].content.text

    @property
    def finish_reason(self) -> str | None:
        """Finish reason of the first candidate."""
        if not self.candidates:
            return None
        return self.candidates[0].finish_reason


class CountTokensRequest(BaseModel):
    """Body of countTokens."""

    model_config = _WIRE_CONFIG

    contents: list[Content]
    system_instruction: Content | None = None
    tools: list[dict[str, Any]] | None = None


class CountTokensResponse(BaseModel):
    """Token count for a prompt."""

    model_config = _WIRE_CONFIG

    total_tokens: int
    cached_content_token_count: int | None = None
