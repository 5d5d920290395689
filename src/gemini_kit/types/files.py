"""
File metadata records returned by the files API.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FileState(str, Enum):
    """Processing state of an uploaded file."""

    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


class Status(BaseModel):
    """Error status attached to a failed file."""

    model_config = ConfigDict(extra="allow")

    code: int | None = None
    message: str | None = None
    details: list[Any] | None = None


class VideoMetadata(BaseModel):
    """Metadata for video files."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    video_duration: str | None = None


class File(BaseModel):
    """An uploaded file.

    Example:
        >>> file = await client.upload_file(data, "image/png", "diagram")
        >>> print(file.uri, file.state)
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    name: str = Field(description="Resource name, e.g. 'files/abc-123'")
    display_name: str | None = None
    mime_type: str
    size_bytes: str | None = None
    create_time: str | None = None
    update_time: str | None = None
    expiration_time: str | None = None
    sha256_hash: str | None = None
    uri: str | None = None
    state: FileState | None = None
    error: Status | None = None
    video_metadata: VideoMetadata | None = None

    @property
    def is_active(self) -> bool:
        """Whether the file is ready to be referenced in prompts."""
        return self.state == FileState.ACTIVE


class ListFilesResponse(BaseModel):
    """One page of the file listing."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    files: list[File] | None = None
    next_page_token: str | None = None
