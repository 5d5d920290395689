"""
Typed request and response models.
"""

from gemini_kit.types.content import (
    Candidate,
    Content,
    CountTokensRequest,
    CountTokensResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    Part,
    Role,
    UsageMetadata,
)
from gemini_kit.types.files import (
    File,
    FileState,
    ListFilesResponse,
    Status,
    VideoMetadata,
)
from gemini_kit.types.request import RequestDescriptor, RequestTarget
from gemini_kit.types.response import EmptyResponse, ErrorDetail, ErrorResponse

__all__ = [
    "Candidate",
    "Content",
    "CountTokensRequest",
    "CountTokensResponse",
    "EmptyResponse",
    "ErrorDetail",
    "ErrorResponse",
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
    "Status",
    "UsageMetadata",
    "VideoMetadata",
]
