"""Resumable file upload.

Two-phase protocol against the Files API upload endpoint:

1. ``POST {upload_base}/files`` with ``X-Goog-Upload-Protocol: resumable``
   and ``X-Goog-Upload-Command: start`` opens a session; the session URL
   comes back in the ``X-Goog-Upload-URL`` response header.
2. ``PUT {session URL}`` transfers the bytes at an offset and, for the last
   chunk, finalizes the upload. The response body is the created File.

Only single-chunk transfers are performed; a failed transfer is not resumed.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from gemini_kit.errors import FileError, InvalidResponse, classify_response
from gemini_kit.telemetry import get_logger
from gemini_kit.transport.base import TransportRequest, merge_headers
from gemini_kit.types.files import File
from gemini_kit.types.request import RequestTarget

if TYPE_CHECKING:
    from gemini_kit.config import ClientConfiguration
    from gemini_kit.transport.base import Transport, TransportResponse

logger = get_logger("gemini_kit.upload")

UPLOAD_URL_HEADER = "X-Goog-Upload-URL"
COMMAND_UPLOAD = "upload"
COMMAND_UPLOAD_FINALIZE = "upload, finalize"


@dataclass
class UploadSession:
    """State of one resumable upload session.

    Attributes:
        upload_url: Session URL returned by the initiate request
        offset: Number of bytes already transferred
        total_size: Total size of the file in bytes
    """

    upload_url: str
    total_size: int
    offset: int = 0

    def is_final_chunk(self, chunk_size: int) -> bool:
        return self.offset + chunk_size >= self.total_size

    def continuation_headers(
        self, chunk_size: int, custom_headers: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Headers for transferring the next ``chunk_size`` bytes."""
        headers = {
            "Content-Length": str(chunk_size),
            "X-Goog-Upload-Offset": str(self.offset),
        }
        headers["X-Goog-Upload-Command"] = (
            COMMAND_UPLOAD_FINALIZE if self.is_final_chunk(chunk_size) else COMMAND_UPLOAD
        )
        return merge_headers(custom_headers or {}, headers)

    def advance(self, chunk_size: int) -> None:
        self.offset += chunk_size


def file_from_upload_body(content: bytes) -> File:
    """Decode the finalize response, unwrapping a top-level ``file`` key.

    Raises:
        InvalidResponse: If the body is not a File resource
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidResponse(f"upload response is not JSON: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("file"), dict):
        data = data["file"]

    try:
        return File.model_validate(data)
    except ValidationError as e:
        raise InvalidResponse(str(e)) from e


class ResumableUploader:
    """Uploads raw bytes with the resumable protocol.

    Example:
        >>> uploader = ResumableUploader(config, transport)
        >>> file = await uploader.upload(data, "image/png", "photo.png")
        >>> print(file.uri)
    """

    def __init__(self, config: ClientConfiguration, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    @staticmethod
    def _raise_for_status(response: TransportResponse, path: str) -> None:
        error = classify_response(response.status_code, response.content, path)
        if error is not None:
            raise error

    async def start_session(
        self, total_size: int, mime_type: str, display_name: str
    ) -> UploadSession:
        """Open an upload session.

        Raises:
            FileError: If the server did not return a session URL
        """
        request = TransportRequest(
            method="POST",
            url=self._config.build_url(RequestTarget.UPLOAD, "files"),
            headers=self._config.upload_headers(total_size, mime_type),
            content=json.dumps({"file": {"display_name": display_name}}).encode(),
            timeout=self._config.timeout,
        )
        response = await self._transport.send(request)
        self._raise_for_status(response, "files")

        upload_url = response.header(UPLOAD_URL_HEADER)
        if not upload_url:
            raise FileError("Failed to get upload URL")

        logger.debug("Upload session opened", display_name=display_name, size=total_size)
        return UploadSession(upload_url=upload_url, total_size=total_size)

    async def transfer(self, session: UploadSession, data: bytes) -> TransportResponse:
        """Send ``data`` at the session's current offset."""
        request = TransportRequest(
            method="PUT",
            url=session.upload_url,
            headers=session.continuation_headers(len(data), self._config.custom_headers),
            timeout=self._config.timeout,
        )
        response = await self._transport.upload(request, data)
        self._raise_for_status(response, session.upload_url)
        session.advance(len(data))
        return response

    async def upload(self, data: bytes, mime_type: str, display_name: str) -> File:
        """Upload ``data`` and return the created File resource.

        Args:
            data: File contents
            mime_type: MIME type of the contents
            display_name: Human-readable name

        Returns:
            The File resource reported by the server

        Raises:
            FileError: If no upload session could be opened
            InvalidResponse: If the finalize response is not a File
            GeminiError: Classified failure of either phase
        """
        session = await self.start_session(len(data), mime_type, display_name)
        response = await self.transfer(session, data)
        uploaded = file_from_upload_body(response.content)
        logger.info(
            "File uploaded",
            name=uploaded.name,
            mime_type=uploaded.mime_type,
            size=len(data),
        )
        return uploaded

