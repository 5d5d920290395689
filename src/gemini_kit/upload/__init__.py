"""
File uploads - resumable upload protocol.
"""

from gemini_kit.upload.resumable import (
    COMMAND_UPLOAD,
    COMMAND_UPLOAD_FINALIZE,
    UPLOAD_URL_HEADER,
    ResumableUploader,
    UploadSession,
    file_from_upload_body,
)

__all__ = [
    "COMMAND_UPLOAD",
    "COMMAND_UPLOAD_FINALIZE",
    "UPLOAD_URL_HEADER",
    "ResumableUploader",
    "UploadSession",
    "file_from_upload_body",
]
