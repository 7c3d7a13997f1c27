from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path

from docqa.core.errors import ReadError, UploadRejected

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ACCEPTED_TYPES = re.compile(r"text/.*|application/pdf")
PDF_MIME = "application/pdf"

MSG_BAD_TYPE = "Please upload a text or PDF file"
MSG_TOO_LARGE = "File size must be less than 10MB"


@dataclass(frozen=True)
class LoadedDocument:
    filename: str
    filetype: str
    content: str


def guess_content_type(path: str | Path) -> str:
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or ""


def validate_upload(filename: str, content_type: str, size: int, *, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Reject unsupported or oversized files before anything is read or sent."""

    if not ACCEPTED_TYPES.search(content_type or ""):
        raise UploadRejected(MSG_BAD_TYPE)
    if size > max_bytes:
        raise UploadRejected(MSG_TOO_LARGE)
    logger.debug("Accepted %s (%s, %d bytes)", filename, content_type, size)


def encode_content(data: bytes, content_type: str) -> str:
    """PDFs travel as a base64 data URL, everything else as decoded text."""

    if content_type == PDF_MIME:
        return f"data:{PDF_MIME};base64,{base64.b64encode(data).decode('ascii')}"
    return data.decode("utf-8", errors="replace")


async def read_document(path: str | Path, content_type: str) -> str:
    try:
        data = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        raise ReadError("Error reading file") from e

    if not data:
        raise ReadError("File is empty")
    return encode_content(data, content_type)
