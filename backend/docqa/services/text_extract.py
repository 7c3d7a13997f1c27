from __future__ import annotations

import base64
import binascii
import logging

import fitz  # PyMuPDF

from docqa.core.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"


def normalize_mime(filetype: str | None) -> str:
    # "Application/PDF; name=x.pdf" -> "application/pdf"
    return (filetype or "").split(";", 1)[0].strip().lower()


def is_pdf(filetype: str | None) -> bool:
    return normalize_mime(filetype) == PDF_MIME


def strip_data_url(payload: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix if the browser added one."""

    if payload.startswith("data:"):
        header, sep, rest = payload.partition(",")
        if sep and header.endswith(";base64"):
            return rest
    return payload


def decode_pdf_payload(document: str | bytes) -> bytes:
    if isinstance(document, bytes):
        return document
    try:
        return base64.b64decode(strip_data_url(document.strip()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ExtractionError(f"Invalid base64 PDF payload: {e}") from e


def extract_text_from_pdf(data: bytes) -> str:
    """Concatenate the text of every page, separated by a blank line."""

    try:
        pdf = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        # FileDataError / EmptyFileError are RuntimeError subclasses.
        raise ExtractionError(str(e) or "Could not open PDF") from e

    try:
        pages: list[str] = []
        for i in range(pdf.page_count):
            page = pdf.load_page(i)
            pages.append(page.get_text("text") or "")
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(str(e) or "Could not read PDF page") from e
    finally:
        pdf.close()

    text = "\n\n".join(pages)
    if not text.strip():
        raise ExtractionError("No text content found in PDF")

    logger.debug("Extracted %d chars from %d PDF page(s)", len(text), len(pages))
    return text


def extract_text(document: str | bytes, filetype: str | None) -> str:
    if is_pdf(filetype):
        return extract_text_from_pdf(decode_pdf_payload(document))

    # Plain text goes through untouched.
    if isinstance(document, bytes):
        return document.decode("utf-8", errors="replace")
    return document
