from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from docqa.api.schemas import ChatRequest, ChatResponse, ErrorResponse
from docqa.core.errors import ConfigurationError, ExtractionError, GatewayError
from docqa.services.completion import MISSING_CREDENTIAL
from docqa.services.prompt import build_prompt
from docqa.services.text_extract import extract_text

logger = logging.getLogger(__name__)

MSG_METHOD_NOT_ALLOWED = "Method not allowed"
MSG_MISSING_FIELDS = "Missing required fields: question and document are required"
MSG_EXTRACTION_FAILED = "Error processing PDF file"
MSG_UPSTREAM_FAILED = "OpenAI API Error"
MSG_UNEXPECTED = "Error processing request"

DEFAULT_FILENAME = "document"


class Completer(Protocol):
    @property
    def is_configured(self) -> bool: ...

    def complete(self, prompt: str) -> str: ...


@dataclass
class ChatOutcome:
    status_code: int
    body: dict


def _error(status_code: int, message: str, error: str | None = None) -> ChatOutcome:
    payload = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return ChatOutcome(status_code, payload)


def _parse_body(body: str | bytes | None) -> ChatRequest:
    # Malformed or empty JSON is not caught here; handle_chat maps it to 500.
    raw = json.loads(body or "")
    if not isinstance(raw, dict):
        # Arrays, scalars and null carry none of the fields.
        raw = {}
    return ChatRequest.model_validate(raw)


def _answer(req: ChatRequest, gateway: Completer) -> ChatOutcome:
    if not req.has_required_fields():
        logger.warning("Rejected chat request with missing fields")
        return _error(400, MSG_MISSING_FIELDS)

    if not gateway.is_configured:
        logger.error("Chat request refused: %s", MISSING_CREDENTIAL)
        return _error(500, MISSING_CREDENTIAL)

    filename = req.filename or DEFAULT_FILENAME
    try:
        text = extract_text(req.document, req.filetype)
    except ExtractionError as e:
        logger.warning("Extraction failed for %s: %s", filename, e.message)
        return _error(400, MSG_EXTRACTION_FAILED, e.message)

    prompt = build_prompt(filename, text, req.question)
    logger.info("Submitting prompt for %s (%d chars)", filename, len(prompt))

    try:
        answer = gateway.complete(prompt)
    except GatewayError as e:
        logger.error("Completion service error (%s): %s", e.status_code, e.message)
        return _error(e.status_code, MSG_UPSTREAM_FAILED, e.message)
    except ConfigurationError as e:
        logger.error("Chat request refused: %s", e.message)
        return _error(500, e.message)

    return ChatOutcome(200, ChatResponse(response=answer).model_dump())


def handle_chat(method: str, body: str | bytes | None, gateway: Completer) -> ChatOutcome:
    """Run one chat request end to end and always return a JSON-able outcome.

    The request is processed as a fixed sequence (method, body, credential,
    extraction, prompt, completion) and stops at the first failure. Nothing
    survives between calls.
    """

    if (method or "").upper() != "POST":
        return _error(405, MSG_METHOD_NOT_ALLOWED)

    try:
        return _answer(_parse_body(body), gateway)
    except Exception as e:
        logger.exception("Unexpected error while handling chat request")
        return _error(500, MSG_UNEXPECTED, str(e))
