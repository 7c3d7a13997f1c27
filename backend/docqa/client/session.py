from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import httpx

from docqa.client.upload import (
    LoadedDocument,
    MAX_UPLOAD_BYTES,
    guess_content_type,
    read_document,
    validate_upload,
)
from docqa.core.errors import DocQAError, SubmissionError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://127.0.0.1:8000/chat"

MSG_NEED_INPUT = "Please upload a document and enter a question."
MSG_THINKING = "Processing document and generating response..."
MSG_SERVER_FAILED = "Failed to get response from server"


class ChatView(Protocol):
    """What the submission flow needs from a UI."""

    def add_message(self, kind: str, text: str) -> Any: ...

    def remove_message(self, handle: Any) -> None: ...

    def set_file_status(self, text: str) -> None: ...

    def set_controls_enabled(self, enabled: bool) -> None: ...

    def focus_question(self) -> None: ...


class ConsoleView:
    """Prints the conversation; used by the ``docqa ask`` command."""

    def __init__(self, echo=print) -> None:
        self._echo = echo
        self.messages: list[tuple[str, str]] = []

    def add_message(self, kind: str, text: str) -> int:
        self.messages.append((kind, text))
        if kind != "thinking":
            self._echo(f"[{kind}] {text}")
        return len(self.messages) - 1

    def remove_message(self, handle: int) -> None:
        # Keep indexes stable for earlier handles.
        _, text = self.messages[handle]
        self.messages[handle] = ("removed", text)

    def set_file_status(self, text: str) -> None:
        logger.info(text)

    def set_controls_enabled(self, enabled: bool) -> None:
        """No controls to toggle on a console."""

    def focus_question(self) -> None:
        """No input field to focus on a console."""


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return MSG_SERVER_FAILED
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return MSG_SERVER_FAILED


class ChatSession:
    """Per-session state for one user: the loaded document and the view.

    Controls are disabled while a file is loading or a question is in flight,
    which is what keeps a user from overlapping submissions.
    """

    def __init__(
        self,
        view: ChatView,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        http: httpx.AsyncClient | None = None,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.view = view
        self.endpoint = endpoint
        self.max_upload_bytes = max_upload_bytes
        self.document: LoadedDocument | None = None
        self._http = http

    async def load_file(self, path: str | Path, content_type: str | None = None) -> bool:
        path = Path(path)
        content_type = content_type or guess_content_type(path)

        self.view.set_file_status("Processing file...")
        self.view.set_controls_enabled(False)
        try:
            size = path.stat().st_size if path.exists() else 0
            validate_upload(path.name, content_type, size, max_bytes=self.max_upload_bytes)
            content = await read_document(path, content_type)

            self.document = LoadedDocument(filename=path.name, filetype=content_type, content=content)
            self.view.set_file_status(f"File loaded: {path.name}")
            self.view.add_message("system", f'Document "{path.name}" uploaded successfully!')
            return True
        except DocQAError as e:
            logger.warning("Could not load %s: %s", path, e.message)
            self.document = None
            self.view.set_file_status(e.message)
            self.view.add_message("system", f"Error: {e.message}")
            return False
        finally:
            self.view.set_controls_enabled(True)

    async def _post(self, payload: dict) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(self.endpoint, json=payload)
        async with httpx.AsyncClient(timeout=None) as client:
            return await client.post(self.endpoint, json=payload)

    async def send(self, question: str) -> str | None:
        """Ask one question about the loaded document; returns the answer or None."""

        question = (question or "").strip()
        if not question or self.document is None:
            self.view.add_message("system", MSG_NEED_INPUT)
            return None

        doc = self.document
        thinking = None
        self.view.set_controls_enabled(False)
        try:
            self.view.add_message("user", question)
            thinking = self.view.add_message("thinking", MSG_THINKING)

            try:
                response = await self._post(
                    {
                        "question": question,
                        "document": doc.content,
                        "filename": doc.filename,
                        "filetype": doc.filetype,
                    }
                )
            except httpx.HTTPError as e:
                raise SubmissionError(str(e) or MSG_SERVER_FAILED) from e

            if response.is_error:
                raise SubmissionError(_error_message(response), status_code=response.status_code)

            answer = response.json()["response"]
            self.view.remove_message(thinking)
            thinking = None
            self.view.add_message("ai", answer)
            return answer
        except (DocQAError, ValueError, KeyError, TypeError) as e:
            message = e.message if isinstance(e, DocQAError) else MSG_SERVER_FAILED
            logger.warning("Question failed: %s", message)
            if thinking is not None:
                self.view.remove_message(thinking)
            self.view.add_message("system", f"Error: {message}")
            return None
        finally:
            self.view.set_controls_enabled(True)
            self.view.focus_question()
