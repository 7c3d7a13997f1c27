from __future__ import annotations

from pydantic import BaseModel, field_validator


class ChatRequest(BaseModel):
    # Everything is optional here so absence is reported as our own 400,
    # not a framework validation error.
    question: str | None = None
    document: str | None = None
    filename: str | None = None
    filetype: str | None = None

    @field_validator("question", "document", "filename", "filetype", mode="before")
    @classmethod
    def _as_text(cls, v):
        # 0, false, "" and null count as absent; other scalars become text.
        if not v:
            return None
        return v if isinstance(v, str) else str(v)

    def has_required_fields(self) -> bool:
        return bool(self.question) and bool(self.document)


class ChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    message: str
    error: str | None = None
