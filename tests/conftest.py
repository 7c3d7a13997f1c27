from __future__ import annotations

import base64
from types import SimpleNamespace

import fitz
import pytest
from fastapi.testclient import TestClient

from docqa.main import app, get_gateway


class FakeGateway:
    """Stands in for CompletionGateway and records every prompt it sees."""

    def __init__(self, answer="42", *, configured=True, error=None):
        self.answer = answer
        self.configured = configured
        self.error = error
        self.prompts = []

    @property
    def is_configured(self):
        return self.configured

    @property
    def calls(self):
        return len(self.prompts)

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


class FakeOpenAI:
    """Minimal ``client.completions.create`` double."""

    def __init__(self, texts=None, error=None):
        self.texts = texts if texts is not None else ["answer"]
        self.error = error
        self.calls = []

        outer = self

        class _Completions:
            def create(self, **kwargs):
                outer.calls.append(kwargs)
                if outer.error is not None:
                    raise outer.error
                return SimpleNamespace(choices=[SimpleNamespace(text=t) for t in outer.texts])

        self.completions = _Completions()


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def pdf_data_url(*pages: str) -> str:
    return "data:application/pdf;base64," + base64.b64encode(make_pdf(*pages)).decode("ascii")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
