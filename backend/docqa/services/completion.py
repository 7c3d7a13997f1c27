from __future__ import annotations

import logging
from collections.abc import Mapping

import openai
from openai import OpenAI

from docqa.core.config import Settings, settings as default_settings
from docqa.core.errors import ConfigurationError, ServiceRejected, TransportFailure

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "Sorry, I could not generate a response."
MISSING_CREDENTIAL = "service credential not configured"


def _service_detail(e: openai.APIStatusError) -> str:
    """Prefer the service's own ``error.message`` over the SDK's summary."""

    body = e.body
    if isinstance(body, Mapping):
        # The SDK usually unwraps {"error": {...}} already, but not always.
        inner = body.get("error", body)
        if isinstance(inner, Mapping) and inner.get("message"):
            return str(inner["message"])
    return e.message or str(e)


class CompletionGateway:
    """Thin wrapper over the OpenAI completions endpoint.

    Generation parameters are fixed per instance. Every failure coming out of
    the SDK is turned into a ``GatewayError`` subclass so callers only deal
    with two cases: the service rejected us, or we never reached it.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        timeout: float | None = None,
        max_retries: int | None = None,
        client: OpenAI | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.max_retries = max_retries
        self._client = client

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "CompletionGateway":
        s = s or default_settings
        return cls(
            api_key=s.openai_api_key,
            model=s.openai_model,
            max_tokens=s.completion_max_tokens,
            temperature=s.completion_temperature,
            timeout=s.openai_timeout,
            max_retries=s.openai_max_retries,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> OpenAI:
        if self._client is None:
            kwargs: dict = {"api_key": self.api_key}
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            if self.max_retries is not None:
                kwargs["max_retries"] = self.max_retries
            self._client = OpenAI(**kwargs)
        return self._client

    def complete(self, prompt: str) -> str:
        if not self.is_configured:
            raise ConfigurationError(MISSING_CREDENTIAL)

        client = self._get_client()
        try:
            completion = client.completions.create(
                model=self.model,
                prompt=prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                n=1,
            )
        except openai.APIStatusError as e:
            detail = _service_detail(e)
            logger.warning("Completion service returned %s: %s", e.status_code, detail)
            raise ServiceRejected(e.status_code, detail) from e
        except openai.OpenAIError as e:
            # APIConnectionError / APITimeoutError and anything else the SDK raises.
            logger.warning("Completion request failed: %s", e)
            raise TransportFailure(str(e) or e.__class__.__name__) from e

        choices = completion.choices or []
        text = (choices[0].text or "").strip() if choices else ""
        if not text:
            logger.info("Completion returned no usable text; using fallback")
            return FALLBACK_RESPONSE
        return text
