import httpx
import openai
import pytest

from docqa.core.config import Settings
from docqa.core.errors import ConfigurationError, GatewayError, ServiceRejected, TransportFailure
from docqa.services.completion import FALLBACK_RESPONSE, CompletionGateway

from conftest import FakeOpenAI

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/completions")


def make_gateway(client, api_key="sk-test"):
    return CompletionGateway(api_key=api_key, model="test-model", client=client)


def test_sends_fixed_generation_parameters():
    fake = FakeOpenAI(texts=["  The answer.  "])
    assert make_gateway(fake).complete("prompt") == "The answer."
    assert fake.calls == [
        {"model": "test-model", "prompt": "prompt", "max_tokens": 500, "temperature": 0.7, "n": 1}
    ]


def test_only_first_choice_is_used():
    fake = FakeOpenAI(texts=["first", "second"])
    assert make_gateway(fake).complete("p") == "first"


@pytest.mark.parametrize("texts", [[""], ["   \n "], [None], []])
def test_no_usable_text_returns_fallback(texts):
    assert make_gateway(FakeOpenAI(texts=texts)).complete("p") == FALLBACK_RESPONSE


def test_missing_credential_fails_before_any_call():
    fake = FakeOpenAI()
    gateway = make_gateway(fake, api_key=None)
    assert not gateway.is_configured
    with pytest.raises(ConfigurationError, match="service credential not configured"):
        gateway.complete("p")
    assert fake.calls == []


def test_missing_credential_never_builds_sdk_client():
    gateway = CompletionGateway(api_key="", model="m")
    with pytest.raises(ConfigurationError):
        gateway.complete("p")
    assert gateway._client is None


def test_service_error_keeps_status_and_detail():
    err = openai.RateLimitError(
        "Error code: 429",
        response=httpx.Response(429, request=REQUEST),
        body={"message": "Rate limit reached for requests", "type": "requests"},
    )
    with pytest.raises(ServiceRejected) as exc:
        make_gateway(FakeOpenAI(error=err)).complete("p")
    assert exc.value.status_code == 429
    assert exc.value.message == "Rate limit reached for requests"


def test_service_error_with_wrapped_body():
    err = openai.AuthenticationError(
        "Error code: 401",
        response=httpx.Response(401, request=REQUEST),
        body={"error": {"message": "Incorrect API key provided"}},
    )
    with pytest.raises(GatewayError) as exc:
        make_gateway(FakeOpenAI(error=err)).complete("p")
    assert exc.value.status_code == 401
    assert exc.value.message == "Incorrect API key provided"


def test_service_error_without_detail_falls_back_to_sdk_message():
    err = openai.InternalServerError(
        "Error code: 503 - upstream unavailable",
        response=httpx.Response(503, request=REQUEST),
        body=None,
    )
    with pytest.raises(ServiceRejected) as exc:
        make_gateway(FakeOpenAI(error=err)).complete("p")
    assert exc.value.status_code == 503
    assert exc.value.message == "Error code: 503 - upstream unavailable"


def test_transport_error_maps_to_500():
    err = openai.APIConnectionError(request=REQUEST)
    with pytest.raises(TransportFailure) as exc:
        make_gateway(FakeOpenAI(error=err)).complete("p")
    assert exc.value.status_code == 500
    assert exc.value.message == "Connection error."


def test_from_settings_uses_configured_values():
    s = Settings(
        openai_api_key="sk-abc",
        openai_model="my-model",
        completion_max_tokens=123,
        completion_temperature=0.1,
        _env_file=None,
    )
    gateway = CompletionGateway.from_settings(s)
    assert gateway.is_configured
    assert (gateway.model, gateway.max_tokens, gateway.temperature) == ("my-model", 123, 0.1)
