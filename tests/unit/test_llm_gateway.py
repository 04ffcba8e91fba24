"""Tests for the completion gateway providers."""
from __future__ import annotations

import httpx
import pytest

from config import LlmRoute
from config.registry import get_provider
from llm_gateway import (
    ChatCompletionsGateway,
    GenerationError,
    OllamaGateway,
    build_gateway,
    runnable,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, raise_json=False):
        self.status_code = status_code
        self._payload = payload
        self._raise_json = raise_json
        self.text = str(payload)

    def json(self):
        if self._raise_json:
            raise ValueError("not json")
        return self._payload


class FakeClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, *, json, headers, timeout):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _route(**overrides):
    data = {
        "name": "test",
        "provider": "chat_completions",
        "base_url": "https://llm.example",
        "model": "m",
        "timeout_s": 12.5,
    }
    data.update(overrides)
    return LlmRoute(**data)


def test_ollama_payload_and_response():
    client = FakeClient(FakeResponse(payload={"response": "hello"}))
    gateway = OllamaGateway(_route(provider="ollama", base_url="http://localhost:11434/"), client=client)

    assert gateway.generate("prompt text") == "hello"
    call = client.calls[0]
    assert call["url"] == "http://localhost:11434/api/generate"
    assert call["json"] == {"model": "m", "prompt": "prompt text", "stream": False}
    assert call["timeout"] == 12.5


def test_chat_completions_payload_and_auth(monkeypatch):
    monkeypatch.setenv("TEST_LLM_KEY", "secret")
    client = FakeClient(FakeResponse(payload={"choices": [{"message": {"content": "hi"}}]}))
    gateway = ChatCompletionsGateway(_route(api_key_env="TEST_LLM_KEY"), client=client)

    assert gateway.generate("question") == "hi"
    call = client.calls[0]
    assert call["url"] == "https://llm.example/chat/completions"
    assert call["json"]["messages"] == [{"role": "user", "content": "question"}]
    assert call["headers"]["Authorization"] == "Bearer secret"


def test_explicit_endpoint_overrides_default():
    client = FakeClient(FakeResponse(payload={"choices": [{"message": {"content": "ok"}}]}))
    gateway = ChatCompletionsGateway(_route(endpoint="/v1/chat/completions"), client=client)
    gateway.generate("x")
    assert client.calls[0]["url"] == "https://llm.example/v1/chat/completions"


@pytest.mark.parametrize(
    "client",
    [
        FakeClient(FakeResponse(status_code=503, payload={})),
        FakeClient(FakeResponse(payload=None, raise_json=True)),
        FakeClient(FakeResponse(payload={"choices": []})),
        FakeClient(error=httpx.ConnectError("refused")),
        FakeClient(error=httpx.ReadTimeout("slow")),
    ],
)
def test_failures_raise_generation_error(client):
    gateway = ChatCompletionsGateway(_route(), client=client)
    with pytest.raises(GenerationError):
        gateway.generate("x")


def test_timeout_message_names_the_bound():
    gateway = OllamaGateway(_route(provider="ollama"), client=FakeClient(error=httpx.ReadTimeout("slow")))
    with pytest.raises(GenerationError, match="12.5"):
        gateway.generate("x")


def test_test_connection_reports_failure_without_raising():
    ok = ChatCompletionsGateway(
        _route(), client=FakeClient(FakeResponse(payload={"choices": [{"message": {"content": "OK"}}]}))
    )
    broken = ChatCompletionsGateway(_route(), client=FakeClient(FakeResponse(status_code=500, payload={})))
    assert ok.test_connection() is True
    assert broken.test_connection() is False


def test_build_gateway_uses_provider_registry():
    assert get_provider("ollama") is OllamaGateway
    assert isinstance(build_gateway(_route(provider="ollama")), OllamaGateway)
    assert isinstance(build_gateway(_route()), ChatCompletionsGateway)


def test_sequential_route_still_returns():
    client = FakeClient(FakeResponse(payload={"response": "done"}))
    gateway = OllamaGateway(_route(provider="ollama", sequential=True), client=client)
    assert gateway.generate("a") == "done"
    assert gateway.generate("b") == "done"


def test_runnable_wraps_gateway():
    client = FakeClient(FakeResponse(payload={"response": "from runnable"}))
    chain = runnable(OllamaGateway(_route(provider="ollama"), client=client))
    assert chain.invoke("prompt") == "from runnable"
