from __future__ import annotations  # Provider-agnostic completion gateway

import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import httpx
from langchain_core.runnables import RunnableLambda

from config import LlmRoute
from config.registry import get_provider, register_provider


logger = logging.getLogger(__name__)  # Module logger setup


_MODEL_LOCKS: Dict[str, threading.Lock] = {}
_MODEL_LOCKS_GUARD = threading.Lock()

CONNECTION_PROBE = 'Test connection. Respond with just "OK".'


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class GenerationError(RuntimeError):  # Provider failure: transport, status, payload or timeout
    pass


class CompletionGateway(Protocol):  # Text in, text out
    def generate(self, prompt: str) -> str: ...

    def test_connection(self) -> bool: ...


def _lock_for(cfg: LlmRoute) -> threading.Lock:
    key = cfg.name or cfg.url()
    with _MODEL_LOCKS_GUARD:
        lock = _MODEL_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[key] = lock
    return lock


class HttpCompletionGateway:  # Shared request/response handling for HTTP providers
    provider = "http"

    def __init__(self, route: LlmRoute, *, client: Optional[HttpClient] = None) -> None:
        self._route = route
        self._client = client

    @property
    def route(self) -> LlmRoute:
        return self._route

    def generate(self, prompt: str) -> str:
        if self._route.sequential:
            with _lock_for(self._route):
                return self._execute(prompt)
        return self._execute(prompt)

    def test_connection(self) -> bool:
        try:
            self.generate(CONNECTION_PROBE)
        except GenerationError as exc:
            logger.error("LLM connection test failed route=%s: %s", self._route.name, exc)
            return False
        return True

    def _execute(self, prompt: str) -> str:
        cfg = self._route
        preview = _preview(prompt)
        logger.info(
            "LLM request start route=%s provider=%s model=%s timeout=%.1fs preview=%s",
            cfg.name,
            self.provider,
            cfg.model,
            cfg.timeout_s,
            preview,
        )
        payload = self._payload(prompt)
        headers = self._headers()
        try:
            response, close_cb = _post(cfg.url(), payload, headers, cfg.timeout_s, self._client)
        except httpx.TimeoutException as exc:
            logger.error("LLM timeout after %.1fs route=%s", cfg.timeout_s, cfg.name)
            raise GenerationError(f"LLM request timed out after {cfg.timeout_s}s") from exc
        except Exception as exc:  # noqa: BLE001
            logger.error("LLM transport failure: %s", exc)
            raise GenerationError("LLM transport failed") from exc
        try:
            if response.status_code >= 400:
                logger.error("LLM error status: %s", response.status_code)
                raise GenerationError(f"LLM returned status {response.status_code}")
            try:
                data = response.json()
            except Exception as exc:  # noqa: BLE001
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise GenerationError("LLM payload was not JSON") from exc
            content = self._extract(data)
        finally:
            _close_safely(close_cb)
        logger.info("LLM request done route=%s model=%s chars=%d", cfg.name, cfg.model, len(content))
        return content

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._route.api_key_env:
            api_key = os.getenv(self._route.api_key_env)
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
        headers.update(self._route.extra_headers)
        return headers

    def _payload(self, prompt: str) -> Dict[str, Any]:  # pragma: no cover - overridden
        raise NotImplementedError

    def _extract(self, data: Any) -> str:  # pragma: no cover - overridden
        raise NotImplementedError


class OllamaGateway(HttpCompletionGateway):  # Ollama /api/generate
    provider = "ollama"

    def _payload(self, prompt: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"model": self._route.model, "prompt": prompt, "stream": False}
        if self._route.options:
            payload["options"] = dict(self._route.options)
        return payload

    def _extract(self, data: Any) -> str:
        if isinstance(data, dict) and isinstance(data.get("response"), str):
            return data["response"]
        raise GenerationError("LLM response missing content")


class ChatCompletionsGateway(HttpCompletionGateway):  # OpenAI-compatible /chat/completions
    provider = "chat_completions"

    def _payload(self, prompt: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self._route.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        payload.update(self._route.options)
        return payload

    def _extract(self, data: Any) -> str:
        return _extract_content(data)


register_provider(OllamaGateway.provider, OllamaGateway)
register_provider(ChatCompletionsGateway.provider, ChatCompletionsGateway)


def build_gateway(route: LlmRoute, *, client: Optional[HttpClient] = None) -> CompletionGateway:  # Instantiate the provider named by the route
    factory = get_provider(route.provider)
    return factory(route, client=client)


def runnable(gateway: CompletionGateway) -> RunnableLambda:  # Provide runnable interface for LangChain pipelines
    def _invoke(prompt: Any) -> str:
        if hasattr(prompt, "to_string"):
            prompt = prompt.to_string()
        if not isinstance(prompt, str):
            raise TypeError("Completion runnable expects a prompt string")
        return gateway.generate(prompt)

    return RunnableLambda(_invoke)


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _preview(prompt: str) -> str:  # Build preview string for logging
    for line in prompt.strip().splitlines():
        if line.strip():
            text = line.strip()
            return text if len(text) <= 120 else text[:117] + "..."
    return ""


def _extract_content(data: Any) -> str:  # Extract message content from chat completion response
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
        if isinstance(data.get("content"), str):
            return data["content"]
    raise GenerationError("LLM response missing content")
