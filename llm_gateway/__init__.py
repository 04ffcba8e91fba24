"""Completion gateway package."""
from .llm_gateway import (
    ChatCompletionsGateway,
    CompletionGateway,
    GenerationError,
    HttpClient,
    HttpCompletionGateway,
    HttpResponse,
    OllamaGateway,
    build_gateway,
    runnable,
)

__all__ = [
    "ChatCompletionsGateway",
    "CompletionGateway",
    "GenerationError",
    "HttpClient",
    "HttpCompletionGateway",
    "HttpResponse",
    "OllamaGateway",
    "build_gateway",
    "runnable",
]
