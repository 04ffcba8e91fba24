"""LLM route and interview flow configuration loaded from JSON."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, model_validator

ProviderName = Literal["ollama", "chat_completions"]


class LlmRoute(BaseModel):
    """LLM endpoint configuration."""

    name: str
    provider: ProviderName = "chat_completions"
    base_url: str
    endpoint: Optional[str] = None
    model: str
    timeout_s: float = Field(default=60.0, ge=0.1)
    api_key_env: str | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)
    sequential: bool = False

    def url(self) -> str:
        if self.endpoint is not None:
            return f"{self.base_url.rstrip('/')}{self.endpoint}"
        default = "/api/generate" if self.provider == "ollama" else "/chat/completions"
        return f"{self.base_url.rstrip('/')}{default}"


class FlowSettings(BaseModel):
    """Interview pacing knobs."""

    question_target: int = Field(default=5, ge=1)
    context_window: int = Field(default=10, ge=1)
    typing_interval_s: float = Field(default=4.0, gt=0)


class AppConfig(BaseModel):
    """Application configuration root."""

    llm_routes: Dict[str, LlmRoute]
    active_route: str
    flow: FlowSettings = Field(default_factory=FlowSettings)

    @model_validator(mode="after")
    def _active_route_known(self) -> "AppConfig":
        if self.active_route not in self.llm_routes:
            raise ValueError(f"active_route '{self.active_route}' is not among llm_routes")
        return self


def load_config(path: Path) -> AppConfig:
    """Load configuration from disk."""

    data = Path(path).read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_route(cfg: AppConfig, route_id: Optional[str] = None) -> LlmRoute:
    """Return the requested route, defaulting to the active one."""

    key = route_id or cfg.active_route
    if key not in cfg.llm_routes:
        raise KeyError(f"Route '{key}' missing from configuration")
    return cfg.llm_routes[key]
