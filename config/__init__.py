"""Configuration package for the screening interview services."""
from .llm import AppConfig, FlowSettings, LlmRoute, load_config, resolve_route
from .registry import get_provider, register_provider, registered_providers
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "FlowSettings",
    "LlmRoute",
    "load_config",
    "resolve_route",
    "get_provider",
    "register_provider",
    "registered_providers",
    "Settings",
    "settings",
]
