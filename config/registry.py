"""In-memory registry of completion gateway providers."""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}


def register_provider(key: str, factory: Callable[..., Any]) -> None:
    """Bind a gateway factory to a provider name."""
    _REGISTRY[key] = factory


def get_provider(key: str) -> Callable[..., Any]:
    """Retrieve a gateway factory from the registry.

    Raises:
        KeyError: If no factory has been registered for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Provider not bound in registry: {key}")
    return _REGISTRY[key]


def registered_providers() -> list[str]:
    return sorted(_REGISTRY)
