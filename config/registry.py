"""In-memory model registry for external scorer bindings."""
from typing import Any, Callable, Dict

_REGISTRY: Dict[str, Callable[..., Any]] = {}


def bind_model(key: str, fn: Callable[..., Any]) -> None:
    """Bind a callable implementation to a registry key."""
    _REGISTRY[key] = fn


def unbind_model(key: str) -> None:
    _REGISTRY.pop(key, None)


def has_model(key: str) -> bool:
    return key in _REGISTRY


def get_model(key: str) -> Callable[..., Any]:
    """Retrieve a callable from the registry.

    Raises:
        KeyError: If no callable has been bound for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Model not bound in registry: {key}")
    return _REGISTRY[key]


SCORER_KEY = "models.answer_scorer"
