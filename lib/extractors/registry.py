"""
Extractor registry - maps a fact type to the function that extracts it.
"""

from typing import Any, Callable, Dict, List, Optional

# content, url -> extracted value or None
Extractor = Callable[[str, str], Optional[Any]]

# Global registry of extractors, keyed by fact type
_REGISTRY: Dict[str, Extractor] = {}


def register(fact: str) -> Callable[[Extractor], Extractor]:
    """
    Decorator to register an extractor for a fact type.

    Usage:
        @register("email")
        def extract_email(content: str, url: str = "") -> Optional[str]:
            ...
    """

    def decorator(fn: Extractor) -> Extractor:
        if fact in _REGISTRY:
            raise ValueError(f"Extractor '{fact}' is already registered")
        _REGISTRY[fact] = fn
        return fn

    return decorator


def get_extractor(fact: str) -> Extractor:
    """
    Get the extractor for a fact type.

    Raises:
        ValueError: If no extractor is registered for the fact type
    """
    if fact not in _REGISTRY:
        available = ", ".join(_REGISTRY.keys()) or "(none)"
        raise ValueError(f"Unknown extractor: '{fact}'. Available: {available}")
    return _REGISTRY[fact]


def list_extractors() -> List[str]:
    """List all registered fact types."""
    return list(_REGISTRY.keys())


def is_registered(fact: str) -> bool:
    """Check if an extractor is registered for a fact type."""
    return fact in _REGISTRY
