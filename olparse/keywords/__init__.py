from __future__ import annotations

from .registry import (
    KeywordConfigError,
    KeywordRegistry,
    Scope,
    get_registry,
    load_keywords,
    reset_registry,
)

__all__ = [
    "KeywordConfigError",
    "KeywordRegistry",
    "Scope",
    "get_registry",
    "load_keywords",
    "reset_registry",
]
