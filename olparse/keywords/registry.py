"""
Keyword registry: vocabulary per grammar scope.

Scope-aware diagnostics ask the registry which terms are valid inside the
construct that failed to parse. The vocabulary is read from the packaged
``keywords.yaml``; an overlay file (explicit path or ``OLPARSE_KEYWORDS``)
can extend it.
"""

from __future__ import annotations

import enum
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import OLUserError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

ENV_OVERLAY = "OLPARSE_KEYWORDS"
_DEFAULTS_RESOURCE = "keywords.yaml"


class Scope(str, enum.Enum):
    """Grammar constructs with a dedicated vocabulary."""
    OUTER = "outer"
    SERVICE = "service"
    INPUT_PORT = "inputPort"
    OUTPUT_PORT = "outputPort"
    INTERFACE = "interface"
    IMPORT = "import"
    EXECUTION = "execution"
    EMBEDDED = "embedded"
    COURIER = "courier"
    TYPE = "type"


ScopeName = Union[Scope, str]


class KeywordConfigError(OLUserError):
    """Keyword file is not valid."""
    pass


def scope_name(scope: ScopeName) -> str:
    return scope.value if isinstance(scope, Scope) else str(scope)


class KeywordRegistry:
    """Ordered vocabularies keyed by scope name."""

    def __init__(self, scopes: Optional[Dict[str, List[str]]] = None):
        self._scopes: Dict[str, List[str]] = {}
        for name, terms in (scopes or {}).items():
            self.register(name, terms)

    def register(self, scope: ScopeName, terms: List[str]) -> None:
        """Appends terms to a scope, keeping order and skipping duplicates."""
        bucket = self._scopes.setdefault(scope_name(scope), [])
        for term in terms:
            if term not in bucket:
                bucket.append(term)

    def keywords_for_scope(self, scope: ScopeName) -> List[str]:
        """Vocabulary of a scope; empty for unknown scopes."""
        return list(self._scopes.get(scope_name(scope), []))

    def scopes(self) -> List[str]:
        return list(self._scopes)

    def merge(self, other: "KeywordRegistry") -> "KeywordRegistry":
        """New registry: this vocabulary extended with ``other``'s."""
        merged = KeywordRegistry(self.as_dict())
        for name, terms in other.as_dict().items():
            merged.register(name, terms)
        return merged

    def as_dict(self) -> Dict[str, List[str]]:
        return {name: list(terms) for name, terms in self._scopes.items()}

    @classmethod
    def from_dict(cls, raw: dict, origin: str = "<dict>") -> "KeywordRegistry":
        scopes = raw.get("scopes", {})
        if not isinstance(scopes, dict):
            raise KeywordConfigError(f"'scopes' must be a mapping in {origin}")
        parsed: Dict[str, List[str]] = {}
        for name, terms in scopes.items():
            if terms is None:
                terms = []
            if not isinstance(terms, list) or not all(isinstance(t, str) for t in terms):
                raise KeywordConfigError(f"Scope '{name}' must be a list of strings in {origin}")
            parsed[str(name)] = terms
        return cls(parsed)


def _read_yaml_map(text: str, origin: str) -> dict:
    """Parses YAML text and checks that it is a mapping."""
    try:
        raw = _yaml.load(text) or {}
    except YAMLError as e:
        raise KeywordConfigError(f"Invalid YAML in {origin}: {e}") from e
    if not isinstance(raw, dict):
        raise KeywordConfigError(f"YAML must be a mapping: {origin}")
    return raw


def _load_defaults() -> KeywordRegistry:
    text = resources.files(__package__).joinpath(_DEFAULTS_RESOURCE).read_text(encoding="utf-8")
    return KeywordRegistry.from_dict(_read_yaml_map(text, _DEFAULTS_RESOURCE), _DEFAULTS_RESOURCE)


def _load_overlay(path: Path) -> KeywordRegistry:
    if not path.is_file():
        raise KeywordConfigError(f"Keyword file not found: {path}")
    raw = _read_yaml_map(path.read_text(encoding="utf-8"), str(path))
    return KeywordRegistry.from_dict(raw, str(path))


def load_keywords(path: Optional[Path] = None) -> KeywordRegistry:
    """
    Loads the keyword vocabulary.

    Args:
        path: Overlay file; defaults to $OLPARSE_KEYWORDS when set

    Returns:
        Packaged vocabulary extended with the overlay

    Raises:
        KeywordConfigError: If a file is missing or malformed
    """
    registry = _load_defaults()
    logger.debug(f"Loaded packaged keywords ({len(registry.scopes())} scopes)")

    if path is None:
        env_path = os.environ.get(ENV_OVERLAY)
        path = Path(env_path) if env_path else None

    if path is not None:
        overlay = _load_overlay(Path(path))
        registry = registry.merge(overlay)
        logger.debug(f"Merged keyword overlay {path} ({len(overlay.scopes())} scopes)")

    return registry


_REGISTRY: Optional[KeywordRegistry] = None


def get_registry() -> KeywordRegistry:
    """Process-wide registry, loaded on first use."""
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = load_keywords()
    return _REGISTRY


def reset_registry() -> None:
    """Forgets the cached registry (the next get_registry() reloads it)."""
    global _REGISTRY
    _REGISTRY = None


__all__ = [
    "Scope",
    "ScopeName",
    "KeywordRegistry",
    "KeywordConfigError",
    "load_keywords",
    "get_registry",
    "reset_registry",
    "scope_name",
]
