"""
Diagnostic subsystem: positioned messages, structured failures and
suggestions.
"""

from __future__ import annotations

from .context import ParsingContext
from .errors import BackupStateError, CodeCheckError, ParserEOFError, ParserError, ScanError
from .message import CodeCheckMessage
from .scopes import ScopeFailure, scoped_message
from .suggest import (
    SUGGESTION_DISTANCE,
    create_help_message,
    create_help_message_with_scope,
    levenshtein,
    similar_terms,
)

__all__ = [
    "ParsingContext",
    "CodeCheckMessage",
    "CodeCheckError",
    "ScanError",
    "ParserError",
    "ParserEOFError",
    "BackupStateError",
    "ScopeFailure",
    "scoped_message",
    "SUGGESTION_DISTANCE",
    "create_help_message",
    "create_help_message_with_scope",
    "levenshtein",
    "similar_terms",
]
