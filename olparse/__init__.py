"""
olparse: scanner, parsing support layer and diagnostics for a
service-oriented language.
"""

from __future__ import annotations

from .diagnostics import CodeCheckMessage, ParserError, ParsingContext, ScanError
from .errors import OLUserError
from .keywords import KeywordRegistry, Scope, get_registry
from .lexer import Scanner, Token, TokenType, tokenize
from .parser import BaseParser

__all__ = [
    "BaseParser",
    "CodeCheckMessage",
    "KeywordRegistry",
    "OLUserError",
    "ParserError",
    "ParsingContext",
    "ScanError",
    "Scanner",
    "Scope",
    "Token",
    "TokenType",
    "get_registry",
    "tokenize",
]
