"""
Lexical layer: token types, the scan-state machine and the scanner.
"""

from __future__ import annotations

from .scanner import Scanner, tokenize
from .states import ScanState
from .tokens import KEYWORDS, Token, TokenType, UNRESERVED_KEYWORDS

__all__ = [
    "Scanner",
    "ScanState",
    "Token",
    "TokenType",
    "KEYWORDS",
    "UNRESERVED_KEYWORDS",
    "tokenize",
]
