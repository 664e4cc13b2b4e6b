"""
Parsing support layer: token cursor with lookahead injection and backup,
plus the BaseParser combinators grammar productions are written with.
"""

from __future__ import annotations

from .base import BaseParser
from .cursor import BackupSession, PositionedToken, TokenCursor

__all__ = ["BaseParser", "TokenCursor", "PositionedToken", "BackupSession"]
