"""
Structured failures of the front end.

Scan-time and parse-time failures are user-facing and always carry a
CodeCheckMessage. Misuse of the backup mechanism is a programming error.
"""

from __future__ import annotations

from ..errors import OLUserError
from .message import CodeCheckMessage


class CodeCheckError(OLUserError):
    """Failure that carries a positioned diagnostic."""

    def __init__(self, message: CodeCheckMessage):
        super().__init__(message.render())
        self.message = message

    @property
    def context(self):
        return self.message.context


class ScanError(CodeCheckError):
    """Malformed input detected while scanning."""
    pass


class ParserError(CodeCheckError):
    """Current token does not fit the grammar."""
    pass


class ParserEOFError(ParserError):
    """End of file reached where more input was required."""
    pass


class BackupStateError(RuntimeError):
    """Backup session started twice or used out of order."""
    pass


__all__ = [
    "CodeCheckError",
    "ScanError",
    "ParserError",
    "ParserEOFError",
    "BackupStateError",
]
