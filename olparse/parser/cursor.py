"""
Token cursor over a scanner.

Holds the current token, a lookahead queue of tokens that were read but not
consumed yet, and at most one backup session recording the tokens advanced
past so a speculative parse can be rewound.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional

from ..diagnostics.errors import BackupStateError
from ..lexer.scanner import Scanner
from ..lexer.tokens import Token, TokenType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedToken:
    """Token plus the position it was scanned at."""
    token: Token
    line: int
    column: int
    met_newline: bool = False


@dataclass
class BackupSession:
    """
    Active backup: tokens advanced past since the session started.

    Attributes:
        tokens: Captured tokens, the one current at start first
        guarded: Opened by a speculation boundary that closes it itself
    """
    tokens: List[PositionedToken] = field(default_factory=list)
    guarded: bool = False


class TokenCursor:
    """
    Single-token lookahead cursor with injection and rollback.

    Not reentrant: owned by exactly one parser for one parse.
    """

    def __init__(self, scanner: Scanner):
        self.scanner = scanner
        self.current: Optional[PositionedToken] = None
        self.met_newline = False
        self._lookahead: Deque[PositionedToken] = deque()
        self._backup: Optional[BackupSession] = None

    # ---------------------------------------------------------------- reading

    def _read(self) -> PositionedToken:
        if self._lookahead:
            return self._lookahead.popleft()
        token = self.scanner.get_token()
        return PositionedToken(
            token=token,
            line=self.scanner.token_line,
            column=self.scanner.token_column,
            met_newline=self.scanner.met_newline,
        )

    def advance(self) -> PositionedToken:
        """
        Moves to the next token.

        NEWLINE tokens are swallowed; crossing one (or a line break skipped by
        the scanner) sets ``met_newline``.
        """
        self.met_newline = False
        while True:
            entry = self._read()
            self.met_newline = self.met_newline or entry.met_newline
            if entry.token.is_not(TokenType.NEWLINE):
                break
            self.met_newline = True

        self.current = entry
        if self._backup is not None:
            self._backup.tokens.append(entry)
        return entry

    # ---------------------------------------------------------------- injection

    def inject(self, entries: Iterable[PositionedToken]) -> None:
        """Queues entries, in order, ahead of everything already queued."""
        self._lookahead.extendleft(reversed(list(entries)))

    def pending(self) -> List[PositionedToken]:
        """Snapshot of the lookahead queue."""
        return list(self._lookahead)

    # ---------------------------------------------------------------- backup

    @property
    def backup_active(self) -> bool:
        return self._backup is not None

    @property
    def backup_guarded(self) -> bool:
        return self._backup is not None and self._backup.guarded

    def start_backup(self, *, guarded: bool = False) -> None:
        """
        Starts recording advanced tokens.

        Raises:
            BackupStateError: If a session is already active
        """
        if self._backup is not None:
            raise BackupStateError("A backup session is already active")
        session = BackupSession(guarded=guarded)
        if self.current is not None:
            session.tokens.append(self.current)
        self._backup = session
        logger.debug(f"Backup started at {self._describe(self.current)}")

    def recover_backup(self) -> None:
        """
        Replays the recorded tokens: the token current when the session
        started becomes current again.

        Raises:
            BackupStateError: If no session is active
        """
        session = self._close("recover")
        if session.tokens:
            self.inject(session.tokens)
            self.advance()
        logger.debug(f"Backup recovered, {len(session.tokens)} tokens replayed")

    def discard_backup(self) -> None:
        """
        Ends the session keeping the consumed tokens.

        Raises:
            BackupStateError: If no session is active
        """
        session = self._close("discard")
        logger.debug(f"Backup discarded, {len(session.tokens)} tokens committed")

    def _close(self, action: str) -> BackupSession:
        if self._backup is None:
            raise BackupStateError(f"Cannot {action} backup: no backup session is active")
        session, self._backup = self._backup, None
        return session

    @staticmethod
    def _describe(entry: Optional[PositionedToken]) -> str:
        if entry is None:
            return "<start>"
        return f"{entry.token!r} {entry.line}:{entry.column}"


__all__ = ["TokenCursor", "PositionedToken", "BackupSession"]
