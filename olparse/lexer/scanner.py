"""
Hand-written scanner for the service-oriented language.

Reads its input line by line, drives the state machine from ``states`` and
keeps every line it has read, so diagnostics can show the offending source
text without consuming further input.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO, Iterator, List, Union

from ..diagnostics.context import ParsingContext
from ..diagnostics.errors import ScanError
from ..diagnostics.message import CodeCheckMessage
from .states import END, MalformedEscape, ScanState, transition
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

Stream = Union[IO[bytes], IO[str]]

_COMMENT_STATES = frozenset({ScanState.BLOCK_COMMENT, ScanState.BLOCK_COMMENT_STAR})


class Scanner:
    """
    Converts a character stream into a lazy sequence of tokens.

    Not reentrant: one scanner serves exactly one parse.
    """

    def __init__(self, stream: Stream, source_name: str, *, newline_tokens: bool = False):
        """
        Args:
            stream: Binary (decoded as UTF-8) or text stream
            source_name: Name used in diagnostics
            newline_tokens: Emit NEWLINE tokens for layout-sensitive grammars
        """
        self._stream = stream
        self._source_name = source_name
        self._newline_tokens = newline_tokens

        # Every line read so far, trailing newline kept
        self._lines: List[str] = []
        self._text = ""
        self._pos = 0
        self._line = 1
        self._exhausted = False

        # Position of the last returned token
        self.token_line = 1
        self.token_column = 0
        # A line break was skipped right before the last returned token
        self.met_newline = False

    @classmethod
    def from_string(cls, text: str, source_name: str = "<string>", **kwargs) -> "Scanner":
        return cls(io.StringIO(text), source_name, **kwargs)

    @classmethod
    def from_path(cls, path: Path, **kwargs) -> "Scanner":
        path = Path(path)
        return cls(io.BytesIO(path.read_bytes()), str(path), **kwargs)

    # ---------------------------------------------------------------- accessors

    def line(self) -> int:
        """Line of the next unread character (1-based)."""
        return self._line

    def source_name(self) -> str:
        return self._source_name

    def all_code_lines(self) -> List[str]:
        """All lines read so far."""
        return list(self._lines)

    def code_line(self, number: int) -> str:
        """
        Raw text of a line that has already been read.

        Raises:
            IndexError: If the line has not been read (or does not exist)
        """
        if number < 1 or number > len(self._lines):
            raise IndexError(f"line {number} is not available in {self._source_name}")
        return self._lines[number - 1]

    def code_lines(self, start: int, end: int) -> List[str]:
        """Lines ``start..end`` that are available; missing ones are skipped."""
        start = max(start, 1)
        return self._lines[start - 1:end]

    # ---------------------------------------------------------------- scanning

    def get_token(self) -> Token:
        """
        Scans the next token.

        Returns:
            Next token; EOF once the input is exhausted (and on every later call)

        Raises:
            ScanError: On a malformed escape sequence inside a string literal
                or a line of binary input that is not valid UTF-8
        """
        state = ScanState.START
        lexeme = ""
        self.met_newline = False

        while True:
            ch = self._peek()

            if state is ScanState.START:
                if ch == "\n":
                    self.met_newline = True
                    if self._newline_tokens:
                        self._mark_token_start()
                        self._advance()
                        return Token(TokenType.NEWLINE)
                elif ch == END or ch not in " \t\r":
                    self._mark_token_start()

            try:
                step = transition(state, ch, lexeme)
            except MalformedEscape as e:
                raise self._scan_error(str(e))

            if step.consume:
                self._advance()
                if ch == "\n" and state in _COMMENT_STATES:
                    self.met_newline = True

            if step.emit is not None:
                return step.emit

            if step.state is ScanState.START:
                lexeme = ""
                if self._newline_tokens and self.met_newline and state in _COMMENT_STATES:
                    # A block comment spanning lines stands for a line break
                    self._mark_token_start()
                    return Token(TokenType.NEWLINE)
            else:
                lexeme += step.append
            state = step.state

    def read_line_after_error(self) -> None:
        """
        Discards the rest of the current line.

        Used after a scan error so scanning resumes on the next line.
        """
        skipped = 0
        while True:
            ch = self._peek()
            if ch == END:
                break
            self._advance()
            skipped += 1
            if ch == "\n":
                break
        logger.debug(f"Skipped {skipped} characters after error in {self._source_name}")

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including EOF."""
        while True:
            token = self.get_token()
            yield token
            if token.is_eof():
                return

    # ---------------------------------------------------------------- internals

    def _peek(self) -> str:
        if self._pos >= len(self._text):
            if not self._read_line():
                return END
        return self._text[self._pos]

    def _advance(self) -> None:
        ch = self._text[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1

    def _read_line(self) -> bool:
        if self._exhausted:
            return False
        raw = self._stream.readline()
        if not raw:
            self._exhausted = True
            return False
        if isinstance(raw, bytes):
            return self._load_bytes(raw)
        self._load(raw)
        return True

    def _load(self, text: str) -> None:
        self._lines.append(text)
        self._text = text
        self._pos = 0

    def _load_bytes(self, raw: bytes) -> bool:
        try:
            self._load(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            # Keep the line readable for the excerpt and stop at the bad byte;
            # read_line_after_error() skips the rest of it
            self._load(raw.decode("utf-8", errors="replace"))
            self._pos = len(raw[:e.start].decode("utf-8", errors="replace"))
            raise self._scan_error(f"invalid UTF-8 byte 0x{raw[e.start]:02x} at byte offset {e.start}") from e
        return True

    def _mark_token_start(self) -> None:
        self.token_line = self._line
        self.token_column = self._pos if self._pos < len(self._text) else len(self._text.rstrip("\n"))

    def _scan_error(self, description: str) -> ScanError:
        line_text = self._text if self._lines else ""
        context = ParsingContext(
            source=self._source_name,
            start_line=self._line,
            end_line=self._line,
            column=self._pos,
            code=(line_text,) if line_text else (),
        )
        logger.debug(f"Scan error at {self._source_name}:{self._line}:{self._pos}: {description}")
        return ScanError(CodeCheckMessage.without_help(context, description))


def tokenize(text: str, source_name: str = "<string>") -> List[Token]:
    """
    Scans a whole string.

    Returns:
        Token list ending with EOF
    """
    return list(Scanner.from_string(text, source_name))


__all__ = ["Scanner", "tokenize"]
