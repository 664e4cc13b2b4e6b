"""
Skeleton of a recursive-descent parser built on the Scanner.

Grammar productions subclass BaseParser and use its token cursor, the
eat/assert combinators and backtracking. Every failed assertion raises a
ParserError carrying a positioned diagnostic.

The parsing process is not reentrant.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..diagnostics.context import ParsingContext
from ..diagnostics.errors import ParserEOFError, ParserError, ScanError
from ..diagnostics.message import CodeCheckMessage
from ..diagnostics.scopes import ScopeFailure, scoped_message
from ..diagnostics.suggest import create_help_message, create_help_message_with_scope
from ..keywords.registry import KeywordRegistry, ScopeName, get_registry
from ..keywords.registry import scope_name as resolve_scope
from ..lexer.scanner import Scanner
from ..lexer.tokens import Token, TokenType
from .cursor import PositionedToken, TokenCursor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseParser:
    """
    Token cursor, consumption combinators and diagnostic factories.

    The current token is undefined until the first call to next_token().
    """

    def __init__(self, scanner: Scanner, *, keywords: Optional[KeywordRegistry] = None):
        """
        Args:
            scanner: Scanner owned by this parser for the whole parse
            keywords: Scope vocabularies for diagnostics (process registry by default)
        """
        self._scanner = scanner
        self._cursor = TokenCursor(scanner)
        self._keywords = keywords
        self._start_line: Optional[int] = None
        self._end_line: Optional[int] = None

    # ---------------------------------------------------------------- cursor

    @property
    def token(self) -> Optional[Token]:
        """Current token."""
        return self._cursor.current.token if self._cursor.current is not None else None

    def scanner(self) -> Scanner:
        return self._scanner

    @property
    def keywords(self) -> KeywordRegistry:
        if self._keywords is None:
            self._keywords = get_registry()
        return self._keywords

    def next_token(self) -> Token:
        """
        Advances to the next token, skipping NEWLINE tokens.

        Raises:
            ScanError: On malformed input; a manual backup session is discarded first
        """
        try:
            return self._cursor.advance().token
        except ScanError:
            self._close_unguarded_backup()
            raise

    def next_token_not_eof(self) -> Token:
        """
        Advances and fails if the new token is EOF.

        Raises:
            ParserEOFError: At end of file
        """
        token = self.next_token()
        if token.is_eof():
            context = self.get_context_during_error()
            self._close_unguarded_backup()
            raise ParserEOFError(CodeCheckMessage.without_help(context, "Unexpected end of file"))
        return token

    def has_met_newline(self) -> bool:
        """A line break was crossed by the last next_token()."""
        return self._cursor.met_newline

    # ---------------------------------------------------------------- injection

    def add_token(self, token: Token) -> None:
        """Queues ``token`` to be read before anything else."""
        self.add_tokens([token])

    def add_tokens(self, tokens: Iterable[Token]) -> None:
        """Queues ``tokens``, in order, to be read before anything else."""
        line, column = self._current_position()
        self._cursor.inject(PositionedToken(token, line, column) for token in tokens)

    def prepend_token(self, prefix: Token) -> None:
        """
        Puts ``prefix`` in front of the current token.

        After the next next_token() the current token is ``prefix``, then the
        token that is current now.
        """
        entries = [PositionedToken(prefix, *self._current_position())]
        if self._cursor.current is not None:
            entries.append(self._cursor.current)
        self._cursor.inject(entries)

    def pending_tokens(self) -> List[Token]:
        """Tokens queued ahead of the scanner."""
        return [entry.token for entry in self._cursor.pending()]

    # ---------------------------------------------------------------- backup

    def start_backup(self) -> None:
        """Starts recording tokens for a later recover_backup()."""
        self._cursor.start_backup()

    def recover_backup(self) -> None:
        """Rewinds to the token that was current when the backup started."""
        self._cursor.recover_backup()

    def discard_backup(self) -> None:
        """Commits to the tokens consumed since the backup started."""
        self._cursor.discard_backup()

    def attempt(self, production: Callable[[], T]) -> Optional[T]:
        """
        Runs ``production`` speculatively.

        Returns:
            Its result; None if it raised ParserError, in which case the
            cursor is rewound to where it was before the call
        """
        self._cursor.start_backup(guarded=True)
        try:
            result = production()
        except ParserError as e:
            self._cursor.recover_backup()
            logger.debug(f"Speculative parse failed, rewound: {e.message.description}")
            return None
        except BaseException:
            self._cursor.discard_backup()
            raise
        self._cursor.discard_backup()
        return result

    # ---------------------------------------------------------------- combinators

    def eat(
        self,
        token_type: TokenType,
        error_message: str,
        *,
        scope_name: Optional[str] = None,
        scope: Optional[ScopeName] = None,
    ) -> Token:
        """
        Asserts the current token type, then advances.

        Returns:
            The token that was eaten
        """
        eaten = self.assert_token(token_type, error_message, scope_name=scope_name, scope=scope)
        self.next_token()
        return eaten

    def maybe_eat(self, *token_types: TokenType) -> bool:
        """Advances past the current token if it is one of ``token_types``."""
        current = self.token
        if current is not None and current.type in token_types:
            self.next_token()
            return True
        return False

    def eat_keyword(self, keyword: str, error_message: str) -> Token:
        """Eats an identifier whose content is exactly ``keyword``."""
        eaten = self.assert_token(TokenType.ID, error_message)
        if not eaten.is_keyword(keyword):
            self.throw_exception(error_message, expected=[keyword])
        self.next_token()
        return eaten

    def eat_identifier(self, error_message: str) -> Token:
        """Eats an identifier or an unreserved keyword."""
        eaten = self.assert_identifier(error_message)
        self.next_token()
        return eaten

    def assert_identifier(self, error_message: str) -> Token:
        """
        Raises:
            ParserError: If the current token is not an identifier or an unreserved keyword
        """
        current = self.token
        if current is None or not current.is_identifier():
            self.throw_exception(error_message)
        return current

    def assert_token(
        self,
        token_type: TokenType,
        error_message: str,
        *,
        scope_name: Optional[str] = None,
        scope: Optional[ScopeName] = None,
    ) -> Token:
        """
        Checks the current token type without advancing.

        Raises:
            ParserError: If the type differs
        """
        current = self.token
        if current is None or current.is_not(token_type):
            if scope is not None:
                self.throw_exception_with_scope(error_message, scope_name, scope)
            expected = [] if token_type.is_variable else [token_type.value]
            self.throw_exception(error_message, expected=expected)
        return current

    # ---------------------------------------------------------------- context

    def line(self) -> int:
        return self._scanner.line()

    def source_name(self) -> str:
        return self._scanner.source_name()

    def start_line(self) -> int:
        """First line of the construct being parsed (defaults to the current token's)."""
        if self._start_line is not None:
            return self._start_line
        return self._current_position()[0]

    def end_line(self) -> int:
        """Last line of the construct being parsed (defaults to the current token's)."""
        if self._end_line is not None:
            return self._end_line
        return self._current_position()[0]

    def set_start_line(self, line: Optional[int]) -> None:
        self._start_line = line

    def set_end_line(self, line: Optional[int]) -> None:
        self._end_line = line

    def get_context(self) -> ParsingContext:
        """Context of the current token."""
        return self.get_context_during_error()

    def get_context_during_error(self) -> ParsingContext:
        """
        Context of the current token with its source line.

        At end of file the context points just past the last non-empty line.
        When the line cannot be read the context carries no code.
        """
        line, column = self._current_position()
        current = self.token

        if current is not None and current.is_eof():
            lines = self._scanner.all_code_lines()
            for number in range(len(lines), 0, -1):
                text = lines[number - 1]
                if text.strip():
                    return ParsingContext(
                        self.source_name(), number, number, len(text.rstrip("\n")), (text,)
                    )
            return ParsingContext(self.source_name(), line, line, 0)

        try:
            code = (self._scanner.code_line(line),)
        except IndexError:
            logger.debug(f"No source line {line} available for diagnostic")
            code = ()
        return ParsingContext(self.source_name(), line, line, column, code)

    # ---------------------------------------------------------------- diagnostics

    def create_help_message(
        self,
        context: ParsingContext,
        token_content: str,
        possible_tokens: Sequence[str],
    ) -> Optional[str]:
        return create_help_message(context, token_content, possible_tokens)

    def create_help_message_with_scope(
        self,
        context: ParsingContext,
        token_content: Optional[str],
        scope: ScopeName,
    ) -> str:
        return create_help_message_with_scope(
            context, token_content, self.keywords.keywords_for_scope(scope)
        )

    def throw_exception(self, message: str, expected: Sequence[str] = ()) -> None:
        """
        Raises a ParserError for the current token.

        Args:
            message: What the grammar expected
            expected: Terms valid at this point, used for suggestions

        Raises:
            ParserError: Always
        """
        context = self.get_context_during_error()
        content = self.token.content if self.token is not None else ""

        if content:
            if message:
                description = f"{message}: {content}"
            else:
                description = f"{message}. Found term: {content}"
            help_text = self.create_help_message(context, content, expected)
            diagnostic = CodeCheckMessage.with_help(context, description, help_text)
        else:
            # Point at the character before the token, not inside it
            context = context.with_column(max(context.column - 1, 0))
            diagnostic = CodeCheckMessage.without_help(context, message)

        self._close_unguarded_backup()
        raise ParserError(diagnostic)

    def throw_exception_with_scope(
        self,
        message: str,
        scope_name: Optional[str],
        scope: ScopeName,
    ) -> None:
        """
        Raises a ParserError tailored to the construct being parsed.

        Args:
            message: What the grammar expected
            scope_name: Name of the construct instance (e.g. the port name)
            scope: Kind of construct, e.g. ``Scope.INPUT_PORT``

        Raises:
            ParserError: Always
        """
        context = self.get_context_during_error()
        start, end = self.start_line(), self.end_line()
        failure = ScopeFailure(
            context=context,
            message=message,
            token_content=self.token.content if self.token is not None else "",
            scope_name=scope_name,
            scope_start=start,
            scope_end=end,
            scope_lines=tuple(self._scanner.code_lines(start, end)),
            vocabulary=tuple(self.keywords.keywords_for_scope(scope)),
        )
        diagnostic = scoped_message(failure, resolve_scope(scope))

        self._close_unguarded_backup()
        raise ParserError(diagnostic)

    def throw_exception_from(self, exception: Exception) -> None:
        """Raises a ParserError using the message of another exception."""
        diagnostic = CodeCheckMessage.without_help(self.get_context(), str(exception))
        self._close_unguarded_backup()
        raise ParserError(diagnostic) from exception

    # ---------------------------------------------------------------- internals

    def _current_position(self) -> tuple[int, int]:
        current = self._cursor.current
        if current is None:
            return self._scanner.line(), 0
        return current.line, current.column

    def _close_unguarded_backup(self) -> None:
        # A session opened by attempt() is rewound there; any other one must
        # not survive the diagnostic.
        if self._cursor.backup_active and not self._cursor.backup_guarded:
            logger.debug("Discarding open backup before raising a diagnostic")
            self._cursor.discard_backup()


__all__ = ["BaseParser"]
