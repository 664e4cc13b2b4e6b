"""
Scan-state machine.

The scanner drives ``transition`` one character at a time. Each call looks
at the current state, the next unread character and the lexeme collected so
far, and answers with a ``Transition``: the next state, an optional token to
emit, whether the character is consumed and what to append to the lexeme.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional

from .tokens import KEYWORDS, Token, TokenType


# Marks the end of input in place of a character
END = ""


class ScanState(enum.Enum):
    START = "start"
    IDENTIFIER = "identifier"
    INTEGER = "integer"
    STRING = "string"
    STRING_ESCAPE = "string_escape"
    PLUS = "plus"
    EQUALS = "equals"
    LANGLE = "langle"
    RANGLE = "rangle"
    BANG = "bang"
    SLASH = "slash"
    MINUS = "minus"
    BLOCK_COMMENT = "block_comment"
    BLOCK_COMMENT_STAR = "block_comment_star"
    LINE_COMMENT = "line_comment"


@dataclass(frozen=True)
class Transition:
    state: ScanState
    emit: Optional[Token] = None
    consume: bool = True
    append: str = ""


class MalformedEscape(ValueError):
    """Backslash followed by a character that has no escape meaning."""

    def __init__(self, char: str):
        super().__init__("malformed string: bad \\ usage")
        self.char = char


SEPARATORS = frozenset(" \t\r\n")

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LSQUARE,
    "]": TokenType.RSQUARE,
    "{": TokenType.LCURLY,
    "}": TokenType.RCURLY,
    "*": TokenType.ASTERISK,
    "@": TokenType.AT,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ";": TokenType.SEQUENCE,
    "|": TokenType.PARALLEL,
}

# First character of a multi-character token -> state that finishes it
_OPENERS: Dict[str, ScanState] = {
    "+": ScanState.PLUS,
    "=": ScanState.EQUALS,
    "<": ScanState.LANGLE,
    ">": ScanState.RANGLE,
    "!": ScanState.BANG,
    "/": ScanState.SLASH,
    "-": ScanState.MINUS,
}

# Two-character operators: state -> (second char, long form, short form)
_PAIRS = {
    ScanState.PLUS: ("+", TokenType.CHOICE, TokenType.PLUS),
    ScanState.EQUALS: ("=", TokenType.EQUAL, TokenType.ASSIGN),
    ScanState.LANGLE: ("=", TokenType.MINOR_OR_EQUAL, TokenType.LANGLE),
    ScanState.RANGLE: ("=", TokenType.MAJOR_OR_EQUAL, TokenType.RANGLE),
    ScanState.BANG: ("=", TokenType.NOT_EQUAL, TokenType.NOT),
}

_ESCAPES = {"\\": "\\", "n": "\n", "t": "\t", '"': '"'}


def is_separator(ch: str) -> bool:
    return ch in SEPARATORS


def identifier_token(lexeme: str) -> Token:
    """Keyword for an exact lexeme match, generic identifier otherwise."""
    keyword = KEYWORDS.get(lexeme)
    if keyword is not None:
        return Token(keyword)
    return Token(TokenType.ID, lexeme)


def transition(state: ScanState, ch: str, lexeme: str) -> Transition:
    """
    One step of the scanner.

    Args:
        state: Current state
        ch: Next unread character, or END
        lexeme: Text collected for the token in progress

    Returns:
        Transition to apply

    Raises:
        MalformedEscape: On an unknown escape sequence inside a string
    """
    if state is ScanState.START:
        return _from_start(ch)

    if state is ScanState.IDENTIFIER:
        if ch != END and (ch.isalpha() or ch.isdecimal() or ch == "_"):
            return Transition(state, append=ch)
        return Transition(state, emit=identifier_token(lexeme), consume=False)

    if state is ScanState.INTEGER:
        if ch != END and ch.isdecimal():
            return Transition(state, append=ch)
        return Transition(state, emit=Token(TokenType.INT, lexeme), consume=False)

    if state is ScanState.MINUS:
        if ch != END and ch.isdecimal():
            return Transition(ScanState.INTEGER, append=ch)
        return Transition(state, emit=Token(TokenType.MINUS), consume=False)

    if state is ScanState.STRING:
        if ch == END:
            return Transition(state, emit=Token(TokenType.ERROR, '"' + lexeme), consume=False)
        if ch == '"':
            return Transition(state, emit=Token(TokenType.STRING, lexeme))
        if ch == "\\":
            return Transition(ScanState.STRING_ESCAPE)
        return Transition(state, append=ch)

    if state is ScanState.STRING_ESCAPE:
        if ch == END:
            return Transition(state, emit=Token(TokenType.ERROR, '"' + lexeme), consume=False)
        if ch not in _ESCAPES:
            raise MalformedEscape(ch)
        return Transition(ScanState.STRING, append=_ESCAPES[ch])

    if state in _PAIRS:
        second, long_form, short_form = _PAIRS[state]
        if ch == second:
            return Transition(state, emit=Token(long_form))
        return Transition(state, emit=Token(short_form), consume=False)

    if state is ScanState.SLASH:
        if ch == "*":
            return Transition(ScanState.BLOCK_COMMENT)
        if ch == "/":
            return Transition(ScanState.LINE_COMMENT)
        return Transition(state, emit=Token(TokenType.DIVIDE), consume=False)

    if state is ScanState.BLOCK_COMMENT:
        if ch == END:
            return Transition(state, emit=Token(TokenType.ERROR, "/*"), consume=False)
        if ch == "*":
            return Transition(ScanState.BLOCK_COMMENT_STAR)
        return Transition(state)

    if state is ScanState.BLOCK_COMMENT_STAR:
        if ch == END:
            return Transition(state, emit=Token(TokenType.ERROR, "/*"), consume=False)
        if ch == "/":
            return Transition(ScanState.START)
        if ch == "*":
            return Transition(state)
        return Transition(ScanState.BLOCK_COMMENT)

    if state is ScanState.LINE_COMMENT:
        if ch == END or ch == "\n":
            return Transition(ScanState.START, consume=False)
        return Transition(state)

    return Transition(state, emit=Token(TokenType.ERROR, ch), consume=ch != END)


def _from_start(ch: str) -> Transition:
    if ch == END:
        return Transition(ScanState.START, emit=Token(TokenType.EOF), consume=False)
    if is_separator(ch):
        return Transition(ScanState.START)
    if ch.isalpha():
        return Transition(ScanState.IDENTIFIER, append=ch)
    if ch.isdecimal():
        return Transition(ScanState.INTEGER, append=ch)
    if ch == '"':
        return Transition(ScanState.STRING)
    if ch in _OPENERS:
        return Transition(_OPENERS[ch], append=ch)
    if ch in SINGLE_CHAR_TOKENS:
        return Transition(ScanState.START, emit=Token(SINGLE_CHAR_TOKENS[ch]))
    return Transition(ScanState.START, emit=Token(TokenType.ERROR, ch))


__all__ = [
    "END",
    "ScanState",
    "Transition",
    "MalformedEscape",
    "transition",
    "identifier_token",
    "is_separator",
    "SINGLE_CHAR_TOKENS",
]
