"""
Lexical types of the service-oriented language.

Defines the closed set of token types and the immutable Token value
produced by the scanner.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, FrozenSet


class TokenType(enum.Enum):
    """
    All lexical categories.

    Fixed tokens carry their lexeme as value, variable tokens a bracketed label.
    """

    # Variable content
    EOF = "<eof>"
    ID = "<identifier>"
    INT = "<integer>"
    STRING = "<string>"
    NEWLINE = "<newline>"
    ERROR = "<error>"

    # Punctuation
    COMMA = ","
    LPAREN = "("
    RPAREN = ")"
    LSQUARE = "["
    RSQUARE = "]"
    LCURLY = "{"
    RCURLY = "}"
    SEQUENCE = ";"
    PARALLEL = "|"
    COLON = ":"
    AT = "@"

    # Operators
    CHOICE = "++"
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    DIVIDE = "/"
    ASSIGN = "="
    EQUAL = "=="
    LANGLE = "<"
    RANGLE = ">"
    MINOR_OR_EQUAL = "<="
    MAJOR_OR_EQUAL = ">="
    NOT = "!"
    NOT_EQUAL = "!="

    # Keywords
    IF = "if"
    ELSE = "else"
    IN = "in"
    OUT = "out"
    AND = "and"
    OR = "or"
    LINKIN = "linkIn"
    LINKOUT = "linkOut"
    OP_OW = "OneWay"
    OP_RR = "RequestResponse"
    OP_N = "Notification"
    OP_SR = "SolicitResponse"
    LOCATIONS = "locations"
    OPERATIONS = "operations"
    VARIABLES = "variables"
    MAIN = "main"
    DEFINE = "define"
    LINKS = "links"
    NULL_PROCESS = "nullProcess"
    WHILE = "while"
    SLEEP = "sleep"
    VAR_TYPE_INT = "int"
    VAR_TYPE_STRING = "string"
    VAR_TYPE_VARIANT = "variant"
    CSET = "cset"
    PERSISTENT = "persistent"
    NOT_PERSISTENT = "not_persistent"
    CONCURRENT = "concurrent"
    SEQUENTIAL = "sequential"
    STATE = "state"
    EXECUTION = "execution"
    THROW = "throw"
    INSTALL_FAULT_HANDLER = "installFH"
    INSTALL_COMPENSATION = "installComp"
    SCOPE = "scope"
    COMPENSATE = "comp"
    INCLUDE = "include"
    FROM = "from"
    IMPORT = "import"
    AS = "as"
    SERVICE = "service"
    INPUT_PORT = "inputPort"
    OUTPUT_PORT = "outputPort"
    INTERFACE = "interface"
    TYPE = "type"
    EMBEDDED = "embedded"
    COURIER = "courier"
    CONSTANTS = "constants"
    INIT = "init"

    @property
    def is_keyword(self) -> bool:
        """True for variants recognised from an identifier lexeme."""
        return self.value[0].isalpha()

    @property
    def is_variable(self) -> bool:
        """True for variants whose text lives in the token content."""
        return self in VARIABLE_TYPES

    @property
    def is_reserved(self) -> bool:
        """Keywords that can never stand in for an identifier."""
        return self.is_keyword and self not in UNRESERVED_KEYWORDS


# Variants without a fixed lexeme
VARIABLE_TYPES: FrozenSet[TokenType] = frozenset({
    TokenType.EOF,
    TokenType.ID,
    TokenType.INT,
    TokenType.STRING,
    TokenType.NEWLINE,
    TokenType.ERROR,
})

# Keywords that grammar productions accept where an identifier is expected
UNRESERVED_KEYWORDS: FrozenSet[TokenType] = frozenset({
    TokenType.OP_OW,
    TokenType.OP_RR,
    TokenType.OP_N,
    TokenType.OP_SR,
    TokenType.LOCATIONS,
    TokenType.OPERATIONS,
    TokenType.VARIABLES,
    TokenType.LINKS,
    TokenType.STATE,
    TokenType.VAR_TYPE_INT,
    TokenType.VAR_TYPE_STRING,
    TokenType.VAR_TYPE_VARIANT,
    TokenType.AS,
    TokenType.TYPE,
    TokenType.SERVICE,
    TokenType.INTERFACE,
    TokenType.INPUT_PORT,
    TokenType.OUTPUT_PORT,
    TokenType.EMBEDDED,
    TokenType.COURIER,
    TokenType.CONSTANTS,
    TokenType.INIT,
})

KEYWORDS: Dict[str, TokenType] = {t.value: t for t in TokenType if t.is_keyword}

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\t": "\\t", '"': '\\"'}


@dataclass(frozen=True)
class Token:
    """
    Classified unit of lexical input.

    Positionless: the scanner and the parser cursor track where it came from.
    """
    type: TokenType
    content: str = ""

    def is_(self, token_type: TokenType) -> bool:
        return self.type is token_type

    def is_not(self, token_type: TokenType) -> bool:
        return self.type is not token_type

    def is_eof(self) -> bool:
        return self.type is TokenType.EOF

    def is_identifier(self) -> bool:
        """Identifier or a keyword that is not reserved."""
        return self.type is TokenType.ID or self.type in UNRESERVED_KEYWORDS

    def is_keyword(self, keyword: str) -> bool:
        """Identifier whose content is exactly ``keyword``."""
        return self.type is TokenType.ID and self.content == keyword

    @property
    def text(self) -> str:
        """Source text of the token, reconstructed from type and content."""
        if self.type is TokenType.STRING:
            return '"' + "".join(_ESCAPES.get(ch, ch) for ch in self.content) + '"'
        if self.type is TokenType.NEWLINE:
            return "\n"
        if self.type.is_variable:
            return self.content
        return self.type.value

    def __repr__(self) -> str:
        if self.content:
            return f"Token({self.type.name}, {self.content!r})"
        return f"Token({self.type.name})"


__all__ = ["TokenType", "Token", "KEYWORDS", "UNRESERVED_KEYWORDS", "VARIABLE_TYPES"]
