"""
Scope-aware diagnostics.

When a failure happens inside a recognisable construct (an input port, a
service block, an import statement, ...), the message is tailored to it:
the excerpt covers the whole construct, the caret column is located with a
small text heuristic and the suggestions come from the scope vocabulary.

The column heuristics look at raw text only. They are best-effort and do not
parse the construct.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from .context import ParsingContext
from .message import CodeCheckMessage
from .suggest import create_help_message, create_help_message_with_scope

EMPTY_SERVICE_MARKER = "unexpected term found inside service"


@dataclass(frozen=True)
class ScopeFailure:
    """
    Everything a scope handler needs to build its message.

    Attributes:
        context: Context of the offending token
        message: Message given by the grammar production
        token_content: Content of the offending token ("" when none)
        scope_name: Name of the construct instance (e.g. the port name)
        scope_start: First line of the construct
        scope_end: Last line of the construct
        scope_lines: Raw lines ``scope_start..scope_end`` that could be read
        vocabulary: Terms valid in the scope
    """
    context: ParsingContext
    message: str
    token_content: str
    scope_name: Optional[str]
    scope_start: int
    scope_end: int
    scope_lines: Tuple[str, ...]
    vocabulary: Tuple[str, ...]

    @property
    def description(self) -> str:
        if self.token_content:
            return f"{self.message}. Found term: {self.token_content}"
        return self.message

    def scope_context(self, column: Optional[int] = None, lines: Optional[Tuple[str, ...]] = None) -> ParsingContext:
        """Context spanning the construct; the token context if no line could be read."""
        code = self.scope_lines if lines is None else lines
        if not code:
            return self.context if column is None else self.context.with_column(column)
        return replace(
            self.context,
            start_line=self.scope_start,
            end_line=self.scope_start + len(code) - 1,
            column=self.context.column if column is None else column,
            code=tuple(code),
        )


ScopeHandler = Callable[[ScopeFailure], CodeCheckMessage]


def _generic(failure: ScopeFailure) -> CodeCheckMessage:
    help_text = create_help_message(failure.context, failure.token_content, failure.vocabulary)
    return CodeCheckMessage.with_help(failure.context, failure.description, help_text)


def _input_port(failure: ScopeFailure) -> CodeCheckMessage:
    column = None
    if failure.scope_lines and "}" in failure.scope_lines[-1]:
        column = failure.scope_lines[-1].index("}")
    context = failure.scope_context(column)
    help_text = create_help_message_with_scope(context, failure.token_content, failure.vocabulary)
    return CodeCheckMessage.with_help(context, failure.description, help_text)


def _execution(failure: ScopeFailure) -> CodeCheckMessage:
    context = failure.scope_context()
    help_text = create_help_message(context, failure.token_content, failure.vocabulary)
    return CodeCheckMessage.with_help(context, failure.description, help_text)


def _service(failure: ScopeFailure) -> CodeCheckMessage:
    if EMPTY_SERVICE_MARKER in failure.message and not failure.token_content and failure.scope_lines:
        first = failure.scope_lines[0]
        brace = first.rfind("{")
        context = failure.scope_context(brace if brace >= 0 else None, (first,))
        help_text = create_help_message_with_scope(context, failure.token_content, failure.vocabulary)
        return CodeCheckMessage.with_help(
            context,
            f"Service {failure.scope_name} is empty and does not have an ending }}",
            help_text,
        )
    return _generic(failure)


def _import(failure: ScopeFailure) -> CodeCheckMessage:
    words = failure.scope_lines[0].rstrip("\n").split(" ") if failure.scope_lines else []
    if len(words) < 3:
        return _execution(failure)
    # The misspelled term is the third word: "from <module> <term> ..."
    # The column is measured on the numbered line "<n>:from <module>"
    # without the separating spaces
    column = len(f"{failure.scope_start}:{words[0]}") + len(words[1])
    context = failure.scope_context(column)
    help_text = create_help_message(context, words[2], failure.vocabulary)
    return CodeCheckMessage.with_help(context, failure.description, help_text)


_HANDLERS: Dict[str, ScopeHandler] = {
    "inputPort": _input_port,
    "execution": _execution,
    "service": _service,
    "import": _import,
    "outer": _generic,
    "interface": _generic,
}


def scoped_message(failure: ScopeFailure, scope: str) -> CodeCheckMessage:
    """Builds the diagnostic for a failure inside ``scope``."""
    handler = _HANDLERS.get(scope)
    if handler is None:
        return _generic(replace(failure, vocabulary=()))
    return handler(failure)


def handled_scopes() -> Tuple[str, ...]:
    return tuple(_HANDLERS)


__all__ = ["ScopeFailure", "scoped_message", "handled_scopes", "EMPTY_SERVICE_MARKER"]
