"""
Positioned, human-readable diagnostic messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .context import ParsingContext


@dataclass(frozen=True)
class CodeCheckMessage:
    """
    Diagnostic produced by the scanner or the parser.

    The description already contains the offending token text when there is
    one; the help block is either a list of possible inputs or a suggested
    correction with a caret excerpt.
    """
    context: ParsingContext
    description: str
    help: Optional[str] = None

    @classmethod
    def with_help(cls, context: ParsingContext, description: str, help: Optional[str]) -> "CodeCheckMessage":
        return cls(context=context, description=description, help=help or None)

    @classmethod
    def without_help(cls, context: ParsingContext, description: str) -> "CodeCheckMessage":
        return cls(context=context, description=description)

    @property
    def header(self) -> str:
        return f"{self.context.source}:{self.context.start_line}: error: {self.description}"

    def excerpt(self) -> List[str]:
        """Numbered code lines followed by a caret under the error column."""
        if not self.context.has_code:
            return []
        lines = [line.rstrip("\n") for line in self.context.numbered_code()]
        # The caret belongs to the last implicated line
        last = len(self.context.code) - 1
        caret = " " * (self.context.prefix_width(last) + self.context.column) + "^"
        return lines + [caret]

    def render(self) -> str:
        parts = [self.header]
        if self.help:
            parts.append(self.help.rstrip("\n"))
        else:
            parts.extend(self.excerpt())
        return "\n".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.context.source,
            "startLine": self.context.start_line,
            "endLine": self.context.end_line,
            "column": self.context.column,
            "description": self.description,
            "help": self.help,
        }

    def __str__(self) -> str:
        return self.render()


__all__ = ["CodeCheckMessage"]
