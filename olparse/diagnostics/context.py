"""
Positional snapshot of the source used to render diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Tuple


@dataclass(frozen=True)
class ParsingContext:
    """
    Where a diagnostic points.

    Attributes:
        source: Source name (file path or a label such as ``<string>``)
        start_line: First implicated line (1-based)
        end_line: Last implicated line (1-based)
        column: 0-based column inside the offending line
        code: Raw source lines ``start_line..end_line``, trailing newline kept
    """
    source: str
    start_line: int
    end_line: int
    column: int
    code: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_code(self) -> bool:
        return bool(self.code)

    def with_column(self, column: int) -> "ParsingContext":
        return replace(self, column=column)

    def with_code(self, code: List[str] | Tuple[str, ...]) -> "ParsingContext":
        return replace(self, code=tuple(code))

    def line_number(self, index: int) -> int:
        """Source line number of ``code[index]``."""
        return self.start_line + index

    def numbered_code(self) -> List[str]:
        """Code lines prefixed with their line number, e.g. ``12:main {``."""
        return [f"{self.line_number(i)}:{line}" for i, line in enumerate(self.code)]

    def prefix_width(self, index: int = 0) -> int:
        """Width of the ``<n>:`` prefix in front of ``code[index]``."""
        return len(f"{self.line_number(index)}:")


__all__ = ["ParsingContext"]
