"""
"Did you mean" suggestions for diagnostics.

Compares the offending term with the valid alternatives by edit distance and
builds the help block shown under a diagnostic: either the list of possible
inputs or the offending line with the closest term substituted and a caret.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .context import ParsingContext

# Maximum edit distance for a term to be proposed as a correction
SUGGESTION_DISTANCE = 2


def levenshtein(a: str, b: str) -> int:
    """Edit distance (insertions, deletions, substitutions) between two strings."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        previous = current
    return previous[-1]


def similar_terms(term: str, candidates: Iterable[str], threshold: int = SUGGESTION_DISTANCE) -> List[str]:
    """Candidates within ``threshold`` edits of ``term``, in candidate order."""
    return [c for c in candidates if levenshtein(term, c) <= threshold]


def _substitute(numbered_line: str, column_space: int, term_length: int, proposal: str) -> str:
    return numbered_line[:column_space] + proposal + numbered_line[column_space + term_length:]


def _with_newline(line: str) -> str:
    return line if line.endswith("\n") else line + "\n"


def create_help_message(
    context: ParsingContext,
    token_content: str,
    possible_tokens: Sequence[str],
) -> Optional[str]:
    """
    Help block for a failure with a flat list of expected terms.

    Args:
        context: Where the failure is
        token_content: Text of the offending token ("" when it has none)
        possible_tokens: Terms valid at this point

    Returns:
        Help text, or None when nothing can be suggested
    """
    if not possible_tokens:
        return None

    if not token_content:
        return "You are missing a keyword. Possible inputs are:\n" + ", ".join(possible_tokens)

    proposed = similar_terms(token_content, possible_tokens)
    if not proposed:
        return "The term did not match possible terms. Possible inputs are:\n" + ", ".join(possible_tokens)

    help_text = (
        "Your term is similar to what would be valid input: "
        + ", ".join(proposed)
        + ". Perhaps you meant:\n"
    )
    if not context.has_code:
        return help_text.rstrip("\n")

    column_space = context.column + context.prefix_width(0)
    first_line = context.numbered_code()[0]
    help_text += _with_newline(_substitute(first_line, column_space, len(token_content), proposed[0]))
    return help_text + " " * column_space + "^"


def create_help_message_with_scope(
    context: ParsingContext,
    token_content: Optional[str],
    possible_terms: Sequence[str],
) -> str:
    """
    Help block for a failure inside a known grammar scope.

    The excerpt may span several lines; the correction is applied to the last
    one (``context.end_line``).
    """
    if not token_content:
        return "A term is missing. Possible inputs are:\n" + "".join(f"{term}\n" for term in possible_terms)

    proposed = similar_terms(token_content, possible_terms)
    if not proposed:
        return "The term did not match possible terms. Possible inputs are:\n" + ", ".join(possible_terms)

    help_text = (
        "\nYour term is similar to what would be valid input: "
        + ", ".join(proposed)
        + ". Perhaps you meant:\n"
    )
    if not context.has_code:
        return help_text.rstrip("\n")

    last = len(context.code) - 1
    number_spaces = context.column + context.prefix_width(last)
    for index, line in enumerate(context.numbered_code()):
        if context.line_number(index) == context.end_line:
            line = _substitute(line, number_spaces, len(token_content), proposed[0])
        help_text += _with_newline(line)
    return help_text + " " * number_spaces + "^"


__all__ = [
    "SUGGESTION_DISTANCE",
    "levenshtein",
    "similar_terms",
    "create_help_message",
    "create_help_message_with_scope",
]
