"""
Diagnostics for the toyc lexer.

The lexer itself never fails: malformed character sequences are consumed
greedily. It can still record warnings, and the Diagnostic type defined here
is shared by the parser and the IR generator.

Author: xwest
"""

from typing import Optional, List, Iterable
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base class for diagnostics (errors, warnings, info)."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerWarning:
    """
    Represents a lexer warning that doesn't stop compilation.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


def edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def suggest_names(name: str, candidates: Iterable[str], max_distance: int = 2) -> List[str]:
    """Return up to three candidates within `max_distance` edits of `name`."""
    close = [c for c in candidates if c and edit_distance(name, c) <= max_distance]
    return sorted(close, key=lambda c: (edit_distance(name, c), c))[:3]


def create_number_followed_by_letter_warning(lexeme: str, next_char: str,
                                             location: SourceLocation) -> LexerWarning:
    """Warn that `lexeme` was split from the letters that follow it."""
    return LexerWarning(
        message=f"Number '{lexeme}' is immediately followed by '{next_char}'",
        location=location,
        code="L101",
        help_text="The number and the following identifier are read as two separate tokens.",
        suggestions=["Insert whitespace or an operator between the number and the name"]
    )
