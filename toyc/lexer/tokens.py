"""
Token definitions for the toyc lexer.

The language only knows five token kinds: end of input, integer numbers,
identifiers, the `def` keyword, and single characters (operators,
parentheses, comma, semicolon).

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Enumeration of all token types in toyc."""

    EOF = auto()                    # End of input
    NUMBER = auto()                 # 42
    IDENTIFIER = auto()             # foo, x1
    DEF = auto()                    # def
    CHAR = auto()                   # + - * / ( ) , ; and anything else


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    `value` is the int for NUMBER, the name for IDENTIFIER, the character
    itself for CHAR, and None for EOF and DEF.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    def is_char(self, char: str) -> bool:
        """Check if this is the single-character token `char`."""
        return self.type == TokenType.CHAR and self.value == char

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER


KEYWORDS = {
    "def": TokenType.DEF,
}
