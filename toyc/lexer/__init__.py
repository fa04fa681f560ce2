"""
toyc Lexer Package

Implements a hand-written, one-character-lookahead scanner for the toyc
language: integers, identifiers, the `def` keyword, single-character
punctuation and `#` line comments.

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, LexerWarning

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "Diagnostic",
    "LexerWarning",
    "tokenize_string",
    "tokenize_file",
]
