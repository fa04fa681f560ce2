"""
toyc Lexer - pulls characters from a stream and hands out one token at a time.

The scanner always reads one character past the token it just produced and
keeps it in `last_char` for the next call. That is the only lookahead.

xwest
"""

import io
import logging
from typing import List, Optional, TextIO, Union

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .errors import LexerWarning, create_number_followed_by_letter_warning

logger = logging.getLogger(__name__)


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_digit(char: str) -> bool:
    return char.isascii() and char.isdigit()


def _is_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


class Lexer:
    """
    toyc lexical analyzer.

    Converts a character stream into tokens on demand via next_token().
    End of input is reported as an EOF token, as many times as it is asked for.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<unknown>"):
        """
        Initialize the lexer with a character source.

        Args:
            source: Source code string or readable text stream. Streams are
                not closed by the lexer.
            filename: Name of source file for error reporting
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self.source = source
        self.filename = filename

        # Position of the next character to be read from the stream
        self.offset = 0
        self.line = 1
        self.column = 1

        # Position of last_char
        self._char_line = 1
        self._char_column = 0
        self._char_offset = -1

        self.last_char = ' '
        self.warnings: List[LexerWarning] = []

    def _read_char(self) -> str:
        """Read one character into last_char; '' marks end of input."""
        char = self.source.read(1)
        self._char_line = self.line
        self._char_column = self.column
        self._char_offset = self.offset

        if char:
            self.offset += 1
            if char == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1

        self.last_char = char
        return char

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._char_line, self._char_column, self._char_offset)

    def next_token(self) -> Token:
        """Scan and return the next token."""
        while True:
            while self.last_char and self.last_char.isspace():
                self._read_char()

            start = self._location()

            if _is_alpha(self.last_char):
                return self._tokenize_identifier_or_keyword(start)

            if _is_digit(self.last_char):
                return self._tokenize_number(start)

            if self.last_char == '#':
                self._skip_comment()
                # Comments never produce a token; rescan from whatever follows
                continue

            if not self.last_char:
                return Token(TokenType.EOF, "", None, start)

            this_char = self.last_char
            self._read_char()
            return Token(TokenType.CHAR, this_char, this_char, start)

    def _tokenize_identifier_or_keyword(self, start: SourceLocation) -> Token:
        chars = [self.last_char]
        while _is_alnum(self._read_char()):
            chars.append(self.last_char)

        text = "".join(chars)
        if text in KEYWORDS:
            return Token(KEYWORDS[text], text, None, start)
        return Token(TokenType.IDENTIFIER, text, text, start)

    def _tokenize_number(self, start: SourceLocation) -> Token:
        digits = []
        while _is_digit(self.last_char):
            digits.append(self.last_char)
            self._read_char()

        lexeme = "".join(digits)
        if _is_alpha(self.last_char):
            warning = create_number_followed_by_letter_warning(lexeme, self.last_char, start)
            self.warnings.append(warning)
            logger.warning("%s: %s", start, warning.diagnostic.message)

        return Token(TokenType.NUMBER, lexeme, int(lexeme), start)

    def _skip_comment(self):
        """Discard characters up to end of line or end of input."""
        while True:
            char = self._read_char()
            if not char or char in '\n\r':
                break

    def tokenize(self) -> List[Token]:
        """
        Drain the scanner.

        Returns:
            List of tokens ending with exactly one EOF token
        """
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    def has_warnings(self) -> bool:
        """Check if lexer encountered any warnings."""
        return len(self.warnings) > 0


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for diagnostics

    Returns:
        List of tokens
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str, encoding: Optional[str] = 'utf-8') -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding=encoding) as f:
        return Lexer(f, filepath).tokenize()
