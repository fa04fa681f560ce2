"""
Error handling for the toyc parser.

Parse failures are recorded as ParseError diagnostics while the parse
functions themselves return None to their callers.

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    A syntax error with diagnostic information.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


def describe_token(token: Token) -> str:
    """Human readable description of a token for messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.DEF:
        return "keyword 'def'"
    if token.type == TokenType.NUMBER:
        return f"number {token.lexeme}"
    if token.type == TokenType.IDENTIFIER:
        return f"identifier '{token.lexeme}'"
    return f"'{token.lexeme}'"


def create_unexpected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    found_str = describe_token(found)

    return ParseError(
        message=f"Expected {expected}, found {found_str}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected} at this position, but found {found_str} instead."
    )


def create_unclosed_paren_error(open_location: Optional[SourceLocation], found: Token) -> ParseError:
    """Create an error for a '(' that was never closed."""
    where = f" opened at {open_location}" if open_location else ""
    return ParseError(
        message=f"Expected ')' to close '('{where}, found {describe_token(found)}",
        location=found.location,
        token=found,
        code="P004",
        suggestions=["Add a closing parenthesis ')'"]
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message=f"Expected expression, found {describe_token(found)}",
        location=found.location,
        token=found,
        code="P005",
        help_text="An expression starts with a number, a name, or '('."
    )


def create_missing_body_error(function_name: str, found: Token) -> ParseError:
    """Create an error for a definition without a body expression."""
    return ParseError(
        message=f"Missing body for function '{function_name}'",
        location=found.location,
        token=found,
        code="P006",
        help_text="A function body is a single expression following the parameter list."
    )


def create_malformed_declaration_error(reason: str, found: Token) -> ParseError:
    """Create an error for a malformed function declaration."""
    return ParseError(
        message=f"Malformed function declaration: {reason}",
        location=found.location,
        token=found,
        code="P008",
        suggestions=["Declarations look like: def name(a b) body"]
    )
