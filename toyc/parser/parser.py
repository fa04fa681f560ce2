"""
toyc Recursive Descent Parser

Pulls tokens from a Lexer on demand and builds AST nodes. Binary operators
are handled by operator-precedence climbing over a single-character
precedence table.

Every parse_* method returns None on failure instead of raising. The
failure is recorded in `errors` and callers must pass None straight up.

Author: xwest
"""

import logging
from typing import Dict, List, Optional, TextIO, Union

from ..config import CompilerConfig
from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    Expression, NumberLiteral, VariableReference, BinaryExpression,
    FunctionCall, FunctionDeclaration, FunctionDefinition, SourceSpan
)
from .errors import (
    ParseError, create_unexpected_token_error, create_unclosed_paren_error,
    create_invalid_expression_error, create_missing_body_error,
    create_malformed_declaration_error
)

logger = logging.getLogger(__name__)


class Parser:
    """
    toyc parser.

    The parser owns the current token. `next_token()` advances it; all
    parse_* methods expect to start on their first token and leave the
    current token on the first token after what they consumed.
    """

    def __init__(self, lexer: Union[Lexer, str, TextIO],
                 config: Optional[CompilerConfig] = None):
        """
        Initialize parser.

        Args:
            lexer: A Lexer, or source text / stream to build one from
            config: Compiler configuration (precedence table, filename)
        """
        self.config = config or CompilerConfig()
        if not isinstance(lexer, Lexer):
            lexer = Lexer(lexer, self.config.filename)
        self.lexer = lexer

        # Copied so later edits to the config cannot change a live parser
        self.binop_precedence: Dict[str, int] = dict(self.config.binop_precedence)

        self.errors: List[ParseError] = []
        self.current_token: Optional[Token] = None
        self.previous_token: Optional[Token] = None

    # ------------------------------------------------------------------
    # Token handling
    # ------------------------------------------------------------------

    def next_token(self) -> Token:
        """Advance to and return the next token."""
        self.previous_token = self.current_token
        self.current_token = self.lexer.next_token()
        return self.current_token

    def _check_char(self, char: str) -> bool:
        return self.current_token.is_char(char)

    def _error(self, error: ParseError) -> None:
        self.errors.append(error)
        logger.debug("parse error at %s: %s", error.diagnostic.location, error.diagnostic.message)
        return None

    def _span_from(self, start: SourceLocation) -> SourceSpan:
        end = self.previous_token.location if self.previous_token else start
        return SourceSpan(start, end)

    def get_token_precedence(self) -> int:
        """Precedence of the current token, or -1 if it is not a binary operator."""
        token = self.current_token
        if token.type != TokenType.CHAR:
            return -1
        precedence = self.binop_precedence.get(token.value, 0)
        if precedence <= 0:
            return -1
        return precedence

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_primary(self) -> Optional[Expression]:
        """Dispatch on the current token to the matching primary parser."""
        token = self.current_token
        if token.type == TokenType.IDENTIFIER:
            return self.parse_identifier_expr()
        if token.type == TokenType.NUMBER:
            return self.parse_number_expr()
        if token.is_char('('):
            return self.parse_paren_expr()
        return self._error(create_invalid_expression_error(token))

    def parse_number_expr(self) -> NumberLiteral:
        token = self.current_token
        result = NumberLiteral(token.value, SourceSpan(token.location, token.location))
        self.next_token()
        return result

    def parse_paren_expr(self) -> Optional[Expression]:
        """Parse '(' expression ')'. No node is kept for the parentheses."""
        open_location = self.current_token.location
        self.next_token()  # Consume (

        expr = self.parse_expression()
        if expr is None:
            return None

        if not self._check_char(')'):
            return self._error(create_unclosed_paren_error(open_location, self.current_token))

        self.next_token()  # Consume )
        return expr

    def parse_identifier_expr(self) -> Optional[Expression]:
        """
        Parse a variable reference or a function call.

        identifier
        identifier '(' [expression (',' expression)*] ')'
        """
        name_token = self.current_token
        name = name_token.value
        self.next_token()  # Consume identifier

        if not self._check_char('('):
            return VariableReference(name, SourceSpan(name_token.location, name_token.location))

        self.next_token()  # Consume (

        args: List[Expression] = []
        if not self._check_char(')'):
            while True:
                arg = self.parse_expression()
                if arg is None:
                    return None
                args.append(arg)

                if self._check_char(')'):
                    break

                if not self._check_char(','):
                    return self._error(
                        create_unexpected_token_error("',' or ')' in argument list", self.current_token)
                    )

                self.next_token()  # Consume ,

        self.next_token()  # Consume )
        return FunctionCall(name, args, self._span_from(name_token.location))

    def parse_expression(self) -> Optional[Expression]:
        """Parse a primary expression followed by any binary operators."""
        lhs = self.parse_primary()
        if lhs is None:
            return None
        return self.parse_binop_rhs(0, lhs)

    def parse_binop_rhs(self, min_precedence: int, lhs: Expression) -> Optional[Expression]:
        """
        Operator-precedence climbing.

        Absorbs operators with precedence >= min_precedence into lhs. When the
        operator after a right-hand side binds tighter than the current one,
        that right-hand side is first extended at precedence + 1. Operators of
        equal precedence therefore associate to the left.
        """
        while True:
            precedence = self.get_token_precedence()
            if precedence < min_precedence:
                return lhs

            operator = self.current_token.value
            self.next_token()  # Consume operator

            rhs = self.parse_primary()
            if rhs is None:
                return None

            next_precedence = self.get_token_precedence()
            if precedence < next_precedence:
                rhs = self.parse_binop_rhs(precedence + 1, rhs)
                if rhs is None:
                    return None

            span = None
            if lhs.span is not None and rhs.span is not None:
                span = SourceSpan(lhs.span.start, rhs.span.end)
            lhs = BinaryExpression(operator, lhs, rhs, span)

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def parse_function_declaration(self) -> Optional[FunctionDeclaration]:
        """
        Parse a function name and its parameter list.

        name '(' [param ([','] param)*] ')'
        """
        start_token = self.current_token
        if start_token.type != TokenType.IDENTIFIER:
            return self._error(create_malformed_declaration_error("expected function name", start_token))

        name = start_token.value
        self.next_token()

        if not self._check_char('('):
            return self._error(
                create_malformed_declaration_error(f"expected '(' after '{name}'", self.current_token)
            )

        params: List[str] = []
        self.next_token()  # Consume (
        while self.current_token.type == TokenType.IDENTIFIER:
            params.append(self.current_token.value)
            self.next_token()
            if self._check_char(','):
                self.next_token()
                if self.current_token.type != TokenType.IDENTIFIER:
                    return self._error(
                        create_malformed_declaration_error("expected parameter name after ','",
                                                           self.current_token)
                    )

        if not self._check_char(')'):
            return self._error(
                create_malformed_declaration_error("expected ')' to close parameter list",
                                                   self.current_token)
            )

        self.next_token()  # Consume )
        return FunctionDeclaration(name, params, self._span_from(start_token.location))

    def _can_start_expression(self) -> bool:
        token = self.current_token
        return token.type in (TokenType.IDENTIFIER, TokenType.NUMBER) or token.is_char('(')

    def parse_function_definition(self) -> Optional[FunctionDefinition]:
        """Parse 'def' declaration expression."""
        start_location = self.current_token.location
        self.next_token()  # Consume def

        declaration = self.parse_function_declaration()
        if declaration is None:
            return None

        if not self._can_start_expression():
            return self._error(create_missing_body_error(declaration.name, self.current_token))

        body = self.parse_expression()
        if body is None:
            return None

        return FunctionDefinition(declaration, body, self._span_from(start_location))

    def parse_top_level_expression(self) -> Optional[FunctionDefinition]:
        """Wrap a bare expression in an anonymous zero-parameter definition."""
        start_location = self.current_token.location
        body = self.parse_expression()
        if body is None:
            return None

        span = self._span_from(start_location)
        return FunctionDefinition(FunctionDeclaration("", [], span), body, span)

    def has_errors(self) -> bool:
        return len(self.errors) > 0


def parse_expression_string(source: str, config: Optional[CompilerConfig] = None) -> Optional[Expression]:
    """
    Convenience function: parse a single expression from a string.

    Returns:
        The expression, or None if it does not parse
    """
    parser = Parser(source, config)
    parser.next_token()
    return parser.parse_expression()
