"""
toyc Parser Package

Recursive descent parser with operator-precedence climbing for binary
operators, producing a small closed set of AST nodes.

Author: xwest
"""

from .ast_nodes import *
from .parser import Parser, parse_expression_string
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "parse_expression_string",

    # AST nodes
    "Expression", "NumberLiteral", "VariableReference", "BinaryExpression",
    "FunctionCall", "FunctionDeclaration", "FunctionDefinition", "SourceSpan",

    # Error handling
    "ParseError",
]
