"""
Abstract Syntax Tree node definitions for toyc.

Expressions form a closed set of four node kinds (see `Expression`). Each
composite node owns its children outright; trees are built once by the
parser and only read afterwards.

Author: xwest
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..lexer.tokens import SourceLocation


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


# Spans are bookkeeping for diagnostics only and never take part in equality,
# so two parses of the same text compare equal.

@dataclass
class NumberLiteral:
    """Integer constant."""
    value: int
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class VariableReference:
    """Name resolved against the symbol table at generation time."""
    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name


@dataclass
class BinaryExpression:
    """Binary operation expression."""
    operator: str
    left: 'Expression'
    right: 'Expression'
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class FunctionCall:
    """Call of a function by name."""
    callee: str
    args: List['Expression'] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.callee}({', '.join(str(arg) for arg in self.args)})"


Expression = Union[NumberLiteral, VariableReference, BinaryExpression, FunctionCall]


@dataclass
class FunctionDeclaration:
    """
    Function name plus parameter names.

    An empty name marks the synthetic wrapper the driver builds around a bare
    top-level expression. Such wrappers are never looked up by name.
    """
    name: str
    params: List[str] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    @property
    def is_anonymous(self) -> bool:
        return self.name == ""

    def __str__(self) -> str:
        return f"{self.name or '<anonymous>'}({' '.join(self.params)})"


@dataclass
class FunctionDefinition:
    """A declaration with a single-expression body."""
    declaration: FunctionDeclaration
    body: Expression
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"def {self.declaration} {self.body}"
