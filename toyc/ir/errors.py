"""
IR generation error handling for toyc.

CodegenError is raised while lowering one definition and caught at the
definition boundary, where the partially built function is cleaned up.
CodegenWarning is only recorded; generation carries on.

Author: xwest
"""

from typing import Iterable, List, Optional

from ..lexer.tokens import SourceLocation
from ..lexer.errors import Diagnostic, suggest_names


class CodegenError(Exception):
    """
    Exception raised when a definition cannot be lowered to IR.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
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

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class CodegenWarning:
    """
    Represents a code generation warning that doesn't stop compilation.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class IRVerificationError(CodegenError):
    """Raised when a generated function is structurally malformed."""

    def __init__(self, function_name: str, reason: str):
        super().__init__(
            message=f"Function '{function_name}' failed verification: {reason}",
            code="G007"
        )
        self.function_name = function_name
        self.reason = reason


def _did_you_mean(name: str, candidates: Iterable[str]) -> List[str]:
    return [f"Did you mean '{c}'?" for c in suggest_names(name, candidates)]


def create_unbound_variable_error(name: str, location: Optional[SourceLocation],
                                  in_scope: Iterable[str]) -> CodegenError:
    in_scope = list(in_scope)
    help_text = (f"Names in scope: {', '.join(in_scope)}" if in_scope
                 else "No parameters are in scope here.")
    return CodegenError(
        message=f"Unbound variable '{name}'",
        location=location,
        code="G001",
        help_text=help_text,
        suggestions=_did_you_mean(name, in_scope)
    )


def create_unknown_function_error(name: str, location: Optional[SourceLocation],
                                  known: Iterable[str]) -> CodegenError:
    return CodegenError(
        message=f"Unknown function '{name}'",
        location=location,
        code="G002",
        help_text="Functions must be defined before they are called.",
        suggestions=_did_you_mean(name, known)
    )


def create_unsupported_operator_error(operator: str,
                                      location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"Unsupported binary operator '{operator}'",
        location=location,
        code="G003",
        help_text="Supported operators are + - * /."
    )


def create_redefinition_error(name: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"Redefinition of function '{name}'",
        location=location,
        code="G004",
        help_text="A function body can only be given once."
    )


def create_signature_mismatch_error(name: str, expected: int, found: int,
                                    location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=(f"Function '{name}' was declared with {expected} parameter(s) "
                 f"but is now declared with {found}"),
        location=location,
        code="G005"
    )


def create_argument_count_error(name: str, expected: int, found: int,
                                location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"Function '{name}' takes {expected} argument(s), {found} given",
        location=location,
        code="G006"
    )


def create_unsupported_node_error(node: object) -> CodegenError:
    return CodegenError(
        message=f"Cannot generate code for {type(node).__name__}",
        code="G008"
    )


def create_truncated_literal_warning(value: int, wrapped: int, bits: int,
                                     location: Optional[SourceLocation]) -> CodegenWarning:
    """Warn that an integer literal does not fit the target width."""
    return CodegenWarning(
        message=f"Integer literal {value} does not fit in i{bits} and becomes {wrapped}",
        location=location,
        code="G101",
        help_text=f"Literals wrap modulo 2**{bits}."
    )
