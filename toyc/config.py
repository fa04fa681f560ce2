"""
Compiler configuration for toyc.

One CompilerConfig instance is threaded explicitly through the lexer,
parser, IR generator, driver and LLVM backend. Nothing here is global.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


# Higher binds tighter
DEFAULT_BINOP_PRECEDENCE: Dict[str, int] = {
    '-': 1,
    '+': 2,
    '/': 3,
    '*': 4,
}


@dataclass
class CompilerConfig:
    """Options controlling a single compilation run."""
    module_name: str = "my compiler"
    int_bits: int = 32
    binop_precedence: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_BINOP_PRECEDENCE)
    )
    anonymous_prefix: str = "__anon_expr"
    implicit_declarations: bool = True
    filename: str = "<stdin>"
    target_triple: Optional[str] = None

    def validate(self) -> 'CompilerConfig':
        """
        Check the configuration for values the pipeline cannot honor.

        Returns:
            self, so calls can be chained

        Raises:
            ValueError: If any field is out of range
        """
        if self.int_bits <= 0:
            raise ValueError(f"int_bits must be positive, got {self.int_bits}")

        if not self.binop_precedence:
            raise ValueError("binop_precedence must define at least one operator")

        for op, prec in self.binop_precedence.items():
            if len(op) != 1:
                raise ValueError(f"operators must be single characters, got {op!r}")
            if prec <= 0:
                raise ValueError(f"precedence for {op!r} must be positive, got {prec}")

        if not self.anonymous_prefix:
            raise ValueError("anonymous_prefix must not be empty")

        # Source identifiers start with a letter; wrapper names must not
        if self.anonymous_prefix[0].isascii() and self.anonymous_prefix[0].isalpha():
            raise ValueError(
                f"anonymous_prefix must not start with a letter, got {self.anonymous_prefix!r}"
            )

        return self
