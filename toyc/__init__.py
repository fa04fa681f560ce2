"""
toyc Compiler Package

A small compiler front end for a language of integer arithmetic and
function definitions, lowering source text to an SSA style IR and from
there to LLVM IR.

Architecture:
    toyc/
    ├── lexer/           # Tokenization
    ├── parser/          # Precedence-climbing parser and AST
    ├── ir/              # IR model, code generator, verifier
    ├── backend/         # LLVM lowering through llvmlite
    ├── driver.py        # Top-level loop with per-unit recovery
    └── cli.py           # Command line entry point

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .config import CompilerConfig
from .lexer import Lexer
from .parser import Parser
from .ir import IRGenerator
from .driver import Driver, CompilationResult, compile_source, compile_file
from .backend import LLVMBackend

__all__ = [
    # Core classes
    "CompilerConfig",
    "Lexer",
    "Parser",
    "IRGenerator",
    "Driver",
    "CompilationResult",
    "LLVMBackend",

    # Convenience functions
    "compile_source",
    "compile_file",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
