"""
toyc Intermediate Representation Package

Register based SSA form IR: modules of functions, functions of basic
blocks, blocks of instructions. Also holds the code generator that lowers
the AST into it and the structural verifier.

Author: xwest
"""

from .ir_nodes import *
from .ir_generator import IRGenerator, IRGenContext
from .errors import CodegenError, CodegenWarning, IRVerificationError
from .symbol_table import Symbol, SymbolTable
from .verifier import verify_function, verify_module

__all__ = [
    # Core IR components
    "IRGenerator",
    "IRGenContext",
    "SymbolTable",
    "Symbol",
    "verify_function",
    "verify_module",

    # IR nodes
    "IRIntegerType", "IRFunctionType",
    "IRValue", "IRConstant", "IRParameter",
    "IRBasicBlock", "IRFunction", "IRModule",
    "IRInstruction", "IRBinaryOp", "IRCall", "IRReturn", "BINARY_OPCODES",

    # Error handling
    "CodegenError",
    "CodegenWarning",
    "IRVerificationError",
]
