"""
toyc Backend Package.

Lowers toyc IR to LLVM IR through llvmlite.

Author: xwest
"""

from .llvm_backend import LLVMBackend

__all__ = ['LLVMBackend']
