"""
Test suite for the toyc LLVM backend.

Lowers generated modules through llvmlite and checks the textual LLVM IR
and LLVM's own verification.

Author: xwest
"""

import os
import sys
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from toyc import CompilerConfig, LLVMBackend, compile_source
from toyc.ir import IRModule, IRFunction, IRFunctionType, IRIntegerType, IRBasicBlock, IRBinaryOp


class TestLLVMBackend(unittest.TestCase):
    """Test cases for LLVM lowering."""

    def _lower(self, source: str, config=None):
        config = config or CompilerConfig()
        result = compile_source(source, config)
        self.assertTrue(result.success, [str(d) for d in result.errors])

        backend = LLVMBackend(config)
        llvm_module = backend.generate(result.module)
        return backend, llvm_module

    def test_function_definition(self):
        backend, llvm_module = self._lower("def add(a b) a + b")
        text = backend.print_llvm_ir(llvm_module)

        self.assertIn('define i32 @"add"(i32 %"a", i32 %"b")', text)
        self.assertIn('%"addtmp" = add i32 %"a", %"b"', text)
        self.assertIn('ret i32 %"addtmp"', text)

    def test_all_operators(self):
        backend, llvm_module = self._lower("def f(a b) a + b - a * b / a")
        text = backend.print_llvm_ir(llvm_module)

        for opcode in ("add", "sub", "mul", "udiv"):
            with self.subTest(opcode=opcode):
                self.assertIn(f" = {opcode} i32 ", text)

    def test_calls_and_anonymous_wrappers(self):
        backend, llvm_module = self._lower("def add(a b) a + b\nadd(1, 2)")
        text = backend.print_llvm_ir(llvm_module)

        self.assertIn('define i32 @"__anon_expr0"()', text)
        self.assertIn('call i32 @"add"', text)

    def test_forward_declaration(self):
        backend, llvm_module = self._lower("h(1)")
        text = backend.print_llvm_ir(llvm_module)
        self.assertIn('declare i32 @"h"(i32 %"arg0")', text)

    def test_verify(self):
        backend, llvm_module = self._lower("def add(a b) a + b\ndef twice(x) add(x, x)\ntwice(4)")
        module_ref = backend.verify(llvm_module)

        self.assertEqual(module_ref.get_function("twice").name, "twice")

    def test_verify_rejects_malformed_module(self):
        int_type = IRIntegerType(32)
        ir_module = IRModule("broken")
        function = ir_module.add_function(
            IRFunction("f", IRFunctionType(int_type, (int_type,)), ["x"])
        )
        block = function.add_basic_block(IRBasicBlock("entry"))
        x = function.parameters[0]
        block.add_instruction(IRBinaryOp("add", x, x, int_type, "addtmp"))

        backend = LLVMBackend()
        llvm_module = backend.generate(ir_module)
        with self.assertLogs("toyc.backend.llvm_backend", level="ERROR"):
            with self.assertRaises(RuntimeError):
                backend.verify(llvm_module)

    def test_integer_width_and_wrapping(self):
        backend, llvm_module = self._lower("def f() 200", CompilerConfig(int_bits=8))
        text = backend.print_llvm_ir(llvm_module)
        self.assertIn("ret i8 -56", text)

    def test_module_name_and_triple(self):
        config = CompilerConfig(module_name="demo", target_triple="x86_64-unknown-linux-gnu")
        _, llvm_module = self._lower("1", config)

        self.assertEqual(llvm_module.name, "demo")
        self.assertEqual(llvm_module.triple, "x86_64-unknown-linux-gnu")

    def test_empty_module(self):
        backend, llvm_module = self._lower("")
        backend.verify(llvm_module)
        self.assertEqual(len(list(llvm_module.functions)), 0)


if __name__ == '__main__':
    unittest.main()
