"""
Test suite for the toyc IR verifier.

Builds small IR functions by hand and checks that each structural
problem is reported.

Author: xwest
"""

import os
import sys
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from toyc.ir import (
    IRModule, IRFunction, IRFunctionType, IRIntegerType, IRBasicBlock,
    IRConstant, IRParameter, IRBinaryOp, IRCall, IRReturn, IRVerificationError,
    verify_function, verify_module
)


I32 = IRIntegerType(32)
I64 = IRIntegerType(64)


def function_type(arity: int, int_type=I32) -> IRFunctionType:
    return IRFunctionType(int_type, tuple(int_type for _ in range(arity)))


class TestVerifier(unittest.TestCase):
    """Test cases for verify_function and verify_module."""

    def setUp(self):
        """Set up test fixtures."""
        self.module = IRModule("test")
        self.function = self.module.add_function(IRFunction("f", function_type(2), ["a", "b"]))
        self.entry = self.function.add_basic_block(IRBasicBlock("entry"))

    def _assert_rejected(self, fragment: str):
        with self.assertRaises(IRVerificationError) as cm:
            verify_function(self.function)
        self.assertEqual(cm.exception.code, "G007")
        self.assertIn(fragment, cm.exception.reason)

    def test_valid_function(self):
        a, b = self.function.parameters
        add = self.entry.add_instruction(IRBinaryOp("add", a, b, I32, "addtmp"))
        mul = self.entry.add_instruction(IRBinaryOp("mul", add.result, IRConstant(I32, 2), I32, "multmp"))
        self.entry.add_instruction(IRReturn(mul.result))

        self.assertIs(verify_function(self.function), self.function)

    def test_declaration_is_rejected(self):
        declaration = self.module.add_function(IRFunction("g", function_type(0)))
        with self.assertRaises(IRVerificationError):
            verify_function(declaration)

    def test_empty_block(self):
        self._assert_rejected("is empty")

    def test_missing_terminator(self):
        a, b = self.function.parameters
        self.entry.add_instruction(IRBinaryOp("add", a, b, I32, "addtmp"))
        self._assert_rejected("does not end in a terminator")

    def test_terminator_in_middle_of_block(self):
        a, _ = self.function.parameters
        self.entry.add_instruction(IRReturn(a))
        self.entry.add_instruction(IRReturn(a))
        self._assert_rejected("terminator in the middle")

    def test_use_before_definition(self):
        a, b = self.function.parameters
        orphan = IRBinaryOp("add", a, b, I32, "orphan")
        self.entry.add_instruction(IRReturn(orphan.result))
        self._assert_rejected("used before it is defined")

    def test_foreign_parameter(self):
        other = IRFunction("g", function_type(1), ["z"])
        self.entry.add_instruction(IRReturn(other.parameters[0]))
        self._assert_rejected("parameter of another function")

    def test_parameter_not_in_its_function_list(self):
        stray = IRParameter(I32, "c", self.function, 2)
        self.entry.add_instruction(IRReturn(stray))
        self._assert_rejected("parameter of another function")

    def test_block_owned_by_another_function(self):
        other = self.module.add_function(IRFunction("g", function_type(0)))
        block = other.add_basic_block(IRBasicBlock("body"))
        block.add_instruction(IRReturn(IRConstant(I32, 0)))
        self.function.basic_blocks[0] = block
        self._assert_rejected("belongs to another function")

    def test_detached_instruction(self):
        # Appended to the list directly, bypassing add_instruction
        self.entry.instructions.append(IRReturn(IRConstant(I32, 0)))
        self._assert_rejected("is not attached to block")

    def test_return_type_mismatch(self):
        self.entry.add_instruction(IRReturn(IRConstant(I64, 1)))
        self._assert_rejected("expected i32")

    def test_call_outside_module(self):
        stranger = IRFunction("g", function_type(0))
        call = self.entry.add_instruction(IRCall(stranger, [], "calltmp"))
        self.entry.add_instruction(IRReturn(call.result))
        self._assert_rejected("not in the module")

    def test_call_arity(self):
        callee = self.module.add_function(IRFunction("g", function_type(2)))
        call = self.entry.add_instruction(IRCall(callee, [IRConstant(I32, 1)], "calltmp"))
        self.entry.add_instruction(IRReturn(call.result))
        self._assert_rejected("passes 1 argument(s), expected 2")

    def test_call_argument_type(self):
        callee = self.module.add_function(IRFunction("g", function_type(1)))
        call = self.entry.add_instruction(IRCall(callee, [IRConstant(I64, 1)], "calltmp"))
        self.entry.add_instruction(IRReturn(call.result))
        self._assert_rejected("passes i64 for i32 parameter")

    def test_verify_module_skips_declarations(self):
        self.module.add_function(IRFunction("ext", function_type(3)))
        self.entry.add_instruction(IRReturn(IRConstant(I32, 0)))

        self.assertIs(verify_module(self.module), self.module)


if __name__ == '__main__':
    unittest.main()
