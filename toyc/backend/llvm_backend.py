"""
LLVM Backend for toyc.

Lowers a finished toyc IR module to an llvmlite module, checks it with
LLVM's own verifier and renders it as textual LLVM IR.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import llvmlite.binding as llvm
import llvmlite.ir as ll

from ..config import CompilerConfig
from ..ir.ir_nodes import (
    IRModule, IRFunction, IRFunctionType, IRIntegerType, IRBasicBlock,
    IRInstruction, IRValue, IRConstant, IRBinaryOp, IRCall, IRReturn
)

logger = logging.getLogger(__name__)


@dataclass
class LLVMGenContext:
    """Context for LLVM code generation."""
    module: Optional[ll.Module] = None
    builder: Optional[ll.IRBuilder] = None
    current_function: Optional[ll.Function] = None
    value_map: Dict[IRValue, Any] = field(default_factory=dict)  # IR value -> LLVM value
    function_map: Dict[str, ll.Function] = field(default_factory=dict)


class LLVMBackend:
    """
    LLVM backend for toyc.

    Every function of the IR module is declared first so calls can refer to
    functions defined later in the module; bodies are emitted afterwards.
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()
        self.context = LLVMGenContext()

    def generate(self, ir_module: IRModule) -> ll.Module:
        """
        Generate an llvmlite module from a toyc IR module.

        Args:
            ir_module: toyc IR module

        Returns:
            The llvmlite module (unverified; see verify())
        """
        self.context = LLVMGenContext(module=ll.Module(name=ir_module.name))
        if self.config.target_triple:
            self.context.module.triple = self.config.target_triple

        self._generate_function_declarations(ir_module)
        self._generate_function_definitions(ir_module)

        logger.debug("lowered module '%s' with %d function(s) to LLVM",
                     ir_module.name, len(ir_module))
        return self.context.module

    def _generate_function_declarations(self, ir_module: IRModule):
        for func_name, ir_function in ir_module.functions.items():
            llvm_func_type = self._convert_function_type(ir_function.type)
            llvm_function = ll.Function(self.context.module, llvm_func_type, func_name)

            for ir_param, llvm_arg in zip(ir_function.parameters, llvm_function.args):
                llvm_arg.name = ir_param.name
                self.context.value_map[ir_param] = llvm_arg

            self.context.function_map[func_name] = llvm_function

    def _generate_function_definitions(self, ir_module: IRModule):
        for ir_function in ir_module.functions.values():
            if not ir_function.is_declaration:
                self._generate_function(ir_function)

    def _generate_function(self, ir_function: IRFunction):
        llvm_function = self.context.function_map[ir_function.name]
        self.context.current_function = llvm_function

        for ir_block in ir_function.basic_blocks:
            self._generate_basic_block(llvm_function, ir_block)

    def _generate_basic_block(self, llvm_function: ll.Function, ir_block: IRBasicBlock):
        llvm_block = llvm_function.append_basic_block(ir_block.name)
        self.context.builder = ll.IRBuilder(llvm_block)

        for ir_instruction in ir_block.instructions:
            self._generate_instruction(ir_instruction)

    def _generate_instruction(self, ir_instruction: IRInstruction):
        if isinstance(ir_instruction, IRBinaryOp):
            self._generate_binary_op(ir_instruction)
        elif isinstance(ir_instruction, IRCall):
            self._generate_call(ir_instruction)
        elif isinstance(ir_instruction, IRReturn):
            self._generate_return(ir_instruction)
        else:
            raise ValueError(f"Unsupported IR instruction: {type(ir_instruction).__name__}")

    def _generate_binary_op(self, ir_instruction: IRBinaryOp):
        left = self._get_llvm_value(ir_instruction.left)
        right = self._get_llvm_value(ir_instruction.right)
        builder = self.context.builder
        name = ir_instruction.result.name

        emitters = {
            "add": builder.add,
            "sub": builder.sub,
            "mul": builder.mul,
            "udiv": builder.udiv,
        }
        if ir_instruction.opcode not in emitters:
            raise ValueError(f"Unsupported binary opcode: {ir_instruction.opcode}")

        result = emitters[ir_instruction.opcode](left, right, name=name)
        self.context.value_map[ir_instruction.result] = result

    def _generate_call(self, ir_instruction: IRCall):
        func = self.context.function_map[ir_instruction.function.name]
        args = [self._get_llvm_value(arg) for arg in ir_instruction.args]

        result = self.context.builder.call(func, args, name=ir_instruction.result.name)
        self.context.value_map[ir_instruction.result] = result

    def _generate_return(self, ir_instruction: IRReturn):
        self.context.builder.ret(self._get_llvm_value(ir_instruction.value))

    def _convert_type(self, ir_type: IRIntegerType) -> ll.IntType:
        return ll.IntType(ir_type.bits)

    def _convert_function_type(self, ir_func_type: IRFunctionType) -> ll.FunctionType:
        return_type = self._convert_type(ir_func_type.return_type)
        param_types = [self._convert_type(param_type) for param_type in ir_func_type.param_types]
        return ll.FunctionType(return_type, param_types)

    def _get_llvm_value(self, ir_value: IRValue) -> Any:
        if isinstance(ir_value, IRConstant):
            return ll.Constant(self._convert_type(ir_value.type), ir_value.value)
        if ir_value in self.context.value_map:
            return self.context.value_map[ir_value]
        raise ValueError(f"IR value {ir_value.ref()} has no LLVM counterpart")

    def verify(self, llvm_module: ll.Module) -> 'llvm.ModuleRef':
        """
        Run LLVM's verifier over the textual form of a module.

        Returns:
            The parsed module reference

        Raises:
            RuntimeError: If LLVM rejects the module
        """
        try:
            module_ref = llvm.parse_assembly(str(llvm_module))
            module_ref.verify()
        except RuntimeError:
            logger.error("LLVM module verification failed; generated IR:\n%s", llvm_module)
            raise
        return module_ref

    def print_llvm_ir(self, llvm_module: ll.Module) -> str:
        """
        Get the LLVM IR as a string.

        Args:
            llvm_module: LLVM module

        Returns:
            LLVM IR as string
        """
        return str(llvm_module)
