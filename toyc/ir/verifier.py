"""
Structural well-formedness checks for generated IR functions.
"""

import logging
from typing import Set

from .errors import IRVerificationError
from .ir_nodes import (
    IRFunction, IRModule, IRValue, IRConstant, IRParameter, IRCall, IRReturn
)

logger = logging.getLogger(__name__)


def verify_function(function: IRFunction) -> IRFunction:
    """
    Check that a function with a body is well formed.

    Blocks and instructions must be owned by the function being checked.
    Every block must end in exactly one terminator, returned values must
    have the function's return type, operands must be constants, the
    function's own parameters, or results defined earlier, and calls must
    target a function of the same module with matching arity and types.

    Returns:
        The function, unchanged

    Raises:
        IRVerificationError: On the first problem found
    """
    name = function.name

    if function.is_declaration:
        raise IRVerificationError(name, "function has no basic blocks")

    defined: Set[IRValue] = set()

    for block in function.basic_blocks:
        if block.function is not function:
            raise IRVerificationError(name, f"block '{block.name}' belongs to another function")

        if not block.instructions:
            raise IRVerificationError(name, f"block '{block.name}' is empty")

        if not block.is_terminated:
            raise IRVerificationError(name, f"block '{block.name}' does not end in a terminator")

        for instr in block.instructions[:-1]:
            if instr.is_terminator:
                raise IRVerificationError(
                    name, f"terminator in the middle of block '{block.name}'"
                )

        for instr in block.instructions:
            if instr.parent is not block:
                raise IRVerificationError(
                    name, f"instruction '{instr}' is not attached to block '{block.name}'"
                )

            for operand in instr.operands:
                if isinstance(operand, IRConstant):
                    continue
                if isinstance(operand, IRParameter):
                    params = function.parameters
                    if (operand.function is not function or operand.index >= len(params)
                            or params[operand.index] is not operand):
                        raise IRVerificationError(
                            name, f"operand {operand.ref()} is a parameter of another function"
                        )
                    continue
                if operand not in defined:
                    raise IRVerificationError(
                        name, f"operand {operand.ref()} is used before it is defined"
                    )

            if isinstance(instr, IRCall):
                _verify_call(function, instr)

            if isinstance(instr, IRReturn) and instr.value.type != function.return_type:
                raise IRVerificationError(
                    name,
                    f"returns {instr.value.type.name}, expected {function.return_type.name}"
                )

            if instr.result is not None:
                defined.add(instr.result)

    logger.debug("verified function '%s'", name)
    return function


def _verify_call(function: IRFunction, call: IRCall):
    callee = call.function
    module = function.module

    if module is None or module.get_function(callee.name) is not callee:
        raise IRVerificationError(
            function.name, f"call to '{callee.name}', which is not in the module"
        )

    if len(call.args) != len(callee.parameters):
        raise IRVerificationError(
            function.name,
            f"call to '{callee.name}' passes {len(call.args)} argument(s), expected {len(callee.parameters)}"
        )

    for arg, param in zip(call.args, callee.parameters):
        if arg.type != param.type:
            raise IRVerificationError(
                function.name,
                f"call to '{callee.name}' passes {arg.type.name} for {param.type.name} parameter"
            )


def verify_module(module: IRModule) -> IRModule:
    """Verify every defined function in the module."""
    for function in module.functions.values():
        if not function.is_declaration:
            verify_function(function)
    return module
