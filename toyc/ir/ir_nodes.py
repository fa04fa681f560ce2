"""
toyc Intermediate Representation Nodes

Register based, SSA style IR: a module holds functions, a function holds
basic blocks, a block holds instructions. Every value has the single fixed
width integer type of the language.

Author: xwest
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple


# ============================================================================
# Types
# ============================================================================

@dataclass(frozen=True)
class IRIntegerType:
    """Fixed width integer type."""
    bits: int

    @property
    def name(self) -> str:
        return f"i{self.bits}"

    def wrap(self, value: int) -> int:
        """Truncate an integer to this width, two's complement."""
        mask = (1 << self.bits) - 1
        value &= mask
        if value >= 1 << (self.bits - 1):
            value -= 1 << self.bits
        return value

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IRFunctionType:
    """Function IR type."""
    return_type: IRIntegerType
    param_types: Tuple[IRIntegerType, ...]

    @property
    def name(self) -> str:
        return f"{self.return_type.name} ({', '.join(t.name for t in self.param_types)})"

    def __str__(self) -> str:
        return self.name


# ============================================================================
# Values
# ============================================================================

class IRValue:
    """Represents a value in SSA form."""

    def __init__(self, ir_type: IRIntegerType, name: str = ""):
        self.type = ir_type
        self.name = name

    def ref(self) -> str:
        """Operand spelling of this value, without its type."""
        return f"%{self.name}"

    def __str__(self) -> str:
        return f"{self.type.name} {self.ref()}"

    def __repr__(self) -> str:
        return f"IRValue({self.ref()}: {self.type.name})"


class IRConstant(IRValue):
    """Constant value in IR."""

    def __init__(self, ir_type: IRIntegerType, value: int):
        super().__init__(ir_type, f"const_{value}")
        self.value = value

    def ref(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"IRConstant({self.type.name} {self.value})"


class IRParameter(IRValue):
    """Formal parameter of a function."""

    def __init__(self, ir_type: IRIntegerType, name: str, function: 'IRFunction', index: int):
        super().__init__(ir_type, name)
        self.function = function
        self.index = index


# ============================================================================
# Containers
# ============================================================================

class IRNode(ABC):
    """Base class for all IR nodes."""

    def __init__(self, name: str = ""):
        self.name = name

    @abstractmethod
    def __str__(self) -> str:
        pass


class IRBasicBlock(IRNode):
    """Basic block containing a sequence of instructions."""

    def __init__(self, name: str = ""):
        super().__init__(name)
        self.instructions: List['IRInstruction'] = []
        self.function: Optional['IRFunction'] = None

    def add_instruction(self, instruction: 'IRInstruction') -> 'IRInstruction':
        """Append an instruction to this basic block."""
        instruction.parent = self
        self.instructions.append(instruction)
        return instruction

    @property
    def terminator(self) -> Optional['IRInstruction']:
        if self.instructions and self.instructions[-1].is_terminator:
            return self.instructions[-1]
        return None

    @property
    def is_terminated(self) -> bool:
        return self.terminator is not None

    def __str__(self) -> str:
        lines = [f"{self.name}:"]
        for instr in self.instructions:
            lines.append(f"  {instr}")
        return "\n".join(lines)


class IRFunction(IRNode):
    """Function in IR. A function without basic blocks is a declaration."""

    def __init__(self, name: str, func_type: IRFunctionType,
                 param_names: Optional[Sequence[str]] = None):
        super().__init__(name)
        self.type = func_type
        self.basic_blocks: List[IRBasicBlock] = []
        self.module: Optional['IRModule'] = None
        self.is_anonymous = False

        # Per-function value names; parameters and results share one namespace
        self._name_counts: Dict[str, int] = {}
        self._used_names: Set[str] = set()

        if param_names is None:
            param_names = [f"arg{i}" for i in range(len(func_type.param_types))]
        if len(param_names) != len(func_type.param_types):
            raise ValueError(
                f"function '{name}' takes {len(func_type.param_types)} parameters, "
                f"got {len(param_names)} names"
            )

        self.parameters: List[IRParameter] = [
            IRParameter(param_type, self.unique_name(param_name), self, i)
            for i, (param_type, param_name) in enumerate(zip(func_type.param_types, param_names))
        ]

    @property
    def return_type(self) -> IRIntegerType:
        return self.type.return_type

    @property
    def entry_block(self) -> Optional[IRBasicBlock]:
        return self.basic_blocks[0] if self.basic_blocks else None

    @property
    def is_declaration(self) -> bool:
        """True while the function has no body."""
        return not self.basic_blocks

    def unique_name(self, base: str) -> str:
        """Reserve a value name in this function, suffixing a counter on clashes."""
        name = base
        while name in self._used_names:
            self._name_counts[base] = self._name_counts.get(base, 0) + 1
            name = f"{base}{self._name_counts[base]}"
        self._used_names.add(name)
        return name

    def rename_parameters(self, names: Sequence[str]):
        """Give a body-less function new parameter names."""
        if not self.is_declaration:
            raise ValueError(f"cannot rename parameters of defined function '{self.name}'")
        if len(names) != len(self.parameters):
            raise ValueError(f"function '{self.name}' takes {len(self.parameters)} parameters")

        self._name_counts.clear()
        self._used_names.clear()
        for param, name in zip(self.parameters, names):
            param.name = self.unique_name(name)

    def add_basic_block(self, block: IRBasicBlock) -> IRBasicBlock:
        """Add a basic block to this function."""
        block.function = self
        block.name = self.unique_name(block.name or "block")
        self.basic_blocks.append(block)
        return block

    def clear_body(self):
        """Drop every basic block, turning the function back into a declaration."""
        for block in self.basic_blocks:
            for instr in block.instructions:
                instr.parent = None
            block.function = None
        self.basic_blocks.clear()

        # Only parameter names stay reserved
        names = [param.name for param in self.parameters]
        self._name_counts.clear()
        self._used_names = set(names)

    def instructions(self):
        """Iterate over all instructions in block order."""
        for block in self.basic_blocks:
            yield from block.instructions

    def signature(self) -> str:
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.return_type.name} @{self.name}({params})"

    def __str__(self) -> str:
        if self.is_declaration:
            return f"declare {self.signature()}"

        lines = [f"define {self.signature()} {{"]
        for block in self.basic_blocks:
            lines.append(str(block))
        lines.append("}")
        return "\n".join(lines)


class IRModule(IRNode):
    """Top-level IR module; functions are kept in insertion order."""

    def __init__(self, name: str):
        super().__init__(name)
        self.functions: Dict[str, IRFunction] = {}

    def add_function(self, function: IRFunction) -> IRFunction:
        """Add a function to this module."""
        if function.name in self.functions:
            raise ValueError(f"module '{self.name}' already has a function named '{function.name}'")
        function.module = self
        self.functions[function.name] = function
        return function

    def get_function(self, name: str) -> Optional[IRFunction]:
        """Get a function by name."""
        return self.functions.get(name)

    def remove_function(self, name: str) -> IRFunction:
        """Erase a function from the module."""
        function = self.functions.pop(name)
        function.clear_body()
        function.module = None
        return function

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __len__(self) -> int:
        return len(self.functions)

    def __str__(self) -> str:
        lines = [f"; ModuleID = '{self.name}'"]
        for func in self.functions.values():
            lines.append("")
            lines.append(str(func))
        return "\n".join(lines) + "\n"


# ============================================================================
# Instructions
# ============================================================================

class IRInstruction(IRNode):
    """Base class for IR instructions."""

    is_terminator = False

    def __init__(self, operands: List[IRValue],
                 result_type: Optional[IRIntegerType] = None, result_name: str = ""):
        super().__init__(result_name)
        self.operands = operands
        self.result: Optional[IRValue] = None
        self.parent: Optional['IRBasicBlock'] = None

        # Create result value if needed
        if result_type is not None:
            self.result = IRValue(result_type, result_name)


# Source operator -> (IR opcode, result name)
BINARY_OPCODES = {
    '+': ("add", "addtmp"),
    '-': ("sub", "subtmp"),
    '*': ("mul", "multmp"),
    '/': ("udiv", "divtmp"),
}


class IRBinaryOp(IRInstruction):
    """Binary arithmetic instruction; `opcode` is one of add, sub, mul, udiv."""

    def __init__(self, opcode: str, left: IRValue, right: IRValue,
                 result_type: IRIntegerType, result_name: str = ""):
        super().__init__([left, right], result_type, result_name)
        self.opcode = opcode
        self.left = left
        self.right = right

    def __str__(self) -> str:
        return f"{self.result.ref()} = {self.opcode} {self.left.type.name} {self.left.ref()}, {self.right.ref()}"


class IRCall(IRInstruction):
    """Function call instruction."""

    def __init__(self, function: IRFunction, args: List[IRValue], result_name: str = ""):
        super().__init__(list(args), function.return_type, result_name)
        self.function = function
        self.args = list(args)

    def __str__(self) -> str:
        arg_strs = [str(arg) for arg in self.args]
        return f"{self.result.ref()} = call {self.function.return_type.name} @{self.function.name}({', '.join(arg_strs)})"


class IRReturn(IRInstruction):
    """Return instruction."""

    is_terminator = True

    def __init__(self, value: IRValue):
        super().__init__([value])
        self.value = value

    def __str__(self) -> str:
        return f"ret {self.value}"
