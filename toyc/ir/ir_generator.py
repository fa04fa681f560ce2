"""
IR Generator for toyc.

Lowers parsed function definitions into the module's IR. Each definition is
generated in isolation: the symbol table is cleared first, and a definition
whose body cannot be generated leaves the module as it found it.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..config import CompilerConfig
from ..parser.ast_nodes import (
    Expression, NumberLiteral, VariableReference, BinaryExpression,
    FunctionCall, FunctionDeclaration, FunctionDefinition
)
from .errors import (
    CodegenError, CodegenWarning, create_unbound_variable_error,
    create_unknown_function_error, create_unsupported_operator_error, create_redefinition_error,
    create_signature_mismatch_error, create_argument_count_error,
    create_unsupported_node_error, create_truncated_literal_warning
)
from .ir_nodes import (
    IRModule, IRFunction, IRFunctionType, IRIntegerType, IRBasicBlock,
    IRValue, IRConstant, IRBinaryOp, IRCall, IRReturn, BINARY_OPCODES
)
from .symbol_table import SymbolTable
from .verifier import verify_function

logger = logging.getLogger(__name__)


def _location(node):
    span = getattr(node, "span", None)
    return span.start if span is not None else None


@dataclass
class IRGenContext:
    """Context for IR generation of the current definition."""
    current_function: Optional[IRFunction] = None
    current_block: Optional[IRBasicBlock] = None
    symbols: SymbolTable = field(default_factory=SymbolTable)
    # Callees forward-declared while lowering the current definition
    implicit_declarations: List[IRFunction] = field(default_factory=list)

    def reset(self):
        self.current_function = None
        self.current_block = None
        self.symbols.clear()
        self.implicit_declarations = []


class IRGenerator:
    """
    Generates toyc IR from function definitions.

    Public generate_* methods return None on failure and append the
    CodegenError to `errors`. The underscored helpers raise. Literals that
    do not fit the integer width are wrapped and noted in `warnings`.
    """

    def __init__(self, config: Optional[CompilerConfig] = None,
                 module: Optional[IRModule] = None):
        """
        Initialize the IR generator.

        Args:
            config: Compiler configuration
            module: Module to add functions to; a new one is created if omitted
        """
        self.config = config or CompilerConfig()
        self.module = module if module is not None else IRModule(self.config.module_name)
        self.int_type = IRIntegerType(self.config.int_bits)
        self.context = IRGenContext()
        self.errors: List[CodegenError] = []
        self.warnings: List[CodegenWarning] = []
        self._anonymous_count = 0

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def generate_definition(self, definition: FunctionDefinition) -> Optional[IRFunction]:
        """
        Generate a verified function for a definition.

        Returns:
            The generated function, or None if generation failed
        """
        try:
            return self._generate_function_definition(definition)
        except CodegenError as e:
            return self._record(e)

    def generate_declaration(self, declaration: FunctionDeclaration) -> Optional[IRFunction]:
        """
        Create or resolve the function for a declaration without a body.

        Parameters are bound into the symbol table as a side effect.
        """
        try:
            return self._generate_function_declaration(declaration)
        except CodegenError as e:
            return self._record(e)

    def generate_expression(self, expr: Expression) -> Optional[IRValue]:
        """
        Lower an expression into the current block.

        Only meaningful while a function body is being generated.
        """
        try:
            return self._generate_expression(expr)
        except CodegenError as e:
            return self._record(e)

    def _record(self, error: CodegenError) -> None:
        self.errors.append(error)
        logger.debug("codegen error: %s", error.diagnostic.message)
        return None

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def _generate_function_definition(self, definition: FunctionDefinition) -> IRFunction:
        self.context.reset()

        declaration = definition.declaration
        existed = (not declaration.is_anonymous
                   and self.module.get_function(declaration.name) is not None)

        function = self._generate_function_declaration(declaration)

        entry = function.add_basic_block(IRBasicBlock("entry"))
        self.context.current_function = function
        self.context.current_block = entry

        try:
            return_value = self._generate_expression(definition.body)
            entry.add_instruction(IRReturn(return_value))
            verify_function(function)
        except CodegenError:
            self._discard(function, created=not existed)
            raise
        finally:
            self.context.current_function = None
            self.context.current_block = None

        logger.debug("generated function '%s' (%d instruction(s))",
                     function.name, len(entry.instructions))
        return function

    def _discard(self, function: IRFunction, created: bool):
        """Undo a failed definition."""
        if created:
            self.module.remove_function(function.name)
            logger.debug("removed function '%s' after failed definition", function.name)
        else:
            # Keep the earlier forward declaration usable by existing callers
            function.clear_body()
            logger.debug("reset function '%s' to a declaration", function.name)

        for declared in self.context.implicit_declarations:
            if declared is not function and self.module.get_function(declared.name) is declared:
                self.module.remove_function(declared.name)
        self.context.implicit_declarations = []

    def _function_type(self, arity: int) -> IRFunctionType:
        return IRFunctionType(self.int_type, tuple(self.int_type for _ in range(arity)))

    def _next_anonymous_name(self) -> str:
        while True:
            name = f"{self.config.anonymous_prefix}{self._anonymous_count}"
            self._anonymous_count += 1
            if name not in self.module:
                return name

    def _generate_function_declaration(self, declaration: FunctionDeclaration) -> IRFunction:
        params = declaration.params
        location = _location(declaration)

        if declaration.is_anonymous:
            function = IRFunction(self._next_anonymous_name(), self._function_type(len(params)), params)
            function.is_anonymous = True
            self.module.add_function(function)
        else:
            function = self.module.get_function(declaration.name)
            if function is None:
                function = IRFunction(declaration.name, self._function_type(len(params)), params)
                self.module.add_function(function)
            else:
                if len(function.parameters) != len(params):
                    raise create_signature_mismatch_error(
                        declaration.name, len(function.parameters), len(params), location
                    )
                if not function.is_declaration:
                    raise create_redefinition_error(declaration.name, location)
                function.rename_parameters(params)

        for name, param in zip(params, function.parameters):
            self.context.symbols.define(name, param, location)

        return function

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _generate_expression(self, expr: Expression) -> IRValue:
        """Lower an expression, raising CodegenError on failure."""
        if isinstance(expr, NumberLiteral):
            return self._generate_number(expr)
        elif isinstance(expr, VariableReference):
            return self._generate_variable(expr)
        elif isinstance(expr, BinaryExpression):
            return self._generate_binary(expr)
        elif isinstance(expr, FunctionCall):
            return self._generate_call(expr)
        raise create_unsupported_node_error(expr)

    def _generate_number(self, expr: NumberLiteral) -> IRValue:
        value = self.int_type.wrap(expr.value)
        if value != expr.value:
            warning = create_truncated_literal_warning(
                expr.value, value, self.int_type.bits, _location(expr)
            )
            self.warnings.append(warning)
            logger.warning("%s: %s", _location(expr), warning.diagnostic.message)
        return IRConstant(self.int_type, value)

    def _generate_variable(self, expr: VariableReference) -> IRValue:
        value = self.context.symbols.lookup(expr.name)
        if value is None:
            raise create_unbound_variable_error(
                expr.name, _location(expr), self.context.symbols.names()
            )
        return value

    def _current_function(self) -> IRFunction:
        if self.context.current_block is None:
            raise CodegenError("No insertion block: expressions can only be lowered inside a function body")
        return self.context.current_function

    def _emit(self, instruction):
        return self.context.current_block.add_instruction(instruction)

    def _generate_binary(self, expr: BinaryExpression) -> IRValue:
        left = self._generate_expression(expr.left)
        right = self._generate_expression(expr.right)

        if expr.operator not in BINARY_OPCODES:
            raise create_unsupported_operator_error(expr.operator, _location(expr))

        opcode, result_name = BINARY_OPCODES[expr.operator]
        function = self._current_function()
        instr = IRBinaryOp(opcode, left, right, self.int_type, function.unique_name(result_name))
        self._emit(instr)
        return instr.result

    def _resolve_callee(self, expr: FunctionCall) -> IRFunction:
        callee = self.module.get_function(expr.callee)
        if callee is not None and not callee.is_anonymous:
            if len(callee.parameters) != len(expr.args):
                raise create_argument_count_error(
                    expr.callee, len(callee.parameters), len(expr.args), _location(expr)
                )
            return callee

        if callee is not None or not self.config.implicit_declarations:
            known = [name for name, f in self.module.functions.items() if not f.is_anonymous]
            raise create_unknown_function_error(expr.callee, _location(expr), known)

        callee = IRFunction(expr.callee, self._function_type(len(expr.args)))
        self.module.add_function(callee)
        self.context.implicit_declarations.append(callee)
        logger.debug("implicitly declared '%s' with %d parameter(s)", expr.callee, len(expr.args))
        return callee

    def _generate_call(self, expr: FunctionCall) -> IRValue:
        callee = self._resolve_callee(expr)

        args = [self._generate_expression(arg) for arg in expr.args]

        function = self._current_function()
        instr = IRCall(callee, args, function.unique_name("calltmp"))
        self._emit(instr)
        return instr.result
