"""
Top-level compilation driver for toyc.

Reads units (function definitions and bare top-level expressions) one at a
time and hands each to the IR generator. A unit that fails to parse or to
generate is reported and skipped; the driver then carries on with the rest
of the input.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Union

from .config import CompilerConfig
from .lexer.errors import Diagnostic
from .lexer.lexer import Lexer
from .lexer.tokens import TokenType
from .parser.parser import Parser
from .ir.ir_generator import IRGenerator
from .ir.ir_nodes import IRFunction, IRModule

logger = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    """Outcome of driving one source to completion."""
    module: IRModule
    functions: List[IRFunction] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.warnings + self.errors

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def success(self) -> bool:
        return not self.has_errors()


class Driver:
    """
    Main loop over top-level units.

    EOF stops the loop, ';' is skipped, 'def' starts a definition and any
    other token starts a top-level expression.
    """

    def __init__(self, source: Union[str, TextIO],
                 config: Optional[CompilerConfig] = None):
        self.config = (config or CompilerConfig()).validate()
        self.lexer = Lexer(source, self.config.filename)
        self.parser = Parser(self.lexer, self.config)
        self.generator = IRGenerator(self.config)
        self.functions: List[IRFunction] = []
        self.failed_units = 0

        # Diagnostics in the order they were raised, and how many of each
        # component's records have been taken so far
        self.warnings: List[Diagnostic] = []
        self.errors: List[Diagnostic] = []
        self._taken = [0, 0, 0, 0]

    @property
    def module(self) -> IRModule:
        return self.generator.module

    def run(self) -> CompilationResult:
        """Compile every unit of the source and collect the results."""
        self.parser.next_token()

        while True:
            token = self.parser.current_token
            if token.type == TokenType.EOF:
                break
            if token.is_char(';'):
                self.parser.next_token()
            elif token.type == TokenType.DEF:
                self.handle_definition()
            else:
                self.handle_top_level_expression()
            self._collect()

        logger.debug("finished module '%s': %d function(s) generated, %d unit(s) failed",
                     self.module.name, len(self.functions), self.failed_units)
        return self.result()

    def result(self) -> CompilationResult:
        self._collect()
        return CompilationResult(
            module=self.module,
            functions=list(self.functions),
            warnings=list(self.warnings),
            errors=list(self.errors),
        )

    def _collect(self):
        """Append diagnostics recorded since the last call."""
        sources = [
            (self.lexer.warnings, self.warnings),
            (self.parser.errors, self.errors),
            (self.generator.warnings, self.warnings),
            (self.generator.errors, self.errors),
        ]
        for i, (recorded, target) in enumerate(sources):
            target.extend(item.diagnostic for item in recorded[self._taken[i]:])
            self._taken[i] = len(recorded)

    def handle_definition(self):
        """Parse and generate one 'def' unit."""
        location = self.parser.current_token.location
        definition = self.parser.parse_function_definition()
        if definition is None:
            self._parse_failed(location)
            return

        logger.debug("handling definition of '%s' at %s", definition.declaration.name, location)
        self._generate(definition, location)

    def handle_top_level_expression(self):
        """Parse and generate one bare expression as an anonymous function."""
        location = self.parser.current_token.location
        definition = self.parser.parse_top_level_expression()
        if definition is None:
            self._parse_failed(location)
            return

        logger.debug("handling top-level expression at %s", location)
        self._generate(definition, location)

    def _parse_failed(self, location):
        self.failed_units += 1
        logger.info("skipping unit at %s: %s", location, self.parser.errors[-1].diagnostic.message)
        # Skip one token for error recovery
        self.parser.next_token()

    def _generate(self, definition, location):
        self._collect()
        function = self.generator.generate_definition(definition)
        if function is None:
            self.failed_units += 1
            logger.info("discarding unit at %s: %s", location,
                        self.generator.errors[-1].diagnostic.message)
            return
        self.functions.append(function)


def compile_source(source: Union[str, TextIO],
                   config: Optional[CompilerConfig] = None) -> CompilationResult:
    """
    Compile source text (or an open text stream) into an IR module.

    Args:
        source: Program text or a readable text stream
        config: Compiler configuration

    Returns:
        The compilation result; check `has_errors()` for failed units
    """
    return Driver(source, config).run()


def compile_file(path: str, config: Optional[CompilerConfig] = None,
                 encoding: str = 'utf-8') -> CompilationResult:
    """
    Compile a source file.

    Raises:
        OSError: If the file cannot be opened
    """
    config = config or CompilerConfig(filename=path)
    with open(path, 'r', encoding=encoding) as f:
        return Driver(f, config).run()
