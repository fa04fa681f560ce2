"""
Symbol table for toyc IR generation.

Maps variable names to the IR values bound to them. The only names in the
language are function parameters, so one flat table per function is enough;
the generator clears it at the start of every function definition.

Author: xwest
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from ..lexer.tokens import SourceLocation
from .ir_nodes import IRValue


@dataclass
class Symbol:
    """A name bound to an IR value."""
    name: str
    value: IRValue
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


class SymbolTable:
    """Flat name -> Symbol mapping, valid for one function at a time."""

    def __init__(self):
        self._symbols: Dict[str, Symbol] = {}

    def define(self, name: str, value: IRValue,
               location: Optional[SourceLocation] = None) -> Symbol:
        """Bind `name`, replacing any earlier binding of the same name."""
        symbol = Symbol(name, value, location)
        self._symbols[name] = symbol
        return symbol

    def lookup(self, name: str) -> Optional[IRValue]:
        """Return the value bound to `name`, or None if unbound."""
        symbol = self._symbols.get(name)
        return symbol.value if symbol else None

    def clear(self):
        """Forget every binding."""
        self._symbols.clear()

    def names(self) -> List[str]:
        return list(self._symbols)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __str__(self) -> str:
        return "{" + ", ".join(str(symbol) for symbol in self) + "}"
