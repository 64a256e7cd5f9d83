"""The context that creates and owns every value of a program."""

from __future__ import annotations

from typing import TypeVar

from .block import BasicBlock
from .function import Function
from .value_type import ValueType
from .values import Argument, ConstantInt, GlobalTag, GlobalValue, LocalValue, Value

__all__ = ["TACContext"]

_V = TypeVar("_V", bound=Value)


class TACContext:
    """Holds the functions, globals, static strings and externs of a program."""

    def __init__(self) -> None:
        self.functions: list[Function] = []
        self.globals: list[Value] = []
        self.static_strings: list[tuple[Value, str]] = []
        self.externs: list[Value] = []
        self._values: list[Value] = []

        self.true = self.create_constant_int(ValueType.U64, 1)
        self.false = self.create_constant_int(ValueType.U64, 0)
        self.one = self.create_constant_int(ValueType.U64, 1)
        self.zero = self.create_constant_int(ValueType.U64, 0)

    @property
    def values(self) -> tuple[Value, ...]:
        """Every value created through this context, in creation order."""
        return tuple(self._values)

    def _register(self, value: _V) -> _V:
        self._values.append(value)
        return value

    def create_argument(self, type: ValueType, name: str) -> Argument:
        return self._register(Argument(self, type, name))

    def create_constant_int(self, type: ValueType, value: int) -> ConstantInt:
        return self._register(ConstantInt(self, type, value))

    def create_extern_function(self, name: str) -> GlobalValue:
        result = self._register(
            GlobalValue(self, ValueType.NON_HEAP_ADDRESS, name, GlobalTag.EXTERN_FUNCTION)
        )
        self.externs.append(result)
        return result

    def create_function(self, name: str) -> Function:
        result = self._register(Function(self, name))
        self.functions.append(result)
        return result

    def create_global(self, type: ValueType, name: str) -> GlobalValue:
        result = self._register(GlobalValue(self, type, name, GlobalTag.VARIABLE))
        self.globals.append(result)
        return result

    def create_static_string(self, name: str, contents: str) -> GlobalValue:
        result = self._register(
            GlobalValue(self, ValueType.REFERENCE, name, GlobalTag.STATIC)
        )
        self.static_strings.append((result, contents))
        return result

    def create_local(self, type: ValueType, name: str) -> LocalValue:
        return self._register(LocalValue(self, type, name))

    def create_temp(self, type: ValueType, seq_number: int = -1, name: str = "") -> Value:
        return self._register(Value(self, type, name, seq_number))

    def create_block(self, parent: Function | None, number: int) -> BasicBlock:
        return self._register(BasicBlock(self, parent, number))