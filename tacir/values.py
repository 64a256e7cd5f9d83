"""Values that instructions of the IR operate on."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from .value_type import ValueType, value_type_string

if TYPE_CHECKING:
    from .instructions import Instruction

__all__ = [
    "IRError",
    "Value",
    "Constant",
    "ConstantInt",
    "GlobalTag",
    "GlobalValue",
    "LocalValue",
    "Argument",
]


class IRError(Exception):
    """Raised when an operation would break an invariant of the IR."""


class Value:
    """A temporary or any other operand of an instruction.

    A value is printed by its sequence number when it has one, and by its
    name otherwise.
    """

    def __init__(
        self,
        context: Any,
        type: ValueType,
        name: str = "",
        seq_number: int = -1,
    ) -> None:
        self.context = context
        self.type = type
        self.name = name
        self.seq_number = seq_number
        self.uses: set[Instruction] = set()
        self.definition: Instruction | None = None

    def __str__(self) -> str:
        label = self.seq_number if self.seq_number >= 0 else self.name
        return f"{value_type_string(self.type)} %{label}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"


class Constant(Value):
    """A value that is never redefined by an instruction."""


_INT64_MOD = 1 << 64
_INT64_MAX = (1 << 63) - 1


def _to_int64(value: int) -> int:
    value %= _INT64_MOD
    return value - _INT64_MOD if value > _INT64_MAX else value


class ConstantInt(Constant):
    """An integer literal, stored as a signed 64-bit two's complement number."""

    def __init__(self, context: Any, type: ValueType, value: int) -> None:
        super().__init__(context, type)
        self.value = _to_int64(value)

    def __str__(self) -> str:
        return f"{value_type_string(self.type)} {self.value}"


class GlobalTag(Enum):
    """What kind of thing a global value names."""

    VARIABLE = auto()
    FUNCTION = auto()
    STATIC = auto()
    EXTERN_FUNCTION = auto()


class GlobalValue(Constant):
    """A named value with program-wide scope."""

    def __init__(self, context: Any, type: ValueType, name: str, tag: GlobalTag) -> None:
        super().__init__(context, type, name)
        self.tag = tag

    def __str__(self) -> str:
        return f"{value_type_string(self.type)} @{self.name}"


class LocalValue(Constant):
    """A named local variable, accessed through loads and stores."""

    def __init__(self, context: Any, type: ValueType, name: str) -> None:
        super().__init__(context, type, name)

    def __str__(self) -> str:
        return f"{value_type_string(self.type)} ${self.name}"


class Argument(Constant):
    """A named function parameter."""

    def __init__(self, context: Any, type: ValueType, name: str) -> None:
        super().__init__(context, type, name)

    def __str__(self) -> str:
        return f"{value_type_string(self.type)} ${self.name}"