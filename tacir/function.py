"""Functions: a list of basic blocks plus the values they own."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .value_type import ValueType
from .values import GlobalTag, GlobalValue, IRError, Value

if TYPE_CHECKING:
    from .block import BasicBlock

__all__ = ["Function"]


class Function(GlobalValue):
    """A function definition in the IR."""

    def __init__(self, context: Any, name: str) -> None:
        super().__init__(context, ValueType.NON_HEAP_ADDRESS, name, GlobalTag.FUNCTION)
        self.blocks: list[BasicBlock] = []
        self.locals: list[Value] = []
        self.params: list[Value] = []
        self.temps: list[Value] = []
        self._next_seq_number = 0

    def _take_seq_number(self) -> int:
        number = self._next_seq_number
        self._next_seq_number += 1
        return number

    def create_temp(self, type: ValueType, name: str | None = None) -> Value:
        """Create a temporary, numbered unless a name is given."""
        if name is None:
            tmp = self.context.create_temp(type, seq_number=self._take_seq_number())
        else:
            tmp = self.context.create_temp(type, name=name)
        self.temps.append(tmp)
        return tmp

    def create_block(self) -> BasicBlock:
        """Create a new numbered block at the end of the function."""
        block = self.context.create_block(self, self._take_seq_number())
        self.blocks.append(block)
        return block

    def replace_references(self, old: Value, new: Value) -> None:
        """Make every user of `old` use `new` instead, then drop `old`."""
        for inst in list(old.uses):
            inst.replace_references(old, new)
        self.kill_temp(old)

    def kill_temp(self, temp: Value) -> None:
        """Forget a temporary that is neither used nor defined any more."""
        if temp.uses:
            raise IRError(f"{temp} is still used")
        if temp.definition is not None:
            raise IRError(f"{temp} still has a definition")
        self.temps = [value for value in self.temps if value is not temp]