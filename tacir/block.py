"""Basic blocks: straight-line runs of instructions ending in a terminator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from .instructions import (
    ConditionalJumpInst,
    Instruction,
    JumpIfInst,
    JumpInst,
    ReturnInst,
    UnreachableInst,
)
from .value_type import ValueType
from .values import IRError, Value

if TYPE_CHECKING:
    from .function import Function

__all__ = ["branch_targets", "BasicBlock"]


def branch_targets(inst: Instruction | None) -> list[BasicBlock] | None:
    """Return the blocks a terminator can jump to, or None for a non-terminator.

    Returns and unreachable markers terminate a block without any target,
    so they give an empty list.
    """
    if isinstance(inst, (ConditionalJumpInst, JumpIfInst)):
        return [inst.if_true, inst.if_false]
    if isinstance(inst, JumpInst):
        return [inst.target]
    if isinstance(inst, (ReturnInst, UnreachableInst)):
        return []
    return None


class BasicBlock(Value):
    """A labelled block owning a linked list of instructions."""

    def __init__(self, context: Any, parent: Function | None, seq_number: int) -> None:
        super().__init__(context, ValueType.NON_HEAP_ADDRESS, seq_number=seq_number)
        self.parent = parent
        self.first: Instruction | None = None
        self.last: Instruction | None = None
        self._predecessors: list[BasicBlock] = []
        self._successors: list[BasicBlock] = []

    def __str__(self) -> str:
        if self.name:
            return f"label {self.name}"
        return f"label .{self.seq_number}"

    def __iter__(self) -> Iterator[Instruction]:
        """Yield the instructions in order; the current one may be removed."""
        inst = self.first
        while inst is not None:
            following = inst.next
            yield inst
            inst = following

    @property
    def predecessors(self) -> list[BasicBlock]:
        return list(self._predecessors)

    @property
    def successors(self) -> list[BasicBlock]:
        return list(self._successors)

    def _place_alone(self, inst: Instruction) -> None:
        inst.parent = self
        inst.prev = None
        inst.next = None
        self.first = self.last = inst

    def prepend(self, inst: Instruction) -> None:
        """Insert an instruction at the start of the block."""
        if self.first is not None:
            inst.insert_before(self.first)
        else:
            self._place_alone(inst)

    def append(self, inst: Instruction) -> None:
        """Add an instruction at the end; a terminator links the successors."""
        if self._successors:
            raise IRError(f"{self} already ends in a branch")

        if self.last is not None:
            inst.insert_after(self.last)
        else:
            self._place_alone(inst)

        targets = branch_targets(inst)
        if targets:
            for target in targets:
                self._successors.append(target)
                target.add_predecessor(self)

    def add_predecessor(self, block: BasicBlock) -> None:
        """Record a block that can jump here."""
        self._predecessors.append(block)

    def is_terminated(self) -> bool:
        """Return True if the block ends in a terminator instruction."""
        return branch_targets(self.last) is not None