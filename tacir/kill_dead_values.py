"""Remove side-effect-free instructions whose results are never used."""

from __future__ import annotations

from .function import Function
from .instructions import (
    BinaryOperationInst,
    CopyInst,
    IndexedLoadInst,
    Instruction,
    LoadInst,
    PhiInst,
    TACVisitor,
)
from .values import Value

__all__ = ["KillDeadValues"]


class KillDeadValues(TACVisitor):
    """Repeatedly drop dead definitions until nothing changes."""

    def __init__(self, function: Function) -> None:
        self._function = function
        self._context = function.context
        self._changed = False

    def run(self) -> None:
        self._changed = True
        while self._changed:
            self._changed = False
            for block in self._function.blocks:
                for inst in block:
                    inst.accept(self)

    def _kill_if_dead(self, inst: Instruction, dest: Value) -> None:
        if not dest.uses:
            inst.remove_from_parent()
            self._changed = True

    def visit_binary_operation(self, inst: BinaryOperationInst) -> None:
        self._kill_if_dead(inst, inst.dest)

    def visit_copy(self, inst: CopyInst) -> None:
        self._kill_if_dead(inst, inst.dest)

    def visit_indexed_load(self, inst: IndexedLoadInst) -> None:
        self._kill_if_dead(inst, inst.lhs)

    def visit_load(self, inst: LoadInst) -> None:
        self._kill_if_dead(inst, inst.dest)

    def visit_phi(self, inst: PhiInst) -> None:
        self._kill_if_dead(inst, inst.dest)