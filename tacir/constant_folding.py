"""Fold binary operations whose operands are both integer constants."""

from __future__ import annotations

from typing import Callable

from .function import Function
from .instructions import BinaryOperation, BinaryOperationInst, CopyInst, TACVisitor
from .value_type import get_size, is_integer, is_signed
from .values import ConstantInt, IRError

__all__ = ["ConstantFolding"]

_MASK64 = (1 << 64) - 1

_SIMPLE: dict[BinaryOperation, Callable[[int, int], int]] = {
    BinaryOperation.ADD: lambda a, b: a + b,
    BinaryOperation.SUB: lambda a, b: a - b,
    BinaryOperation.MUL: lambda a, b: a * b,
    BinaryOperation.AND: lambda a, b: a & b,
}


def _as_signed(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value >> 63 else value


def _truncating_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class ConstantFolding(TACVisitor):
    """Replace constant arithmetic in a function by its result."""

    def __init__(self, function: Function) -> None:
        self._function = function
        self._context = function.context

    def run(self) -> None:
        for block in self._function.blocks:
            for inst in block:
                inst.accept(self)

    def visit_copy(self, inst: CopyInst) -> None:
        pass

    def visit_binary_operation(self, inst: BinaryOperationInst) -> None:
        lhs, rhs = inst.lhs, inst.rhs
        if not (isinstance(lhs, ConstantInt) and isinstance(rhs, ConstantInt)):
            return

        type = lhs.type
        if rhs.type is not type or not is_integer(type):
            raise IRError(f"cannot fold {inst}: operands must share an integer type")

        a = lhs.value & _MASK64
        b = rhs.value & _MASK64
        op = inst.op

        if op in _SIMPLE:
            result = _SIMPLE[op](a, b)
        elif op in (BinaryOperation.SHL, BinaryOperation.SHR):
            if b >= 32:
                raise IRError(f"cannot fold {inst}: shift amount out of range")
            result = a << b if op is BinaryOperation.SHL else a >> b
        elif op in (BinaryOperation.DIV, BinaryOperation.MOD):
            if b == 0:
                raise IRError(f"cannot fold {inst}: division by zero")
            if is_signed(type):
                sa, sb = _as_signed(a), _as_signed(b)
                quotient = _truncating_div(sa, sb)
                result = quotient if op is BinaryOperation.DIV else sa - sb * quotient
            else:
                result = a // b if op is BinaryOperation.DIV else a % b
        else:
            raise IRError(f"cannot fold {inst}: unknown operation")

        result &= (1 << get_size(type)) - 1

        folded = self._context.create_constant_int(type, result)
        dest = inst.dest
        inst.remove_from_parent()
        self._function.replace_references(dest, folded)