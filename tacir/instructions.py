"""Three-address instructions and the visitor that walks them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Iterable, Iterator

from .values import IRError, Value

__all__ = [
    "TACVisitor",
    "Instruction",
    "ConditionalJumpInst",
    "JumpIfInst",
    "ReturnInst",
    "JumpInst",
    "CopyInst",
    "CallInst",
    "LoadInst",
    "StoreInst",
    "IndexedLoadInst",
    "IndexedStoreInst",
    "BinaryOperation",
    "BinaryOperationInst",
    "UnreachableInst",
    "PhiInst",
    "MemsetFn",
]


class TACVisitor:
    """Base visitor; every hook falls back to `_default_visit`."""

    def _default_visit(self, inst: Instruction) -> None:
        """Accept an instruction the subclass has no hook for and leave it as is."""
        if not isinstance(inst, Instruction):
            raise TypeError(f"expected an instruction, got {type(inst).__name__}")

    def visit_binary_operation(self, inst: BinaryOperationInst) -> None:
        self._default_visit(inst)

    def visit_call(self, inst: CallInst) -> None:
        self._default_visit(inst)

    def visit_conditional_jump(self, inst: ConditionalJumpInst) -> None:
        self._default_visit(inst)

    def visit_copy(self, inst: CopyInst) -> None:
        self._default_visit(inst)

    def visit_indexed_load(self, inst: IndexedLoadInst) -> None:
        self._default_visit(inst)

    def visit_indexed_store(self, inst: IndexedStoreInst) -> None:
        self._default_visit(inst)

    def visit_jump_if(self, inst: JumpIfInst) -> None:
        self._default_visit(inst)

    def visit_jump(self, inst: JumpInst) -> None:
        self._default_visit(inst)

    def visit_load(self, inst: LoadInst) -> None:
        self._default_visit(inst)

    def visit_memset(self, inst: MemsetFn) -> None:
        self._default_visit(inst)

    def visit_phi(self, inst: PhiInst) -> None:
        self._default_visit(inst)

    def visit_return(self, inst: ReturnInst) -> None:
        self._default_visit(inst)

    def visit_store(self, inst: StoreInst) -> None:
        self._default_visit(inst)

    def visit_unreachable(self, inst: UnreachableInst) -> None:
        self._default_visit(inst)


class Instruction(ABC):
    """An instruction, linked into the instruction list of its basic block.

    Subclasses name the visitor hook, the attribute holding the value they
    define (if any) and the attributes holding the values they use; the
    bookkeeping of definitions and uses is shared here.
    """

    _visit_hook: ClassVar[str]
    _dest_attr: ClassVar[str | None] = None
    _operand_attrs: ClassVar[tuple[str, ...]] = ()

    def __init__(self) -> None:
        self.parent: Any = None
        self.prev: Instruction | None = None
        self.next: Instruction | None = None

    @abstractmethod
    def __str__(self) -> str:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"

    def _dest(self) -> Value | None:
        return getattr(self, self._dest_attr) if self._dest_attr else None

    def _operand_values(self) -> Iterator[Value]:
        for attr in self._operand_attrs:
            value = getattr(self, attr)
            if value is not None:
                yield value

    def _replace_operands(self, old: Value, new: Value) -> None:
        for attr in self._operand_attrs:
            setattr(self, attr, self._swap(getattr(self, attr), old, new))

    def _link_operands(self) -> None:
        dest = self._dest()
        if dest is not None:
            dest.definition = self
        for value in self._operand_values():
            value.uses.add(self)

    def _swap(self, current: Value | None, old: Value, new: Value) -> Value | None:
        if current is not None and current is old:
            old.uses.discard(self)
            new.uses.add(self)
            return new
        return current

    def accept(self, visitor: TACVisitor) -> None:
        """Dispatch to the matching hook of the visitor."""
        getattr(visitor, self._visit_hook)(self)

    def drop_references(self) -> None:
        """Stop being the definition or a user of any value."""
        dest = self._dest()
        if dest is not None and dest.definition is self:
            dest.definition = None
        for value in self._operand_values():
            value.uses.discard(self)

    def replace_references(self, old: Value, new: Value) -> None:
        """Replace every operand that is `old` with `new`."""
        dest = self._dest()
        if dest is not None and dest is old:
            raise IRError("cannot replace the destination of an instruction")
        self._replace_operands(old, new)

    def _detach(self) -> None:
        self.parent = None
        self.prev = None
        self.next = None

    def insert_before(self, inst: Instruction) -> None:
        """Link this instruction into the list just before `inst`."""
        if inst is None or inst.parent is None:
            raise IRError("cannot insert before an instruction that is not in a block")
        parent = inst.parent
        before = inst.prev
        if before is None and parent.first is not inst:
            raise IRError("instruction list of the block is inconsistent")

        self.parent = parent
        inst.prev = self
        self.next = inst
        self.prev = before
        if before is not None:
            before.next = self
        else:
            parent.first = self

    def insert_after(self, inst: Instruction) -> None:
        """Link this instruction into the list just after `inst`."""
        if inst is None or inst.parent is None:
            raise IRError("cannot insert after an instruction that is not in a block")
        parent = inst.parent
        after = inst.next
        if after is None and parent.last is not inst:
            raise IRError("instruction list of the block is inconsistent")

        self.parent = parent
        inst.next = self
        self.prev = inst
        self.next = after
        if after is not None:
            after.prev = self
        else:
            parent.last = self

    def _check_linked(self) -> Any:
        parent = self.parent
        if parent is None:
            raise IRError("instruction is not in a block")
        if self.prev is None and parent.first is not self:
            raise IRError("instruction list of the block is inconsistent")
        if self.next is None and parent.last is not self:
            raise IRError("instruction list of the block is inconsistent")
        return parent

    def _unlink(self, replacement: Instruction | None) -> Any:
        parent = self._check_linked()
        before = replacement if replacement is not None else self.next
        after = replacement if replacement is not None else self.prev

        if self.prev is not None:
            self.prev.next = before
        else:
            parent.first = before
        if self.next is not None:
            self.next.prev = after
        else:
            parent.last = after
        return parent

    def replace_with(self, inst: Instruction) -> None:
        """Put `inst` in this instruction's place and drop this one."""
        parent = self._unlink(inst)
        inst.parent = parent
        inst.next = self.next
        inst.prev = self.prev
        self.drop_references()
        self._detach()

    def remove_from_parent(self) -> None:
        """Unlink this instruction from its block and drop its references."""
        self._unlink(None)
        self.drop_references()
        self._detach()


class ConditionalJumpInst(Instruction):
    """Branch on a comparison of two values."""

    _visit_hook = "visit_conditional_jump"
    _operand_attrs = ("lhs", "rhs")

    def __init__(self, lhs: Value, op: str, rhs: Value, if_true: Any, if_false: Any) -> None:
        super().__init__()
        self.lhs = lhs
        self.op = op
        self.rhs = rhs
        self.if_true = if_true
        self.if_false = if_false
        self._link_operands()

    def __str__(self) -> str:
        return f"br {self.lhs} {self.op} {self.rhs}, {self.if_true}, {self.if_false}"


class JumpIfInst(Instruction):
    """Branch on the truth of a single value."""

    _visit_hook = "visit_jump_if"
    _operand_attrs = ("lhs",)

    def __init__(self, lhs: Value, if_true: Any, if_false: Any) -> None:
        super().__init__()
        self.lhs = lhs
        self.if_true = if_true
        self.if_false = if_false
        self._link_operands()

    def __str__(self) -> str:
        return f"br {self.lhs}, {self.if_true}, {self.if_false}"


class ReturnInst(Instruction):
    """Return from the function, optionally with a value."""

    _visit_hook = "visit_return"
    _operand_attrs = ("value",)

    def __init__(self, value: Value | None = None) -> None:
        super().__init__()
        self.value = value
        self._link_operands()

    def __str__(self) -> str:
        return "return" if self.value is None else f"return {self.value}"


class JumpInst(Instruction):
    """Unconditional jump to a block."""

    _visit_hook = "visit_jump"

    def __init__(self, target: Any) -> None:
        super().__init__()
        self.target = target

    def __str__(self) -> str:
        return f"jump {self.target}"


class CopyInst(Instruction):
    """dest = src"""

    _visit_hook = "visit_copy"
    _dest_attr = "dest"
    _operand_attrs = ("src",)

    def __init__(self, dest: Value, src: Value) -> None:
        super().__init__()
        self.dest = dest
        self.src = src
        self._link_operands()

    def __str__(self) -> str:
        return f"{self.dest} = {self.src}"


class CallInst(Instruction):
    """dest = call function(params...)"""

    _visit_hook = "visit_call"
    _dest_attr = "dest"
    _operand_attrs = ("function",)

    def __init__(
        self,
        dest: Value | None,
        function: Value,
        params: Iterable[Value | None] = (),
    ) -> None:
        super().__init__()
        self.dest = dest
        self.function = function
        self.params: list[Value | None] = list(params)
        self.ccall = False
        self.regpass = False
        self._link_operands()

    def _operand_values(self) -> Iterator[Value]:
        yield from super()._operand_values()
        yield from (param for param in self.params if param is not None)

    def _replace_operands(self, old: Value, new: Value) -> None:
        super()._replace_operands(old, new)
        self.params = [self._swap(param, old, new) for param in self.params]

    def __str__(self) -> str:
        args = ", ".join("Unit" if p is None else str(p) for p in self.params)
        call = f"call {self.function}({args})"
        return call if self.dest is None else f"{self.dest} = {call}"


class LoadInst(Instruction):
    """dest = [src]"""

    _visit_hook = "visit_load"
    _dest_attr = "dest"
    _operand_attrs = ("src",)

    def __init__(self, dest: Value, src: Value) -> None:
        super().__init__()
        self.dest = dest
        self.src = src
        self._link_operands()

    def __str__(self) -> str:
        return f"{self.dest} = [{self.src}]"


class StoreInst(Instruction):
    """[dest] = src"""

    _visit_hook = "visit_store"
    _operand_attrs = ("dest", "src")

    def __init__(self, dest: Value, src: Value) -> None:
        super().__init__()
        self.dest = dest
        self.src = src
        self._link_operands()

    def __str__(self) -> str:
        return f"[{self.dest}] = {self.src}"


class IndexedLoadInst(Instruction):
    """lhs = [rhs + offset]"""

    _visit_hook = "visit_indexed_load"
    _dest_attr = "lhs"
    _operand_attrs = ("rhs", "offset")

    def __init__(self, lhs: Value, rhs: Value, offset: Value) -> None:
        super().__init__()
        self.lhs = lhs
        self.rhs = rhs
        self.offset = offset
        self._link_operands()

    def __str__(self) -> str:
        return f"{self.lhs} = [{self.rhs} + {self.offset}]"


class IndexedStoreInst(Instruction):
    """[lhs + offset] = rhs"""

    _visit_hook = "visit_indexed_store"
    _operand_attrs = ("lhs", "offset", "rhs")

    def __init__(self, lhs: Value, offset: Value, rhs: Value) -> None:
        super().__init__()
        self.lhs = lhs
        self.offset = offset
        self.rhs = rhs
        self._link_operands()

    def __str__(self) -> str:
        return f"[{self.lhs} + {self.offset}] = {self.rhs}"


class BinaryOperation(Enum):
    """Arithmetic and bitwise operators; the value is the printed name."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    AND = "and"
    SHR = "shr"
    SHL = "shl"


class BinaryOperationInst(Instruction):
    """dest = lhs op rhs"""

    _visit_hook = "visit_binary_operation"
    _dest_attr = "dest"
    _operand_attrs = ("lhs", "rhs")

    def __init__(self, dest: Value, lhs: Value, op: BinaryOperation, rhs: Value) -> None:
        super().__init__()
        self.dest = dest
        self.lhs = lhs
        self.op = op
        self.rhs = rhs
        self._link_operands()

    def __str__(self) -> str:
        return f"{self.dest} = {self.lhs} {self.op.value} {self.rhs}"


class UnreachableInst(Instruction):
    """Marks a point that control flow never reaches."""

    _visit_hook = "visit_unreachable"

    def __str__(self) -> str:
        return "unreachable"


class PhiInst(Instruction):
    """dest = phi (block, value), ... ; a value may be missing (None)."""

    _visit_hook = "visit_phi"
    _dest_attr = "dest"

    def __init__(self, dest: Value) -> None:
        super().__init__()
        self.dest = dest
        self._sources: list[tuple[Any, Value | None]] = []
        self._link_operands()

    def _operand_values(self) -> Iterator[Value]:
        return (value for _, value in self._sources if value is not None)

    def _replace_operands(self, old: Value, new: Value) -> None:
        self._sources = [
            (block, self._swap(value, old, new)) for block, value in self._sources
        ]

    def add_source(self, block: Any, value: Value | None) -> None:
        """Record the value flowing in from a predecessor block."""
        if value is not None:
            value.uses.add(self)
        self._sources.append((block, value))

    def sources(self) -> list[tuple[Any, Value | None]]:
        """Return a copy of the (block, value) pairs."""
        return list(self._sources)

    def __str__(self) -> str:
        parts = ", ".join(
            f"({block}, {'null' if value is None else value})"
            for block, value in self._sources
        )
        text = f"{self.dest} = phi"
        return f"{text} {parts}" if parts else text


class MemsetFn(Instruction):
    """Fill `count` elements of `dest`, starting at `offset`, with `value`."""

    _visit_hook = "visit_memset"
    _operand_attrs = ("dest", "offset", "count", "value")

    def __init__(self, dest: Value, offset: Value, count: Value, value: Value) -> None:
        super().__init__()
        self.dest = dest
        self.offset = offset
        self.count = count
        self.value = value
        self._link_operands()

    def __str__(self) -> str:
        return f"memset {self.dest}, {self.offset}, {self.count}, {self.value}"