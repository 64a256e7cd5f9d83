import pytest

from tacir.block import BasicBlock, branch_targets
from tacir.context import TACContext
from tacir.instructions import (
    ConditionalJumpInst,
    CopyInst,
    JumpIfInst,
    JumpInst,
    ReturnInst,
    UnreachableInst,
)
from tacir.value_type import ValueType
from tacir.values import IRError


@pytest.fixture
def fn():
    ctx = TACContext()
    return ctx.create_function("f")


def _copy(fn):
    return CopyInst(fn.create_temp(ValueType.U64), fn.context.one)


def test_str_uses_name_when_set(fn):
    block = fn.create_block()
    block.name = "entry"
    assert str(block) == "label entry"


def test_str_uses_sequence_number(fn):
    block = fn.create_block()
    assert str(block) == f"label .{block.seq_number}"


def test_append_keeps_order(fn):
    block = fn.create_block()
    insts = [_copy(fn) for _ in range(3)]
    for inst in insts:
        block.append(inst)
    assert list(block) == insts
    assert block.first is insts[0]
    assert block.last is insts[-1]
    assert insts[1].prev is insts[0]
    assert all(inst.parent is block for inst in insts)


def test_prepend_puts_instruction_first(fn):
    block = fn.create_block()
    a, b = _copy(fn), _copy(fn)
    block.append(a)
    block.prepend(b)
    assert list(block) == [b, a]
    assert block.first is b
    assert b.parent is block


def test_prepend_into_empty_block(fn):
    block = fn.create_block()
    inst = _copy(fn)
    block.prepend(inst)
    assert block.first is inst and block.last is inst


def test_jump_links_successor_and_predecessor(fn):
    a, b = fn.create_block(), fn.create_block()
    a.append(JumpInst(b))
    assert a.successors == [b]
    assert b.predecessors == [a]


def test_conditional_jump_has_two_successors(fn):
    entry, yes, no = fn.create_block(), fn.create_block(), fn.create_block()
    ctx = fn.context
    entry.append(ConditionalJumpInst(ctx.one, "==", ctx.zero, yes, no))
    assert entry.successors == [yes, no]
    assert yes.predecessors == [entry]
    assert no.predecessors == [entry]


def test_append_after_branch_raises(fn):
    a, b = fn.create_block(), fn.create_block()
    a.append(JumpInst(b))
    with pytest.raises(IRError):
        a.append(_copy(fn))


def test_return_terminates_without_successors(fn):
    block = fn.create_block()
    block.append(ReturnInst())
    assert block.is_terminated()
    assert block.successors == []


def test_unterminated_blocks(fn):
    empty = fn.create_block()
    assert not empty.is_terminated()
    body = fn.create_block()
    body.append(_copy(fn))
    assert not body.is_terminated()


def test_branch_targets(fn):
    a, b = fn.create_block(), fn.create_block()
    ctx = fn.context
    assert branch_targets(JumpIfInst(ctx.true, a, b)) == [a, b]
    assert branch_targets(JumpInst(b)) == [b]
    assert branch_targets(UnreachableInst()) == []
    assert branch_targets(_copy(fn)) is None
    assert branch_targets(None) is None


def test_iteration_survives_removal(fn):
    block = fn.create_block()
    for _ in range(3):
        block.append(_copy(fn))
    for inst in block:
        inst.remove_from_parent()
    assert list(block) == []
    assert block.first is None and block.last is None


def test_block_type_and_parent(fn):
    block = BasicBlock(fn.context, fn, 7)
    assert block.type is ValueType.NON_HEAP_ADDRESS
    assert block.parent is fn
    assert str(block) == "label .7"