import pytest

from tacir.constant_folding import ConstantFolding
from tacir.context import TACContext
from tacir.instructions import BinaryOperation, BinaryOperationInst, CopyInst, ReturnInst
from tacir.value_type import ValueType
from tacir.values import ConstantInt, IRError


def _function_returning(ctx, *insts):
    """Build a one-block function running `insts`, then returning the last dest."""
    fn = ctx.create_function("f")
    block = fn.create_block()
    for inst in insts:
        block.append(inst)
    ret = ReturnInst(insts[-1].dest)
    block.append(ret)
    return fn, block, ret


def _fold(op, type, lhs, rhs):
    ctx = TACContext()
    dest = ctx.create_temp(type, 0, None) if False else None
    fn = ctx.create_function("f")
    block = fn.create_block()
    dest = fn.create_temp(type)
    block.append(BinaryOperationInst(
        dest, ctx.create_constant_int(type, lhs), op, ctx.create_constant_int(type, rhs)))
    ret = ReturnInst(dest)
    block.append(ret)
    ConstantFolding(fn).run()
    return fn, block, ret, dest


def _value(op, type, lhs, rhs):
    return _fold(op, type, lhs, rhs)[2].value.value


def test_add_is_folded_and_instruction_removed():
    fn, block, ret, dest = _fold(BinaryOperation.ADD, ValueType.U64, 20, 22)
    assert isinstance(ret.value, ConstantInt)
    assert ret.value.value == 42
    assert ret.value.type is ValueType.U64
    assert list(block) == [ret]
    assert dest not in fn.temps


@pytest.mark.parametrize(
    "op, type, lhs, rhs, expected",
    [
        (BinaryOperation.SUB, ValueType.U64, 0, 1, -1),
        (BinaryOperation.ADD, ValueType.U8, 255, 1, 0),
        (BinaryOperation.AND, ValueType.U64, 12, 12, 12),
    ],
    ids=["sub-wraps-64", "u8-narrowed", "and-identity"],
)
def test_folded_values(op, type, lhs, rhs, expected):
    assert _value(op, type, lhs, rhs) == expected


def test_signed_division_truncates_toward_zero():
    q = _value(BinaryOperation.DIV, ValueType.I64, -7, 2)
    r = _value(BinaryOperation.MOD, ValueType.I64, -7, 2)
    assert q * 2 + r == -7
    assert r <= 0 and abs(r) < 2


def test_unsigned_division_treats_operand_as_unsigned():
    q = _value(BinaryOperation.DIV, ValueType.U64, -1, 2)
    r = _value(BinaryOperation.MOD, ValueType.U64, -1, 2)
    assert q > 0
    assert (q % (1 << 64)) * 2 + r == (1 << 64) - 1
    assert _value(BinaryOperation.DIV, ValueType.I64, -1, 2) <= 0


def test_shift_round_trip_folds_chained_instructions():
    ctx = TACContext()
    three = ctx.create_constant_int(ValueType.U64, 3)
    fn = ctx.create_function("f")
    shifted, back = fn.create_temp(ValueType.U64), fn.create_temp(ValueType.U64)
    block = fn.create_block()
    block.append(BinaryOperationInst(
        shifted, ctx.create_constant_int(ValueType.U64, 5), BinaryOperation.SHL, three))
    block.append(BinaryOperationInst(back, shifted, BinaryOperation.SHR, three))
    ret = ReturnInst(back)
    block.append(ret)

    ConstantFolding(fn).run()

    assert ret.value.value == 5
    assert list(block) == [ret]


@pytest.mark.parametrize(
    "op, rhs",
    [(BinaryOperation.SHL, 32), (BinaryOperation.DIV, 0), (BinaryOperation.MOD, 0)],
)
def test_invalid_operands_raise(op, rhs):
    with pytest.raises(IRError):
        _fold(op, ValueType.U64, 1, rhs)


def test_mismatched_types_raise():
    ctx = TACContext()
    fn = ctx.create_function("f")
    block = fn.create_block()
    block.append(BinaryOperationInst(
        fn.create_temp(ValueType.U64),
        ctx.create_constant_int(ValueType.U64, 1),
        BinaryOperation.ADD,
        ctx.create_constant_int(ValueType.I64, 1),
    ))
    with pytest.raises(IRError):
        ConstantFolding(fn).run()


def test_non_constant_operand_is_left_alone():
    ctx = TACContext()
    fn = ctx.create_function("f")
    block = fn.create_block()
    dest = fn.create_temp(ValueType.U64)
    inst = BinaryOperationInst(
        dest, ctx.create_argument(ValueType.U64, "x"), BinaryOperation.ADD, ctx.one)
    copy = CopyInst(fn.create_temp(ValueType.U64), ctx.one)
    block.append(inst)
    block.append(copy)
    ConstantFolding(fn).run()
    assert list(block) == [inst, copy]
    assert dest in fn.temps