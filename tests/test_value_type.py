import pytest

from tacir.value_type import (
    ValueType,
    get_size,
    is_integer,
    is_signed,
    value_type_string,
)


@pytest.mark.parametrize(
    "vtype, name",
    [
        (ValueType.REFERENCE, "Reference"),
        (ValueType.I64, "I64"),
        (ValueType.U64, "U64"),
        (ValueType.U32, "U32"),
        (ValueType.U16, "U16"),
        (ValueType.U8, "U8"),
        (ValueType.NON_HEAP_ADDRESS, "NonHeapAddress"),
    ],
)
def test_value_type_string(vtype, name):
    assert value_type_string(vtype) == name


def test_names_are_unique():
    names = [value_type_string(t) for t in ValueType]
    assert len(names) == len(set(names))


@pytest.mark.parametrize(
    "vtype", [ValueType.I64, ValueType.U64, ValueType.U32, ValueType.U16, ValueType.U8]
)
def test_integer_types(vtype):
    assert is_integer(vtype) is True


@pytest.mark.parametrize("vtype", [ValueType.REFERENCE, ValueType.NON_HEAP_ADDRESS])
def test_non_integer_types(vtype):
    assert is_integer(vtype) is False


def test_only_i64_is_signed():
    signed = [t for t in ValueType if is_integer(t) and is_signed(t)]
    assert signed == [ValueType.I64]


@pytest.mark.parametrize("vtype", [ValueType.REFERENCE, ValueType.NON_HEAP_ADDRESS])
def test_is_signed_rejects_non_integers(vtype):
    with pytest.raises(ValueError):
        is_signed(vtype)


@pytest.mark.parametrize(
    "vtype, bits",
    [
        (ValueType.REFERENCE, 64),
        (ValueType.I64, 64),
        (ValueType.U64, 64),
        (ValueType.NON_HEAP_ADDRESS, 64),
        (ValueType.U32, 32),
        (ValueType.U16, 16),
        (ValueType.U8, 8),
    ],
)
def test_get_size(vtype, bits):
    assert get_size(vtype) == bits