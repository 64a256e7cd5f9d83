"""Machine-level value types used by the three-address IR."""

from __future__ import annotations

from enum import Enum

__all__ = ["ValueType", "value_type_string", "is_integer", "is_signed", "get_size"]


class ValueType(Enum):
    """The storage class of an IR value."""

    REFERENCE = "Reference"
    I64 = "I64"
    U64 = "U64"
    U32 = "U32"
    U16 = "U16"
    U8 = "U8"
    NON_HEAP_ADDRESS = "NonHeapAddress"


_INTEGER_TYPES = frozenset(
    {ValueType.I64, ValueType.U64, ValueType.U32, ValueType.U16, ValueType.U8}
)

_SIZES = {
    ValueType.REFERENCE: 64,
    ValueType.I64: 64,
    ValueType.U64: 64,
    ValueType.NON_HEAP_ADDRESS: 64,
    ValueType.U32: 32,
    ValueType.U16: 16,
    ValueType.U8: 8,
}


def value_type_string(type: ValueType) -> str:
    """Return the printable name of a value type."""
    return type.value


def is_integer(type: ValueType) -> bool:
    """Return True if the type holds a plain integer."""
    return type in _INTEGER_TYPES


def is_signed(type: ValueType) -> bool:
    """Return True for signed integer types; raise for non-integer types."""
    if type is ValueType.I64:
        return True
    if type in _INTEGER_TYPES:
        return False
    raise ValueError(f"{value_type_string(type)} is not an integer type")


def get_size(type: ValueType) -> int:
    """Return the width of the type in bits."""
    return _SIZES[type]