"""Building Values from plain Python data."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .value import Value

__all__ = ["nbt", "byte_array", "int_array", "long_array"]

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


def nbt(obj: Any) -> Value:
    """Convert plain Python data into a Value.

    bool becomes a byte, int an int (or a long when it does not fit in 32
    bits), float a double, str a string, list or tuple a list and a mapping
    a compound. Values are returned unchanged.
    """
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, bool):
        return Value.byte(int(obj))
    if isinstance(obj, int):
        if _I32_MIN <= obj <= _I32_MAX:
            return Value.int(obj)
        return Value.long(obj)
    if isinstance(obj, float):
        return Value.double(obj)
    if isinstance(obj, str):
        return Value.string(obj)
    if isinstance(obj, Mapping):
        return Value.compound({key: nbt(item) for key, item in obj.items()})
    if isinstance(obj, (list, tuple)):
        return Value.list([nbt(item) for item in obj])
    raise TypeError(f"cannot convert {type(obj).__name__} to an NBT value")


def byte_array(values: Iterable[int]) -> Value:
    return Value.byte_array(values)


def int_array(values: Iterable[int]) -> Value:
    return Value.int_array(values)


def long_array(values: Iterable[int]) -> Value:
    return Value.long_array(values)