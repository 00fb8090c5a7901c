"""A dynamically typed NBT value."""

from __future__ import annotations

import numbers
import operator
import struct
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from .errors import NbtError
from .tags import Tag

__all__ = ["Value"]

_F32 = struct.Struct(">f")
_INT_BITS = {Tag.BYTE: 8, Tag.SHORT: 16, Tag.INT: 32, Tag.LONG: 64}
_ARRAY_BITS = {Tag.BYTE_ARRAY: 8, Tag.INT_ARRAY: 32, Tag.LONG_ARRAY: 64}


def _checked_int(raw: Any, bits: int, tag: Tag) -> int:
    number = operator.index(raw)
    limit = 1 << (bits - 1)
    if not -limit <= number < limit:
        raise NbtError(f"{number} is out of range for {tag}")
    return number


def _real(raw: Any) -> float:
    if not isinstance(raw, numbers.Real):
        raise TypeError(f"expected a real number, got {type(raw).__name__}")
    return float(raw)


def _to_f32(raw: Any) -> float:
    try:
        return _F32.unpack(_F32.pack(_real(raw)))[0]
    except OverflowError:
        raise NbtError(f"{raw} is out of range for float") from None


def _require_value(item: Any) -> "Value":
    if not isinstance(item, Value):
        raise TypeError(f"expected a Value, got {type(item).__name__}")
    return item


def _require_key(key: Any) -> str:
    if not isinstance(key, str):
        raise TypeError(f"compound keys must be strings, got {type(key).__name__}")
    return key


def _normalize(tag: Tag, payload: Any) -> Any:
    if tag in _INT_BITS:
        return _checked_int(payload, _INT_BITS[tag], tag)
    if tag == Tag.FLOAT:
        return _to_f32(payload)
    if tag == Tag.DOUBLE:
        return _real(payload)
    if tag == Tag.STRING:
        if not isinstance(payload, str):
            raise TypeError(f"expected a str, got {type(payload).__name__}")
        return payload
    if tag in _ARRAY_BITS:
        bits = _ARRAY_BITS[tag]
        return [_checked_int(item, bits, tag) for item in payload]
    if tag == Tag.LIST:
        return [_require_value(item) for item in payload]
    if tag == Tag.COMPOUND:
        entries = dict(payload)
        for key, item in entries.items():
            _require_key(key)
            _require_value(item)
        return entries
    raise NbtError("a value cannot carry the end tag")


@dataclass
class Value:
    """An NBT value: a tag together with its payload.

    Integers and floats are range-checked and stored as Python numbers,
    arrays as lists of ints, lists as lists of Values and compounds as
    dicts mapping names to Values.
    """

    tag: Tag
    value: Any

    def __post_init__(self) -> None:
        self.tag = Tag(self.tag)
        self.value = _normalize(self.tag, self.value)

    def __getitem__(self, key: Union[str, int]) -> Any:
        if self.tag in (Tag.COMPOUND, Tag.LIST) or self.tag in _ARRAY_BITS:
            return self.value[key]
        raise TypeError(f"{self.tag} value is not subscriptable")

    def __setitem__(self, key: Union[str, int], item: Any) -> None:
        if self.tag == Tag.COMPOUND:
            self.value[_require_key(key)] = _require_value(item)
        elif self.tag == Tag.LIST:
            self.value[key] = _require_value(item)
        elif self.tag in _ARRAY_BITS:
            self.value[key] = _checked_int(item, _ARRAY_BITS[self.tag], self.tag)
        else:
            raise TypeError(f"{self.tag} value does not support item assignment")

    @classmethod
    def byte(cls, value: int) -> "Value":
        return cls(Tag.BYTE, value)

    @classmethod
    def short(cls, value: int) -> "Value":
        return cls(Tag.SHORT, value)

    @classmethod
    def int(cls, value: int) -> "Value":
        return cls(Tag.INT, value)

    @classmethod
    def long(cls, value: int) -> "Value":
        return cls(Tag.LONG, value)

    @classmethod
    def float(cls, value: float) -> "Value":
        """A 32-bit float; the value is rounded to single precision."""
        return cls(Tag.FLOAT, value)

    @classmethod
    def double(cls, value: float) -> "Value":
        return cls(Tag.DOUBLE, value)

    @classmethod
    def string(cls, value: str) -> "Value":
        return cls(Tag.STRING, value)

    @classmethod
    def byte_array(cls, values: Iterable[int]) -> "Value":
        return cls(Tag.BYTE_ARRAY, values)

    @classmethod
    def int_array(cls, values: Iterable[int]) -> "Value":
        return cls(Tag.INT_ARRAY, values)

    @classmethod
    def long_array(cls, values: Iterable[int]) -> "Value":
        return cls(Tag.LONG_ARRAY, values)

    @classmethod
    def list(cls, values: Iterable["Value"]) -> "Value":
        return cls(Tag.LIST, values)

    @classmethod
    def compound(
        cls, entries: Union[Mapping[str, "Value"], Iterable[tuple]]
    ) -> "Value":
        return cls(Tag.COMPOUND, entries)