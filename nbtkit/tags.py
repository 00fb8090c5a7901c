"""NBT tag identifiers."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["Tag", "tag_from_byte"]


class Tag(IntEnum):
    """An NBT tag. It carries neither the value nor the name of the data."""

    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Tag.END: "end",
    Tag.BYTE: "byte",
    Tag.SHORT: "short",
    Tag.INT: "int",
    Tag.LONG: "long",
    Tag.FLOAT: "float",
    Tag.DOUBLE: "double",
    Tag.BYTE_ARRAY: "byte-array",
    Tag.STRING: "string",
    Tag.LIST: "list",
    Tag.COMPOUND: "compound",
    Tag.INT_ARRAY: "int-array",
    Tag.LONG_ARRAY: "long-array",
}


def tag_from_byte(value: int) -> Tag:
    """Return the tag for a raw byte, raising ValueError for unknown values."""
    try:
        return Tag(value)
    except ValueError:
        raise ValueError(f"invalid nbt tag value: {value}") from None