"""Reading and writing whole NBT documents as Value trees."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from .errors import NbtError
from .reader import NbtReader, encode_java_cesu8
from .tags import Tag
from .value import Value

__all__ = ["SerOpts", "DeOpts", "from_bytes", "from_reader", "to_bytes", "to_writer"]

_GZIP_MAGIC = b"\x1f\x8b"
_U16 = struct.Struct(">H")
_I8 = struct.Struct(">b")
_I16 = struct.Struct(">h")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")

# Keys used elsewhere as markers for array types; accepting them as ordinary
# compound names would make documents ambiguous, so they are refused.
_RESERVED_KEYS = frozenset(
    {"__fastnbt_byte_array", "__fastnbt_int_array", "__fastnbt_long_array"}
)

_ARRAY_FORMATS = {Tag.BYTE_ARRAY: ("b", 1), Tag.INT_ARRAY: ("i", 4), Tag.LONG_ARRAY: ("q", 8)}


@dataclass
class SerOpts:
    """Options for writing NBT."""

    root_name: str = ""
    serialize_root_name: bool = True

    @classmethod
    def network_nbt(cls) -> "SerOpts":
        """Options for network NBT, where the root compound has no name."""
        return cls(serialize_root_name=False)


@dataclass
class DeOpts:
    """Options for reading NBT."""

    max_seq_len: int = 10_000_000
    expect_compound_names: bool = True

    @classmethod
    def network_nbt(cls) -> "DeOpts":
        """Options for network NBT, where the root compound has no name."""
        return cls(expect_compound_names=False)


def _length(reader: NbtReader) -> int:
    size = reader.consume_i32()
    if size < 0:
        raise NbtError("size was negative")
    return size


def _read_payload(reader: NbtReader, tag: Tag, opts: DeOpts) -> Value:
    if tag == Tag.BYTE:
        return Value.byte((reader.consume_byte() ^ 0x80) - 0x80)
    if tag == Tag.SHORT:
        return Value.short(reader.consume_i16())
    if tag == Tag.INT:
        return Value.int(reader.consume_i32())
    if tag == Tag.LONG:
        return Value.long(reader.consume_i64())
    if tag == Tag.FLOAT:
        return Value.float(reader.consume_f32())
    if tag == Tag.DOUBLE:
        return Value.double(reader.consume_f64())
    if tag == Tag.STRING:
        return Value.string(reader.consume_str())
    if tag in _ARRAY_FORMATS:
        code, width = _ARRAY_FORMATS[tag]
        count = _length(reader)
        data = reader.consume_bytes(count * width)
        return Value(tag, struct.unpack(f">{count}{code}", data))
    if tag == Tag.LIST:
        element = reader.consume_tag()
        count = _length(reader)
        if count > opts.max_seq_len:
            raise NbtError(
                f"size ({count}) greater than max sequence length ({opts.max_seq_len})"
            )
        if element == Tag.END and count > 0:
            raise NbtError("invalid nbt: list of end tags with a non-zero length")
        return Value.list([_read_payload(reader, element, opts) for _ in range(count)])
    if tag == Tag.COMPOUND:
        entries = {}
        while (inner := reader.consume_tag()) != Tag.END:
            name = reader.consume_str()
            if name in _RESERVED_KEYS:
                raise NbtError(f"compound using reserved key: {name}")
            entries[name] = _read_payload(reader, inner, opts)
        return Value.compound(entries)
    raise NbtError("invalid nbt: unexpected end tag")


def _read_document(reader: NbtReader, opts: DeOpts) -> Value:
    tag = reader.consume_tag()
    if tag != Tag.COMPOUND:
        raise NbtError.no_root_compound()
    if opts.expect_compound_names:
        reader.ignore_str()
    return _read_payload(reader, tag, opts)


def from_bytes(data: Union[bytes, bytearray, memoryview], opts: Optional[DeOpts] = None) -> Value:
    """Parse raw (uncompressed) NBT into a Value."""
    data = bytes(data)
    if data.startswith(_GZIP_MAGIC):
        raise NbtError("from_bytes expects raw NBT, but input appears to be gzipped")
    return _read_document(NbtReader(data), opts or DeOpts())


def from_reader(reader: BinaryIO, opts: Optional[DeOpts] = None) -> Value:
    """Parse NBT from a binary stream into a Value."""
    return _read_document(NbtReader(reader), opts or DeOpts())


def _write_str(out: bytearray, text: str) -> None:
    raw = encode_java_cesu8(text)
    if len(raw) > 0xFFFF:
        raise NbtError("string too long for nbt")
    out += _U16.pack(len(raw))
    out += raw


def _write_payload(out: bytearray, value: Value) -> None:
    tag = value.tag
    payload = value.value
    if tag == Tag.BYTE:
        out += _I8.pack(payload)
    elif tag == Tag.SHORT:
        out += _I16.pack(payload)
    elif tag == Tag.INT:
        out += _I32.pack(payload)
    elif tag == Tag.LONG:
        out += _I64.pack(payload)
    elif tag == Tag.FLOAT:
        out += _F32.pack(payload)
    elif tag == Tag.DOUBLE:
        out += _F64.pack(payload)
    elif tag == Tag.STRING:
        _write_str(out, payload)
    elif tag in _ARRAY_FORMATS:
        code, _ = _ARRAY_FORMATS[tag]
        out += _I32.pack(len(payload))
        out += struct.pack(f">{len(payload)}{code}", *payload)
    elif tag == Tag.LIST:
        element = payload[0].tag if payload else Tag.END
        if any(item.tag != element for item in payload):
            raise NbtError("invalid nbt: list elements must all have the same tag")
        out.append(element)
        out += _I32.pack(len(payload))
        for item in payload:
            _write_payload(out, item)
    elif tag == Tag.COMPOUND:
        for key in sorted(payload):
            item = payload[key]
            out.append(item.tag)
            _write_str(out, key)
            _write_payload(out, item)
        out.append(Tag.END)


def to_bytes(value: Value, opts: Optional[SerOpts] = None) -> bytes:
    """Serialize a compound Value into NBT bytes."""
    if not isinstance(value, Value):
        raise TypeError(f"expected a Value, got {type(value).__name__}")
    if value.tag != Tag.COMPOUND:
        raise NbtError.no_root_compound()
    opts = opts or SerOpts()
    out = bytearray([Tag.COMPOUND])
    if opts.serialize_root_name:
        _write_str(out, opts.root_name)
    _write_payload(out, value)
    return bytes(out)


def to_writer(writer: BinaryIO, value: Value, opts: Optional[SerOpts] = None) -> None:
    """Serialize a compound Value and write it to a binary stream."""
    data = to_bytes(value, opts)
    try:
        writer.write(data)
    except OSError as exc:
        raise NbtError.io_error(exc) from exc