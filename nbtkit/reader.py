"""Low level reading of big-endian NBT primitives from bytes or streams."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, Union

from .errors import NbtError
from .tags import Tag, tag_from_byte

__all__ = ["NbtReader", "decode_java_cesu8", "encode_java_cesu8"]

_I16 = struct.Struct(">h")
_U16 = struct.Struct(">H")
_I32 = struct.Struct(">i")
_I64 = struct.Struct(">q")
_F32 = struct.Struct(">f")
_F64 = struct.Struct(">d")


def decode_java_cesu8(data: bytes) -> str:
    """Decode Java's modified UTF-8 (also accepting plain UTF-8)."""
    data = bytes(data)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    if any(b >= 0xF0 for b in data):
        raise NbtError.nonunicode_string(data)
    # 0xC0 can only ever be a lead byte, so this substitution is unambiguous.
    patched = data.replace(b"\xc0\x80", b"\x00")
    try:
        units = patched.decode("utf-8", errors="surrogatepass")
        return units.encode("utf-16-be", errors="surrogatepass").decode("utf-16-be")
    except UnicodeError:
        raise NbtError.nonunicode_string(data) from None


def encode_java_cesu8(text: str) -> bytes:
    """Encode text as Java's modified UTF-8."""
    out = bytearray()
    for ch in text:
        cp = ord(ch)
        if cp == 0:
            out += b"\xc0\x80"
        elif cp > 0xFFFF:
            cp -= 0x10000
            high = chr(0xD800 + (cp >> 10))
            low = chr(0xDC00 + (cp & 0x3FF))
            out += high.encode("utf-8", errors="surrogatepass")
            out += low.encode("utf-8", errors="surrogatepass")
        else:
            out += ch.encode("utf-8", errors="surrogatepass")
    return bytes(out)


def _sized(size: int, multiplier: int) -> int:
    if size < 0:
        raise NbtError("size was negative")
    return size * multiplier


class NbtReader:
    """Consumes NBT primitives from a bytes-like object or a binary stream."""

    def __init__(self, source: Union[bytes, bytearray, memoryview, BinaryIO]) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._stream: BinaryIO = io.BytesIO(bytes(source))
        else:
            self._stream = source

    def _read(self, n: int) -> bytes:
        if n < 0:
            raise NbtError.unexpected_eof()
        chunks = []
        remaining = n
        try:
            while remaining > 0:
                chunk = self._stream.read(remaining)
                if not chunk:
                    raise NbtError.unexpected_eof()
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as exc:
            raise NbtError.io_error(exc) from exc
        return b"".join(chunks)

    def consume_byte(self) -> int:
        """Read one unsigned byte."""
        return self._read(1)[0]

    def consume_tag(self) -> Tag:
        value = self.consume_byte()
        try:
            return tag_from_byte(value)
        except ValueError:
            raise NbtError.invalid_tag(value) from None

    def consume_str(self) -> str:
        """Read a length-prefixed modified UTF-8 string."""
        (length,) = _U16.unpack(self._read(2))
        return decode_java_cesu8(self._read(length))

    def consume_bytes(self, n: int) -> bytes:
        return self._read(n)

    def consume_i16(self) -> int:
        return _I16.unpack(self._read(2))[0]

    def consume_i32(self) -> int:
        return _I32.unpack(self._read(4))[0]

    def consume_i64(self) -> int:
        return _I64.unpack(self._read(8))[0]

    def consume_f32(self) -> float:
        return _F32.unpack(self._read(4))[0]

    def consume_f64(self) -> float:
        return _F64.unpack(self._read(8))[0]

    def ignore_str(self) -> None:
        (length,) = _U16.unpack(self._read(2))
        self._read(length)

    def ignore_bytes(self, size: int) -> None:
        self._read(size)

    def ignore_value(self, tag: Tag) -> None:
        """Skip over the payload of a value with the given tag."""
        if tag == Tag.BYTE:
            self.consume_byte()
        elif tag == Tag.SHORT:
            self.consume_i16()
        elif tag == Tag.INT:
            self.consume_i32()
        elif tag == Tag.LONG:
            self.consume_i64()
        elif tag == Tag.FLOAT:
            self.consume_f32()
        elif tag == Tag.DOUBLE:
            self.consume_f64()
        elif tag == Tag.STRING:
            self.ignore_str()
        elif tag == Tag.BYTE_ARRAY:
            self.ignore_bytes(self.consume_i32())
        elif tag == Tag.INT_ARRAY:
            self.ignore_bytes(_sized(self.consume_i32(), 4))
        elif tag == Tag.LONG_ARRAY:
            self.ignore_bytes(_sized(self.consume_i32(), 8))
        elif tag == Tag.COMPOUND:
            while (inner := self.consume_tag()) != Tag.END:
                self.ignore_str()
                self.ignore_value(inner)
        elif tag == Tag.LIST:
            element_tag = self.consume_tag()
            size = self.consume_i32()
            for _ in range(size):
                self.ignore_value(element_tag)
        else:
            raise NbtError("invalid nbt: cannot ignore a value of tag end")