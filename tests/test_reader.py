import io
import struct

import pytest

from nbtkit.errors import NbtError
from nbtkit.reader import NbtReader, decode_java_cesu8, encode_java_cesu8
from nbtkit.tags import Tag


def named(name: str) -> bytes:
    raw = encode_java_cesu8(name)
    return struct.pack(">H", len(raw)) + raw


SENTINEL = 0x7B


@pytest.mark.parametrize("wrap", [bytes, bytearray, io.BytesIO])
def test_primitives_from_bytes_and_streams(wrap):
    payload = (
        bytes([200])
        + struct.pack(">h", -1234)
        + struct.pack(">i", 50345)
        + struct.pack(">q", 2**31)
        + struct.pack(">d", 1.23456)
    )
    reader = NbtReader(wrap(payload))
    assert reader.consume_byte() == 200
    assert reader.consume_i16() == -1234
    assert reader.consume_i32() == 50345
    assert reader.consume_i64() == 2**31
    assert reader.consume_f64() == 1.23456


def test_float_round_trips_single_precision():
    expected = struct.unpack(">f", struct.pack(">f", 1.23))[0]
    reader = NbtReader(struct.pack(">f", 1.23))
    assert reader.consume_f32() == expected


def test_consume_tag_and_invalid_tag():
    reader = NbtReader(bytes([10, 13]))
    assert reader.consume_tag() is Tag.COMPOUND
    with pytest.raises(NbtError) as info:
        reader.consume_tag()
    assert info.value == NbtError.invalid_tag(13)


def test_consume_str_and_bytes():
    reader = NbtReader(named("something") + b"\x01\x02\x03")
    assert reader.consume_str() == "something"
    assert reader.consume_bytes(3) == b"\x01\x02\x03"


def test_cesu8_string():
    raw = encode_java_cesu8("😈")
    reader = NbtReader(struct.pack(">H", len(raw)) + raw)
    assert reader.consume_str() == "😈"
    assert len(raw) == 6


def test_plain_utf8_four_byte_string_is_accepted():
    raw = "😈".encode("utf-8")
    assert decode_java_cesu8(raw) == "😈"


def test_nul_encoding():
    assert encode_java_cesu8("\0") == b"\xc0\x80"
    assert decode_java_cesu8(encode_java_cesu8("a\0b")) == "a\0b"


@pytest.mark.parametrize("text", ["", "abc", "héllo", "日本語", "x😈y\0z"])
def test_cesu8_round_trip(text):
    assert decode_java_cesu8(encode_java_cesu8(text)) == text


def test_ascii_encodes_unchanged():
    assert encode_java_cesu8("abc") == b"abc"


def test_invalid_unicode_raises():
    bad = bytes([255, 255, 255])
    reader = NbtReader(struct.pack(">H", 3) + bad)
    with pytest.raises(NbtError) as info:
        reader.consume_str()
    assert info.value == NbtError.nonunicode_string(bad)


def test_lone_surrogate_is_rejected():
    lone = encode_java_cesu8("😈")[:3]
    with pytest.raises(NbtError):
        decode_java_cesu8(lone)


def test_partial_input_is_eof():
    payload = bytes([10]) + named("some long name")
    reader = NbtReader(payload[:3])
    assert reader.consume_tag() is Tag.COMPOUND
    with pytest.raises(NbtError) as info:
        reader.consume_str()
    assert info.value == NbtError.unexpected_eof()


def test_empty_input_is_eof():
    with pytest.raises(NbtError) as info:
        NbtReader(b"").consume_byte()
    assert info.value == NbtError.unexpected_eof()


def test_ignore_str_and_bytes_advance():
    reader = NbtReader(named("skip me") + b"\x00\x00" + bytes([SENTINEL]))
    reader.ignore_str()
    reader.ignore_bytes(2)
    assert reader.consume_byte() == SENTINEL


def _compound_payload() -> bytes:
    body = bytearray()
    body += bytes([Tag.BYTE]) + named("b") + bytes([1])
    body += bytes([Tag.STRING]) + named("s") + named("hello")
    body += bytes([Tag.INT_ARRAY]) + named("ia") + struct.pack(">i", 2) + struct.pack(">ii", 4, 5)
    body += bytes([Tag.LONG_ARRAY]) + named("la") + struct.pack(">i", 1) + struct.pack(">q", 7)
    body += bytes([Tag.BYTE_ARRAY]) + named("ba") + struct.pack(">i", 3) + b"\x01\x02\x03"
    body += bytes([Tag.LIST]) + named("l") + bytes([Tag.COMPOUND]) + struct.pack(">i", 2)
    body += bytes([Tag.END, Tag.END])
    body += bytes([Tag.COMPOUND]) + named("inner")
    body += bytes([Tag.DOUBLE]) + named("d") + struct.pack(">d", 3.21)
    body += bytes([Tag.END])
    body += bytes([Tag.END])
    return bytes(body)


@pytest.mark.parametrize(
    "tag, payload",
    [
        (Tag.BYTE, b"\x05"),
        (Tag.SHORT, struct.pack(">h", 7)),
        (Tag.INT, struct.pack(">i", 7)),
        (Tag.LONG, struct.pack(">q", 7)),
        (Tag.FLOAT, struct.pack(">f", 1.5)),
        (Tag.DOUBLE, struct.pack(">d", 1.5)),
        (Tag.STRING, named("abc")),
        (Tag.LIST, bytes([Tag.INT]) + struct.pack(">iii", 2, 1, 2)),
        (Tag.COMPOUND, _compound_payload()),
    ],
)
def test_ignore_value_skips_exactly_the_payload(tag, payload):
    reader = NbtReader(payload + bytes([SENTINEL]))
    reader.ignore_value(tag)
    assert reader.consume_byte() == SENTINEL


def test_ignore_negative_int_array_size():
    reader = NbtReader(struct.pack(">i", -1))
    with pytest.raises(NbtError, match="size was negative"):
        reader.ignore_value(Tag.INT_ARRAY)


def test_ignore_negative_byte_array_size_is_eof():
    reader = NbtReader(struct.pack(">i", -2))
    with pytest.raises(NbtError) as info:
        reader.ignore_value(Tag.BYTE_ARRAY)
    assert info.value == NbtError.unexpected_eof()


def test_ignore_list_of_end_errors():
    reader = NbtReader(bytes([Tag.END]) + struct.pack(">i", 1) + bytes([Tag.END]))
    with pytest.raises(NbtError):
        reader.ignore_value(Tag.LIST)


def test_ignore_empty_list_of_end_is_fine():
    reader = NbtReader(bytes([Tag.END]) + struct.pack(">i", 0) + bytes([SENTINEL]))
    reader.ignore_value(Tag.LIST)
    assert reader.consume_byte() == SENTINEL


def test_ignore_truncated_long_array_is_eof():
    reader = NbtReader(struct.pack(">i", 2) + struct.pack(">q", 1))
    with pytest.raises(NbtError) as info:
        reader.ignore_value(Tag.LONG_ARRAY)
    assert info.value == NbtError.unexpected_eof()


class _Trickle(io.RawIOBase):
    """Returns at most one byte per read call."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def readable(self) -> bool:
        return True

    def read(self, n=-1):
        if not self._data:
            return b""
        out, self._data = self._data[:1], self._data[1:]
        return out


def test_short_reads_are_assembled():
    reader = NbtReader(_Trickle(struct.pack(">q", -99) + named("ok")))
    assert reader.consume_i64() == -99
    assert reader.consume_str() == "ok"