"""The error type raised while reading and writing NBT."""

from __future__ import annotations

__all__ = ["NbtError"]


class NbtError(Exception):
    """An error raised during (de)serialization of NBT data."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NbtError):
            return NotImplemented
        return self.message == other.message

    def __hash__(self) -> int:
        return hash(self.message)

    @classmethod
    def invalid_tag(cls, tag: int) -> NbtError:
        return cls(f"invalid nbt tag value: {tag}")

    @classmethod
    def no_root_compound(cls) -> NbtError:
        return cls("invalid nbt: no root compound")

    @classmethod
    def nonunicode_string(cls, data: bytes) -> NbtError:
        text = bytes(data).decode("utf-8", errors="replace")
        return cls(f"invalid nbt string: nonunicode: {text}")

    @classmethod
    def unexpected_eof(cls) -> NbtError:
        return cls("eof: unexpectedly ran out of input")

    @classmethod
    def array_as_seq(cls) -> NbtError:
        return cls(
            "expected NBT Array, found seq: use ByteArray, IntArray or LongArray types"
        )

    @classmethod
    def array_as_other(cls) -> NbtError:
        return cls("expected NBT Array: use ByteArray, IntArray or LongArray types")

    @classmethod
    def io_error(cls, exc: BaseException) -> NbtError:
        return cls(f"io error: {exc}")