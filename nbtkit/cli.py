"""Command line tools for inspecting and editing NBT files."""

from __future__ import annotations

import argparse
import gzip
import json
import sys
import zlib
from typing import Optional, Sequence

from .codec import from_bytes, to_bytes
from .errors import NbtError
from .tags import Tag
from .value import Value

__all__ = ["set_world_spawn", "main"]

_INDENT = "    "
_DEBUG_NAMES = {
    Tag.BYTE: "Byte",
    Tag.SHORT: "Short",
    Tag.INT: "Int",
    Tag.LONG: "Long",
    Tag.FLOAT: "Float",
    Tag.DOUBLE: "Double",
    Tag.STRING: "String",
    Tag.BYTE_ARRAY: "ByteArray",
    Tag.INT_ARRAY: "IntArray",
    Tag.LONG_ARRAY: "LongArray",
    Tag.LIST: "List",
    Tag.COMPOUND: "Compound",
}


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _format(value: Value, depth: int = 0) -> str:
    name = _DEBUG_NAMES[value.tag]
    payload = value.value
    inner = _INDENT * (depth + 1)
    outer = _INDENT * depth
    if value.tag == Tag.STRING:
        return f"{name}({_quote(payload)})"
    if value.tag in (Tag.BYTE_ARRAY, Tag.INT_ARRAY, Tag.LONG_ARRAY):
        return f"{name}([{', '.join(str(item) for item in payload)}])"
    if value.tag == Tag.LIST:
        if not payload:
            return f"{name}([])"
        lines = "".join(f"{inner}{_format(item, depth + 1)},\n" for item in payload)
        return f"{name}([\n{lines}{outer}])"
    if value.tag == Tag.COMPOUND:
        if not payload:
            return f"{name}({{}})"
        lines = "".join(
            f"{inner}{_quote(key)}: {_format(payload[key], depth + 1)},\n"
            for key in sorted(payload)
        )
        return f"{name}({{\n{lines}{outer}}})"
    return f"{name}({payload!r})"


def set_world_spawn(level: Value, x: int, y: int, z: int) -> None:
    """Set the world spawn in a level.dat tree, in place."""
    if level.tag != Tag.COMPOUND:
        raise NbtError("level.dat root is not a compound")
    data = level.value.get("Data")
    if data is None or data.tag != Tag.COMPOUND:
        raise NbtError("level.dat has no Data compound")
    for key, coordinate in (("SpawnX", x), ("SpawnY", y), ("SpawnZ", z)):
        if key not in data.value:
            raise NbtError(f"level.dat Data has no {key}")
        data[key] = Value.int(coordinate)


def _dump(path: Optional[str]) -> None:
    if path is None:
        with gzip.GzipFile(fileobj=sys.stdin.buffer) as decoder:
            raw = decoder.read()
    else:
        with gzip.open(path, "rb") as decoder:
            raw = decoder.read()
    print(_format(from_bytes(raw)))


def _set_spawn(path: str, output: str, x: int, y: int, z: int) -> None:
    with gzip.open(path, "rb") as decoder:
        level = from_bytes(decoder.read())
    set_world_spawn(level, x, y, z)
    new_bytes = to_bytes(level)
    with gzip.open(output, "wb", compresslevel=1) as encoder:
        encoder.write(new_bytes)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nbtkit", description="Inspect and edit NBT files.")
    commands = parser.add_subparsers(dest="command", required=True)

    dump = commands.add_parser("dump", help="print a gzipped NBT file as a value tree")
    dump.add_argument("file", nargs="?", help="file to read (default: standard input)")

    spawn = commands.add_parser("set-spawn", help="set the world spawn in a level.dat")
    spawn.add_argument("level", help="path of the level.dat to read")
    spawn.add_argument("--output", default="level.dat", help="where to write the result")
    spawn.add_argument("--x", type=int, default=0)
    spawn.add_argument("--y", type=int, default=100)
    spawn.add_argument("--z", type=int, default=0)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line tool and return its exit status."""
    args = _parser().parse_args(argv)
    try:
        if args.command == "dump":
            _dump(args.file)
        else:
            _set_spawn(args.level, args.output, args.x, args.y, args.z)
    except (NbtError, OSError, EOFError, zlib.error) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())