# nbtkit

`nbtkit` works with NBT, the binary format used by Minecraft: Java Edition
for level files, chunks and player data. It decodes and encodes NBT
documents as typed value trees, builds values from plain Python data, and
provides the pieces needed to turn blocks into top-down map colours.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Values

`nbtkit.value.Value` is a dataclass holding a `tag` (an `nbtkit.tags.Tag`)
and a `value` payload. Constructors exist for every kind:
`Value.byte`, `Value.short`, `Value.int`, `Value.long`, `Value.float`,
`Value.double`, `Value.string`, `Value.byte_array`, `Value.int_array`,
`Value.long_array`, `Value.list` and `Value.compound`.

Payloads are checked when a value is made: integers must fit the width of
their tag (otherwise `NbtError`), `Value.float` rounds to single precision,
list items must be `Value`s and compound keys must be strings. Compounds,
lists and arrays can be indexed and assigned with `value[key]`.

## Decoding and encoding

```python
import gzip

from nbtkit.codec import from_bytes, to_bytes

with gzip.open("level.dat", "rb") as fh:
    level = from_bytes(fh.read())

level["Data"]["SpawnX"] = level["Data"]["SpawnX"]  # any edits here
data = to_bytes(level)
```

- `from_bytes(data, opts=None)` parses raw, uncompressed NBT. Input that
  starts with the gzip magic bytes is refused with an `NbtError` saying so.
- `from_reader(stream, opts=None)` parses from a binary stream.
- `to_bytes(value, opts=None)` and `to_writer(stream, value, opts=None)`
  write a compound value. The root must be a compound; compound entries are
  written in sorted key order, and all items of a list must share one tag.

`DeOpts` has `max_seq_len` (default 10,000,000 list elements) and
`expect_compound_names` (default true). `SerOpts` has `root_name` (default
empty) and `serialize_root_name` (default true). `DeOpts.network_nbt()` and
`SerOpts.network_nbt()` select the form in which the root compound carries
no name.

Malformed input — truncated data, unknown tags, strings that are not valid
modified UTF-8, negative lengths, lists of end tags with elements, a root
that is not a compound — raises `nbtkit.errors.NbtError`.

## Building values from Python data

```python
from nbtkit.builder import nbt, byte_array, int_array, long_array

value = nbt({
    "key1": "value1",
    "key2": 42,
    "key3": [4, 2],
    "ints": int_array([1, 2, 3]),
})
```

`nbt` turns `bool` into a byte, `int` into an int (or a long when it does not
fit in 32 bits), `float` into a double, `str` into a string, lists and
tuples into lists and mappings into compounds; `Value`s pass through
unchanged. `byte_array`, `int_array` and `long_array` make the array kinds.

## Tags and low-level reading

`nbtkit.tags.Tag` enumerates the thirteen tag types with their wire values
(`str(tag)` gives names such as `byte-array`), and `tag_from_byte` converts a
raw byte, raising `ValueError` for anything above 12.

`nbtkit.reader.NbtReader` reads big-endian primitives, tags and strings from
bytes or a binary stream, and can skip whole values with `ignore_value`.
`decode_java_cesu8` and `encode_java_cesu8` convert Java's modified UTF-8.

## Map rendering

- `nbtkit.tex.Renderer` takes blockstates, models and textures (build them
  with `Blockstate.from_dict`, `Model.from_dict` from parsed JSON) and
  `get_top(block_id, encoded_props)` returns the texture on a block's top
  face, following model parents with `merge_models` and resolving `#name`
  texture variables. Failures raise `TexError`, whose `kind` names the
  problem; multipart blockstates raise `TexError("unsupported")`.
- `nbtkit.render.TopShadeRenderer(palette, height_mode)` renders a chunk to
  256 RGBA tuples (index `z * 16 + x`). The chunk object supplies `status()`,
  `y_range()`, `surface_height(x, z, mode)`, `block(x, y, z)` and
  `biome(x, y, z)`; blocks carry an `archetype` (`BlockArchetype`). Chunks
  whose status is not fully generated render transparent. Columns are
  drilled through airy blocks and water, and shaded against the northern
  neighbour, taken from the optional `north` chunk on the first row.
- `nbtkit.render.RegionMap(x, z, default)` holds the pixels of a 32×32-chunk
  region; read with `chunk(x, z)` and write with `set_chunk(x, z, pixels)`.
- `nbtkit.palette.load_rendered_palette(stream)` reads a gzipped tar
  holding `blockstates.json`, `grass-colourmap.png` and
  `foliage-colourmap.png`, and returns a `RenderedPalette` whose `pick`
  tints grass, foliage and water by biome. Missing or malformed parts raise
  `PaletteError`.

## Command line

Installing the package provides the `nbtkit` command:

```
nbtkit dump [FILE]
nbtkit set-spawn LEVEL [--output level.dat] [--x 0] [--y 100] [--z 0]
```

`dump` prints the value tree of a gzipped NBT file, or of standard input
when no file is given. `set-spawn` reads a gzipped `level.dat`, sets
`Data.SpawnX`, `SpawnY` and `SpawnZ` (each must already exist) and writes a
gzipped copy to `--output`. Errors are printed to standard error with exit
status 1. See `nbtkit --help` for details.

## What it does not do

nbtkit does not read region (`.mca`) files or decode chunk data into the
block, biome and height objects the renderer consumes; those have to be
supplied by the caller. There is no streaming event parser, no mapping of
NBT onto user-defined classes, and no SNBT text format.