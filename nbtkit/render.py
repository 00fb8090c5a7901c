"""Top-down map rendering of chunks with height shading and water depth."""

from __future__ import annotations

import math
import struct
from enum import Enum, auto
from typing import Any, Generic, Iterable, Optional, Protocol, TypeVar

__all__ = [
    "BlockArchetype",
    "Palette",
    "TopShadeRenderer",
    "RegionMap",
    "water_depth_to_alpha",
    "a_over_b_colour",
    "top_shade_colour",
]

Rgba = tuple[int, int, int, int]

_F32 = struct.Struct("<f")
_TRANSPARENT: Rgba = (0, 0, 0, 0)

# Chunks that have been fully generated have one of these statuses; others
# render unpredictably and are skipped.
_OK_STATUSES = frozenset(
    {
        "full",
        "spawn",
        "postprocessed",
        "fullchunk",
        "minecraft:full",
        "minecraft:spawn",
        "minecraft:postprocessed",
        "minecraft:fullchunk",
    }
)


class BlockArchetype(Enum):
    """How a block behaves when drilling down a column for its colour."""

    NORMAL = auto()
    AIRY = auto()
    WATERY = auto()


class Palette(Protocol):
    """Something that maps a block and biome to a colour."""

    def pick(self, block: Any, biome: Any) -> Rgba:
        """Return the colour a block in the given biome renders to."""


class _Chunk(Protocol):
    def status(self) -> str: ...

    def y_range(self) -> range: ...

    def surface_height(self, x: int, z: int, mode: Any) -> int: ...

    def block(self, x: int, y: int, z: int) -> Any: ...

    def biome(self, x: int, y: int, z: int) -> Any: ...


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def _to_u8(value: float) -> int:
    if math.isnan(value):
        return 0
    return max(0, min(255, int(value)))


def _linear(component: int) -> float:
    return _f32(component * component / 65025.0)


def _alpha_out(aa: float, ab: float) -> float:
    return _f32(aa + _f32(ab * _f32(1.0 - aa)))


def _over_component(ca: float, aa: float, cb: float, ab: float) -> int:
    a_out = _alpha_out(aa, ab)
    numerator = _f32(_f32(ca * aa) + _f32(_f32(cb * ab) * _f32(1.0 - aa)))
    if a_out == 0.0:
        return 0
    linear_out = _f32(numerator / a_out)
    return _to_u8(_f32(math.sqrt(_f32(_f32(linear_out * 255.0) * 255.0))))


def a_over_b_colour(colour: Rgba, below_colour: Rgba) -> Rgba:
    """Composite colour A over colour B, blending in a linearised space."""
    top = [_linear(c) for c in colour]
    below = [_linear(c) for c in below_colour]
    alpha = _alpha_out(top[3], below[3])
    return (
        _over_component(top[0], top[3], below[0], below[3]),
        _over_component(top[1], top[3], below[1], below[3]),
        _over_component(top[2], top[3], below[2], below[3]),
        _to_u8(_f32(math.sqrt(_f32(_f32(alpha * 255.0) * 255.0)))),
    )


def water_depth_to_alpha(water_depth: int) -> int:
    """Approximate the opacity of a column of water of the given depth.

    Deeper water is more opaque; a floor keeps shallow rivers visible and a
    ceiling leaves deep ocean slightly transparent.
    """
    return min(180 + 2 * water_depth, 250)


def top_shade_colour(colour: Rgba, height: int, shade_height: int) -> Rgba:
    """Darken a colour when the block to its north is taller, the way maps do."""
    if height < shade_height:
        shade = 180
    elif height == shade_height:
        shade = 220
    else:
        shade = 255
    return (
        colour[0] * shade // 255,
        colour[1] * shade // 255,
        colour[2] * shade // 255,
        colour[3],
    )


def _water_depth(x: int, y: int, z: int, chunk: _Chunk, y_min: int) -> int:
    depth = 1
    while y > y_min:
        block = chunk.block(x, y, z)
        if block is None or block.archetype != BlockArchetype.WATERY:
            return depth
        depth += 1
        y -= 1
    return depth


class TopShadeRenderer:
    """Renders a chunk from above, shading by height relative to the north."""

    def __init__(self, palette: Palette, height_mode: Any) -> None:
        self.palette = palette
        self.height_mode = height_mode

    def render(self, chunk: _Chunk, north: Optional[_Chunk] = None) -> list[Rgba]:
        """Return 16x16 colours in row-major order (index ``z * 16 + x``)."""
        if chunk.status() not in _OK_STATUSES:
            return [_TRANSPARENT] * (16 * 16)

        y_min = chunk.y_range().start
        pixels: list[Rgba] = []
        for z in range(16):
            for x in range(16):
                air_height = chunk.surface_height(x, z, self.height_mode)
                block_height = max(air_height - 1, y_min)
                colour = self._drill_for_colour(x, block_height, z, chunk, y_min)

                if z > 0:
                    north_height = chunk.surface_height(x, z - 1, self.height_mode)
                elif north is not None:
                    north_height = north.surface_height(x, 15, self.height_mode)
                else:
                    north_height = block_height
                pixels.append(top_shade_colour(colour, air_height, north_height))
        return pixels

    def _drill_for_colour(
        self, x: int, y: int, z: int, chunk: _Chunk, y_min: int
    ) -> Rgba:
        """Walk down the column until the accumulated colour is opaque."""
        colour = _TRANSPARENT
        while colour[3] != 255 and y >= y_min:
            biome = chunk.biome(x, y, z)
            block = chunk.block(x, y, z)
            if block is None:
                return colour

            if block.archetype == BlockArchetype.AIRY:
                y -= 1
            elif block.archetype == BlockArchetype.WATERY:
                depth = _water_depth(x, y, z, chunk, y_min)
                r, g, b, _ = self.palette.pick(block, biome)
                colour = a_over_b_colour(colour, (r, g, b, water_depth_to_alpha(depth)))
                y -= depth
            else:
                colour = a_over_b_colour(colour, tuple(self.palette.pick(block, biome)))
                y -= 1
        return colour


T = TypeVar("T")

_CHUNK_LEN = 16 * 16
_REGION_CHUNKS = 32


class RegionMap(Generic[T]):
    """Per-block data for a whole 32x32-chunk region, stored chunk by chunk."""

    def __init__(self, x: int, z: int, default: T) -> None:
        self.x = x
        self.z = z
        self.data: list[T] = [default] * (_CHUNK_LEN * _REGION_CHUNKS * _REGION_CHUNKS)

    def _span(self, x: int, z: int) -> slice:
        if not (0 <= x < _REGION_CHUNKS and 0 <= z < _REGION_CHUNKS):
            raise ValueError(f"chunk coordinate ({x}, {z}) is outside the region")
        begin = (z * _REGION_CHUNKS + x) * _CHUNK_LEN
        return slice(begin, begin + _CHUNK_LEN)

    def chunk(self, x: int, z: int) -> list[T]:
        """Return a copy of the 256 entries for the chunk at (x, z)."""
        return self.data[self._span(x, z)]

    def set_chunk(self, x: int, z: int, pixels: Iterable[T]) -> None:
        """Replace the 256 entries for the chunk at (x, z)."""
        values = list(pixels)
        if len(values) != _CHUNK_LEN:
            raise ValueError(f"a chunk holds {_CHUNK_LEN} entries, got {len(values)}")
        self.data[self._span(x, z)] = values