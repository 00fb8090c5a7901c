"""A palette built from pre-rendered block colours and biome colour maps."""

from __future__ import annotations

import io
import json
import logging
import math
import re
import struct
import tarfile
import zlib
from dataclasses import dataclass
from typing import Any, BinaryIO, Mapping, Optional, Protocol

from PIL import Image

__all__ = ["PaletteError", "RenderedPalette", "load_rendered_palette"]

log = logging.getLogger(__name__)

Rgba = tuple[int, int, int, int]

_F32 = struct.Struct("<f")
_MISSING_COLOUR: Rgba = (255, 0, 255, 255)
_NO_BIOME_COLOUR: Rgba = (255, 0, 0, 0)
_DEFAULT_WATER: Rgba = (0x3F, 0x76, 0xE4, 255)
_WATER_COLOURS: dict[str, Rgba] = {
    "swamp": (0x61, 0x7B, 0x64, 255),
    "river": (0x3F, 0x76, 0xE4, 255),
    "ocean": (0x3F, 0x76, 0xE4, 255),
    "lukewarm_ocean": (0x45, 0xAD, 0xF2, 255),
    "warm_ocean": (0x43, 0xD5, 0xEE, 255),
    "cold_ocean": (0x3D, 0x57, 0xD6, 255),
    "frozen_river": (0x39, 0x38, 0xC9, 255),
    "frozen_ocean": (0x39, 0x38, 0xC9, 255),
}

_GRASS_LIKE = frozenset({"grass", "tall_grass", "vine", "fern", "large_fern", "short_grass"})
_FOLIAGE_LEAVES = frozenset(
    {"oak_leaves", "jungle_leaves", "acacia_leaves", "dark_oak_leaves", "mangrove_leaves"}
)
_WATER_LIKE = frozenset({"water", "bubble_column", "kelp", "kelp_plant", "seagrass", "tall_seagrass"})

_GRASS_FILE = "grass-colourmap.png"
_FOLIAGE_FILE = "foliage-colourmap.png"
_BLOCKSTATES_FILE = "blockstates.json"


class _Block(Protocol):
    name: str
    encoded_description: str
    snowy: bool


class _Biome(Protocol):
    name: str
    temperature: float
    rainfall: float


@dataclass(frozen=True)
class _PlainBlock:
    name: str
    encoded_description: str
    snowy: bool = False


_SNOW_BLOCK = _PlainBlock("minecraft:snow_block", "minecraft:snow_block|")


class PaletteError(Exception):
    """Raised when a rendered palette cannot be loaded."""


def _f32(value: float) -> float:
    return _F32.unpack(_F32.pack(value))[0]


def _clamp01(value: float) -> float:
    return min(max(_f32(value), 0.0), 1.0)


def _biome_key(biome: Any) -> str:
    name = str(biome.name)
    if name.startswith("minecraft:"):
        name = name[len("minecraft:"):]
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()


class RenderedPalette:
    """Chooses block colours from a blockstate table and biome colour maps."""

    def __init__(
        self,
        blockstates: Mapping[str, Rgba],
        grass: Image.Image,
        foliage: Image.Image,
    ) -> None:
        self.blockstates = {key: tuple(colour) for key, colour in blockstates.items()}
        self.grass = grass.convert("RGBA")
        self.foliage = foliage.convert("RGBA")

    @staticmethod
    def _climate_pixel(image: Image.Image, biome: Optional[_Biome]) -> Rgba:
        if biome is None:
            return _NO_BIOME_COLOUR
        temperature = _clamp01(biome.temperature)
        rainfall = _f32(_clamp01(biome.rainfall) * temperature)
        x = 255 - math.ceil(_f32(temperature * 255.0))
        y = 255 - math.ceil(_f32(rainfall * 255.0))
        return tuple(image.getpixel((x, y)))

    def _pick_grass(self, biome: Optional[_Biome]) -> Rgba:
        return self._climate_pixel(self.grass, biome)

    def _pick_foliage(self, biome: Optional[_Biome]) -> Rgba:
        return self._climate_pixel(self.foliage, biome)

    @staticmethod
    def _pick_water(biome: Optional[_Biome]) -> Rgba:
        if biome is None:
            return _DEFAULT_WATER
        return _WATER_COLOURS.get(_biome_key(biome), _DEFAULT_WATER)

    def pick(self, block: _Block, biome: Optional[_Biome]) -> Rgba:
        """Return the colour a block renders to in the given biome."""
        name = block.name
        if name.startswith("minecraft:"):
            block_id = name[len("minecraft:"):]
            if block_id in _GRASS_LIKE:
                return self._pick_grass(biome)
            if block_id == "grass_block":
                if block.snowy:
                    return self.pick(_SNOW_BLOCK, biome)
                return self._pick_grass(biome)
            if block_id in _WATER_LIKE:
                return self._pick_water(biome)
            if block_id in _FOLIAGE_LEAVES:
                return self._pick_foliage(biome)
            match block_id:
                case "birch_leaves":
                    return (0x80, 0xA7, 0x55, 255)
                case "spruce_leaves":
                    return (0x61, 0x99, 0x61, 255)
                case "snow":
                    return self.pick(_SNOW_BLOCK, biome)
                case "air":
                    # Common in the end, where the bottom layer is void air.
                    return (0, 0, 0, 255)
                case "cave_air":
                    return (255, 0, 0, 255)

        colour = self.blockstates.get(block.encoded_description)
        if colour is None:
            colour = self.blockstates.get(name)
        if colour is None:
            log.debug("could not draw %s", block.encoded_description)
            return _MISSING_COLOUR
        return colour


def _load_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data), formats=["PNG"])
    image.load()
    return image.convert("RGBA")


def _load_blockstates(data: bytes) -> dict[str, Rgba]:
    try:
        raw = json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise PaletteError(str(exc)) from exc
    if not isinstance(raw, dict):
        raise PaletteError("blockstate palette must be a JSON object")
    table: dict[str, Rgba] = {}
    for key, colour in raw.items():
        if (
            not isinstance(colour, list)
            or len(colour) != 4
            or not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in colour)
        ):
            raise PaletteError(f"invalid colour for {key}: {colour!r}")
        table[key] = tuple(colour)
    return table


def load_rendered_palette(stream: BinaryIO) -> RenderedPalette:
    """Load a palette from a gzipped tar holding the colour maps and blockstates."""
    grass: Optional[Image.Image] = None
    foliage: Optional[Image.Image] = None
    blockstates: Optional[dict[str, Rgba]] = None

    try:
        with tarfile.open(fileobj=stream, mode="r|gz") as archive:
            for member in archive:
                if member.name not in (_GRASS_FILE, _FOLIAGE_FILE, _BLOCKSTATES_FILE):
                    continue
                handle = archive.extractfile(member)
                if handle is None:
                    continue
                data = handle.read()
                if member.name == _GRASS_FILE:
                    grass = _load_image(data)
                elif member.name == _FOLIAGE_FILE:
                    foliage = _load_image(data)
                else:
                    blockstates = _load_blockstates(data)
    except (tarfile.TarError, OSError, EOFError, zlib.error) as exc:
        raise PaletteError(str(exc)) from exc

    if blockstates is None:
        raise PaletteError("no blockstate palette")
    if grass is None:
        raise PaletteError("no grass colour map")
    if foliage is None:
        raise PaletteError("no foliage colour map")
    return RenderedPalette(blockstates, grass, foliage)