from dataclasses import dataclass

import pytest

from nbtkit.render import (
    BlockArchetype,
    RegionMap,
    TopShadeRenderer,
    a_over_b_colour,
    top_shade_colour,
    water_depth_to_alpha,
)


@dataclass(frozen=True)
class FakeBlock:
    name: str
    archetype: BlockArchetype


STONE = FakeBlock("stone", BlockArchetype.NORMAL)
AIR = FakeBlock("air", BlockArchetype.AIRY)
WATER = FakeBlock("water", BlockArchetype.WATERY)


class FakeChunk:
    def __init__(self, layers, height, status="full", biome="plains"):
        self.layers = layers
        self.height = height
        self._status = status
        self._biome = biome
        self.modes = set()

    def status(self):
        return self._status

    def y_range(self):
        return range(0, len(self.layers))

    def surface_height(self, x, z, mode):
        self.modes.add(mode)
        return self.height

    def block(self, x, y, z):
        if 0 <= y < len(self.layers):
            return self.layers[y]
        return None

    def biome(self, x, y, z):
        return self._biome


class FakePalette:
    def __init__(self, colours):
        self.colours = colours
        self.picked = []

    def pick(self, block, biome):
        self.picked.append((block.name, biome))
        return self.colours[block.name]


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def test_water_depth_to_alpha_limits():
    assert water_depth_to_alpha(0) == 180
    assert water_depth_to_alpha(1000) == 250
    assert water_depth_to_alpha(3) > water_depth_to_alpha(1)


def test_top_shade_colour():
    white = (255, 255, 255, 10)
    assert top_shade_colour(white, 1, 2) == (180, 180, 180, 10)
    assert top_shade_colour(white, 2, 2) == (220, 220, 220, 10)
    assert top_shade_colour(white, 3, 2) == white


def test_opaque_colour_over_anything_is_itself():
    assert a_over_b_colour(RED, (0, 255, 0, 255)) == RED


def test_transparent_colour_over_opaque_is_below():
    assert a_over_b_colour((0, 0, 0, 0), (0, 255, 0, 255)) == (0, 255, 0, 255)


def test_both_transparent_stays_transparent():
    assert a_over_b_colour((0, 0, 0, 0), (0, 0, 0, 0)) == (0, 0, 0, 0)


def test_partial_alphas_combine_to_more_opaque():
    result = a_over_b_colour((255, 255, 255, 128), (0, 0, 0, 128))
    assert 128 < result[3] < 255


def test_render_skips_unfinished_chunks():
    chunk = FakeChunk([STONE, STONE], 2, status="minecraft:noise")
    renderer = TopShadeRenderer(FakePalette({"stone": RED}), "trust")
    assert renderer.render(chunk) == [(0, 0, 0, 0)] * 256


def test_render_flat_chunk_shades_rows():
    palette = FakePalette({"stone": RED})
    chunk = FakeChunk([STONE, STONE], 2)
    pixels = TopShadeRenderer(palette, "trust").render(chunk)
    assert len(pixels) == 256
    assert pixels[:16] == [RED] * 16
    assert pixels[16:] == [(220, 0, 0, 255)] * 240
    assert chunk.modes == {"trust"}
    assert all(biome == "plains" for _, biome in palette.picked)


def test_render_skips_air():
    solid = TopShadeRenderer(FakePalette({"stone": RED}), None).render(
        FakeChunk([STONE, STONE], 2)
    )
    airy = TopShadeRenderer(FakePalette({"stone": RED, "air": BLUE}), None).render(
        FakeChunk([STONE, AIR, AIR], 3)
    )
    assert airy == solid


def test_render_water_blends_with_floor():
    palette = FakePalette({"stone": RED, "water": BLUE})
    chunk = FakeChunk([STONE, STONE, WATER, WATER], 4)
    pixels = TopShadeRenderer(palette, None).render(chunk)
    top = pixels[0]
    assert top[3] == 255
    assert top[0] > 0 and top[2] > 0
    assert [name for name, _ in palette.picked[:2]] == ["water", "stone"]


def test_render_missing_block_leaves_transparent():
    chunk = FakeChunk([], 5)
    pixels = TopShadeRenderer(FakePalette({}), None).render(chunk)
    assert pixels == [(0, 0, 0, 0)] * 256


def test_render_uses_north_chunk_for_first_row():
    palette = FakePalette({"stone": RED})
    chunk = FakeChunk([STONE, STONE], 2)
    taller = FakeChunk([STONE] * 5, 5)
    pixels = TopShadeRenderer(palette, None).render(chunk, taller)
    assert pixels[:16] == [top_shade_colour(RED, 2, 5)] * 16
    assert pixels[0][0] < RED[0]


def test_region_map_defaults_and_round_trip():
    region = RegionMap(3, -2, (0, 0, 0, 0))
    assert (region.x, region.z) == (3, -2)
    assert len(region.data) == 256 * 32 * 32
    pixels = [(i % 256, 0, 0, 255) for i in range(256)]
    region.set_chunk(5, 7, pixels)
    assert region.chunk(5, 7) == pixels
    assert region.chunk(7, 5) == [(0, 0, 0, 0)] * 256
    assert region.data[(7 * 32 + 5) * 256] == pixels[0]


def test_region_map_rejects_bad_input():
    region = RegionMap(0, 0, 0)
    with pytest.raises(ValueError):
        region.chunk(32, 0)
    with pytest.raises(ValueError):
        region.chunk(0, -1)
    with pytest.raises(ValueError):
        region.set_chunk(0, 0, [1, 2, 3])