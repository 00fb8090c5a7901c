import pytest

from nbtkit.tags import Tag, tag_from_byte


@pytest.mark.parametrize(
    "tag, value",
    [
        (Tag.END, 0),
        (Tag.BYTE, 1),
        (Tag.SHORT, 2),
        (Tag.INT, 3),
        (Tag.LONG, 4),
        (Tag.FLOAT, 5),
        (Tag.DOUBLE, 6),
        (Tag.BYTE_ARRAY, 7),
        (Tag.STRING, 8),
        (Tag.LIST, 9),
        (Tag.COMPOUND, 10),
        (Tag.INT_ARRAY, 11),
        (Tag.LONG_ARRAY, 12),
    ],
)
def test_exhaustive_tag_values(tag, value):
    assert int(tag) == value
    assert tag_from_byte(value) is tag


@pytest.mark.parametrize("value", range(13, 256))
def test_values_above_twelve_are_invalid(value):
    with pytest.raises(ValueError):
        tag_from_byte(value)


@pytest.mark.parametrize(
    "tag, text",
    [
        (Tag.END, "end"),
        (Tag.BYTE, "byte"),
        (Tag.SHORT, "short"),
        (Tag.INT, "int"),
        (Tag.LONG, "long"),
        (Tag.FLOAT, "float"),
        (Tag.DOUBLE, "double"),
        (Tag.BYTE_ARRAY, "byte-array"),
        (Tag.STRING, "string"),
        (Tag.LIST, "list"),
        (Tag.COMPOUND, "compound"),
        (Tag.INT_ARRAY, "int-array"),
        (Tag.LONG_ARRAY, "long-array"),
    ],
)
def test_display_names(tag, text):
    assert str(tag) == text
    assert f"{tag}" == text


def test_every_tag_round_trips_through_its_byte():
    assert [tag_from_byte(int(t)) for t in Tag] == list(Tag)