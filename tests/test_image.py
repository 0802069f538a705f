import io

import pytest

from pixelkit.image import (
    Image,
    ImageType,
    ImageTypeSelector,
    RGBA8,
    find_image_type,
    format_image_types,
    print_image_types,
)

DIRECT_TYPES = [ImageType.RGB565, ImageType.RGB888, ImageType.RGBA16, ImageType.RGBA32]
INDEXED_TYPES = [ImageType.BPP4, ImageType.BPP8]


def test_rgb888_geometry_is_aligned_to_16():
    image = Image(ImageType.RGB888, 10, 5, False)
    assert image.pitch == 48
    assert image.aligned_height == 16
    assert image.size == image.pitch * image.aligned_height
    assert len(image.buffer) == image.size


@pytest.mark.parametrize("image_type", DIRECT_TYPES + INDEXED_TYPES)
def test_buffer_starts_zeroed_and_sized(image_type):
    image = Image(image_type, 17, 3, False)
    assert image.pitch % 2 == 0
    assert image.aligned_height % 16 == 0
    assert image.size == image.pitch * image.aligned_height
    assert not any(image.buffer)


def test_unknown_type_raises():
    with pytest.raises(ValueError):
        Image("RGB999", 4, 4, False)


@pytest.mark.parametrize("image_type", [ImageType.RGB888, ImageType.RGBA32])
def test_exact_formats_round_trip(image_type):
    image = Image(image_type, 8, 8, False)
    colour = RGBA8(12, 34, 56, 78)
    assert image.set_pixel_rgb(3, 4, colour)
    got = image.get_pixel_rgb(3, 4)
    assert (got.red, got.green, got.blue) == (12, 34, 56)
    expected_alpha = 78 if image_type is ImageType.RGBA32 else 255
    assert got.alpha == expected_alpha


@pytest.mark.parametrize("image_type", [ImageType.RGB565, ImageType.RGBA16])
def test_extreme_colours_survive_packed_formats(image_type):
    image = Image(image_type, 4, 4, False)
    white = RGBA8(255, 255, 255, 255)
    black = RGBA8(0, 0, 0, 255)
    image.set_pixel_rgb(0, 0, white)
    image.set_pixel_rgb(1, 0, black)
    assert image.get_pixel_rgb(0, 0) == white
    assert image.get_pixel_rgb(1, 0) == black


def test_rgb565_wire_layout_little_endian():
    image = Image(ImageType.RGB565, 4, 4, False)
    image.set_pixel_rgb(0, 0, RGBA8(255, 0, 0, 255))
    assert image.buffer[0:2] == bytes((0x00, 0xF8))


def test_packed_formats_are_idempotent():
    for image_type in (ImageType.RGB565, ImageType.RGBA16):
        image = Image(image_type, 4, 4, False)
        image.set_pixel_rgb(2, 2, RGBA8(100, 150, 200, 120))
        first = image.get_pixel_rgb(2, 2)
        image.set_pixel_rgb(2, 2, first)
        assert image.get_pixel_rgb(2, 2) == first


def test_dithered_rgb565_never_darkens():
    plain = Image(ImageType.RGB565, 8, 8, False)
    dithered = Image(ImageType.RGB565, 8, 8, True)
    colour = RGBA8(100, 100, 100, 255)
    plain.clear_rgb(colour)
    dithered.clear_rgb(colour)
    for y in range(8):
        for x in range(8):
            p = plain.get_pixel_rgb(x, y)
            d = dithered.get_pixel_rgb(x, y)
            assert d.red >= p.red and d.green >= p.green and d.blue >= p.blue


def test_dithered_rgb565_clamps_white():
    image = Image(ImageType.RGB565, 8, 8, True)
    white = RGBA8(255, 255, 255, 255)
    image.clear_rgb(white)
    assert image.get_pixel_rgb(5, 6) == white


def test_4bpp_neighbours_are_independent():
    image = Image(ImageType.BPP4, 4, 2, False)
    image.set_pixel_indexed(0, 0, 3)
    image.set_pixel_indexed(1, 0, 12)
    assert image.get_pixel_indexed(0, 0) == 3
    assert image.get_pixel_indexed(1, 0) == 12
    image.set_pixel_indexed(0, 0, 7)
    assert image.get_pixel_indexed(1, 0) == 12


def test_4bpp_masks_index_to_nibble():
    image = Image(ImageType.BPP4, 4, 2, False)
    image.set_pixel_indexed(2, 1, 0x1F)
    assert image.get_pixel_indexed(2, 1) == 0x0F


def test_8bpp_round_trip_and_clear():
    image = Image(ImageType.BPP8, 5, 5, False)
    image.clear_indexed(9)
    assert all(image.get_pixel_indexed(x, y) == 9 for x in range(5) for y in range(5))
    assert image.set_pixel_indexed(4, 4, 200)
    assert image.get_pixel_indexed(4, 4) == 200


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (8, 0), (0, 8)])
def test_out_of_bounds_set_is_rejected(x, y):
    image = Image(ImageType.RGBA32, 8, 8, False)
    assert image.set_pixel_rgb(x, y, RGBA8(1, 2, 3, 4)) is False
    assert not any(image.buffer)


def test_out_of_bounds_get_raises():
    image = Image(ImageType.RGB888, 8, 8, False)
    with pytest.raises(IndexError):
        image.get_pixel_rgb(8, 0)
    indexed = Image(ImageType.BPP8, 8, 8, False)
    with pytest.raises(IndexError):
        indexed.get_pixel_indexed(0, -1)


def test_wrong_colour_model():
    direct = Image(ImageType.RGB888, 4, 4, False)
    indexed = Image(ImageType.BPP8, 4, 4, False)
    assert direct.set_pixel_indexed(0, 0, 1) is False
    assert indexed.set_pixel_rgb(0, 0, RGBA8(1, 1, 1, 1)) is False
    with pytest.raises(TypeError):
        direct.get_pixel_indexed(0, 0)
    with pytest.raises(TypeError):
        indexed.get_pixel_rgb(0, 0)


def test_clear_ignores_other_colour_model():
    indexed = Image(ImageType.BPP8, 4, 4, False)
    indexed.clear_rgb(RGBA8(9, 9, 9, 9))
    assert indexed.get_pixel_indexed(2, 2) == 0
    assert not any(indexed.buffer)
    direct = Image(ImageType.RGBA32, 4, 4, False)
    direct.clear_indexed(5)
    assert direct.get_pixel_rgb(1, 1) == RGBA8(0, 0, 0, 0)
    assert not any(direct.buffer)


def test_clear_rgb_leaves_padding_untouched():
    image = Image(ImageType.RGBA32, 3, 2, False)
    colour = RGBA8(10, 20, 30, 40)
    image.clear_rgb(colour)
    assert image.get_pixel_rgb(2, 1) == colour
    assert image.buffer[3 * 4] == 0
    assert not any(image.buffer[2 * image.pitch:])


def test_find_image_type_case_insensitive():
    info = find_image_type("rgba32", ImageTypeSelector.ALL)
    assert info is not None
    assert info.name == "RGBA32"
    assert info.type is ImageType.RGBA32
    assert info.has_alpha and not info.is_indexed


def test_find_image_type_respects_selector():
    assert find_image_type("4BPP", ImageTypeSelector.ALL_DIRECT_COLOUR) is None
    assert find_image_type("RGB565", ImageTypeSelector.WITH_ALPHA | ImageTypeSelector.DIRECT_COLOUR) is None
    found = find_image_type("8bpp", ImageTypeSelector.ALL_INDEXED_COLOUR)
    assert found is not None and found.type is ImageType.BPP8


def test_find_unknown_name():
    assert find_image_type("JPEG", ImageTypeSelector.ALL) is None


def test_format_image_types_all_in_table_order():
    text = format_image_types("", ",", ImageTypeSelector.ALL)
    assert text.split(",")[:-1] == ["4BPP", "8BPP", "RGB565", "RGB888", "RGBA16", "RGBA32"]


def test_format_image_types_with_alpha():
    selector = ImageTypeSelector.WITH_ALPHA | ImageTypeSelector.COLOUR_DONT_CARE
    assert format_image_types("<", ">", selector) == "<RGBA16><RGBA32>"


def test_print_image_types_matches_format():
    out = io.StringIO()
    selector = ImageTypeSelector.ALL_DIRECT_COLOUR
    print_image_types(out, "  ", "\n", selector)
    assert out.getvalue() == format_image_types("  ", "\n", selector)
    assert "4BPP" not in out.getvalue()