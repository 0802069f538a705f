import pytest
from PIL import Image as PILImage

from pixelkit.image import RGBA8, Image, ImageType
from pixelkit.pngio import load_png, save_png


def _pattern(image):
    for y in range(image.height):
        for x in range(image.width):
            image.set_pixel_rgb(
                x, y, RGBA8((x * 40) % 256, (y * 60) % 256, (x + y) * 10 % 256, 200)
            )


def _pixels(image):
    return [
        image.get_pixel_rgb(x, y)
        for y in range(image.height)
        for x in range(image.width)
    ]


def test_rgb888_round_trip(tmp_path):
    original = Image(ImageType.RGB888, 5, 3, False)
    _pattern(original)
    path = tmp_path / "rgb.png"
    save_png(original, path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGB888
    assert (loaded.width, loaded.height) == (5, 3)
    assert _pixels(loaded) == _pixels(original)


def test_rgba32_round_trip(tmp_path):
    original = Image(ImageType.RGBA32, 4, 4, False)
    _pattern(original)
    path = tmp_path / "rgba.png"
    save_png(original, path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGBA32
    assert _pixels(loaded) == _pixels(original)


def test_rgb565_saved_as_expanded_rgb(tmp_path):
    original = Image(ImageType.RGB565, 6, 2, False)
    _pattern(original)
    path = tmp_path / "565.png"
    save_png(original, path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGB888
    assert _pixels(loaded) == _pixels(original)


def test_rgba16_saved_with_alpha(tmp_path):
    original = Image(ImageType.RGBA16, 3, 3, False)
    _pattern(original)
    path = tmp_path / "rgba16.png"
    save_png(original, path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGBA32
    assert _pixels(loaded) == _pixels(original)


def test_saved_file_is_eight_bit_png(tmp_path):
    original = Image(ImageType.RGBA16, 2, 2, False)
    path = tmp_path / "mode.png"
    save_png(original, path)
    with PILImage.open(path) as png:
        assert png.format == "PNG"
        assert png.mode == "RGBA"
        assert png.size == (2, 2)


@pytest.mark.parametrize("image_type", [ImageType.BPP4, ImageType.BPP8])
def test_indexed_images_cannot_be_saved(tmp_path, image_type):
    path = tmp_path / "indexed.png"
    with pytest.raises(ValueError):
        save_png(Image(image_type, 4, 4, False), path)
    assert not path.exists()


def test_loaded_rows_are_aligned(tmp_path):
    path = tmp_path / "odd.png"
    PILImage.new("RGB", (17, 3), (1, 2, 3)).save(path)
    loaded = load_png(path)
    assert loaded.pitch == 32 * 3
    assert loaded.aligned_height == 16
    assert loaded.get_pixel_rgb(16, 2) == RGBA8(1, 2, 3, 255)


def test_grey_expands_to_rgb(tmp_path):
    path = tmp_path / "grey.png"
    PILImage.new("L", (2, 2), 77).save(path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGB888
    assert loaded.get_pixel_rgb(1, 1) == RGBA8(77, 77, 77, 255)


def test_grey_alpha_becomes_rgba(tmp_path):
    path = tmp_path / "la.png"
    PILImage.new("LA", (2, 1), (90, 30)).save(path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGBA32
    assert loaded.get_pixel_rgb(0, 0) == RGBA8(90, 90, 90, 30)


def test_palette_expands_to_rgb(tmp_path):
    path = tmp_path / "pal.png"
    PILImage.new("RGB", (3, 2), (10, 20, 30)).convert("P").save(path)
    loaded = load_png(path)
    assert loaded.type is ImageType.RGB888
    assert loaded.get_pixel_rgb(2, 1) == RGBA8(10, 20, 30, 255)


def test_sixteen_bit_grey_scaled_to_eight(tmp_path):
    path = tmp_path / "grey16.png"
    PILImage.frombytes("I;16", (2, 1), b"\x00\x00\xff\xff").save(path)
    loaded = load_png(path)
    assert loaded.get_pixel_rgb(0, 0) == RGBA8(0, 0, 0, 255)
    assert loaded.get_pixel_rgb(1, 0) == RGBA8(255, 255, 255, 255)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_png(tmp_path / "absent.png")


def test_non_image_file_raises(tmp_path):
    path = tmp_path / "text.png"
    path.write_text("not an image at all")
    with pytest.raises(OSError):
        load_png(path)


def test_other_format_rejected(tmp_path):
    path = tmp_path / "picture.gif"
    PILImage.new("RGB", (2, 2), (5, 5, 5)).save(path, format="GIF")
    with pytest.raises(ValueError):
        load_png(path)