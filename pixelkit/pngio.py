"""Reading and writing PNG files as in-memory images."""

from __future__ import annotations

import os
from typing import Union

from PIL import Image as PILImage

from .image import Image, ImageType

PathLike = Union[str, "os.PathLike[str]"]

_ALPHA_MODES = frozenset({"RGBA", "RGBa", "LA", "La", "PA"})
_WIDE_GREY_MODES = frozenset({"I", "I;16", "I;16B", "I;16L"})

_SAVE_MODES = {
    ImageType.RGB565: "RGB",
    ImageType.RGB888: "RGB",
    ImageType.RGBA16: "RGBA",
    ImageType.RGBA32: "RGBA",
}


def _grey_to_eight_bits(picture: PILImage.Image) -> PILImage.Image:
    """Scale 16-bit grey samples down to 8 bits."""
    values = bytes(min(255, max(0, round(v / 257))) for v in picture.getdata())
    return PILImage.frombytes("L", picture.size, values)


def _copy_rows(image: Image, data: bytes) -> None:
    row_length = (image.width * image.bits_per_pixel) // 8
    for y in range(image.height):
        start = y * image.pitch
        image.buffer[start:start + row_length] = data[
            y * row_length:(y + 1) * row_length
        ]


def load_png(path: PathLike) -> Image:
    """Read a PNG file into an RGBA32 image if it has alpha, otherwise RGB888.

    Palette, grey and low bit-depth images are expanded to 8-bit RGB;
    16-bit samples are scaled to 8 bits.
    """
    with PILImage.open(path) as png:
        if png.format != "PNG":
            raise ValueError(f"loadpng: {os.fspath(path)} is not a PNG file")
        png.load()

        has_alpha = png.mode in _ALPHA_MODES
        source = _grey_to_eight_bits(png) if png.mode in _WIDE_GREY_MODES else png

        if has_alpha:
            image_type, pixels = ImageType.RGBA32, source.convert("RGBA")
        else:
            image_type, pixels = ImageType.RGB888, source.convert("RGB")

        width, height = pixels.size
        image = Image(image_type, width, height, False)
        _copy_rows(image, pixels.tobytes())
    return image


def _packed_rows(image: Image) -> bytes:
    row_length = (image.width * image.bits_per_pixel) // 8
    return b"".join(
        bytes(image.buffer[y * image.pitch:y * image.pitch + row_length])
        for y in range(image.height)
    )


def _expanded_rows(image: Image, with_alpha: bool) -> bytes:
    out = bytearray()
    for y in range(image.height):
        for x in range(image.width):
            colour = image.get_pixel_rgb(x, y)
            out += bytes((colour.red, colour.green, colour.blue))
            if with_alpha:
                out.append(colour.alpha)
    return bytes(out)


def save_png(image: Image, path: PathLike) -> None:
    """Write a direct-colour image as an 8-bit RGB or RGBA PNG file."""
    mode = _SAVE_MODES.get(image.type)
    if mode is None:
        raise ValueError(f"savepng: cannot save {image.type.name} images")

    if image.type in (ImageType.RGB888, ImageType.RGBA32):
        data = _packed_rows(image)
    else:
        data = _expanded_rows(image, with_alpha=(mode == "RGBA"))

    picture = PILImage.frombytes(mode, (image.width, image.height), data)
    picture.save(path, format="PNG")