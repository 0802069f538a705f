"""In-memory raster images in the pixel formats used by the display layers."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import Callable, Optional, TextIO


def _align_to_16(value: int) -> int:
    return (value + 15) & ~15


class ImageType(enum.Enum):
    """Supported pixel layouts."""

    BPP4 = "4BPP"
    BPP8 = "8BPP"
    RGB565 = "RGB565"
    RGB888 = "RGB888"
    RGBA16 = "RGBA16"
    RGBA32 = "RGBA32"


class ImageTypeSelector(enum.IntFlag):
    """Flags that select image types by alpha and colour model."""

    WITH_ALPHA = 1
    WITHOUT_ALPHA = 1 << 1
    ALPHA_DONT_CARE = WITH_ALPHA | WITHOUT_ALPHA
    DIRECT_COLOUR = 1 << 2
    ALL_DIRECT_COLOUR = ALPHA_DONT_CARE | DIRECT_COLOUR
    INDEXED_COLOUR = 1 << 3
    ALL_INDEXED_COLOUR = ALPHA_DONT_CARE | INDEXED_COLOUR
    COLOUR_DONT_CARE = DIRECT_COLOUR | INDEXED_COLOUR
    ALL = ALPHA_DONT_CARE | COLOUR_DONT_CARE


@dataclass(frozen=True)
class ImageTypeInfo:
    """Name and properties of one image type."""

    name: str
    type: ImageType
    has_alpha: bool
    is_indexed: bool

    def matches(self, selector: ImageTypeSelector) -> bool:
        """Whether this type is chosen by the selector."""
        matched_alpha = bool(
            (selector & ImageTypeSelector.WITH_ALPHA and self.has_alpha)
            or (selector & ImageTypeSelector.WITHOUT_ALPHA and not self.has_alpha)
        )
        matched_colour = bool(
            (selector & ImageTypeSelector.DIRECT_COLOUR and not self.is_indexed)
            or (selector & ImageTypeSelector.INDEXED_COLOUR and self.is_indexed)
        )
        return matched_alpha and matched_colour


_TYPE_INFO = (
    ImageTypeInfo("4BPP", ImageType.BPP4, False, True),
    ImageTypeInfo("8BPP", ImageType.BPP8, False, True),
    ImageTypeInfo("RGB565", ImageType.RGB565, False, False),
    ImageTypeInfo("RGB888", ImageType.RGB888, False, False),
    ImageTypeInfo("RGBA16", ImageType.RGBA16, True, False),
    ImageTypeInfo("RGBA32", ImageType.RGBA32, True, False),
)


@dataclass(frozen=True)
class RGBA8:
    """A colour with 8-bit red, green, blue and alpha channels."""

    red: int
    green: int
    blue: int
    alpha: int = 255


_DITHER8 = (
    1, 6, 2, 7, 1, 6, 2, 7,
    4, 2, 5, 4, 4, 3, 6, 4,
    1, 7, 1, 6, 2, 7, 1, 7,
    5, 3, 5, 3, 5, 4, 5, 3,
    1, 6, 2, 7, 1, 6, 2, 7,
    4, 3, 6, 4, 4, 2, 6, 4,
    2, 7, 1, 7, 2, 7, 1, 6,
    5, 3, 5, 3, 5, 3, 5, 3,
)

_DITHER4 = (
    1, 3, 1, 3, 1, 3, 1, 3,
    2, 1, 3, 2, 2, 1, 3, 2,
    1, 3, 1, 3, 1, 3, 1, 3,
    2, 2, 2, 1, 3, 2, 2, 2,
    1, 3, 1, 3, 1, 3, 1, 3,
    2, 1, 3, 2, 2, 1, 3, 2,
    1, 3, 1, 3, 1, 3, 1, 3,
    3, 2, 2, 2, 2, 2, 2, 2,
)

_DITHER16 = (
    1, 12, 4, 15, 1, 13, 4, 15,
    8, 4, 11, 7, 9, 5, 12, 8,
    3, 14, 2, 13, 3, 15, 2, 14,
    10, 6, 9, 5, 11, 7, 10, 6,
    1, 12, 4, 15, 1, 12, 4, 15,
    9, 5, 12, 8, 8, 5, 11, 8,
    3, 14, 2, 13, 3, 14, 2, 13,
    11, 7, 10, 6, 10, 7, 9, 6,
)


def _dither_index(x: int, y: int) -> int:
    return (x & 7) | ((y & 7) << 3)


_BITS_PER_PIXEL = {
    ImageType.BPP4: 4,
    ImageType.BPP8: 8,
    ImageType.RGB565: 16,
    ImageType.RGB888: 24,
    ImageType.RGBA16: 16,
    ImageType.RGBA32: 32,
}


class Image:
    """A pixel buffer with 16-aligned rows and height."""

    def __init__(
        self,
        image_type: ImageType,
        width: int,
        height: int,
        dither: bool = False,
    ) -> None:
        if not isinstance(image_type, ImageType):
            raise ValueError(f"image: unknown type ({image_type!r})")

        self.type = image_type
        self.width = width
        self.height = height
        self.bits_per_pixel = _BITS_PER_PIXEL[image_type]
        self.pitch = (_align_to_16(width) * self.bits_per_pixel) // 8
        self.aligned_height = _align_to_16(height)
        self.size = self.pitch * self.aligned_height
        self.buffer = bytearray(self.size)

        self._set_direct: Optional[Callable[[int, int, RGBA8], None]] = None
        self._get_direct: Optional[Callable[[int, int], RGBA8]] = None
        self._set_indexed: Optional[Callable[[int, int, int], None]] = None
        self._get_indexed: Optional[Callable[[int, int], int]] = None

        if image_type is ImageType.BPP4:
            self._set_indexed = self._set_4bpp
            self._get_indexed = self._get_4bpp
        elif image_type is ImageType.BPP8:
            self._set_indexed = self._set_8bpp
            self._get_indexed = self._get_8bpp
        elif image_type is ImageType.RGB565:
            self._set_direct = self._set_rgb565_dithered if dither else self._set_rgb565
            self._get_direct = self._get_rgb565
        elif image_type is ImageType.RGB888:
            self._set_direct = self._set_rgb888
            self._get_direct = self._get_rgb888
        elif image_type is ImageType.RGBA16:
            self._set_direct = self._set_rgba16_dithered if dither else self._set_rgba16
            self._get_direct = self._get_rgba16
        else:
            self._set_direct = self._set_rgba32
            self._get_direct = self._get_rgba32

    def __repr__(self) -> str:
        return f"Image({self.type.name}, {self.width}x{self.height})"

    @property
    def is_indexed(self) -> bool:
        """Whether pixels are palette indices rather than colours."""
        return self._set_indexed is not None

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _pixels(self):
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    # -- public pixel access ------------------------------------------------

    def clear_indexed(self, index: int) -> None:
        """Fill an indexed image with one index; direct-colour images are left alone."""
        if self._set_indexed is None:
            return
        for x, y in self._pixels():
            self._set_indexed(x, y, index)

    def clear_rgb(self, rgba: RGBA8) -> None:
        """Fill a direct-colour image with one colour; indexed images are left alone."""
        if self._set_direct is None:
            return
        for x, y in self._pixels():
            self._set_direct(x, y, rgba)

    def set_pixel_indexed(self, x: int, y: int, index: int) -> bool:
        """Set a palette index; False if outside the image or not indexed."""
        if self._set_indexed is None or not self._inside(x, y):
            return False
        self._set_indexed(x, y, index)
        return True

    def set_pixel_rgb(self, x: int, y: int, rgba: RGBA8) -> bool:
        """Set a colour; False if outside the image or the image is indexed."""
        if self._set_direct is None or not self._inside(x, y):
            return False
        self._set_direct(x, y, rgba)
        return True

    def get_pixel_indexed(self, x: int, y: int) -> int:
        """Return the palette index at (x, y)."""
        if self._get_indexed is None:
            raise TypeError(f"{self.type.name} image has no indexed pixels")
        if not self._inside(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside the image")
        return self._get_indexed(x, y)

    def get_pixel_rgb(self, x: int, y: int) -> RGBA8:
        """Return the colour at (x, y)."""
        if self._get_direct is None:
            raise TypeError(f"{self.type.name} image has no direct-colour pixels")
        if not self._inside(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside the image")
        return self._get_direct(x, y)

    # -- per-format writers -------------------------------------------------

    def _set_4bpp(self, x: int, y: int, index: int) -> None:
        index &= 0x0F
        offset = x // 2 + y * self.pitch
        value = self.buffer[offset]
        if x % 2:
            self.buffer[offset] = (value & 0xF0) | index
        else:
            self.buffer[offset] = (value & 0x0F) | (index << 4)

    def _set_8bpp(self, x: int, y: int, index: int) -> None:
        self.buffer[x + y * self.pitch] = index & 0xFF

    def _write16(self, x: int, y: int, pixel: int) -> None:
        offset = x * 2 + y * self.pitch
        self.buffer[offset:offset + 2] = pixel.to_bytes(2, "little")

    def _read16(self, x: int, y: int) -> int:
        offset = x * 2 + y * self.pitch
        return int.from_bytes(self.buffer[offset:offset + 2], "little")

    def _set_rgb565(self, x: int, y: int, rgba: RGBA8) -> None:
        pixel = ((rgba.red >> 3) << 11) | ((rgba.green >> 2) << 5) | (rgba.blue >> 3)
        self._write16(x, y, pixel)

    def _set_rgb565_dithered(self, x: int, y: int, rgba: RGBA8) -> None:
        i = _dither_index(x, y)
        dithered = RGBA8(
            min(rgba.red + _DITHER8[i], 255),
            min(rgba.green + _DITHER4[i], 255),
            min(rgba.blue + _DITHER8[i], 255),
            rgba.alpha,
        )
        self._set_rgb565(x, y, dithered)

    def _set_rgb888(self, x: int, y: int, rgba: RGBA8) -> None:
        offset = y * self.pitch + 3 * x
        self.buffer[offset:offset + 3] = bytes((rgba.red, rgba.green, rgba.blue))

    def _set_rgba16(self, x: int, y: int, rgba: RGBA8) -> None:
        pixel = (
            ((rgba.red >> 4) << 12)
            | ((rgba.green >> 4) << 8)
            | ((rgba.blue >> 4) << 4)
            | (rgba.alpha >> 4)
        )
        self._write16(x, y, pixel)

    def _set_rgba16_dithered(self, x: int, y: int, rgba: RGBA8) -> None:
        d = _DITHER16[_dither_index(x, y)]
        dithered = RGBA8(
            min(rgba.red + d, 255),
            min(rgba.green + d, 255),
            min(rgba.blue + d, 255),
            # alpha is not clamped and wraps to eight bits
            (rgba.alpha + d) & 0xFF,
        )
        self._set_rgba16(x, y, dithered)

    def _set_rgba32(self, x: int, y: int, rgba: RGBA8) -> None:
        offset = y * self.pitch + 4 * x
        self.buffer[offset:offset + 4] = bytes(
            (rgba.red, rgba.green, rgba.blue, rgba.alpha)
        )

    # -- per-format readers -------------------------------------------------

    def _get_4bpp(self, x: int, y: int) -> int:
        value = self.buffer[x // 2 + y * self.pitch]
        return value & 0x0F if x % 2 else value >> 4

    def _get_8bpp(self, x: int, y: int) -> int:
        return self.buffer[x + y * self.pitch]

    def _get_rgb565(self, x: int, y: int) -> RGBA8:
        pixel = self._read16(x, y)
        r5 = (pixel >> 11) & 0x1F
        g6 = (pixel >> 5) & 0x3F
        b5 = pixel & 0x1F
        return RGBA8(
            ((r5 << 3) | (r5 >> 2)) & 0xFF,
            ((g6 << 2) | (g6 >> 4)) & 0xFF,
            ((b5 << 3) | (b5 >> 2)) & 0xFF,
            255,
        )

    def _get_rgb888(self, x: int, y: int) -> RGBA8:
        offset = y * self.pitch + 3 * x
        red, green, blue = self.buffer[offset:offset + 3]
        return RGBA8(red, green, blue, 255)

    def _get_rgba16(self, x: int, y: int) -> RGBA8:
        pixel = self._read16(x, y)
        r4, g4, b4, a4 = ((pixel >> s) & 0xF for s in (12, 8, 4, 0))
        return RGBA8(
            (r4 << 4) | r4,
            (g4 << 4) | g4,
            (b4 << 4) | b4,
            (a4 << 4) | a4,
        )

    def _get_rgba32(self, x: int, y: int) -> RGBA8:
        offset = y * self.pitch + 4 * x
        return RGBA8(*self.buffer[offset:offset + 4])


def find_image_type(
    name: str,
    selector: ImageTypeSelector = ImageTypeSelector.ALL,
) -> Optional[ImageTypeInfo]:
    """Look up a type by case-insensitive name; None if unknown or not selected."""
    wanted = name.casefold()
    entry = next((info for info in _TYPE_INFO if info.name.casefold() == wanted), None)
    if entry is not None and entry.matches(selector):
        return entry
    return None


def format_image_types(
    before: str,
    after: str,
    selector: ImageTypeSelector = ImageTypeSelector.ALL,
) -> str:
    """Names of the selected types, each wrapped in before and after."""
    return "".join(
        f"{before}{info.name}{after}" for info in _TYPE_INFO if info.matches(selector)
    )


def print_image_types(
    file: Optional[TextIO],
    before: str,
    after: str,
    selector: ImageTypeSelector = ImageTypeSelector.ALL,
) -> None:
    """Write the selected type names to file (standard output if None)."""
    stream = sys.stdout if file is None else file
    stream.write(format_image_types(before, after, selector))