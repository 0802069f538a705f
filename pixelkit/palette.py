"""Colour palettes of 16-bit RGB565 and 32-bit ARGB entries."""

from __future__ import annotations

from .image import RGBA8


def rgb_to_palette16_entry(rgb: RGBA8) -> int:
    """Pack a colour into an RGB565 palette entry; alpha is dropped."""
    return ((rgb.red >> 3) << 11) | ((rgb.green >> 2) << 5) | (rgb.blue >> 3)


def palette16_entry_to_rgb(entry: int) -> RGBA8:
    """Expand an RGB565 palette entry into an opaque colour."""
    r5 = (entry >> 11) & 0x1F
    g6 = (entry >> 5) & 0x3F
    b5 = entry & 0x1F
    return RGBA8(
        ((r5 << 3) | (r5 >> 2)) & 0xFF,
        ((g6 << 2) | (g6 >> 4)) & 0xFF,
        ((b5 << 3) | (b5 >> 2)) & 0xFF,
        255,
    )


def rgba_to_palette32_entry(rgba: RGBA8) -> int:
    """Pack a colour into a 32-bit ARGB palette entry."""
    return (
        ((rgba.alpha & 0xFF) << 24)
        | ((rgba.red & 0xFF) << 16)
        | ((rgba.green & 0xFF) << 8)
        | (rgba.blue & 0xFF)
    )


def palette32_entry_to_rgba(entry: int) -> RGBA8:
    """Unpack a 32-bit ARGB palette entry."""
    return RGBA8(
        (entry >> 16) & 0xFF,
        (entry >> 8) & 0xFF,
        entry & 0xFF,
        (entry >> 24) & 0xFF,
    )


class _Palette:
    def __init__(self, length: int) -> None:
        if length < 0:
            raise ValueError(f"palette length must not be negative: {length}")
        self.entries = [0] * length

    def __len__(self) -> int:
        return len(self.entries)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self.entries)

    def _check(self, index: int) -> None:
        if not self._in_range(index):
            raise IndexError(
                f"palette index {index} out of range 0..{len(self.entries) - 1}"
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.entries)})"


class Palette16(_Palette):
    """A palette of RGB565 entries, all zero when created."""

    def __init__(self, length: int) -> None:
        super().__init__(length)

    def set_entry(self, index: int, rgb: RGBA8) -> bool:
        """Store a colour; False if the index is out of range."""
        if not self._in_range(index):
            return False
        self.entries[index] = rgb_to_palette16_entry(rgb)
        return True

    def get_entry(self, index: int) -> RGBA8:
        """Return the colour at index."""
        self._check(index)
        return palette16_entry_to_rgb(self.entries[index])


class Palette32(_Palette):
    """A palette of 32-bit ARGB entries, all zero when created."""

    def __init__(self, length: int) -> None:
        super().__init__(length)

    def set_entry(self, index: int, rgba: RGBA8) -> bool:
        """Store a colour; False if the index is out of range."""
        if not self._in_range(index):
            return False
        self.entries[index] = rgba_to_palette32_entry(rgba)
        return True

    def get_entry(self, index: int) -> RGBA8:
        """Return the colour at index."""
        self._check(index)
        return palette32_entry_to_rgba(self.entries[index])