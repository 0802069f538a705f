"""Pixel buffers, drawing, palettes, PNG I/O, key polling, Game of Life and Mandelbrot rendering."""

__version__ = "0.1.0"

__all__ = [
    "image",
    "graphics",
    "palette",
    "pngio",
    "keyboard",
    "life",
    "mandelbrot",
]