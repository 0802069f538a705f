# pixelkit

In-memory pixel buffers in common framebuffer formats, and tools to draw
into them, convert palette entries, read and write PNG files, and generate
Game of Life and Mandelbrot images.

## Modules

- `pixelkit.image`: `Image` is a buffer of one of the `ImageType` formats:
  `BPP4`, `BPP8`, `RGB565`, `RGB888`, `RGBA16` and `RGBA32`. Rows and height
  are padded to multiples of 16 pixels. `RGB565` and `RGBA16` images can be
  created with `dither=True` to apply an ordered dither when pixels are set.
  Pixels are colours (`RGBA8`) or palette indices, depending on the type:
  - `set_pixel_rgb` and `set_pixel_indexed` return `False` when the point is
    outside the image or the image has the other kind of pixel.
  - `get_pixel_rgb` and `get_pixel_indexed` raise `IndexError` outside the
    image and `TypeError` for the wrong kind of pixel.
  - `clear_rgb` and `clear_indexed` fill the whole image.

  `find_image_type` looks up a type by name, ignoring case, and returns an
  `ImageTypeInfo` or `None`. `format_image_types` and `print_image_types`
  list the type names. Both take an `ImageTypeSelector` to filter by alpha
  and by colour model.
- `pixelkit.graphics`: lines (Bresenham), horizontal and vertical lines,
  box outlines and filled boxes. Each comes in an `_rgb` form that takes an
  `RGBA8` colour and an `_indexed` form that takes a palette index. Points
  outside the image are skipped.
- `pixelkit.palette`: `Palette16` holds RGB565 entries and `Palette32`
  holds ARGB entries. `set_entry` returns `False` for an index out of range,
  and `get_entry` raises `IndexError` for one. The module also has the
  conversion functions `rgb_to_palette16_entry`, `palette16_entry_to_rgb`,
  `rgba_to_palette32_entry` and `palette32_entry_to_rgba`.
- `pixelkit.pngio`: `load_png` reads a PNG file into an `RGBA32` image when
  the file has alpha, and into an `RGB888` image when it does not. Palette,
  grey and 16-bit files are converted to 8-bit RGB. `save_png` writes
  `RGB565` and `RGB888` images as RGB files and `RGBA16` and `RGBA32` images
  as RGBA files. It raises `ValueError` for indexed images.
- `pixelkit.keyboard`: `Keyboard` polls a terminal for key presses without
  blocking. `poll()` returns a `KeyPress` or `None`. A multi-byte key such
  as an arrow key gives a `KeyPress` whose `character` is `None`. The
  terminal is switched to non-canonical, no-echo mode on first use, and
  `reset()` (or leaving the `with` block) restores it. This module needs a
  POSIX system.
- `pixelkit.life`: `Life` is Conway's Game of Life on a square field that
  wraps at its edges. The field starts with random cells; pass a
  `random.Random` as `rng` to get a repeatable start. Use `set_cell`,
  `clear_cell` and `is_alive` for single cells, and `iterate()` to advance
  one generation. `buffer` holds an 8-bit image of the field. `split_rows`
  divides rows into contiguous ranges.
- `pixelkit.mandelbrot`:
  - `Mandelbrot` renders the set into a direct-colour image, colouring each
    point by its escape count from a sequence of `RGBA8` colours.
  - `Coords` describes the region shown.
  - `ZoomWindow` is a quarter-size selection rectangle. It is moved with the
    keys `w`, `a`, `s` and `d`, and its step size is changed with `[` and
    `]`. Enter accepts the selection and Esc cancels it. `apply` then returns
    the zoomed `Coords`.
  - `snapshot_filename` names saved images after the local time.

## Installation

```
pip install .
```

## Example

```python
from pixelkit.image import Image, ImageType, RGBA8
from pixelkit.graphics import line_rgb, box_rgb
from pixelkit.pngio import save_png

image = Image(ImageType.RGB888, 64, 64)
image.clear_rgb(RGBA8(255, 255, 255, 255))
box_rgb(image, 2, 2, 61, 61, RGBA8(0, 0, 0, 255))
line_rgb(image, 2, 2, 61, 61, RGBA8(255, 0, 0, 255))
save_png(image, "drawing.png")
```

A Mandelbrot render, zoomed into the centre:

```python
from pixelkit.image import Image, ImageType, RGBA8
from pixelkit.mandelbrot import Mandelbrot, Coords, ZoomWindow
from pixelkit.pngio import save_png

image = Image(ImageType.RGB888, 256, 256)
colours = [RGBA8(i, 255 - i, 128, 255) for i in range(256)]
mandelbrot = Mandelbrot(image, colours)

coords = Coords(-2.0, -1.5, 3.0)
window = ZoomWindow(image.width, image.height)
window.handle_key("\n")
mandelbrot.render(window.apply(coords))
save_png(image, "mandelbrot.png")
```

## What it does not do

pixelkit only works with images in memory and with PNG files. It does not
show anything on a screen, and it has no commands or interactive programs.
`Keyboard` and `ZoomWindow` are the pieces an interactive viewer would use,
but you have to write the display and the main loop yourself. `Life` and
`Mandelbrot` record how many worker threads they would use
(`number_of_threads`), but they compute their rows one range after another
in the calling thread.

## Running the tests

```
pip install .[test]
pytest
```