"""Mandelbrot set rendering onto a direct-colour image, with a zoom window."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple, Union

from .image import RGBA8, Image
from .life import split_rows

MANDELBROT_MAX_THREADS = 4

ZOOM_STEPS = (1, 2, 5, 10, 20, 50)

_BLACK = RGBA8(0, 0, 0, 0)
_ENTER = 10
_ESCAPE = 27


@dataclass(frozen=True)
class Coords:
    """The square region of the complex plane shown: corner (x0, y0) and side."""

    x0: float
    y0: float
    side: float


DEFAULT_COORDS = Coords(-2.0, -1.5, 3.0)


class Mandelbrot:
    """Renders the Mandelbrot set, colouring each point by its escape count.

    Points that do not escape within len(colours) iterations are left as
    they were cleared: transparent black.
    """

    def __init__(self, image: Image, colours: Sequence[RGBA8]) -> None:
        if image.is_indexed:
            raise TypeError("mandelbrot: image must be direct colour")
        if not colours:
            raise ValueError("mandelbrot: at least one colour is needed")
        self.image = image
        self.colours: Tuple[RGBA8, ...] = tuple(colours)
        self.coords = DEFAULT_COORDS
        cores = os.cpu_count() or 1
        self.number_of_threads = min(cores, MANDELBROT_MAX_THREADS)
        self.row_ranges = split_rows(image.height, self.number_of_threads)

    @property
    def number_of_colours(self) -> int:
        """The iteration limit, which is the number of colours."""
        return len(self.colours)

    def __repr__(self) -> str:
        return f"Mandelbrot({self.image!r}, {self.number_of_colours} colours)"

    def _escape_count(self, cx: float, cy: float) -> int:
        limit = self.number_of_colours
        x = y = 0.0
        x2 = y2 = 0.0
        n = 0
        while x2 + y2 < 4.0 and n < limit:
            y = 2 * x * y + cy
            x = x2 - y2 + cx
            x2 = x * x
            y2 = y * y
            n += 1
        return n

    def render_rows(self, coords: Coords, start: int, end: int) -> None:
        """Colour rows start..end of the image for the given region."""
        image = self.image
        dx = coords.side / (image.width - 1) if image.width > 1 else 0.0
        dy = coords.side / (image.height - 1) if image.height > 1 else 0.0
        limit = self.number_of_colours
        for j in range(start, end):
            cy = coords.y0 + dy * j
            for i in range(image.width):
                n = self._escape_count(coords.x0 + dx * i, cy)
                if n < limit:
                    image.set_pixel_rgb(i, j, self.colours[n])

    def render(self, coords: Coords) -> None:
        """Clear the image and render the whole region."""
        self.coords = coords
        self.image.clear_rgb(_BLACK)
        for start, end in self.row_ranges:
            self.render_rows(coords, start, end)


class ZoomWindow:
    """A quarter-size selection rectangle moved by keys to choose a zoom region."""

    def __init__(self, image_width: int, image_height: int) -> None:
        self.image_width = image_width
        self.image_height = image_height
        self.width = image_width // 4
        self.height = image_height // 4
        self.x = (image_width - self.width) // 2
        self.y = (image_height - self.height) // 2
        self.steps = ZOOM_STEPS
        self.step_index = 0
        self.accepted = False
        self.cancelled = False

    @property
    def step(self) -> int:
        """How many pixels one move shifts the window."""
        return self.steps[self.step_index]

    @property
    def done(self) -> bool:
        """Whether the zoom was accepted or cancelled."""
        return self.accepted or self.cancelled

    @property
    def rectangle(self) -> Tuple[int, int, int, int]:
        """Inclusive corners (x1, y1, x2, y2) of the window."""
        return (self.x, self.y, self.x + self.width - 1, self.y + self.height - 1)

    def handle_key(self, key: Union[int, str]) -> bool:
        """Act on one key; True if the window moved or the step changed."""
        code = ord(key) if isinstance(key, str) else key
        if 0 <= code < 0x110000:
            code = ord(chr(code).lower()[0])

        if code == _ENTER:
            self.accepted = True
            return False
        if code == _ESCAPE:
            self.cancelled = True
            return False

        step = self.step
        key_char = chr(code) if 0 <= code < 0x110000 else ""
        if key_char == "a":
            if self.x - step >= 0:
                self.x -= step
                return True
        elif key_char == "d":
            if self.x + self.width + step <= self.image_width:
                self.x += step
                return True
        elif key_char == "w":
            if self.y - step >= 0:
                self.y -= step
                return True
        elif key_char == "s":
            if self.y + self.height + step <= self.image_height:
                self.y += step
                return True
        elif key_char == "]":
            if self.step_index < len(self.steps) - 1:
                self.step_index += 1
                return True
        elif key_char == "[":
            if self.step_index > 0:
                self.step_index -= 1
                return True
        return False

    def apply(self, coords: Coords) -> Coords:
        """The region selected by the window; coords unchanged unless accepted."""
        if not self.accepted:
            return coords
        return Coords(
            coords.x0 + (coords.side * self.x) / self.image_width,
            coords.y0 + (coords.side * self.y) / self.image_height,
            coords.side * (self.width / self.image_width),
        )


def snapshot_filename(now: Optional[datetime] = None) -> str:
    """File name for a saved image, stamped with the local time.

    The month is numbered from zero and the hour is space padded.
    """
    moment = datetime.now() if now is None else now
    return "mandelbrot_%4d%02d%02d_%2d%02d%02d.png" % (
        moment.year,
        moment.month - 1,
        moment.day,
        moment.hour,
        moment.minute,
        moment.second,
    )