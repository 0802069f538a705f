"""Line and box drawing on indexed and direct-colour images."""

from __future__ import annotations

from typing import Callable, Iterator, Tuple

from .image import RGBA8, Image


def _step(start: int, end: int) -> int:
    return 1 if start <= end else -1


def _span(start: int, end: int) -> Iterator[int]:
    """Every integer from start to end inclusive, in the direction given."""
    return iter(range(start, end + _step(start, end), _step(start, end)))


def _line_points(x1: int, y1: int, x2: int, y2: int) -> Iterator[Tuple[int, int]]:
    """Points of a straight line from (x1, y1) to (x2, y2), endpoints included."""
    if y1 == y2:
        yield from ((x, y1) for x in _span(x1, x2))
        return
    if x1 == x2:
        yield from ((x1, y) for y in _span(y1, y2))
        return

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sign_x = _step(x1, x2)
    sign_y = _step(y1, y2)
    x, y = x1, y1

    yield x, y

    if dx > dy:
        d = 2 * dy - dx
        incr_e = 2 * dy
        incr_ne = 2 * (dy - dx)
        while x != x2:
            x += sign_x
            if d <= 0:
                d += incr_e
            else:
                d += incr_ne
                y += sign_y
            yield x, y
    else:
        d = 2 * dx - dy
        incr_n = 2 * dx
        incr_ne = 2 * (dx - dy)
        while y != y2:
            y += sign_y
            if d <= 0:
                d += incr_n
            else:
                d += incr_ne
                x += sign_x
            yield x, y


def _plot(points, put: Callable[[int, int], bool]) -> None:
    for x, y in points:
        put(x, y)


# -- lines ------------------------------------------------------------------


def horizontal_line_indexed(image: Image, x1: int, x2: int, y: int, index: int) -> None:
    """Draw a horizontal line of palette index from x1 to x2 on row y."""
    _plot(((x, y) for x in _span(x1, x2)),
          lambda x, y: image.set_pixel_indexed(x, y, index))


def horizontal_line_rgb(image: Image, x1: int, x2: int, y: int, rgba: RGBA8) -> None:
    """Draw a horizontal line of colour from x1 to x2 on row y."""
    _plot(((x, y) for x in _span(x1, x2)),
          lambda x, y: image.set_pixel_rgb(x, y, rgba))


def vertical_line_indexed(image: Image, x: int, y1: int, y2: int, index: int) -> None:
    """Draw a vertical line of palette index from y1 to y2 in column x."""
    _plot(((x, y) for y in _span(y1, y2)),
          lambda x, y: image.set_pixel_indexed(x, y, index))


def vertical_line_rgb(image: Image, x: int, y1: int, y2: int, rgba: RGBA8) -> None:
    """Draw a vertical line of colour from y1 to y2 in column x."""
    _plot(((x, y) for y in _span(y1, y2)),
          lambda x, y: image.set_pixel_rgb(x, y, rgba))


def line_indexed(image: Image, x1: int, y1: int, x2: int, y2: int, index: int) -> None:
    """Draw a straight line of palette index between two points."""
    _plot(_line_points(x1, y1, x2, y2),
          lambda x, y: image.set_pixel_indexed(x, y, index))


def line_rgb(image: Image, x1: int, y1: int, x2: int, y2: int, rgba: RGBA8) -> None:
    """Draw a straight line of colour between two points."""
    _plot(_line_points(x1, y1, x2, y2),
          lambda x, y: image.set_pixel_rgb(x, y, rgba))


# -- boxes ------------------------------------------------------------------


def box_indexed(image: Image, x1: int, y1: int, x2: int, y2: int, index: int) -> None:
    """Draw the outline of a box with corners (x1, y1) and (x2, y2)."""
    vertical_line_indexed(image, x1, y1, y2, index)
    horizontal_line_indexed(image, x1, x2, y1, index)
    vertical_line_indexed(image, x2, y1, y2, index)
    horizontal_line_indexed(image, x1, x2, y2, index)


def box_rgb(image: Image, x1: int, y1: int, x2: int, y2: int, rgba: RGBA8) -> None:
    """Draw the outline of a box with corners (x1, y1) and (x2, y2)."""
    vertical_line_rgb(image, x1, y1, y2, rgba)
    horizontal_line_rgb(image, x1, x2, y1, rgba)
    vertical_line_rgb(image, x2, y1, y2, rgba)
    horizontal_line_rgb(image, x1, x2, y2, rgba)


def box_filled_indexed(
    image: Image, x1: int, y1: int, x2: int, y2: int, index: int
) -> None:
    """Fill the box with corners (x1, y1) and (x2, y2), edges included."""
    for y in _span(y1, y2):
        horizontal_line_indexed(image, x1, x2, y, index)


def box_filled_rgb(
    image: Image, x1: int, y1: int, x2: int, y2: int, rgba: RGBA8
) -> None:
    """Fill the box with corners (x1, y1) and (x2, y2), edges included."""
    for y in _span(y1, y2):
        horizontal_line_rgb(image, x1, x2, y, rgba)