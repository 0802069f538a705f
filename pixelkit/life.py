"""Conway's Game of Life on a wrapping square field.

Each field byte keeps the cell state in bit 0 and the live-neighbour count
in the bits above it. An 8-bit pixel buffer with 16-aligned rows mirrors
the field for display.
"""

from __future__ import annotations

import os
import random
from typing import List, Optional, Protocol, Tuple

LIVE = 210
DEAD = 3
LIFE_MAX_THREADS = 4

_NEIGHBOUR_OFFSETS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


class _RandomSource(Protocol):
    def random(self) -> float: ...


def _align_to_16(value: int) -> int:
    return (value + 15) & ~15


def split_rows(height: int, parts: int) -> List[Tuple[int, int]]:
    """Split rows 0..height into parts contiguous (start, end) ranges.

    Every range gets height // parts rows; the last one also takes the rest.
    """
    if parts < 1:
        raise ValueError(f"life: number of parts must be at least 1, not {parts}")
    step = height // parts
    ranges = [(part * step, (part + 1) * step) for part in range(parts)]
    last_start, _ = ranges[-1]
    ranges[-1] = (last_start, height)
    return ranges


class Life:
    """A square Game of Life field that wraps at its edges."""

    def __init__(self, size: int, rng: Optional[_RandomSource] = None) -> None:
        if size < 1:
            raise ValueError(f"life: size must be at least 1, not {size}")

        self.width = size
        self.height = size
        self.aligned_width = _align_to_16(self.width)
        self.aligned_height = _align_to_16(self.height)
        self.pitch = _align_to_16(self.width)
        self.buffer = bytearray(self.pitch * self.aligned_height)

        self.field_length = self.width * self.height
        self.field = bytearray(self.field_length)
        self.field_next = bytearray(self.field_length)

        cores = os.cpu_count() or 1
        self.number_of_threads = min(cores, LIFE_MAX_THREADS)
        self.row_ranges = split_rows(self.height, self.number_of_threads)

        source = random.Random() if rng is None else rng
        for row in range(self.height):
            for col in range(self.width):
                if source.random() >= 0.5:
                    self.set_cell(col, row)
                else:
                    self.buffer[self._buffer_offset(col, row)] = DEAD

        self.field[:] = self.field_next

    def __repr__(self) -> str:
        return f"Life({self.width}x{self.height})"

    # -- helpers ------------------------------------------------------------

    def _check(self, col: int, row: int) -> None:
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise IndexError(f"cell ({col}, {row}) is outside the field")

    def _buffer_offset(self, col: int, row: int) -> int:
        return col + row * self.aligned_width

    def _neighbour_offsets(self, col: int, row: int):
        for dx, dy in _NEIGHBOUR_OFFSETS:
            yield ((col + dx) % self.width) + ((row + dy) % self.height) * self.width

    # -- cell updates -------------------------------------------------------

    def set_cell(self, col: int, row: int) -> None:
        """Make a cell live in the next generation and count it for its neighbours."""
        self._check(col, row)
        self.buffer[self._buffer_offset(col, row)] = LIVE
        cell = col + row * self.width
        self.field_next[cell] |= 0x01
        for offset in self._neighbour_offsets(col, row):
            self.field_next[offset] = (self.field_next[offset] + 2) & 0xFF

    def clear_cell(self, col: int, row: int) -> None:
        """Make a cell dead in the next generation and uncount it for its neighbours."""
        self._check(col, row)
        self.buffer[self._buffer_offset(col, row)] = DEAD
        cell = col + row * self.width
        self.field_next[cell] &= ~0x01 & 0xFF
        for offset in self._neighbour_offsets(col, row):
            self.field_next[offset] = (self.field_next[offset] - 2) & 0xFF

    def is_alive(self, col: int, row: int) -> bool:
        """Whether the cell is live in the latest generation."""
        self._check(col, row)
        return bool(self.field_next[col + row * self.width] & 0x01)

    # -- generations --------------------------------------------------------

    def iterate_rows(self, start: int, end: int) -> None:
        """Apply the rules to rows start..end of the current snapshot."""
        for row in range(start, end):
            base = row * self.width
            for col in range(self.width):
                value = self.field[base + col]
                neighbours = value >> 1
                if value & 0x01:
                    if neighbours not in (2, 3):
                        self.clear_cell(col, row)
                elif neighbours == 3:
                    self.set_cell(col, row)

    def iterate(self) -> None:
        """Advance the whole field by one generation."""
        self.field[:] = self.field_next
        for start, end in self.row_ranges:
            self.iterate_rows(start, end)
        self.field[:] = self.field_next