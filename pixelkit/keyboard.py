"""Non-blocking single key reads from a terminal."""

from __future__ import annotations

import array
import fcntl
import os
import sys
import termios
from dataclasses import dataclass
from typing import IO, Any, List, Optional


@dataclass(frozen=True)
class KeyPress:
    """A key press; character is None for multi-byte keys such as arrows."""

    character: Optional[int]

    @property
    def text(self) -> Optional[str]:
        """The key as a one-character string, if it produced a single byte."""
        return None if self.character is None else chr(self.character)


class Keyboard:
    """Polls an input stream for key presses without waiting.

    On first use a terminal is switched to non-canonical mode without echo;
    reset() puts it back the way it was found.
    """

    def __init__(self, stream: Optional[IO[Any]] = None) -> None:
        self._stream = sys.stdin if stream is None else stream
        self._fd: Optional[int] = None
        self._original: Optional[List[Any]] = None

    def _configure(self) -> None:
        self._fd = self._stream.fileno()
        if os.isatty(self._fd):
            self._original = termios.tcgetattr(self._fd)
            attributes = list(self._original)
            attributes[3] &= ~(termios.ICANON | termios.ECHO)
            termios.tcsetattr(self._fd, termios.TCSANOW, attributes)

    def _buffered(self) -> int:
        count = array.array("i", [0])
        fcntl.ioctl(self._fd, termios.FIONREAD, count, True)
        return count[0]

    def poll(self) -> Optional[KeyPress]:
        """Return the key waiting to be read, or None if no key was pressed."""
        if self._fd is None:
            self._configure()

        waiting = self._buffered()
        if waiting == 0:
            return None

        data = b""
        while len(data) < waiting:
            chunk = os.read(self._fd, waiting - len(data))
            if not chunk:
                break
            data += chunk

        if waiting == 1 and data:
            return KeyPress(data[0])
        return KeyPress(None)

    def reset(self) -> None:
        """Restore the terminal attributes changed by poll()."""
        if self._fd is not None and self._original is not None:
            termios.tcsetattr(self._fd, termios.TCSANOW, self._original)
        self._fd = None
        self._original = None

    def __enter__(self) -> "Keyboard":
        return self

    def __exit__(self, *args: Any) -> None:
        self.reset()