"""
bfrunner Core: the Tape

The Tape is the whole mutable memory of a running program: a fixed
array of unsigned 8-bit cells plus the data pointer.

Cell values wrap (255 + 1 == 0, 0 - 1 == 255). The pointer never wraps
and is never clamped: a move that would leave the tape raises
PointerOutOfBounds and the pointer stays where it was.

Usage:
    tape = Tape()
    tape.add(3)
    tape.move_pointer(1)
    tape.cell = 65
    tape.snapshot(0, 2)   # b"\\x03A"
"""

from __future__ import annotations

from typing import Optional

from bfrunner.errors import PointerOutOfBounds

TAPE_SIZE = 30000


class Tape:
    """Fixed-capacity byte tape with a bounds-checked data pointer."""

    def __init__(self, size: int = TAPE_SIZE) -> None:
        if size < 1:
            raise ValueError(f"Tape size must be at least 1, got {size}")
        self._cells = bytearray(size)
        self._pointer = 0

    @property
    def size(self) -> int:
        return len(self._cells)

    @property
    def pointer(self) -> int:
        """Index of the current cell."""
        return self._pointer

    @property
    def cell(self) -> int:
        return self._cells[self._pointer]

    @cell.setter
    def cell(self, value: int) -> None:
        self._cells[self._pointer] = value & 0xFF

    def read(self) -> int:
        return self._cells[self._pointer]

    def write(self, value: int) -> None:
        self._cells[self._pointer] = value & 0xFF

    def add(self, delta: int) -> None:
        """Wrapping 8-bit addition on the current cell."""
        self._cells[self._pointer] = (self._cells[self._pointer] + delta) & 0xFF

    def move_pointer(self, delta: int) -> None:
        """Move the data pointer by ``delta`` cells.

        Raises:
            PointerOutOfBounds: the new index would fall outside the tape.
                The pointer is left unchanged.
        """
        new_index = self._pointer + delta
        if new_index < 0 or new_index >= len(self._cells):
            raise PointerOutOfBounds(self._pointer, delta, len(self._cells))
        self._pointer = new_index

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> bytes:
        """Copy of cells[start:end], for diagnostics and tests."""
        return bytes(self._cells[start:end])

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"<Tape: {self.size} cells, pointer={self._pointer} cell={self.cell}>"
