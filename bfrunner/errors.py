"""
bfrunner Error Taxonomy

Every failure the interpreter can report derives from BrainfuckError, so
callers can catch the whole pipeline with a single except clause or
discriminate by stage:

- ParseError:        the program text is malformed (bracket mismatch)
- RuntimeError_:     execution aborted (pointer left the tape, stream I/O failed)
- OutputDecodeError: the program ran, but its output bytes are not UTF-8 text

End-of-input is deliberately absent: reading past the end of the input
stream stores 0 in the current cell and carries on.
"""

from __future__ import annotations

from typing import Optional


class BrainfuckError(Exception):
    """Root of all bfrunner errors."""


# ============================================================================
# Parse-time
# ============================================================================

class ParseError(BrainfuckError):
    """Malformed program. No partial tree is ever returned."""

    def __init__(self, message: str, pos: int, line: int = 1, col: Optional[int] = None):
        super().__init__(message)
        self.pos = pos
        self.line = line
        self.col = pos if col is None else col

    @property
    def location(self) -> str:
        return f"line {self.line}, col {self.col}"


class UnmatchedClosingBracket(ParseError):
    """A ']' with no open loop. ``pos`` is a character index, not a byte offset."""

    def __init__(self, pos: int, line: int = 1, col: Optional[int] = None):
        super().__init__(f"Unmatched closing bracket ']' at position {pos}", pos, line, col)


class UnmatchedOpeningBracket(ParseError):
    """A '[' never closed; the outermost one is reported.

    ``pos`` is a character index into the source text, not a byte offset.
    """

    def __init__(self, pos: int, line: int = 1, col: Optional[int] = None):
        super().__init__(f"Unmatched opening bracket '[' (opened at position {pos})", pos, line, col)


# ============================================================================
# Run-time
# ============================================================================

class RuntimeError_(BrainfuckError):
    """Brainfuck runtime error. Fatal to the run that raised it."""


class PointerOutOfBounds(RuntimeError_):
    def __init__(self, pointer: int, delta: int, size: int):
        super().__init__(
            f"Data pointer went out of bounds (at {pointer}, move {delta:+d}, tape size {size})"
        )
        self.pointer = pointer
        self.delta = delta
        self.size = size


class StreamError(RuntimeError_):
    """Wraps the OSError raised by an input or output stream."""

    def __init__(self, direction: str, cause: OSError):
        super().__init__(f"I/O Error while {direction}: {cause}")
        self.direction = direction


# ============================================================================
# Post-execution
# ============================================================================

class OutputDecodeError(BrainfuckError):
    """Program output is not valid UTF-8."""

    def __init__(self, data: bytes, position: int, reason: str = "invalid utf-8"):
        super().__init__(
            f"Program output is not valid UTF-8 text ({reason} at byte {position} "
            f"of {len(data)})"
        )
        self.data = data
        self.position = position
