"""
bfrunner Buffer Adapter

Fixed-capacity entry point for hosts that hand over NUL-terminated byte
strings and a preallocated output buffer (C callers via ctypes/cffi, or
anything else that cannot deal in exceptions).

Contract of brainfuck_run():
- never writes past ``output_capacity`` bytes of ``output``
- returns the number of bytes actually written, which is less than the
  program produced when the buffer is too small
- returns a small negative status code instead of raising:

    STATUS_NULL_SOURCE  (-1)  source is None
    STATUS_NULL_BUFFER  (-2)  output buffer is None or read-only
    STATUS_PARSE_ERROR  (-3)  malformed program
    STATUS_EXEC_ERROR   (-4)  execution failed (pointer out of bounds, I/O)

Checks happen in that order. Source or input text that is not valid UTF-8
is treated as empty, and a None input means no input.
"""

from __future__ import annotations

import io
import logging
from typing import Optional, Union

from bfrunner.compiler import parse
from bfrunner.core import Tape
from bfrunner.errors import ParseError, RuntimeError_
from bfrunner.runtime import execute

logger = logging.getLogger(__name__)

STATUS_NULL_SOURCE = -1
STATUS_NULL_BUFFER = -2
STATUS_PARSE_ERROR = -3
STATUS_EXEC_ERROR = -4

Buffer = Union[bytearray, memoryview]


class BoundedWriter(io.RawIOBase):
    """Output sink over a caller-owned buffer that silently drops overflow."""

    def __init__(self, buffer: Buffer, capacity: Optional[int] = None) -> None:
        super().__init__()
        self._view = memoryview(buffer).cast("B")
        limit = len(self._view)
        self._capacity = limit if capacity is None else max(0, min(capacity, limit))
        self.pos = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        data = memoryview(b).cast("B")
        n = min(self._capacity - self.pos, len(data))
        self._view[self.pos:self.pos + n] = data[:n]
        self.pos += n
        return n

    def flush(self) -> None:
        pass


def _c_string(raw: Optional[bytes]) -> Optional[str]:
    """Decode a NUL-terminated byte string; invalid UTF-8 reads as ''."""
    if raw is None:
        return None
    text = bytes(raw).split(b"\x00", 1)[0]
    try:
        return text.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("non-UTF-8 C string treated as empty (%d bytes)", len(text))
        return ""


def brainfuck_run(
    source: Optional[bytes],
    input: Optional[bytes],
    output: Optional[Buffer],
    output_capacity: Optional[int] = None,
) -> int:
    """Run ``source`` and copy its output into ``output``.

    Returns the number of bytes written (>= 0) or a negative STATUS_* code.
    """
    program_text = _c_string(source)
    if program_text is None:
        return STATUS_NULL_SOURCE

    input_text = _c_string(input) or ""

    if output is None or memoryview(output).readonly:
        return STATUS_NULL_BUFFER

    writer = BoundedWriter(output, output_capacity)

    try:
        program = parse(program_text)
    except ParseError as e:
        logger.debug("brainfuck_run: %s", e)
        return STATUS_PARSE_ERROR

    try:
        execute(program, Tape(), io.BytesIO(input_text.encode("utf-8")), writer)
    except RuntimeError_ as e:
        logger.debug("brainfuck_run: %s", e)
        return STATUS_EXEC_ERROR

    return writer.pos
