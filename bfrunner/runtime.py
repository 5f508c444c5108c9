"""
bfrunner Runtime Engine

Executes compiled Brainfuck programs (Program trees) against a Tape and a
pair of binary streams.

The Runtime:
1. Takes a Program, a fresh Tape, an input stream and an output stream
2. Walks the tree depth-first, re-entering Loop bodies while the current
   cell is non-zero
3. Mutates the Tape, reads bytes from input, writes bytes to output
4. Returns ExecutionStats, or raises on the first fatal error

Streams are ordinary binary file objects: input needs read(n) returning
bytes (b"" at end of input), output needs write(b) and optionally flush().
End of input stores 0 in the current cell; it is not an error.

Loop nesting is handled with an explicit frame stack, so programs nested
deeper than the interpreter's recursion limit still run.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional, Sequence, Union

from bfrunner.compiler import ASTNode, Add, Input, Loop, Move, Output, Program, parse
from bfrunner.core import TAPE_SIZE, Tape
from bfrunner.errors import OutputDecodeError, RuntimeError_, StreamError

logger = logging.getLogger(__name__)

InputSource = Union[BinaryIO, bytes, str, None]


@dataclass
class ExecutionStats:
    """Counters collected during one execution."""
    steps: int = 0           # instruction nodes visited, loop nodes included
    bytes_read: int = 0      # bytes actually taken from input (EOF reads excluded)
    bytes_written: int = 0   # bytes handed to the output stream
    max_pointer: int = 0     # highest cell index reached

    def summary(self) -> str:
        return (
            f"steps={self.steps} read={self.bytes_read} "
            f"written={self.bytes_written} max_pointer={self.max_pointer}"
        )


@dataclass
class _Frame:
    body: Sequence[ASTNode]
    loop: bool
    index: int = 0


class Runtime:
    """Brainfuck execution engine.

    Usage:
        runtime = Runtime()
        stats = runtime.execute(parse(source), Tape(), io.BytesIO(b""), sys.stdout.buffer)

        # Or from source, capturing output:
        output = runtime.run(source, input=b"Hello!")
    """

    def __init__(self) -> None:
        self._handlers: dict[type, Callable[..., None]] = {
            Move: self._exec_move,
            Add: self._exec_add,
            Output: self._exec_output,
            Input: self._exec_input,
        }

    def execute(
        self,
        program: Union[Program, Sequence[ASTNode]],
        tape: Tape,
        input: BinaryIO,
        output: BinaryIO,
    ) -> ExecutionStats:
        """Execute an instruction tree.

        Raises:
            PointerOutOfBounds: a Move would leave the tape
            StreamError: the input or output stream raised OSError
        """
        body = program.instructions if isinstance(program, Program) else tuple(program)
        stats = ExecutionStats(max_pointer=tape.pointer)
        frames = [_Frame(body, loop=False)]
        handlers = self._handlers

        logger.debug("executing %d top-level nodes on %d-cell tape", len(body), tape.size)

        while frames:
            frame = frames[-1]
            if frame.index >= len(frame.body):
                if frame.loop and tape.read() != 0:
                    frame.index = 0
                else:
                    frames.pop()
                continue

            node = frame.body[frame.index]
            frame.index += 1
            stats.steps += 1

            if isinstance(node, Loop):
                if tape.read() != 0:
                    frames.append(_Frame(node.body, loop=True))
                continue

            handler = handlers.get(type(node))
            if handler is None:
                if not isinstance(node, ASTNode):
                    raise TypeError(f"Expected an instruction node, got {type(node).__name__}")
                raise RuntimeError_(f"No handler for {type(node).__name__}")
            handler(node, tape, input, output, stats)

        flush = getattr(output, "flush", None)
        if flush is not None:
            try:
                flush()
            except OSError as e:
                raise StreamError("flushing output", e) from e

        logger.debug("execution finished: %s", stats.summary())
        return stats

    def run(self, source: str, input: InputSource = None, tape_size: Optional[int] = None) -> bytes:
        """Parse and execute ``source`` on a fresh tape, returning the output bytes.

        The tape has ``TAPE_SIZE`` cells unless ``tape_size`` is given; the
        environment is not consulted here.
        """
        program = parse(source)
        if tape_size is None:
            tape_size = TAPE_SIZE
        sink = io.BytesIO()
        self.execute(program, Tape(tape_size), _as_stream(input), sink)
        return sink.getvalue()

    # ------------------------------------------------------------------
    # Instruction Handlers
    # ------------------------------------------------------------------

    def _exec_move(self, op: Move, tape: Tape, input: BinaryIO, output: BinaryIO,
                   stats: ExecutionStats) -> None:
        tape.move_pointer(op.delta)
        if tape.pointer > stats.max_pointer:
            stats.max_pointer = tape.pointer

    def _exec_add(self, op: Add, tape: Tape, input: BinaryIO, output: BinaryIO,
                  stats: ExecutionStats) -> None:
        tape.add(op.delta)

    def _exec_output(self, op: Output, tape: Tape, input: BinaryIO, output: BinaryIO,
                     stats: ExecutionStats) -> None:
        # Short writes from capacity-limited sinks are not errors.
        try:
            output.write(bytes((tape.read(),)))
        except OSError as e:
            raise StreamError("writing output", e) from e
        stats.bytes_written += 1

    def _exec_input(self, op: Input, tape: Tape, input: BinaryIO, output: BinaryIO,
                    stats: ExecutionStats) -> None:
        try:
            data = input.read(1)
        except OSError as e:
            raise StreamError("reading input", e) from e
        if data:
            tape.write(data[0])
            stats.bytes_read += 1
        else:
            tape.write(0)


# ============================================================================
# Public API
# ============================================================================

_runtime = Runtime()


def _as_stream(input: InputSource) -> BinaryIO:
    if input is None:
        return io.BytesIO()
    if isinstance(input, str):
        return io.BytesIO(input.encode("utf-8"))
    if isinstance(input, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(input))
    return input


def execute(
    program: Union[Program, Sequence[ASTNode]],
    tape: Tape,
    input: BinaryIO,
    output: BinaryIO,
) -> ExecutionStats:
    """Execute an instruction tree against ``tape`` and the given streams."""
    return _runtime.execute(program, tape, input, output)


def run(source: str, input: InputSource = None, tape_size: Optional[int] = None) -> bytes:
    """Run a Brainfuck program and return its raw output bytes."""
    return _runtime.run(source, input, tape_size)


def run_to_string(source: str, input: InputSource = None, tape_size: Optional[int] = None) -> str:
    """Run a Brainfuck program and return its output as text.

    Example:
        >>> run_to_string("+++.").encode()
        b'\\x03'
        >>> run_to_string(",[.,]", b"Hello!")
        'Hello!'

    Raises:
        ParseError: the program is malformed
        RuntimeError_: execution aborted
        OutputDecodeError: the output bytes are not valid UTF-8
    """
    return decode_output(run(source, input, tape_size))


def decode_output(data: bytes) -> str:
    """Strictly decode captured program output as UTF-8."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise OutputDecodeError(data, e.start, e.reason) from e
