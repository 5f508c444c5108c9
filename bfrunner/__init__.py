"""
bfrunner - Brainfuck interpreter
Parses Brainfuck source into an instruction tree and executes it on a
bounded 30,000-cell byte tape.

Compiler: tokenize → run-length merged, bracket-nested Program tree
Runtime:  Program × Tape × input/output byte streams → output
Adapters: fixed-capacity output buffer (ffi), build-time evaluation (macro)
"""

__version__ = "0.1.0"

from bfrunner.errors import (
    BrainfuckError,
    ParseError,
    UnmatchedClosingBracket,
    UnmatchedOpeningBracket,
    RuntimeError_,
    PointerOutOfBounds,
    StreamError,
    OutputDecodeError,
)
from bfrunner.compiler import (
    ASTNode,
    Move,
    Add,
    Output,
    Input,
    Loop,
    Program,
    parse,
    render,
)
from bfrunner.core import Tape, TAPE_SIZE
from bfrunner.config import RunnerConfig, load_config
from bfrunner.runtime import Runtime, ExecutionStats, execute, run, run_to_string

__all__ = [
    "BrainfuckError",
    "ParseError",
    "UnmatchedClosingBracket",
    "UnmatchedOpeningBracket",
    "RuntimeError_",
    "PointerOutOfBounds",
    "StreamError",
    "OutputDecodeError",
    "ASTNode",
    "Move",
    "Add",
    "Output",
    "Input",
    "Loop",
    "Program",
    "parse",
    "render",
    "Tape",
    "TAPE_SIZE",
    "RunnerConfig",
    "load_config",
    "Runtime",
    "ExecutionStats",
    "execute",
    "run",
    "run_to_string",
]
