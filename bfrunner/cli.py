#!/usr/bin/env python3
"""
bfrunner: Brainfuck interpreter

Command-line interface.

Usage:
    bfrunner run <program.bf>              Execute a program (input from stdin)
    bfrunner run -e ',[.,]' --input Hi     Execute inline source with given input
    bfrunner parse <program.bf>            Show the instruction tree
    bfrunner check <program.bf>            Validate bracket structure only
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
import textwrap
from pathlib import Path

from bfrunner import __version__
from bfrunner.compiler import parse, render
from bfrunner.config import load_config
from bfrunner.core import Tape
from bfrunner.errors import BrainfuckError, OutputDecodeError, ParseError, RuntimeError_
from bfrunner.runtime import decode_output, execute


# ============================================================================
# Formatting helpers
# ============================================================================

class C:
    """ANSI colors."""
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    CYAN = "\033[36m"
    RESET = "\033[0m"

    @staticmethod
    def off():
        C.BOLD = C.DIM = C.RED = C.GREEN = C.CYAN = C.RESET = ""


RULE = "─" * 60


def header(title: str) -> str:
    rule = f"{C.CYAN}{RULE}{C.RESET}"
    return f"\n{rule}\n{C.BOLD}  {title}{C.RESET}\n{rule}"


def _mark(color: str, symbol: str, text: str) -> str:
    return f"  {color}{symbol}{C.RESET} {text}"


def ok(text: str) -> str:
    return _mark(C.GREEN, "✓", text)


def fail(text: str) -> str:
    return _mark(C.RED, "✗", text)


def dim(text: str) -> str:
    return C.DIM + text + C.RESET


# ============================================================================
# Source / input loading
# ============================================================================

def load_source(args) -> tuple[str, str]:
    """Return (display name, source text) from -e or a program file."""
    if args.exec_source is not None:
        return "<inline>", args.exec_source
    path = Path(args.program)
    return str(path), path.read_text(encoding="utf-8")


def open_input(args):
    if args.input is not None:
        return io.BytesIO(args.input.encode("utf-8"))
    if args.input_file is not None:
        return io.BytesIO(Path(args.input_file).read_bytes())
    return getattr(sys.stdin, "buffer", sys.stdin)


# ============================================================================
# Commands
# ============================================================================

def cmd_run(args) -> int:
    """Execute a Brainfuck program."""
    name, source = load_source(args)
    config = load_config(tape_size=args.tape_size)

    try:
        program = parse(source)
        sink = io.BytesIO()
        stats = execute(program, Tape(config.tape_size), open_input(args), sink)
        data = sink.getvalue()
        if args.raw:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        else:
            sys.stdout.write(decode_output(data))
            sys.stdout.flush()
    except ParseError as e:
        print(fail(f"Parse error in {name}: {e} ({e.location})"), file=sys.stderr)
        return 1
    except RuntimeError_ as e:
        print(fail(f"Runtime error in {name}: {e}"), file=sys.stderr)
        return 1
    except OutputDecodeError as e:
        print(fail(f"{e}"), file=sys.stderr)
        print(dim("    use --raw to write the output bytes unchanged"), file=sys.stderr)
        return 1

    if args.verbose:
        print(ok(f"{name}: {stats.summary()}"), file=sys.stderr)
    return 0


def cmd_parse(args) -> int:
    """Show the instruction tree of a program."""
    name, source = load_source(args)

    try:
        program = parse(source)
    except ParseError as e:
        print(fail(f"{name}: {e} ({e.location})"))
        return 1

    print(header(f"PARSE: {name}"))
    if len(program):
        print(textwrap.indent(render(program), "  "))
    else:
        print(dim("  Empty program"))
    print(f"\n  {dim(f'{program.node_count} nodes, {len(program)} top-level, loop depth {program.max_depth}')}")
    return 0


def cmd_check(args) -> int:
    """Validate a program without running it."""
    name, source = load_source(args)

    try:
        program = parse(source)
    except ParseError as e:
        print(fail(f"{name}: {e} ({e.location})"))
        return 1

    print(ok(f"{name}: OK ({program.node_count} nodes, loop depth {program.max_depth})"))
    return 0


# ============================================================================
# CLI setup
# ============================================================================

def _add_source_args(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("program", nargs="?", help="Path to a Brainfuck source file")
    group.add_argument("-e", "--exec", dest="exec_source", metavar="SOURCE",
                       help="Brainfuck source given inline")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfrunner",
        description="bfrunner: Brainfuck interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""
        examples:
          bfrunner run hello_world.bf
          echo -n 'Hello!' | bfrunner run -e ',[.,]'
          bfrunner run --exec=-. --raw | xxd
          bfrunner parse mandelbrot.bf
          bfrunner check broken.bf
        """),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging on stderr")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    # run
    p = sub.add_parser("run", help="Execute a Brainfuck program")
    _add_source_args(p)
    inp = p.add_mutually_exclusive_group()
    inp.add_argument("-i", "--input", help="Program input as text (default: stdin)")
    inp.add_argument("--input-file", help="Read program input from a file")
    p.add_argument("--tape-size", type=int, help="Number of tape cells (default: 30000)")
    p.add_argument("--raw", action="store_true", help="Write output bytes without UTF-8 decoding")
    p.add_argument("-v", "--verbose", action="store_true", help="Print execution stats to stderr")

    # parse
    p = sub.add_parser("parse", aliases=["ast"], help="Show the instruction tree")
    _add_source_args(p)

    # check
    p = sub.add_parser("check", help="Validate bracket structure")
    _add_source_args(p)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config()
    except ValueError as e:
        print(fail(f"Configuration error: {e}"), file=sys.stderr)
        return 2

    if args.no_color or config.no_color:
        C.off()

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch
    commands = {
        "run": cmd_run,
        "parse": cmd_parse, "ast": cmd_parse,
        "check": cmd_check,
    }

    handler = commands.get(args.command)
    try:
        return handler(args)
    except FileNotFoundError as e:
        print(fail(f"File not found: {e.filename}"), file=sys.stderr)
        return 1
    except ValueError as e:
        print(fail(f"Error: {e}"), file=sys.stderr)
        return 2
    except BrainfuckError as e:
        print(fail(f"Error: {e}"), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
