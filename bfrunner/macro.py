"""
bfrunner Build-time Evaluation

bf() runs a Brainfuck program eagerly, typically at import time of a
module that wants the program's output as a constant:

    GREETING = bf(HELLO_WORLD_SOURCE)

Any pipeline failure (parse, runtime or decode) renders a fixed
placeholder instead of breaking the importing module. That substitution
is this helper's policy; run_to_string() itself always raises.
"""

from __future__ import annotations

import logging

from bfrunner.errors import BrainfuckError
from bfrunner.runtime import run_to_string

logger = logging.getLogger(__name__)

PLACEHOLDER = "<compile-time error>"


def bf(source: str, placeholder: str = PLACEHOLDER) -> str:
    """Evaluate ``source`` with empty input and return its output text."""
    logger.warning("Brainfuck code is being executed at build time")
    try:
        return run_to_string(source, b"")
    except BrainfuckError as e:
        logger.warning("build-time evaluation failed, using placeholder: %s", e)
        return placeholder
