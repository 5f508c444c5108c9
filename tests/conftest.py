"""Pytest configuration to make the project root importable.

This ensures that ``import bfrunner`` works when tests are run from the
repository root without installing the package.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


@pytest.fixture
def hello_world() -> str:
    return HELLO_WORLD


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("BFRUNNER_TAPE_SIZE", raising=False)
    monkeypatch.delenv("BFRUNNER_NO_COLOR", raising=False)
