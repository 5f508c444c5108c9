# bfrunner/config.py

import os
from dataclasses import dataclass, field

from bfrunner.core import TAPE_SIZE


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class RunnerConfig:
    """Interpreter defaults.

    Values can be overridden via environment variables:
    - BFRUNNER_TAPE_SIZE  (number of cells, default 30000)
    - BFRUNNER_NO_COLOR   (1/true/yes/on disables ANSI colors in the CLI)
    """

    tape_size: int = field(default_factory=lambda: _env_int("BFRUNNER_TAPE_SIZE", TAPE_SIZE))
    no_color: bool = field(default_factory=lambda: _env_flag("BFRUNNER_NO_COLOR"))

    def __post_init__(self) -> None:
        if self.tape_size < 1:
            raise ValueError(f"tape_size must be at least 1, got {self.tape_size}")


def load_config(**overrides) -> RunnerConfig:
    """Build a RunnerConfig from the environment, then apply non-None overrides."""
    values = {k: v for k, v in overrides.items() if v is not None}
    return RunnerConfig(**values)
