"""Runtime configuration, read from the environment."""
import os
from datetime import timedelta
from typing import Dict

from sweeper.errors import ConfigurationError
from sweeper.types import BoardConfig

PRESETS: Dict[str, BoardConfig] = {
    'Beginner': BoardConfig(rows=9, columns=9, mine_count=10),
    'Intermediate': BoardConfig(rows=16, columns=16, mine_count=40),
    'Expert': BoardConfig(rows=16, columns=30, mine_count=99),
}

TASK_QUEUE = os.getenv("SWEEPER_TASK_QUEUE", "minesweeper-task-queue")


def get_preset(name: str) -> BoardConfig:
    """Look up a preset by name, ignoring case."""
    for preset_name, board in PRESETS.items():
        if preset_name.lower() == name.lower():
            return board
    raise ConfigurationError(
        f"Unknown board preset {name!r}, expected one of {', '.join(PRESETS)}"
    )


def default_board() -> BoardConfig:
    return get_preset(os.getenv("SWEEPER_PRESET", "Beginner"))


def inactivity_timeout() -> timedelta:
    """How long a round may sit untouched before its workflow closes."""
    hours = os.getenv("SWEEPER_INACTIVITY_HOURS", "24")
    try:
        return timedelta(hours=float(hours))
    except ValueError as error:
        raise ConfigurationError(f"SWEEPER_INACTIVITY_HOURS must be a number, got {hours!r}") from error
