"""Mine placement with a guaranteed-safe first move."""
import random
from typing import FrozenSet, Optional

from sweeper.errors import ConfigurationError, InvalidIndexError


def place_mines(
    total_mines: int,
    excluded_index: int,
    cell_count: int,
    rng: Optional[random.Random] = None,
) -> FrozenSet[int]:
    """Pick `total_mines` distinct cells, never `excluded_index`.

    `rng` only needs a `sample(population, k)` method; pass a seeded
    `random.Random` (or `workflow.random()`) for reproducible layouts.
    """
    if not 0 <= excluded_index < cell_count:
        raise InvalidIndexError(excluded_index, cell_count)
    if total_mines < 0:
        raise ConfigurationError(f"Mine count cannot be negative, got {total_mines}")
    if total_mines > cell_count - 1:
        raise ConfigurationError(
            f"Cannot place {total_mines} mines on {cell_count} cells "
            f"while keeping cell {excluded_index} safe"
        )

    rng = rng or random.Random()
    candidates = [idx for idx in range(cell_count) if idx != excluded_index]
    mines = frozenset(rng.sample(candidates, total_mines))

    if len(mines) != total_mines or excluded_index in mines:
        raise ConfigurationError(
            f"Random source produced an invalid layout of {len(mines)} mines"
        )
    return mines
