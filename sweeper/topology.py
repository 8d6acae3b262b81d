"""Grid topology: neighbor lookup for row-major boards."""
from typing import List, Optional, Tuple

from sweeper.errors import InvalidIndexError

# Compass order N, NE, E, SE, S, SW, W, NW as (row delta, column delta).
DIRECTIONS: List[Tuple[int, int]] = [
    (-1, 0), (-1, 1), (0, 1), (1, 1),
    (1, 0), (1, -1), (0, -1), (-1, -1),
]


def neighbors_of(index: int, rows: int, columns: int) -> Tuple[Optional[int], ...]:
    """Return the eight neighbor indices of a cell in compass order.

    Directions that fall outside the grid are None, so edge cells have
    five real neighbors and corner cells three.
    """
    cell_count = rows * columns
    if not 0 <= index < cell_count:
        raise InvalidIndexError(index, cell_count)

    row, col = divmod(index, columns)
    matrix: List[Optional[int]] = []
    for dr, dc in DIRECTIONS:
        new_row = row + dr
        new_col = col + dc
        if 0 <= new_row < rows and 0 <= new_col < columns:
            matrix.append(new_row * columns + new_col)
        else:
            matrix.append(None)
    return tuple(matrix)


def count_adjacent_mines(matrix: Tuple[Optional[int], ...], mines) -> int:
    """Count the mines among the non-null entries of a neighbor matrix."""
    return sum(1 for idx in matrix if idx is not None and idx in mines)
