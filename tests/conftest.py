"""Shared fixtures for the game core tests."""
import pytest

from sweeper.engine import add_mines_to_cells, create_cells
from sweeper.types import BoardConfig, GamePhase, GameSnapshot


class FixedMines:
    """Random source stand-in that always picks the same mines."""

    def __init__(self, *mines):
        self.mines = list(mines)

    def sample(self, population, k):
        assert k == len(self.mines)
        return list(self.mines)


def snapshot_with_mines(board, mines, phase=GamePhase.ACTIVE):
    """Snapshot whose mines are already placed at `mines`."""
    mines = frozenset(mines)
    return GameSnapshot(
        phase=phase,
        cells=add_mines_to_cells(create_cells(board), board, mines),
        mines=mines,
        mines_placed=True,
    )


@pytest.fixture
def small_board():
    """3x3 board with a single mine."""
    return BoardConfig(rows=3, columns=3, mine_count=1)


@pytest.fixture
def strip_board():
    """A single row of five cells with two mines."""
    return BoardConfig(rows=1, columns=5, mine_count=2)
