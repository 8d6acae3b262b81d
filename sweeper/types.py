"""Type definitions for the Minesweeper game core."""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union

from sweeper.errors import ConfigurationError, InvalidIndexError, SweeperError


@dataclass(frozen=True)
class BoardConfig:
    """Dimensions and mine count for one round."""
    rows: int
    columns: int
    mine_count: int

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    @property
    def max_mines(self) -> int:
        # At least one cell has to stay safe for the first move.
        return self.cell_count - 1

    def validate(self) -> "BoardConfig":
        """Raise ConfigurationError unless this board can host a round."""
        if self.rows <= 0 or self.columns <= 0:
            raise ConfigurationError(
                f"Board must have at least one row and column, got {self.rows}x{self.columns}"
            )
        if self.mine_count < 0:
            raise ConfigurationError(f"Mine count cannot be negative, got {self.mine_count}")
        if self.mine_count > self.max_mines:
            raise ConfigurationError(
                f"Too many mines for the board size: {self.mine_count} mines "
                f"on {self.cell_count} cells (at most {self.max_mines})"
            )
        return self

    def check_index(self, index: int) -> int:
        if not 0 <= index < self.cell_count:
            raise InvalidIndexError(index, self.cell_count)
        return index

    def index_of(self, row: int, column: int) -> int:
        """Row-major index of (row, column)."""
        if not (0 <= row < self.rows and 0 <= column < self.columns):
            raise InvalidIndexError(row * self.columns + column, self.cell_count)
        return row * self.columns + column

    def position_of(self, index: int) -> Tuple[int, int]:
        """(row, column) of a row-major index."""
        self.check_index(index)
        return divmod(index, self.columns)


class CellStatus(str, Enum):
    """Mutually exclusive per-cell states."""
    HIDDEN = 'hidden'
    FLAGGED = 'flagged'
    QUESTION = 'question'
    REVEALED = 'revealed'
    EXPLODED = 'exploded'


class GamePhase(str, Enum):
    """Round-level phases."""
    IDLE = 'idle'
    ACTIVE = 'active'
    WON = 'won'
    LOST = 'lost'


@dataclass(frozen=True)
class Cell:
    """Represents a single cell on the minesweeper board.

    Cells never change in place; use `with_status` to derive a new one.
    """
    index: int
    adjacent_mine_count: int
    adjacent_index_matrix: Tuple[Optional[int], ...]
    status: CellStatus = CellStatus.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.status in (CellStatus.REVEALED, CellStatus.EXPLODED)

    def neighbors(self) -> Tuple[int, ...]:
        """Indices of the in-bounds neighbors, in compass order."""
        return tuple(idx for idx in self.adjacent_index_matrix if idx is not None)

    def with_status(self, status: CellStatus) -> "Cell":
        return replace(self, status=status)


@dataclass(frozen=True)
class GameSnapshot:
    """Complete state of one round at a point in time."""
    phase: GamePhase
    cells: Tuple[Cell, ...]
    mines: FrozenSet[int] = field(default_factory=frozenset)
    mines_placed: bool = False

    def cell(self, index: int) -> Cell:
        if not 0 <= index < len(self.cells):
            raise InvalidIndexError(index, len(self.cells))
        return self.cells[index]

    @property
    def is_over(self) -> bool:
        return self.phase in (GamePhase.WON, GamePhase.LOST)


@dataclass(frozen=True)
class Reset:
    """Start a fresh round, possibly on a new board."""
    board: BoardConfig


@dataclass(frozen=True)
class Reveal:
    """Reveal a single cell."""
    board: BoardConfig
    index: int


@dataclass(frozen=True)
class RevealAdjacent:
    """Chord: reveal the hidden neighbors of a cell."""
    board: BoardConfig
    index: int


@dataclass(frozen=True)
class ToggleFlag:
    """Cycle the flag annotation on a cell."""
    index: int


@dataclass(frozen=True)
class MarkRemainingMines:
    """Flag every unrevealed cell once the round is won."""
    board: BoardConfig


Command = Union[Reset, Reveal, RevealAdjacent, ToggleFlag, MarkRemainingMines]


@dataclass
class MoveRequest:
    """Request to make a move."""
    action: str
    index: int


MOVE_ACTIONS = ('reveal', 'chord', 'flag')


def command_for_move(move: MoveRequest, board: BoardConfig) -> Command:
    """Translate a move request into the matching command."""
    if move.action == 'reveal':
        return Reveal(board, move.index)
    if move.action == 'chord':
        return RevealAdjacent(board, move.index)
    if move.action == 'flag':
        return ToggleFlag(move.index)
    raise ValueError(f"Unknown move action {move.action!r}, expected one of {', '.join(MOVE_ACTIONS)}")


@dataclass(frozen=True)
class CommandResult:
    """Outcome of dispatching one command.

    On failure `snapshot` is the snapshot from before the command.
    """
    snapshot: GameSnapshot
    error: Optional[SweeperError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
