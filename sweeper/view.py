"""Read model handed to presentation layers.

The snapshot carries the full mine set in every phase. `build_view` is the
sanitized form: mine positions and unrevealed adjacency counts stay hidden
until the round is over.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from sweeper.engine import count_status
from sweeper.types import BoardConfig, CellStatus, GamePhase, GameSnapshot

MAX_ELAPSED_SECONDS = 999
COUNTER_MIN = -99
COUNTER_MAX = 999


@dataclass
class CellView:
    """One cell as a renderer may see it."""
    index: int
    row: int
    column: int
    status: str
    adjacent_mine_count: Optional[int] = None


@dataclass
class GameView:
    """JSON-friendly view of a round."""
    phase: str
    rows: int
    columns: int
    mine_count: int
    remaining_mines: int
    cells: List[CellView] = field(default_factory=list)
    mines: List[int] = field(default_factory=list)
    elapsed_seconds: int = 0


def remaining_mine_count(snapshot: GameSnapshot, board: BoardConfig) -> int:
    """Mines left to flag. Goes negative when the player over-flags."""
    return board.mine_count - count_status(snapshot.cells, CellStatus.FLAGGED)


def format_counter(count: int) -> str:
    """Clamp a counter to what a three-digit display can show."""
    return str(max(min(count, COUNTER_MAX), COUNTER_MIN))


def timer_running(phase: GamePhase) -> bool:
    return phase == GamePhase.ACTIVE


def build_view(snapshot: GameSnapshot, board: BoardConfig, elapsed_seconds: int = 0) -> GameView:
    show_mines = snapshot.is_over
    cells = []
    for cell in snapshot.cells:
        row, column = board.position_of(cell.index)
        cells.append(CellView(
            index=cell.index,
            row=row,
            column=column,
            status=cell.status.value,
            adjacent_mine_count=cell.adjacent_mine_count if cell.is_revealed else None,
        ))

    return GameView(
        phase=snapshot.phase.value,
        rows=board.rows,
        columns=board.columns,
        mine_count=board.mine_count,
        remaining_mines=remaining_mine_count(snapshot, board),
        cells=cells,
        mines=sorted(snapshot.mines) if show_mines else [],
        elapsed_seconds=min(max(elapsed_seconds, 0), MAX_ELAPSED_SECONDS),
    )
