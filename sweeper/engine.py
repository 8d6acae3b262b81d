"""Game rules: cell construction, cascade reveal, chords, flags and win detection.

Every function here is pure. Cells are immutable and each operation returns
a new tuple of cells instead of changing the one it was given.
"""
from collections import deque
from typing import AbstractSet, Iterable, List, Sequence, Tuple

from sweeper.topology import count_adjacent_mines, neighbors_of
from sweeper.types import BoardConfig, Cell, CellStatus, GamePhase, GameSnapshot

Cells = Tuple[Cell, ...]


def create_cells(board: BoardConfig, mines: AbstractSet[int] = frozenset(),
                 statuses: Sequence[CellStatus] = ()) -> Cells:
    """Build every cell of the board with adjacency counts for `mines`.

    `statuses` carries over existing per-cell statuses, which is how flags
    placed before the first reveal survive mine placement.
    """
    cells: List[Cell] = []
    for index in range(board.cell_count):
        matrix = neighbors_of(index, board.rows, board.columns)
        status = statuses[index] if index < len(statuses) else CellStatus.HIDDEN
        cells.append(Cell(
            index=index,
            adjacent_mine_count=count_adjacent_mines(matrix, mines),
            adjacent_index_matrix=matrix,
            status=status,
        ))
    return tuple(cells)


def add_mines_to_cells(cells: Cells, board: BoardConfig, mines: AbstractSet[int]) -> Cells:
    """Recompute adjacency counts for `mines`, keeping every cell's status."""
    return create_cells(board, mines, [cell.status for cell in cells])


def new_snapshot(board: BoardConfig) -> GameSnapshot:
    """Fresh round: every cell hidden, no mines yet."""
    board.validate()
    return GameSnapshot(phase=GamePhase.IDLE, cells=create_cells(board))


def count_status(cells: Iterable[Cell], status: CellStatus) -> int:
    return sum(1 for cell in cells if cell.status == status)


def is_won(cells: Sequence[Cell], mine_count: int) -> bool:
    """True once every non-mine cell is revealed, whatever the flags say."""
    return count_status(cells, CellStatus.REVEALED) == len(cells) - mine_count


def reveal(index: int, cells: Cells, mines: AbstractSet[int],
           phase: GamePhase) -> Tuple[GamePhase, Cells]:
    """Reveal a cell and cascade through zero-count neighbors.

    Returns the new phase and cells. Revealing an already revealed or
    exploded cell changes nothing. Revealing a mine loses the round: the
    clicked mine explodes and all others are revealed.
    """
    cell = cells[index]
    if cell.is_revealed:
        return phase, cells

    new_cells = list(cells)

    if index in mines:
        for mine in mines:
            status = CellStatus.EXPLODED if mine == index else CellStatus.REVEALED
            new_cells[mine] = new_cells[mine].with_status(status)
        return GamePhase.LOST, tuple(new_cells)

    # Breadth-first work queue; a cell is revealed when queued so it is
    # never queued twice.
    new_cells[index] = cell.with_status(CellStatus.REVEALED)
    queue = deque([index])
    while queue:
        current = new_cells[queue.popleft()]
        if current.adjacent_mine_count != 0:
            continue
        for neighbor_index in current.neighbors():
            neighbor = new_cells[neighbor_index]
            if neighbor.is_revealed:
                continue
            new_cells[neighbor_index] = neighbor.with_status(CellStatus.REVEALED)
            queue.append(neighbor_index)

    new_phase = GamePhase.WON if is_won(new_cells, len(mines)) else GamePhase.ACTIVE
    return new_phase, tuple(new_cells)


def reveal_adjacent(index: int, cells: Cells, mines: AbstractSet[int],
                    phase: GamePhase) -> Tuple[GamePhase, Cells]:
    """Chord: reveal the hidden neighbors once enough of them are flagged."""
    cell = cells[index]
    if cell.adjacent_mine_count <= 0:
        return phase, cells

    flagged_count = 0
    to_reveal: List[int] = []
    for neighbor_index in cell.neighbors():
        status = cells[neighbor_index].status
        if status == CellStatus.FLAGGED:
            flagged_count += 1
        elif status == CellStatus.HIDDEN:
            to_reveal.append(neighbor_index)

    if flagged_count < cell.adjacent_mine_count:
        return phase, cells

    for neighbor_index in to_reveal:
        phase, cells = reveal(neighbor_index, cells, mines, phase)
        if phase == GamePhase.LOST:
            break
    return phase, cells


_FLAG_CYCLE = {
    CellStatus.HIDDEN: CellStatus.FLAGGED,
    CellStatus.FLAGGED: CellStatus.QUESTION,
    CellStatus.QUESTION: CellStatus.HIDDEN,
}


def toggle_flag(cell: Cell) -> Cell:
    """Advance hidden -> flagged -> question -> hidden.

    Revealed and exploded cells come back unchanged.
    """
    next_status = _FLAG_CYCLE.get(cell.status)
    if next_status is None:
        return cell
    return cell.with_status(next_status)


def mark_remaining_mines(cells: Cells) -> Cells:
    """Flag every hidden or question cell; returns `cells` itself if none."""
    if not any(cell.status in (CellStatus.HIDDEN, CellStatus.QUESTION) for cell in cells):
        return cells
    return tuple(
        cell.with_status(CellStatus.FLAGGED)
        if cell.status in (CellStatus.HIDDEN, CellStatus.QUESTION) else cell
        for cell in cells
    )
