"""Game state machine.

`reduce` maps (snapshot, command) to a new snapshot and raises on invalid
input. `Game` owns the current snapshot for a caller and turns those errors
into a failed `CommandResult`, leaving the snapshot it held untouched.

Transitions:

    any     Reset              -> idle, fresh cells, no mines
    idle    Reveal             -> place mines, reveal; active / won / lost
    idle    ToggleFlag         -> active
    active  Reveal             -> place mines if still missing, reveal
    active  RevealAdjacent     -> chord
    active  ToggleFlag         -> active
    won     MarkRemainingMines -> won
    lost    anything but Reset -> unchanged

Reaching `won` flags the remaining cells within the same command.
"""
import logging
import random
from dataclasses import replace
from typing import Optional, Union

from sweeper import engine
from sweeper.errors import ConfigurationError, SweeperError
from sweeper.mines import place_mines
from sweeper.topology import neighbors_of
from sweeper.types import (
    BoardConfig,
    Command,
    CommandResult,
    GamePhase,
    GameSnapshot,
    MarkRemainingMines,
    Reset,
    Reveal,
    RevealAdjacent,
    ToggleFlag,
)

logger = logging.getLogger(__name__)


def reduce(snapshot: GameSnapshot, command: Command,
           rng: Optional[random.Random] = None,
           log: Union[logging.Logger, logging.LoggerAdapter] = logger) -> GameSnapshot:
    """Apply one command and return the next snapshot.

    Events are written to `log`; workflows pass `workflow.logger` so that
    replays stay quiet.

    Raises:
        ConfigurationError: Reset or mine placement with an unplayable board,
            or a command carrying a board the round was not started with.
        InvalidIndexError: the command names a cell outside the board.
    """
    if isinstance(command, Reset):
        return engine.new_snapshot(command.board)

    if isinstance(command, (Reveal, RevealAdjacent, MarkRemainingMines)):
        _check_board(snapshot, command.board)

    if isinstance(command, (Reveal, RevealAdjacent, ToggleFlag)):
        snapshot.cell(command.index)

    phase = snapshot.phase
    if phase == GamePhase.LOST:
        return snapshot
    if phase == GamePhase.WON:
        if isinstance(command, MarkRemainingMines):
            return _mark_remaining_mines(snapshot)
        return snapshot

    if isinstance(command, Reveal):
        result = _reveal(snapshot, command, rng, log)
    elif isinstance(command, ToggleFlag):
        cells = list(snapshot.cells)
        cells[command.index] = engine.toggle_flag(cells[command.index])
        result = replace(snapshot, phase=GamePhase.ACTIVE, cells=tuple(cells))
    elif isinstance(command, RevealAdjacent) and phase == GamePhase.ACTIVE:
        new_phase, cells = engine.reveal_adjacent(
            command.index, snapshot.cells, snapshot.mines, phase)
        result = replace(snapshot, phase=new_phase, cells=cells)
    else:
        log.debug(f"Ignoring {type(command).__name__} in phase {phase.value}")
        return snapshot

    if result.phase == GamePhase.WON:
        log.info("Round won")
        result = _mark_remaining_mines(result)
    elif result.phase == GamePhase.LOST:
        log.info(f"Round lost on cell {command.index}")
    return result


def _check_board(snapshot: GameSnapshot, board: BoardConfig) -> None:
    # Board changes only happen through Reset.
    if (board.cell_count != len(snapshot.cells)
            or snapshot.cells[0].adjacent_index_matrix != neighbors_of(0, board.rows, board.columns)):
        raise ConfigurationError(
            f"Command is for a {board.rows}x{board.columns} board but the round has "
            f"{len(snapshot.cells)} cells; reset to change the board"
        )


def _reveal(snapshot: GameSnapshot, command: Reveal, rng: Optional[random.Random],
            log: Union[logging.Logger, logging.LoggerAdapter]) -> GameSnapshot:
    mines = snapshot.mines
    cells = snapshot.cells

    # Mines wait for the first reveal so that cell is never one of them,
    # even when the player flagged something first.
    if not snapshot.mines_placed:
        board = command.board.validate()
        mines = place_mines(board.mine_count, command.index, board.cell_count, rng)
        cells = engine.add_mines_to_cells(cells, board, mines)
        log.info(f"Placed {len(mines)} mines, first reveal at cell {command.index}")

    phase, cells = engine.reveal(command.index, cells, mines, snapshot.phase)
    if cells is snapshot.cells:
        return snapshot
    return GameSnapshot(phase=phase, cells=cells, mines=mines, mines_placed=True)


def _mark_remaining_mines(snapshot: GameSnapshot) -> GameSnapshot:
    cells = engine.mark_remaining_mines(snapshot.cells)
    if cells is snapshot.cells:
        return snapshot
    return replace(snapshot, cells=cells)


class Game:
    """Holds the current snapshot of one round and applies commands to it."""

    def __init__(self, board: BoardConfig, rng: Optional[random.Random] = None,
                 log: Union[logging.Logger, logging.LoggerAdapter] = logger):
        self.board = board
        self.rng = rng or random.Random()
        self.log = log
        self.snapshot = engine.new_snapshot(board)

    @property
    def phase(self) -> GamePhase:
        return self.snapshot.phase

    def dispatch(self, command: Command) -> CommandResult:
        """Apply `command`; on failure keep the previous snapshot."""
        try:
            snapshot = reduce(self.snapshot, command, self.rng, self.log)
        except SweeperError as error:
            self.log.warning(f"Rejected {type(command).__name__}: {error}")
            return CommandResult(snapshot=self.snapshot, error=error)

        if isinstance(command, Reset):
            self.board = command.board
        self.snapshot = snapshot
        return CommandResult(snapshot=snapshot)

    def reset(self, board: Optional[BoardConfig] = None) -> CommandResult:
        return self.dispatch(Reset(board or self.board))

    def reveal(self, index: int) -> CommandResult:
        return self.dispatch(Reveal(self.board, index))

    def reveal_adjacent(self, index: int) -> CommandResult:
        return self.dispatch(RevealAdjacent(self.board, index))

    def toggle_flag(self, index: int) -> CommandResult:
        return self.dispatch(ToggleFlag(index))
