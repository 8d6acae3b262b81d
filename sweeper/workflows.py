"""Temporal workflow hosting one Minesweeper round."""
import asyncio
from datetime import datetime, timedelta
from typing import Optional

from temporalio import workflow
from temporalio.exceptions import ApplicationError

with workflow.unsafe.imports_passed_through():
    from sweeper.game import Game
    from sweeper.types import MOVE_ACTIONS, BoardConfig, GamePhase, MoveRequest, Reset, command_for_move
    from sweeper.view import GameView, build_view

DEFAULT_INACTIVITY_TIMEOUT = timedelta(hours=24)


@workflow.defn
class MinesweeperWorkflow:
    """Workflow that owns the game state of a single round.

    Moves arrive as updates or signals and are applied one at a time, so
    every cascade finishes before the next move is looked at. Mine placement
    draws from `workflow.random()` and therefore replays identically.
    """

    def __init__(self):
        self.game_id: str = ""
        self.game: Game | None = None
        self.last_activity_time: float = 0
        self.should_close: bool = False
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

    @workflow.run
    async def run(self, game_id: str, board: BoardConfig,
                  inactivity_seconds: float = DEFAULT_INACTIVITY_TIMEOUT.total_seconds()) -> None:
        """Main workflow entry point."""
        self.game_id = game_id
        self.last_activity_time = workflow.time()
        self.game = Game(board, rng=workflow.random(), log=workflow.logger)

        while not self.should_close:
            remaining = inactivity_seconds - (workflow.time() - self.last_activity_time)
            if remaining <= 0:
                workflow.logger.info(f"Game {game_id} auto-closing after {inactivity_seconds:.0f}s of inactivity")
                break
            try:
                await workflow.wait_condition(lambda: self.should_close, timeout=remaining)
            except asyncio.TimeoutError:
                continue

        workflow.logger.info(f"Minesweeper workflow {game_id} completed")

    def _apply_move(self, move: MoveRequest) -> None:
        self.last_activity_time = workflow.time()
        was_over = self.game.snapshot.is_over
        result = self.game.dispatch(command_for_move(move, self.game.board))
        if not result.ok:
            raise ApplicationError(str(result.error), type=type(result.error).__name__, non_retryable=True)

        if self.start_time is None and self.game.phase != GamePhase.IDLE:
            self.start_time = workflow.now()
        if self.game.snapshot.is_over and not was_over:
            self.end_time = workflow.now()

    def _restart(self, board: BoardConfig) -> None:
        self.last_activity_time = workflow.time()
        result = self.game.dispatch(Reset(board))
        if not result.ok:
            raise ApplicationError(str(result.error), type=type(result.error).__name__, non_retryable=True)
        self.start_time = None
        self.end_time = None

    def _view(self) -> GameView:
        elapsed = 0
        if self.start_time is not None:
            until = self.end_time or workflow.now()
            elapsed = int((until - self.start_time).total_seconds())
        return build_view(self.game.snapshot, self.game.board, elapsed)

    @workflow.update
    def make_move_update(self, move: MoveRequest) -> GameView:
        """Update to make a move and return the updated state."""
        self._apply_move(move)
        return self._view()

    @make_move_update.validator
    def validate_move(self, move: MoveRequest) -> None:
        if not self.game:
            raise ValueError("Game state not initialized")
        if move.action not in MOVE_ACTIONS:
            raise ValueError(f"Invalid move action {move.action!r}")
        self.game.board.check_index(move.index)

    @workflow.signal
    def make_move_signal(self, move: MoveRequest) -> None:
        """Signal to make a move (fire-and-forget)."""
        if not self.game:
            return
        try:
            self._apply_move(move)
        except (ApplicationError, ValueError) as error:
            workflow.logger.error(f"Error processing move: {error}")

    @workflow.update
    def restart_game_update(self, board: BoardConfig) -> GameView:
        """Update to restart the game, possibly on a new board."""
        self._restart(board)
        return self._view()

    @restart_game_update.validator
    def validate_restart(self, board: BoardConfig) -> None:
        if not self.game:
            raise ValueError("Game state not initialized")
        board.validate()

    @workflow.signal
    def restart_game_signal(self, board: BoardConfig) -> None:
        """Signal to restart the game with a new configuration."""
        if not self.game:
            return
        try:
            self._restart(board)
        except ApplicationError as error:
            workflow.logger.error(f"Error restarting game: {error}")

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> Optional[GameView]:
        """Query to get the current game state."""
        if not self.game:
            return None
        return self._view()
